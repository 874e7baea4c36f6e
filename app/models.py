from datetime import datetime, timezone
from enum import Enum

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from app.extensions import db


def utcnow():
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ============================================================
# ENUMS
# ============================================================
class MemberRole(Enum):
    OWNER = 'owner'
    ADMIN = 'admin'
    MEMBER = 'member'
    VIEWER = 'viewer'


class TransactionType(Enum):
    COLLECT = 'collect'
    SPEND = 'spend'
    REIMBURSE = 'reimburse'


class TransactionStatus(Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    PAID = 'paid'


class DecisionValue(Enum):
    APPROVE = 'approve'
    REJECT = 'reject'


# ============================================================
# USER MODEL
# ============================================================
class User(UserMixin, db.Model):
    """
    Represents a person known to the system.
    Users created from a bearer token or by being added to a group
    have no password until they sign up.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    display_name = db.Column(db.String(100))
    password_hash = db.Column(db.String(256), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    memberships = db.relationship('GroupMember', backref='user', lazy='dynamic')
    transactions_created = db.relationship('Transaction', backref='creator', lazy='dynamic',
                                           foreign_keys='Transaction.created_by')
    decisions = db.relationship('Approval', backref='approver', lazy='dynamic')

    def set_password(self, password):
        """Hash and set the user's password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Verify password against stored hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {'id': self.id, 'email': self.email, 'display_name': self.display_name}

    def __repr__(self):
        return f'<User {self.email}>'


# ============================================================
# GROUP MODEL
# ============================================================
class Group(db.Model):
    """
    A shared wallet. Members open transactions in it and vote on them.
    approval_threshold is the number of approvals a transaction needs
    to be marked paid.
    """
    __tablename__ = 'groups'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    currency = db.Column(db.String(3), nullable=False, default='USD')
    approval_threshold = db.Column(db.Integer, nullable=False, default=1)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    members = db.relationship('GroupMember', backref='group', lazy='dynamic',
                              cascade='all, delete-orphan')
    transactions = db.relationship('Transaction', backref='group', lazy='dynamic',
                                   cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'currency': self.currency,
            'approval_threshold': self.approval_threshold,
            'created_by': self.created_by,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Group {self.name}>'


# ============================================================
# GROUP MEMBER MODEL
# ============================================================
class GroupMember(db.Model):
    """
    Membership of a user in a group.
    Role is one of owner / admin / member / viewer.
    """
    __tablename__ = 'group_members'

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=MemberRole.MEMBER.value)
    auto_pay_enabled = db.Column(db.Boolean, nullable=False, default=False)
    joined_at = db.Column(db.DateTime, default=utcnow)

    # Prevent duplicate memberships
    __table_args__ = (
        db.UniqueConstraint('group_id', 'user_id', name='unique_group_member'),
    )

    def to_dict(self):
        return {
            'id': self.user_id,
            'email': self.user.email,
            'role': self.role,
            'auto_pay_enabled': self.auto_pay_enabled,
        }

    def __repr__(self):
        return f'<GroupMember user={self.user_id} group={self.group_id} role={self.role}>'


# ============================================================
# TRANSACTION MODEL
# ============================================================
class Transaction(db.Model):
    """
    A collect / spend / reimburse request inside a group.

    Lifecycle:
    1. Created with status='pending'
    2. Members vote (approve/reject), one current decision each
    3. Any rejection -> 'rejected'
    4. Enough approvals (group threshold) -> 'paid'
    5. Otherwise -> 'approved' (provisional)

    Status is only changed by the approval service after a vote.
    """
    __tablename__ = 'transactions'

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=False)
    type = db.Column(db.String(20), nullable=False)

    # Minor currency units, always > 0
    amount_cents = db.Column(db.Integer, nullable=False)
    description = db.Column(db.String(500), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=TransactionStatus.PENDING.value)

    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id'), nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint('amount_cents > 0', name='positive_amount'),
    )

    # Relationships
    approvals = db.relationship('Approval', backref='transaction', lazy='dynamic',
                                cascade='all, delete-orphan')
    comments = db.relationship('Comment', backref='transaction', lazy='dynamic',
                               cascade='all, delete-orphan')

    def get_approval_count(self):
        """Count how many members approved."""
        return self.approvals.filter_by(decision=DecisionValue.APPROVE.value).count()

    def get_rejection_count(self):
        """Count how many members rejected."""
        return self.approvals.filter_by(decision=DecisionValue.REJECT.value).count()

    def to_dict(self):
        return {
            'id': self.id,
            'group_id': self.group_id,
            'type': self.type,
            'amount_cents': self.amount_cents,
            'description': self.description,
            'status': self.status,
            'created_by': self.created_by,
            'created_by_email': self.creator.email if self.creator else None,
            'account_id': self.account_id,
            'due_date': _iso(self.due_date),
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Transaction {self.type} {self.amount_cents} status={self.status}>'


# ============================================================
# APPROVAL MODEL (one current decision per member)
# ============================================================
class Approval(db.Model):
    """
    A member's current vote on a transaction.
    Re-voting overwrites decision and decided_at on the same row.
    """
    __tablename__ = 'approvals'

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey('transactions.id'), nullable=False)
    approver_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    decision = db.Column(db.String(10), nullable=False)
    decided_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # One decision per approver per transaction
    __table_args__ = (
        db.UniqueConstraint('transaction_id', 'approver_id', name='unique_transaction_approver'),
    )

    def to_dict(self):
        return {
            'approver_id': self.approver_id,
            'decision': self.decision,
            'decided_at': _iso(self.decided_at),
        }

    def __repr__(self):
        return f'<Approval tx={self.transaction_id} user={self.approver_id} {self.decision}>'


# ============================================================
# COMMENT MODEL
# ============================================================
class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey('transactions.id'), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    body = db.Column(db.String(1000), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    author = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'body': self.body,
            'author': self.author.email,
            'created_at': _iso(self.created_at),
        }


# ============================================================
# PERSONAL DATA: ACCOUNTS, CONTACTS, NOTIFICATIONS, SETTINGS
# ============================================================
class Account(db.Model):
    """A linked bank account. Transactions may reference one of the creator's accounts."""
    __tablename__ = 'accounts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    bank_name = db.Column(db.String(100))
    account_number = db.Column(db.String(50))
    balance_cents = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'bank_name': self.bank_name,
            'account_number': self.account_number,
            'balance_cents': self.balance_cents,
        }


class Contact(db.Model):
    __tablename__ = 'contacts'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    contact_name = db.Column(db.String(100), nullable=False)
    contact_email = db.Column(db.String(120), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'contact_name': self.contact_name,
            'contact_email': self.contact_email,
            'created_at': _iso(self.created_at),
        }


class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    type = db.Column(db.String(20), nullable=False, default='info')
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'message': self.message,
            'type': self.type,
            'created_at': _iso(self.created_at),
        }


class UserSettings(db.Model):
    __tablename__ = 'settings'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), primary_key=True)
    language = db.Column(db.String(10), nullable=False, default='en')
    theme = db.Column(db.String(10), nullable=False, default='light')
    audio_assist = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'language': self.language,
            'theme': self.theme,
            'audio_assist': self.audio_assist,
        }


def _iso(value):
    return value.isoformat() if value else None
