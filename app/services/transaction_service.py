"""
TRANSACTION SERVICE
===================

Handles:
- Opening transactions (always 'pending', no decisions)
- Group ledger listing
- Transaction comments

Status changes after creation belong to approval_service only.
"""

import logging

from app.extensions import db
from app.errors import InvalidArgument, NotFound, Internal
from app.models import (
    Account, Comment, GroupMember, Notification, Transaction,
    TransactionStatus, TransactionType
)
from app.services.authorization_service import (
    can_create_transaction, require_authorization,
    require_membership, require_transaction_access
)

logger = logging.getLogger(__name__)

VALID_TYPES = [t.value for t in TransactionType]


# ============================================================
# CREATE TRANSACTION
# ============================================================

def create_transaction(user_id, group_id, type, amount_cents,
                       description=None, due_date=None, account_id=None):
    """
    Open a new transaction in a group.

    Raises:
        InvalidArgument: unknown type or non-positive amount
        NotFound: group or account missing (or account not the caller's)
        Forbidden: caller is not a member of the group

    Returns: Transaction (status 'pending')
    """
    if type not in VALID_TYPES:
        raise InvalidArgument(f"type must be one of {'|'.join(VALID_TYPES)}")

    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
        raise InvalidArgument("Amount must be a positive whole number of cents")

    require_authorization(can_create_transaction, user_id, group_id)

    if account_id is not None:
        account = db.session.get(Account, account_id)
        if not account or account.user_id != user_id:
            raise NotFound(f"Account {account_id} not found")

    try:
        transaction = Transaction(
            group_id=group_id,
            type=type,
            amount_cents=amount_cents,
            description=description or None,
            status=TransactionStatus.PENDING.value,
            created_by=user_id,
            account_id=account_id,
            due_date=due_date
        )
        db.session.add(transaction)

        # Let the other members know there is something to vote on
        label = description or f"{type} of {amount_cents / 100:.2f}"
        others = GroupMember.query.filter(
            GroupMember.group_id == group_id,
            GroupMember.user_id != user_id
        ).all()
        for member in others:
            db.session.add(Notification(
                user_id=member.user_id,
                message=f"Transaction pending approval: {label}",
                type='warning'
            ))

        db.session.commit()

    except Exception as e:
        db.session.rollback()
        logger.exception("Failed to create transaction in group %s", group_id)
        raise Internal(f"Failed to create transaction: {str(e)}")

    logger.info("Transaction %s opened in group %s by user %s: %s %d",
                transaction.id, group_id, user_id, type, amount_cents)
    return transaction


# ============================================================
# LEDGER
# ============================================================

def list_ledger(group_id, user_id):
    """Transactions of a group, newest first, with their tallies."""
    require_membership(user_id, group_id)

    transactions = Transaction.query.filter_by(
        group_id=group_id
    ).order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()

    ledger = []
    for t in transactions:
        row = t.to_dict()
        row['approvals'] = t.get_approval_count()
        row['rejections'] = t.get_rejection_count()
        ledger.append(row)

    return ledger


# ============================================================
# COMMENTS
# ============================================================

def list_comments(transaction_id, user_id):
    require_transaction_access(user_id, transaction_id)

    return Comment.query.filter_by(
        transaction_id=transaction_id
    ).order_by(Comment.created_at.asc(), Comment.id.asc()).all()


def add_comment(transaction_id, user_id, body):
    """Attach a comment from a group member to a transaction."""
    require_transaction_access(user_id, transaction_id)

    if not body or not body.strip():
        raise InvalidArgument("body required")

    try:
        comment = Comment(
            transaction_id=transaction_id,
            author_id=user_id,
            body=body
        )
        db.session.add(comment)
        db.session.commit()
        return comment

    except Exception as e:
        db.session.rollback()
        logger.exception("Failed to add comment to transaction %s", transaction_id)
        raise Internal(f"Failed to add comment: {str(e)}")
