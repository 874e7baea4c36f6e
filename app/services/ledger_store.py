"""
LEDGER STORE
============

The persistence seam the approval engine talks to.

SqlLedgerStore is the Flask-SQLAlchemy implementation. Anything with the
same methods can stand in for it (the unit tests use an in-memory one).
All writes go through the request-scoped session and become visible only
on commit().
"""

from sqlalchemy import case, func

from app.extensions import db
from app.models import Approval, Group, Transaction, DecisionValue, utcnow


class SqlLedgerStore:
    """Transactions and decisions stored in the relational database."""

    def get_transaction(self, transaction_id, lock=False):
        """
        Load a transaction, or None.

        lock=True issues SELECT ... FOR UPDATE so concurrent voters on the
        same transaction queue behind each other until commit.
        """
        return db.session.get(Transaction, transaction_id, with_for_update=lock)

    def get_approval_threshold(self, group_id):
        group = db.session.get(Group, group_id)
        return group.approval_threshold if group else None

    def upsert_decision(self, transaction_id, approver_id, decision):
        """Insert the approver's decision, or overwrite it if one exists."""
        approval = Approval.query.filter_by(
            transaction_id=transaction_id,
            approver_id=approver_id
        ).first()

        if approval:
            approval.decision = decision
            approval.decided_at = utcnow()
        else:
            approval = Approval(
                transaction_id=transaction_id,
                approver_id=approver_id,
                decision=decision,
                decided_at=utcnow()
            )
            db.session.add(approval)

        db.session.flush()
        return approval

    def list_decisions(self, transaction_id):
        return Approval.query.filter_by(
            transaction_id=transaction_id
        ).order_by(Approval.decided_at).all()

    def tally_decisions(self, transaction_id):
        """Return (approvals, rejections) for a transaction."""
        approvals, rejections = db.session.query(
            func.coalesce(func.sum(case(
                (Approval.decision == DecisionValue.APPROVE.value, 1), else_=0)), 0),
            func.coalesce(func.sum(case(
                (Approval.decision == DecisionValue.REJECT.value, 1), else_=0)), 0),
        ).filter(Approval.transaction_id == transaction_id).one()

        return int(approvals), int(rejections)

    def set_status(self, transaction_id, status):
        transaction = db.session.get(Transaction, transaction_id)
        transaction.status = status
        db.session.flush()

    def commit(self):
        db.session.commit()

    def rollback(self):
        db.session.rollback()
