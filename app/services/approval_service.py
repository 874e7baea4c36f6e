"""
APPROVAL SERVICE
================

Handles:
- Recording a member's decision on a transaction (upsert)
- Recomputing transaction status from the current decisions
- Reporting the vote tally

Status rules (order independent, evaluated on the deduplicated decisions):
1. Any rejection            -> rejected  (a single reject is a veto)
2. approvals >= threshold   -> paid
3. otherwise                -> approved  (provisional, waiting for votes)

A paid transaction can fall back to approved or rejected if votes change.
"""

import logging

from app.errors import SwalletError, InvalidArgument, NotFound, Forbidden, Internal
from app.models import TransactionStatus, DecisionValue
from app.services.authorization_service import is_group_member
from app.services.ledger_store import SqlLedgerStore

logger = logging.getLogger(__name__)

VALID_DECISIONS = (DecisionValue.APPROVE.value, DecisionValue.REJECT.value)


# ============================================================
# STATUS TRANSITION
# ============================================================

def compute_status(approvals, rejections, threshold):
    """Status for a tally under a group's approval threshold."""
    if threshold is None or threshold < 1:
        raise InvalidArgument("Approval threshold must be at least 1")

    if rejections > 0:
        return TransactionStatus.REJECTED.value
    if approvals >= threshold:
        return TransactionStatus.PAID.value
    return TransactionStatus.APPROVED.value


def tally_decisions(decisions):
    """
    Count (approvals, rejections) over a set of decisions.

    Keeps only the latest decision of each approver, so the result does not
    depend on the order the decisions arrive in. On equal decided_at a
    reject beats an approve.
    """
    def rank(d):
        return d.decided_at, d.decision == DecisionValue.REJECT.value

    latest = {}
    for d in decisions:
        current = latest.get(d.approver_id)
        if current is None or rank(d) > rank(current):
            latest[d.approver_id] = d

    approvals = sum(1 for d in latest.values() if d.decision == DecisionValue.APPROVE.value)
    rejections = sum(1 for d in latest.values() if d.decision == DecisionValue.REJECT.value)
    return approvals, rejections


# ============================================================
# RECORD DECISION (ATOMIC)
# ============================================================

def record_decision(transaction_id, approver_id, decision, store=None, membership_check=None):
    """
    Record approver's decision on a transaction and recompute its status.

    ATOMIC: the transaction row is locked, then upsert + tally + status
    write are committed together.

    Raises:
        InvalidArgument: decision is not approve/reject
        NotFound: transaction does not exist
        Forbidden: approver is not a member of the transaction's group

    Returns: {'approvals': int, 'rejections': int, 'status': str}
    """
    if decision not in VALID_DECISIONS:
        raise InvalidArgument("decision must be approve|reject")

    store = store or SqlLedgerStore()
    membership_check = membership_check or is_group_member

    try:
        transaction = store.get_transaction(transaction_id, lock=True)
        if not transaction:
            raise NotFound(f"Transaction {transaction_id} not found")

        if not membership_check(approver_id, transaction.group_id):
            raise Forbidden("You are not a member of this group")

        store.upsert_decision(transaction_id, approver_id, decision)

        approvals, rejections = store.tally_decisions(transaction_id)
        threshold = store.get_approval_threshold(transaction.group_id)
        status = compute_status(approvals, rejections, threshold)

        previous = transaction.status
        if status != previous:
            store.set_status(transaction_id, status)

        store.commit()

    except SwalletError:
        store.rollback()
        raise
    except Exception as e:
        store.rollback()
        logger.exception("Failed to record decision on transaction %s", transaction_id)
        raise Internal(f"Failed to record decision: {str(e)}")

    logger.info(
        "Transaction %s: user %s voted %s (approvals=%d rejections=%d threshold=%d) %s -> %s",
        transaction_id, approver_id, decision, approvals, rejections, threshold, previous, status
    )

    return {'approvals': approvals, 'rejections': rejections, 'status': status}


# ============================================================
# READ TALLY
# ============================================================

def get_tally(transaction_id, user_id, store=None, membership_check=None):
    """
    Current tally and decisions for a transaction, for a group member.

    Returns: {'approvals', 'rejections', 'threshold', 'decisions'}
    """
    store = store or SqlLedgerStore()
    membership_check = membership_check or is_group_member

    transaction = store.get_transaction(transaction_id)
    if not transaction:
        raise NotFound(f"Transaction {transaction_id} not found")

    if not membership_check(user_id, transaction.group_id):
        raise Forbidden("You are not a member of this group")

    decisions = store.list_decisions(transaction_id)
    approvals, rejections = tally_decisions(decisions)

    return {
        'approvals': approvals,
        'rejections': rejections,
        'threshold': store.get_approval_threshold(transaction.group_id),
        'decisions': decisions,
    }
