"""
CENTRALIZED AUTHORIZATION SERVICE
==================================

All membership and role checks live here.
Routes and other services call these functions.

Non-members get Forbidden. Missing groups/transactions get NotFound.
"""

from app.extensions import db
from app.errors import Forbidden, NotFound
from app.models import Group, GroupMember, Transaction, MemberRole


ADMIN_ROLES = (MemberRole.OWNER.value, MemberRole.ADMIN.value)


# ============================================================
# GROUP MEMBERSHIP CHECKS
# ============================================================

def get_membership(user_id, group_id):
    """Get membership record, or None"""
    return GroupMember.query.filter_by(
        user_id=user_id,
        group_id=group_id
    ).first()


def is_group_member(user_id, group_id):
    """Check if user is a member of group"""
    return get_membership(user_id, group_id) is not None


def is_group_admin(user_id, group_id):
    """Check if user is an owner or admin of group"""
    membership = get_membership(user_id, group_id)
    return membership is not None and membership.role in ADMIN_ROLES


# ============================================================
# GUARDS (raise instead of returning a flag)
# ============================================================

def require_membership(user_id, group_id):
    """
    Return the caller's membership in group.

    Raises NotFound if the group does not exist,
    Forbidden if the caller is not a member.
    """
    group = db.session.get(Group, group_id)
    if not group:
        raise NotFound(f"Group {group_id} not found")

    membership = get_membership(user_id, group_id)
    if not membership:
        raise Forbidden("You are not a member of this group")

    return membership


def require_admin(user_id, group_id):
    """Membership check plus owner/admin role"""
    membership = require_membership(user_id, group_id)
    if membership.role not in ADMIN_ROLES:
        raise Forbidden("Only a group owner or admin can do this")
    return membership


def require_transaction_access(user_id, transaction_id):
    """
    Return the transaction if the caller belongs to its group.

    Raises NotFound if the transaction does not exist,
    Forbidden if the caller is not a member of the owning group.
    """
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise NotFound(f"Transaction {transaction_id} not found")

    if not is_group_member(user_id, transaction.group_id):
        raise Forbidden("You are not a member of this group")

    return transaction


# ============================================================
# CREATE TRANSACTION AUTHORIZATION
# ============================================================

def can_create_transaction(user_id, group_id):
    """
    Check if user can open a transaction in group.

    Requirements:
    - Group must exist
    - User must be a member (any role, viewers included)
    """
    group = db.session.get(Group, group_id)
    if not group:
        return False, "Group not found"

    if not is_group_member(user_id, group_id):
        return False, "You are not a member of this group"

    return True, None


# ============================================================
# VOTING AUTHORIZATION
# ============================================================

def can_vote(user_id, transaction_id):
    """
    Check if user can vote on transaction.

    Requirements:
    - Transaction must exist
    - User must be a member of the owning group

    Re-voting is allowed; it replaces the earlier decision.
    """
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        return False, "Transaction not found"

    if not is_group_member(user_id, transaction.group_id):
        return False, "You are not a member of this group"

    return True, None


# ============================================================
# HELPER FUNCTION: REQUIRE AUTHORIZATION
# ============================================================

def require_authorization(check_func, *args, error_class=Forbidden):
    """
    Wrapper to raise exception if authorization fails.

    "not found" reasons become NotFound, everything else error_class.

    Usage:
        require_authorization(can_vote, user_id, transaction_id)
    """
    allowed, reason = check_func(*args)
    if not allowed:
        if reason and reason.endswith("not found"):
            raise NotFound(reason)
        raise error_class(reason)
    return True
