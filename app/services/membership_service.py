"""
MEMBERSHIP SERVICE
==================

Handles:
- Creating groups (creator becomes owner)
- Adding members
- Group approval policy (threshold)
- Group listing / detail for members
"""

import logging

from flask import current_app
from sqlalchemy import case, func

from app.extensions import db
from app.errors import SwalletError, InvalidArgument, Internal
from app.models import (
    Group, GroupMember, Transaction,
    MemberRole, TransactionStatus
)
from app.services.authorization_service import is_group_admin, require_admin, require_membership
from app.services.identity_service import get_or_create_user

logger = logging.getLogger(__name__)


# ============================================================
# CREATE GROUP
# ============================================================

def create_group(user_id, name, currency='USD', approval_threshold=None):
    """Create a group and add the creator as its owner."""
    if approval_threshold is None:
        approval_threshold = current_app.config['DEFAULT_APPROVAL_THRESHOLD']

    if approval_threshold < 1:
        raise InvalidArgument("approval_threshold must be at least 1")

    try:
        group = Group(
            name=name,
            currency=currency,
            approval_threshold=approval_threshold,
            created_by=user_id
        )
        db.session.add(group)
        db.session.flush()

        db.session.add(GroupMember(
            group_id=group.id,
            user_id=user_id,
            role=MemberRole.OWNER.value
        ))
        db.session.commit()

    except Exception as e:
        db.session.rollback()
        logger.exception("Failed to create group %r", name)
        raise Internal(f"Failed to create group: {str(e)}")

    logger.info("Group %s created by user %s (threshold=%d)", group.id, user_id, approval_threshold)
    return group


# ============================================================
# ADD MEMBER
# ============================================================

def add_member(group_id, email, added_by_user_id, role=MemberRole.MEMBER.value):
    """
    Add a user (by email) to a group. Owner/admin only.

    Unknown emails get a passwordless user. Adding someone who is
    already a member changes nothing.
    """
    require_admin(added_by_user_id, group_id)

    try:
        user = get_or_create_user(email)

        membership = GroupMember.query.filter_by(
            group_id=group_id,
            user_id=user.id
        ).first()

        if membership:
            db.session.commit()
            return membership

        membership = GroupMember(
            group_id=group_id,
            user_id=user.id,
            role=role
        )
        db.session.add(membership)
        db.session.commit()

    except SwalletError:
        db.session.rollback()
        raise
    except Exception as e:
        db.session.rollback()
        logger.exception("Failed to add %s to group %s", email, group_id)
        raise Internal(f"Failed to add member: {str(e)}")

    logger.info("User %s added to group %s as %s", user.id, group_id, role)
    return membership


# ============================================================
# GROUP POLICY
# ============================================================

def update_group_policy(group_id, user_id, approval_threshold):
    """Change how many approvals a transaction needs to be paid. Owner/admin only."""
    require_admin(user_id, group_id)

    if approval_threshold is None or approval_threshold < 1:
        raise InvalidArgument("approval_threshold must be at least 1")

    group = db.session.get(Group, group_id)
    previous = group.approval_threshold
    group.approval_threshold = approval_threshold
    db.session.commit()

    # Existing transactions keep their status until the next vote
    logger.info("Group %s threshold %d -> %d by user %s",
                group_id, previous, approval_threshold, user_id)
    return group


# ============================================================
# LISTING
# ============================================================

def list_groups(user_id):
    """Groups the user belongs to, newest first, with total paid cents."""
    paid_cents = func.coalesce(func.sum(case(
        (Transaction.status == TransactionStatus.PAID.value, Transaction.amount_cents),
        else_=0
    )), 0)

    rows = db.session.query(Group, paid_cents) \
        .join(GroupMember, GroupMember.group_id == Group.id) \
        .outerjoin(Transaction, Transaction.group_id == Group.id) \
        .filter(GroupMember.user_id == user_id) \
        .group_by(Group.id) \
        .order_by(Group.created_at.desc(), Group.id.desc()) \
        .all()

    groups = []
    for group, paid in rows:
        data = group.to_dict()
        data['paid_cents'] = int(paid)
        groups.append(data)
    return groups


def get_group(group_id, user_id):
    """Group detail with its members. Members only."""
    require_membership(user_id, group_id)

    group = db.session.get(Group, group_id)
    members = GroupMember.query.filter_by(group_id=group_id) \
        .order_by(GroupMember.joined_at, GroupMember.id).all()

    data = group.to_dict()
    data['members'] = [m.to_dict() for m in members]
    data['is_admin'] = is_group_admin(user_id, group_id)
    return data
