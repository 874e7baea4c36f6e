"""
Services Package
================

Business logic layer for Swallet Pro.

All ledger, approval and authorization operations are handled here.
Routes should call these services, not manipulate models directly.
"""

from app.services.approval_service import (
    compute_status,
    tally_decisions,
    record_decision,
    get_tally
)

from app.services.authorization_service import (
    can_create_transaction,
    can_vote,
    is_group_member,
    is_group_admin,
    require_membership,
    require_admin,
    require_transaction_access,
    require_authorization
)

from app.services.transaction_service import (
    create_transaction,
    list_ledger,
    list_comments,
    add_comment
)

from app.services.membership_service import (
    create_group,
    add_member,
    update_group_policy,
    list_groups,
    get_group
)

from app.services.ledger_store import SqlLedgerStore
