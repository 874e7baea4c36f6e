"""
GROUP ROUTES
============

Groups, members, approval policy and the group ledger.
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from app.schemas import (
    parse_body, CreateGroupRequest, AddMemberRequest,
    GroupSettingsRequest, CreateTransactionRequest
)
from app.services.membership_service import (
    create_group, add_member, update_group_policy, list_groups, get_group
)
from app.services.transaction_service import create_transaction, list_ledger

groups_bp = Blueprint('groups', __name__)


# ============== LIST MY GROUPS ==============
@groups_bp.route('/groups')
@login_required
def list_groups_route():
    return jsonify(list_groups(current_user.id))


# ============== CREATE GROUP ==============
@groups_bp.route('/groups', methods=['POST'])
@login_required
def create_group_route():
    form = parse_body(CreateGroupRequest)
    group = create_group(
        user_id=current_user.id,
        name=form.name,
        currency=form.currency,
        approval_threshold=form.approval_threshold
    )
    return jsonify(group.to_dict()), 201


# ============== VIEW GROUP ==============
@groups_bp.route('/groups/<int:group_id>')
@login_required
def view_group(group_id):
    return jsonify(get_group(group_id, current_user.id))


# ============== ADD MEMBER (owner/admin) ==============
@groups_bp.route('/groups/<int:group_id>/members', methods=['POST'])
@login_required
def add_member_route(group_id):
    form = parse_body(AddMemberRequest)
    add_member(group_id, form.email, current_user.id, role=form.role)
    return jsonify({'ok': True})


# ============== APPROVAL POLICY (owner/admin) ==============
@groups_bp.route('/groups/<int:group_id>/settings', methods=['PUT'])
@login_required
def group_settings(group_id):
    form = parse_body(GroupSettingsRequest)
    group = update_group_policy(group_id, current_user.id, form.approval_threshold)
    return jsonify(group.to_dict())


# ============== LEDGER ==============
@groups_bp.route('/groups/<int:group_id>/ledger')
@login_required
def ledger(group_id):
    return jsonify(list_ledger(group_id, current_user.id))


# ============== REQUEST FUNDS (group-scoped create) ==============
@groups_bp.route('/groups/<int:group_id>/requests', methods=['POST'])
@login_required
def create_request(group_id):
    form = parse_body(CreateTransactionRequest, group_id=group_id)
    transaction = create_transaction(
        user_id=current_user.id,
        group_id=form.group_id,
        type=form.type,
        amount_cents=form.amount_cents,
        description=form.description,
        due_date=form.due_date,
        account_id=form.account_id
    )
    return jsonify({'id': transaction.id}), 201
