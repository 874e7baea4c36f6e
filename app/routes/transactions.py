"""
TRANSACTION ROUTES
==================

Uses transaction_service and approval_service for all operations.
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from app.schemas import parse_body, CreateTransactionRequest, DecisionRequest, CommentRequest
from app.services.approval_service import record_decision, get_tally
from app.services.authorization_service import can_vote, require_transaction_access
from app.services.transaction_service import create_transaction, list_comments, add_comment

transactions_bp = Blueprint('transactions', __name__)


# ============== CREATE TRANSACTION ==============
@transactions_bp.route('/transactions', methods=['POST'])
@login_required
def create():
    form = parse_body(CreateTransactionRequest)
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


# ============== VIEW TRANSACTION ==============
@transactions_bp.route('/transactions/<int:transaction_id>')
@login_required
def view(transaction_id):
    transaction = require_transaction_access(current_user.id, transaction_id)
    tally = get_tally(transaction_id, current_user.id)

    data = transaction.to_dict()
    data['approvals'] = tally['approvals']
    data['rejections'] = tally['rejections']
    data['approval_threshold'] = tally['threshold']
    data['decisions'] = [d.to_dict() for d in tally['decisions']]
    data['can_vote'], _ = can_vote(current_user.id, transaction_id)
    return jsonify(data)


# ============== VOTE ==============
@transactions_bp.route('/approvals/<int:transaction_id>', methods=['POST'])
@login_required
def vote(transaction_id):
    form = parse_body(DecisionRequest)
    tally = record_decision(transaction_id, current_user.id, form.decision)
    return jsonify({'ok': True, **tally})


# ============== COMMENTS ==============
@transactions_bp.route('/transactions/<int:transaction_id>/comments')
@login_required
def comments(transaction_id):
    return jsonify([c.to_dict() for c in list_comments(transaction_id, current_user.id)])


@transactions_bp.route('/transactions/<int:transaction_id>/comments', methods=['POST'])
@login_required
def comment(transaction_id):
    form = parse_body(CommentRequest)
    add_comment(transaction_id, current_user.id, form.body)
    return jsonify({'ok': True})
