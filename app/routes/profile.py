"""
PROFILE ROUTES
==============

Accounts, contacts, notifications and settings of the current user.
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from app.schemas import parse_body, AccountRequest, ContactRequest, SettingsRequest
from app.services import profile_service

profile_bp = Blueprint('profile', __name__)


# ============== ACCOUNTS ==============
@profile_bp.route('/accounts')
@login_required
def accounts():
    return jsonify([a.to_dict() for a in profile_service.list_accounts(current_user.id)])


@profile_bp.route('/accounts', methods=['POST'])
@login_required
def add_account():
    form = parse_body(AccountRequest)
    account = profile_service.add_account(
        current_user.id, form.bank_name, form.account_number, form.balance_cents
    )
    return jsonify(account.to_dict()), 201


# ============== CONTACTS ==============
@profile_bp.route('/contacts')
@login_required
def contacts():
    return jsonify([c.to_dict() for c in profile_service.list_contacts(current_user.id)])


@profile_bp.route('/contacts', methods=['POST'])
@login_required
def add_contact():
    form = parse_body(ContactRequest)
    contact = profile_service.add_contact(current_user.id, form.contact_name, form.contact_email)
    return jsonify(contact.to_dict()), 201


# ============== NOTIFICATIONS ==============
@profile_bp.route('/notifications')
@login_required
def notifications():
    return jsonify([n.to_dict() for n in profile_service.list_notifications(current_user.id)])


# ============== SETTINGS ==============
@profile_bp.route('/settings')
@login_required
def settings():
    stored = profile_service.get_settings(current_user.id)
    return jsonify(stored.to_dict() if stored else {})


@profile_bp.route('/settings', methods=['PUT'])
@login_required
def save_settings():
    form = parse_body(SettingsRequest)
    profile_service.save_settings(current_user.id, form.language, form.theme, form.audio_assist)
    return jsonify({'ok': True})
