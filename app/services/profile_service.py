"""
PROFILE SERVICE
===============

The caller's own data: linked accounts, contacts, notifications, settings.
Nothing here is shared across users.
"""

from app.extensions import db
from app.models import Account, Contact, Notification, UserSettings


def list_accounts(user_id):
    return Account.query.filter_by(user_id=user_id).order_by(Account.id).all()


def add_account(user_id, bank_name, account_number, balance_cents=0):
    account = Account(
        user_id=user_id,
        bank_name=bank_name,
        account_number=account_number,
        balance_cents=balance_cents
    )
    db.session.add(account)
    db.session.commit()
    return account


def list_contacts(user_id):
    return Contact.query.filter_by(owner_id=user_id).order_by(Contact.id).all()


def add_contact(user_id, contact_name, contact_email=None):
    contact = Contact(
        owner_id=user_id,
        contact_name=contact_name,
        contact_email=contact_email
    )
    db.session.add(contact)
    db.session.commit()
    return contact


def list_notifications(user_id):
    return Notification.query.filter_by(user_id=user_id) \
        .order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def get_settings(user_id):
    """Stored settings, or None if the user never saved any."""
    return db.session.get(UserSettings, user_id)


def save_settings(user_id, language, theme, audio_assist):
    """Insert or overwrite the user's settings row."""
    settings = db.session.get(UserSettings, user_id)
    if not settings:
        settings = UserSettings(user_id=user_id)
        db.session.add(settings)

    settings.language = language
    settings.theme = theme
    settings.audio_assist = audio_assist
    db.session.commit()
    return settings
