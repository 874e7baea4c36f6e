"""
IDENTITY SERVICE
================

Development-grade identity: bearer tokens look like "fake|<email>".
The user behind a token is created on first sight.
"""

import logging

from app.extensions import db
from app.errors import Conflict, Unauthorized
from app.models import User

logger = logging.getLogger(__name__)

TOKEN_PREFIX = 'fake'


def issue_token(email):
    return f"{TOKEN_PREFIX}|{email}"


def normalize_email(email):
    return email.strip().lower()


def get_or_create_user(email):
    """Find a user by email or add a passwordless one. Flushes, caller commits."""
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(email=email, display_name=email.split('@')[0])
        db.session.add(user)
        db.session.flush()
    return user


def load_user_from_header(authorization):
    """
    Resolve an Authorization header to a User, or None.

    Accepts only "Bearer fake|<email>".
    """
    if not authorization or not authorization.startswith('Bearer '):
        return None

    token = authorization[len('Bearer '):]
    prefix, _, email = token.partition('|')
    if prefix != TOKEN_PREFIX or '@' not in email:
        return None

    user = get_or_create_user(email)
    db.session.commit()
    return user


# ============================================================
# SIGNUP / LOGIN
# ============================================================

def signup(email, password, display_name=None):
    """Register a password for an email. Returns a token."""
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()

    if user and user.password_hash:
        raise Conflict("account already exists")

    if not user:
        user = User(email=email)
        db.session.add(user)

    user.display_name = display_name or user.display_name or email.split('@')[0]
    user.set_password(password)
    db.session.commit()

    logger.info("User %s signed up", user.id)
    return issue_token(user.email)


def login(email, password):
    """
    Exchange credentials for a token.

    Unknown emails and passwordless users are let in (dev mode).
    """
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()

    if not user:
        get_or_create_user(email)
        db.session.commit()
        return issue_token(email)

    if not user.password_hash:
        return issue_token(email)

    if not user.check_password(password):
        logger.warning("Failed login for %s", email)
        raise Unauthorized("invalid credentials")

    return issue_token(email)
