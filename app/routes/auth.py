"""
AUTHENTICATION ROUTES
=====================

Public endpoints: health check, signup, login.
"""

from flask import Blueprint, jsonify
from sqlalchemy import text

from app.extensions import db
from app.schemas import parse_body, SignupRequest, LoginRequest
from app.services import identity_service

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/health')
def health():
    db.session.execute(text('SELECT 1'))
    return jsonify({'ok': True})


@auth_bp.route('/signup', methods=['POST'])
def signup():
    form = parse_body(SignupRequest)
    token = identity_service.signup(form.email, form.password, form.display_name)
    return jsonify({'token': token})


@auth_bp.route('/login', methods=['POST'])
def login():
    form = parse_body(LoginRequest)
    token = identity_service.login(form.email, form.password)
    return jsonify({'token': token})
