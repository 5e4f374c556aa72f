from flask import Blueprint, current_app, request

from auth_service import AuthService
from identity import identity_required
from logging_utils import get_logger
from responses import json_ok
from validation import bind_payload, validate_profile

auth_bp = Blueprint('auth', __name__)
logger = get_logger("auth")


@auth_bp.route('/login', methods=['POST'])
def login():
    payload = bind_payload(request)
    identity, csrf_token = AuthService().login(payload.get('email'), payload.get('password'))
    return json_ok(identity.to_dict(), message="Login successful", name=identity.name, csrfToken=csrf_token)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    AuthService().logout()
    response, status = json_ok(message="Logged out")

    # Expire the cookie with the same attributes it was issued with
    config = current_app.config
    response.delete_cookie(
        config.get('SESSION_COOKIE_NAME', 'session'),
        path=config.get('SESSION_COOKIE_PATH') or config.get('APPLICATION_ROOT') or '/',
        domain=config.get('SESSION_COOKIE_DOMAIN') or None,
        secure=config.get('SESSION_COOKIE_SECURE', False),
        httponly=config.get('SESSION_COOKIE_HTTPONLY', True),
        samesite=config.get('SESSION_COOKIE_SAMESITE'),
    )
    logger.info("Session closed")
    return response, status


@auth_bp.route('/register', methods=['POST'])
def register():
    fields = validate_profile(bind_payload(request))
    user = AuthService().register(fields)
    return json_ok({"id": user.id}, status=201, message="Registration successful")


@auth_bp.route('/me', methods=['GET'])
@identity_required
def me(identity):
    return json_ok(identity.to_dict())


@auth_bp.route('/me/update', methods=['POST'])
@identity_required
def update_me(identity):
    fields = validate_profile(bind_payload(request), partial=True)
    refreshed = AuthService().update_profile(identity, fields)
    return json_ok(refreshed.to_dict())
