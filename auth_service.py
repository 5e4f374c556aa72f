"""
Authentication, registration and profile updates.

Login failures are deliberately uniform: an unknown email and a wrong password
raise the same ``AuthenticationError`` so callers cannot tell which applied.
"""
import secrets

from flask import current_app, session
from flask_login import login_user, logout_user
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from errors import AuthenticationError, ValidationError
from identity import Identity, store_identity
from logging_utils import get_logger
from repositories import UserRepository
from validation import validate_credentials

logger = get_logger("auth")

# Checked against when the email is unknown so both failure paths hash once.
_DUMMY_HASH = generate_password_hash("not-a-real-password")


class AuthService:
    def __init__(self, users=None):
        self.users = users or UserRepository()

    def login(self, email, password):
        """Verify credentials and start a fresh authenticated session.

        Returns:
            (identity, csrf_token) where csrf_token may be None
        """
        email, password = validate_credentials(email, password)

        user = self.users.find_by_email(email)
        if user is None:
            check_password_hash(_DUMMY_HASH, password)
            logger.warning("Failed login for %s", email)
            raise AuthenticationError()
        if not check_password_hash(user.password, password):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError()

        identity = Identity.from_user(user)

        # New session id and empty contents, so a planted session cannot be
        # carried into the authenticated one. The old server-side record is
        # deleted by regenerate().
        current_app.session_interface.regenerate(session._get_current_object())
        session.clear()
        login_user(identity)
        store_identity(identity)
        csrf_token = self._mint_csrf_token()

        logger.info("User %s logged in", identity.id)
        return identity, csrf_token

    def _mint_csrf_token(self):
        try:
            token = secrets.token_hex(32)
        except Exception:
            logger.warning("Could not generate CSRF token; continuing without one", exc_info=True)
            return None
        session[current_app.config["CSRF_SESSION_KEY"]] = token
        return token

    def logout(self):
        logout_user()
        # an emptied session is removed from the store when the response is saved
        session.clear()

    def register(self, fields):
        """Create a user from validated profile fields (plain-text password)."""
        try:
            user = self.users.create(
                first_name=fields["first_name"],
                last_name=fields["last_name"],
                email=fields["email"],
                password_hash=generate_password_hash(fields["password"]),
                is_student=fields.get("is_student", False),
            )
        except IntegrityError:
            self.users.session.rollback()
            raise ValidationError({"email": "Email already registered"})

        logger.info("Registered user %s", user.id)
        return user

    def update_profile(self, identity, fields):
        user = self.users.get(identity.id)
        if user is None:
            # account removed while the session was alive
            self.logout()
            raise AuthenticationError("Unauthorized")

        changes = dict(fields)
        if "password" in changes:
            changes["password"] = generate_password_hash(changes["password"])

        if changes:
            try:
                user = self.users.update(user, changes)
            except IntegrityError:
                self.users.session.rollback()
                raise ValidationError({"email": "Email already registered"})

        refreshed = Identity.from_user(user)
        store_identity(refreshed)
        return refreshed
