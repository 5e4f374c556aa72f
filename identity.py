import hmac
from functools import wraps

from flask import current_app, redirect, request, session
from flask_login import LoginManager, UserMixin, current_user
from flask_session import Session

from errors import Forbidden, Unauthorized

login_manager = LoginManager()
login_manager.session_protection = "strong"

session_store = Session()


class Identity(UserMixin):
    """Public view of a logged-in user, as kept in the session.

    Never carries the password hash.
    """

    def __init__(self, id, name, email):
        self.id = int(id)
        self.name = name
        self.email = email

    @classmethod
    def from_user(cls, user):
        name = f"{user.first_name or ''} {user.last_name or ''}".strip()
        return cls(user.id, name, user.email)

    @classmethod
    def from_dict(cls, data):
        return cls(data["id"], data.get("name", ""), data.get("email", ""))

    def to_dict(self):
        return {"id": self.id, "name": self.name, "email": self.email}


@login_manager.user_loader
def load_identity(user_id):
    data = session.get(current_app.config["IDENTITY_SESSION_KEY"])
    if not data or str(data.get("id")) != str(user_id):
        return None
    return Identity.from_dict(data)


def store_identity(identity):
    session[current_app.config["IDENTITY_SESSION_KEY"]] = identity.to_dict()


def wants_json():
    """True when the caller is a script/SPA rather than a browser navigation."""
    if request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest":
        return True
    if request.is_json:
        return True
    best = request.accept_mimetypes.best_match(["application/json", "text/html"])
    return best == "application/json"


def check_csrf():
    if not current_app.config.get("CSRF_ENFORCE") or request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return
    expected = session.get(current_app.config["CSRF_SESSION_KEY"])
    if not expected:
        # no token was minted for this session
        return
    sent = request.headers.get(current_app.config["CSRF_HEADER"], "")
    if not hmac.compare_digest(sent, expected):
        raise Forbidden("Invalid CSRF token")


def identity_required(view):
    """Run ``view(identity, ...)`` for authenticated callers.

    JSON clients get a 401 envelope, browser navigations a redirect to the
    login page.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            if wants_json():
                raise Unauthorized()
            return redirect(current_app.config["LOGIN_URL"])

        check_csrf()
        return view(current_user._get_current_object(), *args, **kwargs)

    return wrapper
