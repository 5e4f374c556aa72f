"""
Request binding and field validation.

``bind_payload`` is the only place that looks at how a client sent its data
(JSON body, form body or query string, camelCase or snake_case keys). Everything
after it works with a flat :class:`Payload` keyed by the camelCase names the
frontend uses. The ``validate_*`` helpers return only the fields that were
present, converted to model attribute names, or raise ``ValidationError`` with
one message per offending field.
"""
import re
from datetime import datetime, timezone

from enums import Language, TaskFilter, TaskSort, TaskStatus, Theme
from errors import BadRequest, ValidationError
from models import INT64_MAX, INT64_MIN

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
MIN_PASSWORD_LENGTH = 6

ALIASES = {
    "category_id": "categoryId",
    "first_name": "firstName",
    "last_name": "lastName",
    "is_student": "isStudent",
    "task_filter": "taskFilter",
    "task_sort": "taskSort",
}

DEADLINE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%d/%m/%Y",
)

TRUE_VALUES = ("1", "true", "yes", "on")


class Payload(dict):
    """Normalized request fields."""

    def has(self, key):
        return key in self

    def text(self, key):
        value = self.get(key)
        if value is None:
            return None
        return str(value).strip()

    def is_text(self, key):
        """False when a JSON client sent an object or array for ``key``."""
        return not isinstance(self.get(key), (dict, list))


def bind_payload(request):
    if request.is_json:
        raw = request.get_data(cache=True)
        if raw.strip():
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                raise BadRequest(errors={"body": "Invalid JSON"})
        else:
            data = {}
    else:
        data = request.form.to_dict()

    payload = Payload()
    for key, value in request.args.items():
        payload[ALIASES.get(key, key)] = value
    for key, value in data.items():
        payload[ALIASES.get(key, key)] = value
    return payload


def parse_id(value):
    if value is None or value == "":
        raise BadRequest("Missing id")
    if isinstance(value, bool):
        raise BadRequest("Invalid id")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise BadRequest("Invalid id")


def resolve_id(payload, path_id=None):
    """The id from the URL wins over one sent in the body or query string."""
    if path_id is not None:
        return path_id
    return parse_id(payload.get("id"))


def parse_deadline(raw):
    """Parse free-text deadline input into a naive UTC datetime.

    Raises ValueError when none of the accepted formats match.
    """
    text = str(raw).strip()
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in DEADLINE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        raise ValueError(f"Unrecognized date: {text!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_flag(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def _parse_int(value):
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("fractional value")
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError("out of range")
    return number


def validate_credentials(email, password):
    email = "" if email is None else str(email).strip()
    password = "" if password is None else str(password)

    errors = {}
    if email == "":
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Invalid email"
    if password == "":
        errors["password"] = "Password is required"

    if errors:
        raise ValidationError(errors)
    return email, password


def validate_profile(payload, partial=False):
    """Registration (partial=False) and profile update (partial=True) fields.

    The returned ``password`` is still plain text; hashing is the caller's job.
    """
    errors = {}
    fields = {}

    for key, attr, label in (("firstName", "first_name", "First name"), ("lastName", "last_name", "Last name")):
        if partial and not payload.has(key):
            continue
        value = payload.text(key) or ""
        if not payload.is_text(key):
            errors[key] = f"{label} must be text"
        elif value == "":
            errors[key] = f"{label} is required"
        else:
            fields[attr] = value

    if not partial or payload.has("email"):
        email = payload.text("email") or ""
        if email == "":
            errors["email"] = "Email is required"
        elif not EMAIL_RE.match(email):
            errors["email"] = "Invalid email"
        else:
            fields["email"] = email

    password = payload.get("password")
    password = "" if password is None else str(password)
    if partial:
        # an empty password on update means "keep the current one"
        if password != "":
            if len(password) < MIN_PASSWORD_LENGTH:
                errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            else:
                fields["password"] = password
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    else:
        fields["password"] = password

    if payload.has("isStudent") or not partial:
        fields["is_student"] = parse_flag(payload.get("isStudent"))

    if errors:
        raise ValidationError(errors)
    return fields


def validate_category(payload, partial=False):
    errors = {}
    fields = {}

    if not partial or payload.has("name"):
        name = payload.text("name") or ""
        if not payload.is_text("name"):
            errors["name"] = "Name must be text"
        elif name == "":
            errors["name"] = "Name is required"
        else:
            fields["name"] = name

    if payload.has("color"):
        color = payload.text("color")
        if color is None or color == "":
            fields["color"] = None
        elif not COLOR_RE.match(color):
            errors["color"] = "Color must be hex like #RRGGBB"
        else:
            fields["color"] = color

    if errors:
        raise ValidationError(errors)
    return fields


def validate_task(payload, owns_category, partial=False):
    """Validate task fields.

    ``owns_category`` is called with a category id and must return True only
    when that category belongs to the caller.
    """
    errors = {}
    fields = {}

    if payload.has("category"):
        errors["category"] = "Use categoryId to assign a category"

    if not partial or payload.has("title"):
        title = payload.text("title") or ""
        if not payload.is_text("title"):
            errors["title"] = "Title must be text"
        elif title == "":
            errors["title"] = "Title is required"
        else:
            fields["title"] = title

    if payload.has("description"):
        if payload.is_text("description"):
            fields["description"] = payload.text("description") or None
        else:
            errors["description"] = "Description must be text"

    if payload.get("status") is not None:
        status = payload.text("status")
        if not TaskStatus.is_valid(status):
            errors["status"] = "Invalid status value"
        else:
            fields["status"] = status
    elif not partial:
        fields["status"] = TaskStatus.PENDING.value

    priority = payload.get("priority")
    if priority is not None and priority != "":
        try:
            fields["priority"] = _parse_int(priority)
        except (TypeError, ValueError, OverflowError):
            errors["priority"] = "Priority must be an integer"
    elif not partial:
        fields["priority"] = 2

    if payload.has("deadline"):
        raw = payload.get("deadline")
        if raw is None or str(raw).strip() == "":
            fields["deadline"] = None
        else:
            try:
                fields["deadline"] = parse_deadline(raw)
            except ValueError:
                errors["deadline"] = "Invalid deadline format"
    elif not partial:
        fields["deadline"] = None

    if payload.has("categoryId"):
        raw = payload.get("categoryId")
        if raw is None or str(raw).strip() == "":
            fields["category_id"] = None
        else:
            try:
                category_id = _parse_int(raw)
            except (TypeError, ValueError, OverflowError):
                errors["categoryId"] = "Invalid category"
            else:
                if owns_category(category_id):
                    fields["category_id"] = category_id
                else:
                    errors["categoryId"] = "Invalid category"
    elif not partial:
        fields["category_id"] = None

    if errors:
        raise ValidationError(errors)
    return fields


OPTION_FIELDS = (
    ("language", "language", Language, "Invalid language"),
    ("theme", "theme", Theme, "Invalid theme"),
    ("taskFilter", "task_filter", TaskFilter, "Invalid task filter"),
    ("taskSort", "task_sort", TaskSort, "Invalid task sort"),
)


def validate_options(payload):
    errors = {}
    fields = {}

    for key, attr, choices, message in OPTION_FIELDS:
        value = payload.text(key)
        if value is None or value == "":
            continue
        if choices is Theme:
            value = value.lower()
        if choices.is_valid(value):
            fields[attr] = value
        else:
            errors[key] = message

    if errors:
        raise ValidationError(errors)
    return fields
