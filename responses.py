from flask import jsonify

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def json_ok(data=None, status=200, message=None, **extra):
    body = {"status": "ok"}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def json_error(message=None, status=400, errors=None):
    body = {"status": "error"}
    if errors:
        body["errors"] = errors
    if message is not None:
        body["message"] = message
    return jsonify(body), status


def format_timestamp(value):
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def serialize_category(category):
    return {
        "id": category.id,
        "name": category.name,
        "color": category.color,
        "createdAt": format_timestamp(category.created_at),
        "updatedAt": format_timestamp(category.updated_at),
    }


def serialize_task(task, categories):
    """Shape a task for output.

    ``categories`` is the owner's CategoryRepository-like lookup; the category
    is resolved at serialization time so a since-deleted one becomes null.
    """
    category = None
    if task.category_id is not None:
        found = categories.get_owned(task.user_id, task.category_id)
        if found is not None:
            category = {"id": found.id, "name": found.name, "color": found.color}

    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "priority": task.priority,
        "deadline": format_timestamp(task.deadline),
        "category": category,
        "createdAt": format_timestamp(task.created_at),
        "updatedAt": format_timestamp(task.updated_at),
    }


def serialize_option(option):
    return {
        "id": option.id,
        "language": option.language,
        "theme": option.theme,
        "taskFilter": option.task_filter,
        "taskSort": option.task_sort,
        "createdAt": format_timestamp(option.created_at),
        "updatedAt": format_timestamp(option.updated_at),
    }
