from flask import Blueprint, request

from errors import NotFound
from identity import identity_required
from repositories import CategoryRepository, TaskRepository
from responses import json_ok, serialize_task
from validation import bind_payload, resolve_id, validate_task

tasks_bp = Blueprint('tasks', __name__, url_prefix='/tasks')


def _owned_task(tasks, identity, task_id):
    task = tasks.get_owned(identity.id, task_id)
    if task is None:
        raise NotFound("Task not found")
    return task


def _category_check(categories, identity):
    return lambda category_id: categories.get_owned(identity.id, category_id) is not None


@tasks_bp.route('', methods=['GET'])
@identity_required
def list_tasks(identity):
    categories = CategoryRepository()
    tasks = TaskRepository().list_for_user(identity.id)
    return json_ok([serialize_task(task, categories) for task in tasks])


@tasks_bp.route('/create', methods=['POST'])
@identity_required
def create_task(identity):
    categories = CategoryRepository()
    fields = validate_task(bind_payload(request), _category_check(categories, identity))
    task = TaskRepository().create(identity.id, fields)
    return json_ok(serialize_task(task, categories), status=201)


@tasks_bp.route('/update', methods=['POST'], defaults={'task_id': None})
@tasks_bp.route('/update/<int:task_id>', methods=['POST'])
@identity_required
def update_task(identity, task_id):
    payload = bind_payload(request)
    tasks = TaskRepository()
    categories = CategoryRepository()

    task = _owned_task(tasks, identity, resolve_id(payload, task_id))
    fields = validate_task(payload, _category_check(categories, identity), partial=True)
    task = tasks.update(task, fields)
    return json_ok(serialize_task(task, categories))


@tasks_bp.route('/delete', methods=['POST'], defaults={'task_id': None})
@tasks_bp.route('/delete/<int:task_id>', methods=['POST'])
@identity_required
def delete_task(identity, task_id):
    tasks = TaskRepository()
    task = _owned_task(tasks, identity, resolve_id(bind_payload(request), task_id))
    tasks.delete(task)
    return json_ok(message="Task deleted successfully")
