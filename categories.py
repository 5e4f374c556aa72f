from flask import Blueprint, request

from errors import NotFound
from identity import identity_required
from repositories import CategoryRepository
from responses import json_ok, serialize_category
from validation import bind_payload, resolve_id, validate_category

categories_bp = Blueprint('categories', __name__, url_prefix='/categories')


def _owned_category(categories, identity, category_id):
    # Someone else's category is reported exactly like a missing one
    category = categories.get_owned(identity.id, category_id)
    if category is None:
        raise NotFound()
    return category


@categories_bp.route('', methods=['GET'])
@identity_required
def list_categories(identity):
    categories = CategoryRepository().list_for_user(identity.id)
    return json_ok([serialize_category(category) for category in categories])


@categories_bp.route('/detail', methods=['GET'], defaults={'category_id': None})
@categories_bp.route('/detail/<int:category_id>', methods=['GET'])
@identity_required
def category_detail(identity, category_id):
    category_id = resolve_id(bind_payload(request), category_id)
    category = _owned_category(CategoryRepository(), identity, category_id)
    return json_ok(serialize_category(category))


@categories_bp.route('/create', methods=['POST'])
@identity_required
def create_category(identity):
    fields = validate_category(bind_payload(request))
    category = CategoryRepository().create(identity.id, fields['name'], fields.get('color'))
    return json_ok(serialize_category(category), status=201)


@categories_bp.route('/update', methods=['POST'], defaults={'category_id': None})
@categories_bp.route('/update/<int:category_id>', methods=['POST'])
@identity_required
def update_category(identity, category_id):
    payload = bind_payload(request)
    categories = CategoryRepository()

    category = _owned_category(categories, identity, resolve_id(payload, category_id))
    fields = validate_category(payload, partial=True)
    category = categories.update(category, fields)
    return json_ok(serialize_category(category))


@categories_bp.route('/delete', methods=['POST'], defaults={'category_id': None})
@categories_bp.route('/delete/<int:category_id>', methods=['POST'])
@identity_required
def delete_category(identity, category_id):
    categories = CategoryRepository()
    category = _owned_category(categories, identity, resolve_id(bind_payload(request), category_id))
    # Tasks keep their category_id; they serialize with category null afterwards
    categories.delete(category)
    return json_ok()
