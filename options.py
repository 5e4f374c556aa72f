from flask import Blueprint, request

from identity import identity_required
from repositories import OptionRepository
from responses import json_ok, serialize_option
from validation import bind_payload, validate_options

options_bp = Blueprint('options', __name__, url_prefix='/options')


@options_bp.route('', methods=['GET'])
@identity_required
def get_options(identity):
    option = OptionRepository().get_or_create(identity.id)
    return json_ok(serialize_option(option))


@options_bp.route('/update', methods=['POST'])
@identity_required
def update_options(identity):
    # Validate everything first: one bad field means nothing is written
    fields = validate_options(bind_payload(request))

    options = OptionRepository()
    option = options.get_or_create(identity.id)
    if fields:
        option = options.update(option, fields)
    return json_ok(serialize_option(option))
