from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import jwt_required
from inscriptions.schemas import registration_schema, registrations_schema
from inscriptions.services.categories import get_category_rules
from inscriptions.services.errors import InvalidCategory
from inscriptions.services.registration_service import (
    get_registration,
    list_registrations,
)
from inscriptions.utils.auth_helpers import require_admin

registrations_bp = Blueprint(
    'registrations', __name__, url_prefix='/api/registrations')

# Category table


@registrations_bp.route('/categories', methods=['GET'])
@jwt_required()
@require_admin
def get_categories():
    rules = get_category_rules()
    return jsonify({'categories': [
        {'category': name, **rule} for name, rule in rules.items()
    ]}), 200

# Registrations of one category, sorted by surname


@registrations_bp.route('/<category>', methods=['GET'])
@jwt_required()
@require_admin
def get_registrations(category):
    try:
        registrations = list_registrations(category)
    except InvalidCategory as e:
        return jsonify(e.to_dict()), 404

    return jsonify({
        'category': category.lower(),
        'total': len(registrations),
        'registrations': registrations_schema.dump(registrations)
    }), 200

# One registration, signatures included


@registrations_bp.route('/<category>/<int:registration_id>', methods=['GET'])
@jwt_required()
@require_admin
def get_registration_detail(category, registration_id):
    try:
        registration = get_registration(category, registration_id)
    except InvalidCategory as e:
        return jsonify(e.to_dict()), 404

    if not registration:
        current_app.logger.debug(
            f"[registrations] {category}/{registration_id} not found")
        return jsonify({'message': 'Inscription introuvable'}), 404

    return jsonify({'registration': registration_schema.dump(registration)}), 200
