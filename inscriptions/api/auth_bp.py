from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required
from marshmallow import ValidationError
from inscriptions.schemas import admin_login_schema
from inscriptions.utils.auth_helpers import ADMIN_ROLE, get_credential_verifier

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

# Staff login


@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        payload = request.get_json(silent=True) or request.form.to_dict()
        data = admin_login_schema.load(payload)
    except ValidationError as e:
        return jsonify({'message': 'Mot de passe requis', 'errors': e.messages}), 400

    if not get_credential_verifier().verify(data['password']):
        current_app.logger.warning(
            f"[auth] Failed staff login from {request.remote_addr}")
        return jsonify({'message': 'Mot de passe incorrect'}), 401

    access_token = create_access_token(
        identity=ADMIN_ROLE, additional_claims={'role': ADMIN_ROLE})
    return jsonify({'access_token': access_token, 'role': ADMIN_ROLE}), 200

# Logout


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    # With JWT, logout happens client side (drop the token)
    return jsonify({'message': 'Déconnexion réussie'}), 200
