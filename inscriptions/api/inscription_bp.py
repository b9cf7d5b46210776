from flask import Blueprint, request, jsonify, current_app
from inscriptions.services.errors import RegistrationError, SubmissionRejected
from inscriptions.services.registration_service import (
    UPLOAD_LIMITS,
    submit_registration,
)

inscription_bp = Blueprint('inscription', __name__, url_prefix='')

SERVER_ERROR = {'success': False, 'message': 'Erreur serveur.'}


def _submitted_payload():
    """Form fields from a multipart/urlencoded post, or a JSON object body"""
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise SubmissionRejected('Le corps JSON doit être un objet.')
        return payload
    return request.form.to_dict()


def _submitted_files():
    # Browsers send an empty part for file inputs left blank
    return {
        field: [f for f in request.files.getlist(field) if f and f.filename]
        for field in UPLOAD_LIMITS
    }


@inscription_bp.route('/inscription', methods=['POST'])
def create_inscription():
    try:
        registration = submit_registration(
            _submitted_payload(), _submitted_files())
    except SubmissionRejected as e:
        current_app.logger.warning(f"[inscription] Rejected: {e.message}")
        return jsonify(e.to_dict()), e.status_code
    except RegistrationError as e:
        current_app.logger.exception(f"[inscription] Failed: {e.message}")
        return jsonify(SERVER_ERROR), 500
    except Exception as e:
        current_app.logger.exception(f"[inscription] Unexpected error: {e}")
        return jsonify(SERVER_ERROR), 500

    return jsonify({
        'success': True,
        'message': 'Inscription réussie ! PDF générés.',
        'id': registration.id,
        'pdfUrl': registration.authorization_pdf_url,
        'sanitaryPdfUrl': registration.sanitary_pdf_url,
        'registration': registration.to_dict(),
    }), 201
