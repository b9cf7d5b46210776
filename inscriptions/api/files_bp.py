from flask import Blueprint, current_app, send_from_directory
from flask_jwt_extended import jwt_required
from inscriptions.utils.auth_helpers import require_admin

# Serves files kept by the local storage backend
files_bp = Blueprint('files', __name__, url_prefix='')


@files_bp.route('/pdfs/<path:filename>', methods=['GET'])
def get_pdf(filename):
    # Names are random uuids, handed out only to the submitter
    return send_from_directory(current_app.config['PDF_DIR'], filename,
                               mimetype='application/pdf')


@files_bp.route('/uploads/<path:filename>', methods=['GET'])
@jwt_required()
@require_admin
def get_upload(filename):
    return send_from_directory(current_app.config['UPLOAD_DIR'], filename)
