import uuid

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from inscriptions import db
from inscriptions.models.registration import Registration
from inscriptions.services.categories import get_category_rules, normalize_category
from inscriptions.services.document_renderer import DocumentRenderer
from inscriptions.services.eligibility import CONSENT_TEXT, validate_fields
from inscriptions.services.errors import (
    InvalidCategory,
    PersistenceFailure,
    RegistrationError,
)
from inscriptions.services.file_storage import build_storage
from inscriptions.services.normalizer import (
    MAX_MEDICATION_DOCUMENTS,
    MAX_OTHER_DOCUMENTS,
    MAX_VACCINATION_PROOFS,
    normalize_attachments,
    normalize_payload,
)
from inscriptions.services.registration_builder import build_registration
from inscriptions.utils.datetime_utils import local_now

UPLOAD_LIMITS = {
    'vaccinScan': MAX_VACCINATION_PROOFS,
    'medicationScan': MAX_MEDICATION_DOCUMENTS,
    'otherDocuments': MAX_OTHER_DOCUMENTS,
}


def _discard(written):
    """Delete the files stored for a submission that did not go through."""
    for storage, reference in written:
        storage.delete(reference)


def submit_registration(payload, uploads=None, *, now=None, renderer=None,
                        upload_storage=None, document_storage=None, rules=None):
    """Run one submission through the whole pipeline.

    normalize -> validate -> store uploads -> build -> insert -> render the
    two PDFs -> store them -> record their locations -> commit.

    ``uploads`` maps an upload field name to a list of werkzeug FileStorage.
    Returns the committed Registration. Any failure rolls the session back,
    removes the files written so far and raises a RegistrationError.
    """
    config = current_app.config
    now = now or local_now()
    rules = get_category_rules(rules)

    fields = normalize_payload(
        payload, now, default_place=config.get('DEFAULT_SIGNING_PLACE', 'Cluses'))
    validate_fields(fields, rules, consent_text=config.get('CONSENT_TEXT', CONSENT_TEXT))

    renderer = renderer or DocumentRenderer.from_config(config)
    upload_storage = upload_storage or build_storage(config, 'uploads')
    document_storage = document_storage or build_storage(config, 'pdfs')

    written = []
    try:
        file_refs = {}
        for field, limit in UPLOAD_LIMITS.items():
            refs = []
            for file_storage in list((uploads or {}).get(field) or [])[:limit]:
                reference = upload_storage.store_upload(file_storage)
                written.append((upload_storage, reference))
                refs.append(reference)
            file_refs[field] = refs

        registration = build_registration(fields, normalize_attachments(file_refs))
        db.session.add(registration)
        db.session.flush()

        authorization_pdf = renderer.render_authorization(registration, issued_at=now)
        sanitary_pdf = renderer.render_sanitary(registration, issued_at=now)

        pdf_id = uuid.uuid4()
        registration.authorization_pdf_url = document_storage.save(
            authorization_pdf, f'{pdf_id}-auth.pdf')
        written.append((document_storage, registration.authorization_pdf_url))
        registration.sanitary_pdf_url = document_storage.save(
            sanitary_pdf, f'{pdf_id}-sanitary.pdf')
        written.append((document_storage, registration.sanitary_pdf_url))

        db.session.commit()
    except RegistrationError:
        db.session.rollback()
        _discard(written)
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        _discard(written)
        raise PersistenceFailure(str(e)) from e
    except Exception as e:
        db.session.rollback()
        _discard(written)
        raise PersistenceFailure(f"Erreur inattendue : {e!r}") from e

    current_app.logger.info(
        f"[inscription] Registration {registration.id} saved "
        f"({registration.category}, {registration.age} ans)")
    return registration


def list_registrations(category, rules=None):
    """All registrations of a category, sorted by surname then given name."""
    category = normalize_category(category)
    if category not in get_category_rules(rules):
        raise InvalidCategory(category)
    return (
        Registration.query.filter_by(category=category)
        .order_by(Registration.last_name, Registration.first_name)
        .all()
    )


def get_registration(category, registration_id, rules=None):
    category = normalize_category(category)
    if category not in get_category_rules(rules):
        raise InvalidCategory(category)
    return Registration.query.filter_by(
        category=category, id=registration_id).first()
