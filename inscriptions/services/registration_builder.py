from inscriptions.models.registration import Registration
from inscriptions.services.normalizer import VACCINE_FIELDS

DEFAULT_VACCINE_STATUS = 'OK'


def build_vaccines(overrides=None, other=''):
    """The fixed immunization list, "OK" unless the form said otherwise."""
    overrides = overrides or {}
    vaccines = {name: overrides.get(name) or DEFAULT_VACCINE_STATUS
                for name in VACCINE_FIELDS}
    vaccines['autres'] = other or ''
    return vaccines


def build_registration(fields, attachments=None):
    """Assemble a transient Registration from validated fields.

    No checks happen here: ``fields`` must already have gone through
    ``validate_fields``.
    """
    attachments = attachments or {}
    values = {key: value for key, value in fields.items()
              if key not in ('vaccine_overrides', 'other_vaccines')}
    values['mandatory_vaccines'] = True
    values['vaccines'] = build_vaccines(
        fields.get('vaccine_overrides'), fields.get('other_vaccines'))
    values['vaccination_proof'] = attachments.get('vaccination_proof')
    values['medication_documents'] = list(
        attachments.get('medication_documents') or [])
    values['other_documents'] = list(attachments.get('other_documents') or [])
    return Registration(**values)
