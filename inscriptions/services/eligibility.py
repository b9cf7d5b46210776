from inscriptions.models.registration import Registration
from inscriptions.services.errors import (
    AgeOutOfRange,
    ConsentNotAcknowledged,
    FieldTooLong,
    InvalidCategory,
    MissingRequiredField,
    MissingSignature,
)

CONSENT_TEXT = 'Lu et approuvé'

# normalized field -> form field reported to the submitter
REQUIRED_FIELDS = (
    ('last_name', 'nom'),
    ('first_name', 'prenom'),
    ('birth_date', 'dateNaissance'),
    ('category', 'categorie'),
)

ACKNOWLEDGMENT_FIELDS = (
    ('image_rights_acknowledgment', 'luEtApprouveDroitImageText'),
    ('registration_acknowledgment', 'luEtApprouveInscriptionText'),
)

SIGNATURE_FIELDS = (
    ('image_rights_signature', 'signatureDroitImage'),
    ('sanitary_signature', 'signatureSanitaire'),
)

# free-text fields stored in bounded columns
BOUNDED_FIELDS = (
    ('last_name', 'nom'),
    ('first_name', 'prenom'),
    ('address', 'adresse'),
    ('city', 'ville'),
    ('postal_code', 'codePostal'),
    ('email', 'email'),
    ('home_phone', 'telDomicile'),
    ('mobile_phone', 'telPortable'),
    ('other_club_name', 'nomAutreClub'),
    ('parent_full_name', 'parentNomPrenom'),
    ('parent_address', 'parentAdresse'),
    ('parent_email', 'parentEmail'),
    ('signing_place', 'lieuInscription'),
    ('physician_name', 'medecinTraitant'),
)


def _column_length(name):
    return Registration.__table__.columns[name].type.length


def validate_fields(fields, rules, consent_text=CONSENT_TEXT):
    """Check a normalized field set, raising on the first failed rule.

    Order: required fields, category, age bounds, acknowledgments,
    signatures, field lengths. Returns ``fields`` unchanged when every rule
    passes.
    """
    missing = [form_name for name, form_name in REQUIRED_FIELDS
               if not fields.get(name)]
    if missing:
        raise MissingRequiredField(missing)

    category = fields['category']
    rule = rules.get(category)
    if rule is None:
        raise InvalidCategory(category)

    age = fields['age']
    if age < rule['min_age'] or age > rule['max_age']:
        raise AgeOutOfRange(category, age, rule['min_age'], rule['max_age'])

    for name, form_name in ACKNOWLEDGMENT_FIELDS:
        if fields.get(name) != consent_text:
            raise ConsentNotAcknowledged(form_name, consent_text)

    for name, form_name in SIGNATURE_FIELDS:
        if not fields.get(name):
            raise MissingSignature(form_name)

    for name, form_name in BOUNDED_FIELDS:
        max_length = _column_length(name)
        if len(fields.get(name) or '') > max_length:
            raise FieldTooLong(form_name, max_length)

    return fields
