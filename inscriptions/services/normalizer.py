"""Turns a raw form submission into a normalized field set.

Every function here is pure: values in, values out. The keys of the raw payload
are the French form field names (``nom``, ``prenom``, ``dateNaissance``...),
the keys of the normalized set are the ``Registration`` column names.
"""
import re
from datetime import date, datetime

from inscriptions.services.categories import normalize_category
from inscriptions.services.errors import InvalidBirthDate

_MARKUP_CHARS = re.compile(r'[<>&"\']')
_ISO_DATE = re.compile(
    r'^(\d{4}-\d{2}-\d{2})'
    r'(?:T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$')

MAX_VACCINATION_PROOFS = 1
MAX_MEDICATION_DOCUMENTS = 5
MAX_OTHER_DOCUMENTS = 5

# vaccines entry -> form field
VACCINE_FIELDS = {
    'diphtérie': 'vaccinDiphtérie',
    'coqueluche': 'vaccinCoqueluche',
    'tétanos': 'vaccinTétanos',
    'haemophilus': 'vaccinHaemophilus',
    'poliomyélite': 'vaccinPoliomyélite',
    'rougeole': 'vaccinRougeole',
    'pneumocoque': 'vaccinPneumocoque',
    'bcg': 'vaccinBcg',
}

_SEX_ALIASES = {
    'male': 'male', 'masculin': 'male', 'm': 'male', 'homme': 'male',
    'female': 'female', 'féminin': 'female', 'feminin': 'female',
    'f': 'female', 'femme': 'female',
}


def sanitize(value):
    """Strip markup characters and surrounding whitespace.

    The characters are removed before trimming so that the result is stable:
    sanitize(sanitize(x)) == sanitize(x).
    """
    if value is None:
        return ''
    return _MARKUP_CHARS.sub('', str(value)).strip()


def coerce_boolean(value):
    """Checkbox semantics: only "on" (or a real True) means checked."""
    return value is True or value == 'on'


def compute_age(birth_date, now):
    """Whole calendar years between birth_date and now."""
    if isinstance(now, datetime):
        now = now.date()
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()
    before_birthday = (now.month, now.day) < (birth_date.month, birth_date.day)
    return now.year - birth_date.year - (1 if before_birthday else 0)


def parse_birth_date(value):
    """Parse an ISO date (a trailing time part is accepted); None if empty."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = sanitize(value)
    if not text:
        return None
    match = _ISO_DATE.match(text)
    if not match:
        raise InvalidBirthDate(text)
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        raise InvalidBirthDate(text)


def _signature(value):
    # data URI, kept verbatim apart from surrounding whitespace
    return '' if value is None else str(value).strip()


def normalize_sex(value):
    return _SEX_ALIASES.get(sanitize(value).lower())


def _contact(payload, prefix):
    return {
        'last_name': sanitize(payload.get(f'{prefix}Nom')),
        'first_name': sanitize(payload.get(f'{prefix}Prenom')),
        'phone': sanitize(payload.get(f'{prefix}Tel')),
        'sex': normalize_sex(payload.get(f'{prefix}Sexe')),
        'relation': sanitize(payload.get(f'{prefix}Lien')),
    }


def _guardian(payload, prefix):
    return {
        'last_name': sanitize(payload.get(f'{prefix}Nom')),
        'first_name': sanitize(payload.get(f'{prefix}Prenom')),
        'address': sanitize(payload.get(f'{prefix}Adresse')),
        'home_phone': sanitize(payload.get(f'{prefix}TelDomicile')),
        'work_phone': sanitize(payload.get(f'{prefix}TelTravail')),
        'mobile_phone': sanitize(payload.get(f'{prefix}TelPortable')),
    }


def _is_supplied(value):
    return value is not None and value != ''


def normalize_payload(payload, now, default_place='Cluses'):
    """Build the normalized field set of one submission.

    ``now`` is the submission instant: it drives the age and the signature
    timestamps. Missing required values are kept as empty/None, rejecting
    them is the eligibility validator's job.
    """
    clean = {key: sanitize(payload.get(key)) for key in (
        'nom', 'prenom', 'adresse', 'ville', 'codePostal', 'email',
        'parentEmail', 'telDomicile', 'telPortable', 'parentNomPrenom',
        'parentAdresse', 'nomAutreClub', 'lieuInscription', 'responsable1Nom',
        'responsable1Prenom')}

    birth_date = parse_birth_date(payload.get('dateNaissance'))
    age = compute_age(birth_date, now) if birth_date else None

    image_rights = coerce_boolean(payload.get('droitImage'))
    if _is_supplied(payload.get('droitDiffusion')):
        diffusion_rights = coerce_boolean(payload.get('droitDiffusion'))
    else:
        diffusion_rights = image_rights

    secondary_contact = None
    if payload.get('contactUrgenceSecondaireNom'):
        secondary_contact = _contact(payload, 'contactUrgenceSecondaire')

    secondary_guardian = None
    if payload.get('responsable2Nom'):
        secondary_guardian = _guardian(payload, 'responsable2')

    vaccine_overrides = {}
    for name, field in VACCINE_FIELDS.items():
        value = sanitize(payload.get(field))
        if value:
            vaccine_overrides[name] = value

    remarks = [sanitize(payload.get(f'remarqueSection{i}')) for i in range(1, 6)]

    return {
        'last_name': clean['nom'],
        'first_name': clean['prenom'],
        'birth_date': birth_date,
        'sex': normalize_sex(payload.get('sexe')),
        'age': age,
        'category': normalize_category(sanitize(payload.get('categorie'))),
        'address': clean['adresse'] or f"{clean['ville']} {clean['codePostal']}".strip(),
        'city': clean['ville'],
        'postal_code': clean['codePostal'],
        'email': clean['email'] or clean['parentEmail'],
        'home_phone': clean['telDomicile'],
        'mobile_phone': clean['telPortable'],
        'emergency_contact': _contact(payload, 'contactUrgence'),
        'secondary_emergency_contact': secondary_contact,
        'other_club': coerce_boolean(payload.get('autreClub')),
        'other_club_name': clean['nomAutreClub'],
        'parent_full_name': clean['parentNomPrenom'] or (
            f"{clean['responsable1Nom']} {clean['responsable1Prenom']}".strip()),
        'parent_address': clean['parentAdresse'],
        'parent_email': clean['parentEmail'],
        'primary_guardian': _guardian(payload, 'responsable1'),
        'secondary_guardian': secondary_guardian,
        'image_rights': image_rights,
        'diffusion_rights': diffusion_rights,
        'transport_authorization': coerce_boolean(payload.get('autorisationTransport')),
        'image_rights_acknowledgment': sanitize(payload.get('luEtApprouveDroitImageText')),
        'registration_acknowledgment': sanitize(payload.get('luEtApprouveInscriptionText')),
        'image_rights_signature': _signature(payload.get('signatureDroitImage')),
        'image_rights_signed_at': now,
        'sanitary_signature': _signature(payload.get('signatureSanitaire')),
        'sanitary_signed_at': now,
        'signing_place': clean['lieuInscription'] or default_place,
        'registered_at': now,
        'vaccine_overrides': vaccine_overrides,
        'other_vaccines': sanitize(payload.get('vaccinsAutres')),
        'on_treatment': coerce_boolean(payload.get('traitementMedical')),
        'food_allergy': coerce_boolean(payload.get('allergiesAlimentaires')),
        'medication_allergy': coerce_boolean(payload.get('allergiesMedicament')),
        'other_allergy': coerce_boolean(payload.get('allergiesAutres')),
        'allergy_details': sanitize(payload.get('allergiesDetails')),
        'health_issue': coerce_boolean(payload.get('problemeSante')),
        'health_issue_details': sanitize(payload.get('problemeSanteDetails')),
        'parent_recommendations': sanitize(payload.get('recommandationsParents')),
        'physician_name': sanitize(payload.get('medecinTraitant')),
        'section_remarks': remarks if any(remarks) else None,
    }


def normalize_attachments(file_refs):
    """Keep the allowed number of references per upload field."""
    file_refs = file_refs or {}

    def _refs(key, limit):
        value = file_refs.get(key) or []
        if isinstance(value, str):
            value = [value]
        return [ref for ref in value if ref][:limit]

    proofs = _refs('vaccinScan', MAX_VACCINATION_PROOFS)
    return {
        'vaccination_proof': proofs[0] if proofs else None,
        'medication_documents': _refs('medicationScan', MAX_MEDICATION_DOCUMENTS),
        'other_documents': _refs('otherDocuments', MAX_OTHER_DOCUMENTS),
    }
