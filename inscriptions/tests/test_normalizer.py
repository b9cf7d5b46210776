# inscriptions/tests/test_normalizer.py
import pytest
from datetime import date, datetime
from inscriptions.services.errors import InvalidBirthDate, MissingRequiredField
from inscriptions.services.normalizer import (
    coerce_boolean,
    compute_age,
    normalize_attachments,
    normalize_payload,
    normalize_sex,
    parse_birth_date,
    sanitize,
)

NOW = datetime(2024, 8, 1, 10, 30)

# --- sanitize ---


@pytest.mark.parametrize('raw, expected', [
    ('  Durand  ', 'Durand'),
    ('<script>alert("x")</script>', 'scriptalert(x)/script'),
    ("L'Étoile & Co", 'LÉtoile  Co'),
    (None, ''),
    ('', ''),
    ('< Léa >', 'Léa'),
])
def test_sanitize(raw, expected):
    assert sanitize(raw) == expected


@pytest.mark.parametrize('raw', [
    '  <b>Durand</b>  ', '" a "', "' & ' x", '&&<<>>', '\t<tag> text </tag>\n',
    'déjà propre', '',
])
def test_sanitize_is_idempotent_and_removes_markup(raw):
    once = sanitize(raw)
    assert sanitize(once) == once
    assert not any(char in once for char in '<>&"\'')


def test_sanitize_stringifies_non_strings():
    assert sanitize(74300) == '74300'

# --- coerce_boolean ---


@pytest.mark.parametrize('value, expected', [
    ('on', True),
    (True, True),
    ('off', False),
    ('true', False),
    ('', False),
    (None, False),
    (False, False),
])
def test_coerce_boolean(value, expected):
    assert coerce_boolean(value) is expected

# --- compute_age ---


def test_compute_age_day_before_birthday():
    assert compute_age(date(2010, 3, 1), date(2025, 2, 28)) == 14


def test_compute_age_on_birthday():
    assert compute_age(date(2010, 3, 1), date(2025, 3, 1)) == 15


def test_compute_age_leap_day_birth():
    born = date(2012, 2, 29)
    assert compute_age(born, date(2025, 2, 28)) == 12
    assert compute_age(born, date(2025, 3, 1)) == 13
    assert compute_age(born, date(2024, 2, 29)) == 12


def test_compute_age_accepts_datetimes():
    assert compute_age(datetime(2014, 5, 10, 23, 59), NOW) == 10

# --- parse_birth_date / normalize_sex ---


def test_parse_birth_date():
    assert parse_birth_date('2014-05-10') == date(2014, 5, 10)
    assert parse_birth_date('2014-05-10T00:00:00.000Z') == date(2014, 5, 10)
    assert parse_birth_date('') is None
    assert parse_birth_date(None) is None


def test_parse_birth_date_rejects_garbage():
    with pytest.raises(InvalidBirthDate) as excinfo:
        parse_birth_date('10/05/2014')
    assert isinstance(excinfo.value, MissingRequiredField)
    assert excinfo.value.fields == ['dateNaissance']


@pytest.mark.parametrize('raw', [
    '2014-05-10xyz', '2014-05-10 garbage', '2014-05-10T', '2014-02-30',
])
def test_parse_birth_date_rejects_trailing_text(raw):
    with pytest.raises(InvalidBirthDate):
        parse_birth_date(raw)


def test_parse_birth_date_accepts_time_suffix():
    assert parse_birth_date('2014-05-10T08:30') == date(2014, 5, 10)
    assert parse_birth_date('2014-05-10T08:30:00+02:00') == date(2014, 5, 10)


@pytest.mark.parametrize('raw, expected', [
    ('Masculin', 'male'), ('Féminin', 'female'), ('female', 'female'),
    ('F', 'female'), ('', None), ('autre', None),
])
def test_normalize_sex(raw, expected):
    assert normalize_sex(raw) == expected

# --- normalize_payload ---


def test_normalize_payload_derives_fields(payload):
    payload['dateNaissance'] = '2014-05-10'
    fields = normalize_payload(payload, NOW)

    assert fields['age'] == 10
    assert fields['birth_date'] == date(2014, 5, 10)
    assert fields['category'] == 'louveteau'
    assert fields['sex'] == 'female'
    assert fields['image_rights'] is True
    # droitDiffusion absent: follows droitImage
    assert fields['diffusion_rights'] is True
    assert fields['transport_authorization'] is True
    assert fields['on_treatment'] is False
    assert fields['food_allergy'] is True
    assert fields['image_rights_signed_at'] == NOW
    assert fields['signing_place'] == 'Cluses'
    assert fields['secondary_emergency_contact'] is None
    assert fields['secondary_guardian'] is None
    assert fields['emergency_contact']['relation'] == 'Parents'
    assert fields['emergency_contact']['sex'] == 'male'


def test_normalize_payload_fallbacks():
    fields = normalize_payload({
        'nom': 'Petit',
        'prenom': 'Hugo',
        'ville': 'Cluses',
        'codePostal': '74300',
        'parentEmail': 'parent@example.fr',
        'responsable1Nom': 'Petit',
        'responsable1Prenom': 'Anne',
    }, NOW, default_place='Scionzier')

    assert fields['address'] == 'Cluses 74300'
    assert fields['parent_full_name'] == 'Petit Anne'
    assert fields['email'] == 'parent@example.fr'
    assert fields['signing_place'] == 'Scionzier'
    assert fields['birth_date'] is None
    assert fields['age'] is None
    assert fields['diffusion_rights'] is False


def test_normalize_payload_explicit_diffusion_overrides_image_rights():
    fields = normalize_payload({'droitImage': 'on', 'droitDiffusion': 'off'}, NOW)
    assert fields['image_rights'] is True
    assert fields['diffusion_rights'] is False


def test_normalize_payload_category_is_lowercased():
    assert normalize_payload({'categorie': '  Scout '}, NOW)['category'] == 'scout'


def test_normalize_payload_secondary_contacts_only_when_named(payload):
    payload['contactUrgenceSecondaireNom'] = 'Durand'
    payload['contactUrgenceSecondaireTel'] = '0600000000'
    payload['responsable2Nom'] = 'Roux'
    payload['responsable2Prenom'] = 'Paul'
    fields = normalize_payload(payload, NOW)

    assert fields['secondary_emergency_contact']['phone'] == '0600000000'
    assert fields['secondary_guardian']['last_name'] == 'Roux'


def test_normalize_payload_sanitizes_free_text(payload):
    payload['allergiesDetails'] = '<img src=x> "arachides"'
    payload['vaccinRougeole'] = ' À faire '
    fields = normalize_payload(payload, NOW)

    assert fields['allergy_details'] == 'img src=x arachides'
    assert fields['vaccine_overrides'] == {'rougeole': 'À faire'}


def test_normalize_payload_signatures_accept_non_strings(payload):
    payload['signatureDroitImage'] = 123
    payload['signatureSanitaire'] = None

    fields = normalize_payload(payload, NOW)

    assert fields['image_rights_signature'] == '123'
    assert fields['sanitary_signature'] == ''


def test_normalize_payload_section_remarks(payload):
    assert normalize_payload(payload, NOW)['section_remarks'] is None

    payload['remarqueSection3'] = 'Craint le froid'
    remarks = normalize_payload(payload, NOW)['section_remarks']
    assert remarks == ['', '', 'Craint le froid', '', '']

# --- normalize_attachments ---


def test_normalize_attachments_limits():
    refs = normalize_attachments({
        'vaccinScan': ['/uploads/a.pdf', '/uploads/b.pdf'],
        'medicationScan': [f'/uploads/m{i}.pdf' for i in range(7)],
        'otherDocuments': '/uploads/o.png',
    })

    assert refs['vaccination_proof'] == '/uploads/a.pdf'
    assert len(refs['medication_documents']) == 5
    assert refs['other_documents'] == ['/uploads/o.png']


def test_normalize_attachments_empty():
    assert normalize_attachments(None) == {
        'vaccination_proof': None,
        'medication_documents': [],
        'other_documents': [],
    }
