from inscriptions.services.credentials import PasswordHashVerifier
from inscriptions import create_app, db
from werkzeug.security import generate_password_hash
from inscriptions.utils.datetime_utils import local_now
from datetime import date
import pytest
import sys
import os

# Make the repository root importable (config.py lives there)
sys.path.insert(0, os.path.abspath('.'))

STAFF_PASSWORD = 'testpassword'

# 1x1 transparent PNG, as produced by the signature pad
SIGNATURE_PNG_B64 = (
    'iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA'
    '60e6kgAAAABJRU5ErkJggg=='
)
SIGNATURE_DATA_URI = f'data:image/png;base64,{SIGNATURE_PNG_B64}'


def birth_date_for_age(age, today=None):
    """ISO birth date giving exactly ``age`` years today (first of the month)."""
    today = today or local_now().date()
    return date(today.year - age, today.month, 1).isoformat()


@pytest.fixture
def app(tmp_path):
    """Test app on a SQLite file with storage directories under tmp_path."""
    _app = create_app(
        'testing',
        test_config={
            'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test_inscriptions.db'}",
            'SQLALCHEMY_ENGINE_OPTIONS': {
                'connect_args': {'check_same_thread': False}
            },
            'PDF_DIR': str(tmp_path / 'pdfs'),
            'UPLOAD_DIR': str(tmp_path / 'uploads'),
        },
        credential_verifier=PasswordHashVerifier(
            generate_password_hash(STAFF_PASSWORD)),
    )

    # Keep the app context active for the whole test
    with _app.app_context():
        import inscriptions.models  # noqa: F401
        db.create_all()

        yield _app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client"""
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    """Bearer headers for a logged-in staff member"""
    response = client.post('/api/auth/login', json={'password': STAFF_PASSWORD})
    token = response.get_json()['access_token']
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def payload():
    """A complete, valid louveteau submission aged 10 today."""
    return {
        'nom': 'Durand',
        'prenom': 'Léa',
        'dateNaissance': birth_date_for_age(10),
        'sexe': 'Féminin',
        'categorie': 'louveteau',
        'adresse': '12 rue des Allobroges',
        'ville': 'Cluses',
        'codePostal': '74300',
        'email': 'famille.durand@example.fr',
        'telPortable': '0612345678',
        'contactUrgenceNom': 'Durand',
        'contactUrgencePrenom': 'Marc',
        'contactUrgenceTel': '0698765432',
        'contactUrgenceSexe': 'Homme',
        'contactUrgenceLien': 'Parents',
        'responsable1Nom': 'Durand',
        'responsable1Prenom': 'Claire',
        'responsable1Adresse': '12 rue des Allobroges',
        'responsable1TelPortable': '0611223344',
        'parentAdresse': '12 rue des Allobroges 74300 Cluses',
        'parentEmail': 'claire.durand@example.fr',
        'droitImage': 'on',
        'autorisationTransport': 'on',
        'luEtApprouveDroitImageText': 'Lu et approuvé',
        'luEtApprouveInscriptionText': 'Lu et approuvé',
        'signatureDroitImage': SIGNATURE_DATA_URI,
        'signatureSanitaire': SIGNATURE_DATA_URI,
        'allergiesAlimentaires': 'on',
        'allergiesDetails': 'Arachides',
        'medecinTraitant': 'Dr Martin',
    }
