import os
from dotenv import load_dotenv
from urllib.parse import quote_plus

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get(
        'SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Build the SQLALCHEMY_DATABASE_URI:
    # - Prefer DATABASE_URL if provided (full URI)
    # - Otherwise compose from DB_USER, DB_PASSWORD, DB_HOST, DB_PORT and DB_NAME
    _database_url = os.environ.get('DATABASE_URL')
    if _database_url:
        SQLALCHEMY_DATABASE_URI = _database_url
    else:
        DB_USER = os.environ.get('DB_USER', 'root')
        DB_PASSWORD = os.environ.get('DB_PASSWORD', '')
        DB_HOST = os.environ.get('DB_HOST', 'localhost')
        DB_PORT = os.environ.get('DB_PORT', '')
        DB_NAME = os.environ.get('DB_NAME', 'scouts_cluses')

        host = f"{DB_HOST}:{DB_PORT}" if DB_PORT else DB_HOST
        user_q = quote_plus(DB_USER)
        pw_q = quote_plus(DB_PASSWORD)
        SQLALCHEMY_DATABASE_URI = f"mysql+pymysql://{user_q}:{pw_q}@{host}/{DB_NAME}"

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = os.environ.get(
        'JWT_SECRET_KEY') or 'jwt-secret-string-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = 3600  # 1 hour
    JWT_TOKEN_LOCATION = ['headers']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'

    # werkzeug hash of the staff password, see scripts/hash_admin_password.py
    ADMIN_PASSWORD_HASH = os.environ.get('ADMIN_PASSWORD_HASH')

    APP_TIMEZONE = os.environ.get('APP_TIMEZONE', 'Europe/Paris')
    ASSOCIATION_NAME = os.environ.get(
        'ASSOCIATION_NAME', 'Scouts et Guides de Cluses')
    DEFAULT_SIGNING_PLACE = os.environ.get('DEFAULT_SIGNING_PLACE', 'Cluses')
    CONSENT_TEXT = 'Lu et approuvé'

    # Single source of truth for categories and their inclusive age bounds.
    CATEGORY_RULES = {
        'louveteau': {'min_age': 8, 'max_age': 11, 'display_name': 'Louveteaux'},
        'scout': {'min_age': 11, 'max_age': 17, 'display_name': 'Scouts'},
        'guide': {'min_age': 11, 'max_age': 17, 'display_name': 'Guides'},
    }

    # Empty string disables the logos on generated documents
    LOGO_PATH = os.environ.get(
        'LOGO_PATH',
        os.path.join(basedir, 'inscriptions', 'static', 'images', 'logo-scouts.png'))

    # 'local' or 's3'
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'local')
    UPLOAD_DIR = os.environ.get('UPLOAD_DIR', os.path.join(basedir, 'uploads'))
    PDF_DIR = os.environ.get('PDF_DIR', os.path.join(basedir, 'public', 'pdfs'))
    S3_BUCKET = os.environ.get('S3_BUCKET')
    S3_PREFIX = os.environ.get('S3_PREFIX', 'inscriptions/')
    S3_PUBLIC_BASE_URL = os.environ.get('S3_PUBLIC_BASE_URL')

    # 10 MB per file, 11 files at most
    MAX_FILE_SIZE = 10 * 1024 * 1024
    MAX_CONTENT_LENGTH = 11 * MAX_FILE_SIZE


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///test_inscriptions.db'
    STORAGE_BACKEND = 'local'


class ProductionConfig(Config):
    DEBUG = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
