from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_marshmallow import Marshmallow
import os

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
ma = Marshmallow()


def create_app(config_name=None, test_config=None, credential_verifier=None):
    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG", "default")

    app = Flask(__name__, static_folder="static")

    from config import config

    app.config.from_object(config[config_name])
    # Overrides applied before the extensions bind (database URI, directories)
    if test_config:
        app.config.update(test_config)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Import models so Flask-Migrate picks them up
    from inscriptions.models import Registration  # noqa: F401

    # Staff credential check, replaceable by callers (tests, secret stores)
    from inscriptions.services.credentials import PasswordHashVerifier

    if credential_verifier is None:
        if not app.config.get("ADMIN_PASSWORD_HASH"):
            app.logger.warning(
                "[auth] ADMIN_PASSWORD_HASH is not set, staff login is disabled"
            )
        credential_verifier = PasswordHashVerifier(
            app.config.get("ADMIN_PASSWORD_HASH"))
    app.extensions["credential_verifier"] = credential_verifier

    # Register blueprints
    from inscriptions.api.auth_bp import auth_bp
    from inscriptions.api.inscription_bp import inscription_bp
    from inscriptions.api.registrations_bp import registrations_bp
    from inscriptions.api.files_bp import files_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(inscription_bp)
    app.register_blueprint(registrations_bp)
    app.register_blueprint(files_bp)

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify({
            "success": False,
            "message": "Fichiers trop volumineux (10 Mo maximum par fichier).",
        }), 413

    @app.route("/mentions-legales")
    def legal_notice():
        name = app.config.get("ASSOCIATION_NAME")
        return (
            f"<h1>Mentions légales</h1>"
            f"<p>Association {name} - RNA W741000XXX</p>"
            f"<p>Hébergeur : OVH</p>"
            f"<p>RGPD respecté. Contact : contact@scouts-cluses.fr</p>"
            f'<p><a href="/">Retour</a></p>'
        )

    return app
