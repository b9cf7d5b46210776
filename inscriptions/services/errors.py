"""Error kinds raised by the registration pipeline.

Blueprints translate any ``RegistrationError`` into the JSON envelope
``{"success": false, "message": ..., "error": ...}`` with ``status_code``.
"""


class RegistrationError(Exception):
    status_code = 500
    code = 'registration_error'

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'message': self.message, 'error': self.code}


class SubmissionRejected(RegistrationError):
    """The submitted data is not acceptable; nothing has been persisted."""

    status_code = 400
    code = 'submission_rejected'


class MissingRequiredField(SubmissionRejected):
    code = 'missing_required_field'

    def __init__(self, fields, message=None):
        self.fields = list(fields)
        super().__init__(
            message or f"Champs obligatoires manquants : {', '.join(self.fields)}")


class InvalidBirthDate(MissingRequiredField):
    code = 'invalid_birth_date'

    def __init__(self, value):
        self.value = value
        super().__init__(
            ['dateNaissance'], f"Date de naissance invalide : {value}")


class InvalidCategory(SubmissionRejected):
    code = 'invalid_category'

    def __init__(self, category):
        self.category = category
        super().__init__(f"Catégorie invalide : {category}")


class AgeOutOfRange(SubmissionRejected):
    code = 'age_out_of_range'

    def __init__(self, category, age, min_age, max_age):
        self.category = category
        self.age = age
        self.min_age = min_age
        self.max_age = max_age
        super().__init__(
            f"Âge non conforme pour {category} : {age} ans "
            f"(attendu entre {min_age} et {max_age} ans)")


class ConsentNotAcknowledged(SubmissionRejected):
    code = 'consent_not_acknowledged'

    def __init__(self, field, expected):
        self.field = field
        super().__init__(
            f'Le champ {field} doit contenir exactement "{expected}"')


class MissingSignature(SubmissionRejected):
    code = 'missing_signature'

    def __init__(self, field):
        self.field = field
        super().__init__(f"Signature manquante : {field}")


class InvalidAttachment(SubmissionRejected):
    code = 'invalid_attachment'

    def __init__(self, filename):
        self.filename = filename
        super().__init__(
            f"Fichier refusé ({filename}) : PDF, JPG, PNG uniquement")


class FileTooLarge(SubmissionRejected):
    code = 'file_too_large'

    def __init__(self, filename, max_size):
        self.filename = filename
        self.max_size = max_size
        if max_size >= 1024 * 1024:
            limit = f'{max_size // (1024 * 1024)} Mo'
        else:
            limit = f'{max_size} octets'
        super().__init__(
            f"Fichier trop volumineux ({filename}) : {limit} maximum")


class FieldTooLong(SubmissionRejected):
    code = 'field_too_long'

    def __init__(self, field, max_length):
        self.field = field
        self.max_length = max_length
        super().__init__(
            f"Le champ {field} dépasse {max_length} caractères")


class DocumentGenerationError(RegistrationError):
    """A legal document could not be produced; the submission is aborted."""

    code = 'document_generation_failed'


class MissingAsset(DocumentGenerationError):
    code = 'missing_asset'

    def __init__(self, path):
        self.path = path
        super().__init__(f"Ressource manquante pour les documents : {path}")


class RenderFailure(DocumentGenerationError):
    code = 'render_failure'


class PersistenceFailure(RegistrationError):
    code = 'persistence_failure'
