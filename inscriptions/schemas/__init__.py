from inscriptions.schemas.registration_schema import registration_schema, registrations_schema
from inscriptions.schemas.auth_schema import admin_login_schema

__all__ = [
    'registration_schema', 'registrations_schema',
    'admin_login_schema'
]
