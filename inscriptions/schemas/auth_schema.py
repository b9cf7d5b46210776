from marshmallow import fields, validate
from inscriptions import ma


# Staff login: a single shared password checked by the credential verifier
class AdminLoginSchema(ma.Schema):
    password = fields.Str(required=True, validate=validate.Length(min=1))


admin_login_schema = AdminLoginSchema()
