from marshmallow import fields
from inscriptions import ma
from inscriptions.models.registration import Registration

SIGNATURE_FIELDS = ('image_rights_signature', 'sanitary_signature')


class RegistrationSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Registration
        load_instance = False

    # Read-only fields
    id = fields.Int(dump_only=True)
    age = fields.Int(dump_only=True)
    authorization_pdf_url = fields.Str(dump_only=True)
    sanitary_pdf_url = fields.Str(dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


registration_schema = RegistrationSchema()
# Listing leaves out the signature images
registrations_schema = RegistrationSchema(many=True, exclude=SIGNATURE_FIELDS)
