from inscriptions import db


class Registration(db.Model):
    """One child's membership application, whatever its category."""

    __tablename__ = 'registrations'

    id = db.Column(db.Integer, primary_key=True)
    # Key of CATEGORY_RULES
    category = db.Column(db.String(20), nullable=False, index=True)

    # Identity
    last_name = db.Column(db.String(100), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    birth_date = db.Column(db.Date, nullable=False)
    sex = db.Column(db.Enum('male', 'female', name='registration_sex'))
    age = db.Column(db.Integer, nullable=False)

    # Contact
    address = db.Column(db.String(255))
    city = db.Column(db.String(100))
    postal_code = db.Column(db.String(10))
    email = db.Column(db.String(120))
    home_phone = db.Column(db.String(20))
    mobile_phone = db.Column(db.String(20))

    # {last_name, first_name, phone, sex, relation}
    emergency_contact = db.Column(db.JSON, nullable=False)
    secondary_emergency_contact = db.Column(db.JSON)

    other_club = db.Column(db.Boolean, default=False, nullable=False)
    other_club_name = db.Column(db.String(100))

    # Legal guardian
    parent_full_name = db.Column(db.String(200))
    parent_address = db.Column(db.String(255))
    parent_email = db.Column(db.String(120))
    # {last_name, first_name, address, home_phone, work_phone, mobile_phone}
    primary_guardian = db.Column(db.JSON, nullable=False)
    secondary_guardian = db.Column(db.JSON)

    # Consents
    image_rights = db.Column(db.Boolean, default=False, nullable=False)
    diffusion_rights = db.Column(db.Boolean, default=False, nullable=False)
    transport_authorization = db.Column(db.Boolean, default=False,
                                        nullable=False)
    image_rights_acknowledgment = db.Column(db.String(50), nullable=False)
    registration_acknowledgment = db.Column(db.String(50), nullable=False)

    # Signatures (base64 data URIs)
    image_rights_signature = db.Column(db.Text, nullable=False)
    image_rights_signed_at = db.Column(db.DateTime, nullable=False)
    sanitary_signature = db.Column(db.Text, nullable=False)
    sanitary_signed_at = db.Column(db.DateTime, nullable=False)
    signing_place = db.Column(db.String(100), nullable=False)
    registered_at = db.Column(db.DateTime, nullable=False)

    # Sanitary sheet
    mandatory_vaccines = db.Column(db.Boolean, default=True, nullable=False)
    vaccines = db.Column(db.JSON, nullable=False)
    on_treatment = db.Column(db.Boolean, default=False, nullable=False)
    food_allergy = db.Column(db.Boolean, default=False, nullable=False)
    medication_allergy = db.Column(db.Boolean, default=False, nullable=False)
    other_allergy = db.Column(db.Boolean, default=False, nullable=False)
    allergy_details = db.Column(db.Text)
    health_issue = db.Column(db.Boolean, default=False, nullable=False)
    health_issue_details = db.Column(db.Text)
    parent_recommendations = db.Column(db.Text)
    physician_name = db.Column(db.String(200))
    section_remarks = db.Column(db.JSON)

    # Attachments: stored-file references, never raw bytes
    vaccination_proof = db.Column(db.String(500))
    medication_documents = db.Column(db.JSON)
    other_documents = db.Column(db.JSON)

    # Generated documents
    authorization_pdf_url = db.Column(db.String(500))
    sanitary_pdf_url = db.Column(db.String(500))

    created_at = db.Column(
        db.DateTime, server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, server_default=db.func.now(
    ), onupdate=db.func.now(), nullable=False)

    def __repr__(self):
        return f'<Registration {self.category}:{self.last_name} {self.first_name}>'

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def to_dict(self):
        from inscriptions.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'category': self.category,
            'last_name': self.last_name,
            'first_name': self.first_name,
            'birth_date': self.birth_date.isoformat() if self.birth_date else None,
            'age': self.age,
            'authorization_pdf_url': self.authorization_pdf_url,
            'sanitary_pdf_url': self.sanitary_pdf_url,
            'registered_at': safe_iso(self.registered_at),
        }
