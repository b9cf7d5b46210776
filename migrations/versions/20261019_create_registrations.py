"""Create registrations table."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_create_registrations"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create registrations table with all columns."""
    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("sex", sa.Enum("male", "female", name="registration_sex"), nullable=True),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("email", sa.String(120), nullable=True),
        sa.Column("home_phone", sa.String(20), nullable=True),
        sa.Column("mobile_phone", sa.String(20), nullable=True),
        sa.Column("emergency_contact", sa.JSON(), nullable=False),
        sa.Column("secondary_emergency_contact", sa.JSON(), nullable=True),
        sa.Column("other_club", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("other_club_name", sa.String(100), nullable=True),
        sa.Column("parent_full_name", sa.String(200), nullable=True),
        sa.Column("parent_address", sa.String(255), nullable=True),
        sa.Column("parent_email", sa.String(120), nullable=True),
        sa.Column("primary_guardian", sa.JSON(), nullable=False),
        sa.Column("secondary_guardian", sa.JSON(), nullable=True),
        sa.Column("image_rights", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("diffusion_rights", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "transport_authorization", sa.Boolean(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("image_rights_acknowledgment", sa.String(50), nullable=False),
        sa.Column("registration_acknowledgment", sa.String(50), nullable=False),
        sa.Column("image_rights_signature", sa.Text(), nullable=False),
        sa.Column("image_rights_signed_at", sa.DateTime(), nullable=False),
        sa.Column("sanitary_signature", sa.Text(), nullable=False),
        sa.Column("sanitary_signed_at", sa.DateTime(), nullable=False),
        sa.Column("signing_place", sa.String(100), nullable=False),
        sa.Column("registered_at", sa.DateTime(), nullable=False),
        sa.Column(
            "mandatory_vaccines", sa.Boolean(), nullable=False, server_default=sa.text("1")
        ),
        sa.Column("vaccines", sa.JSON(), nullable=False),
        sa.Column("on_treatment", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("food_allergy", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "medication_allergy", sa.Boolean(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("other_allergy", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("allergy_details", sa.Text(), nullable=True),
        sa.Column("health_issue", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("health_issue_details", sa.Text(), nullable=True),
        sa.Column("parent_recommendations", sa.Text(), nullable=True),
        sa.Column("physician_name", sa.String(200), nullable=True),
        sa.Column("section_remarks", sa.JSON(), nullable=True),
        sa.Column("vaccination_proof", sa.String(500), nullable=True),
        sa.Column("medication_documents", sa.JSON(), nullable=True),
        sa.Column("other_documents", sa.JSON(), nullable=True),
        sa.Column("authorization_pdf_url", sa.String(500), nullable=True),
        sa.Column("sanitary_pdf_url", sa.String(500), nullable=True),
        # Use SQL-native defaults compatible with MySQL/MariaDB/SQLite
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Listing is always by category
    op.create_index("ix_registrations_category", "registrations", ["category"])


def downgrade():
    """Drop registrations table and index."""
    op.drop_index("ix_registrations_category", table_name="registrations")
    op.drop_table("registrations")
