"""create certificates and activity_log

Revision ID: 20251019_create_certificates
Revises:
Create Date: 2025-10-19 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20251019_create_certificates'
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "certificates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("serialNo", sa.String(length=40), nullable=False),
        sa.Column("registrationNo", sa.String(length=80), nullable=False),
        sa.Column("studentName", sa.String(length=160), nullable=False),
        sa.Column("guardianName", sa.String(length=160), nullable=False),
        sa.Column("courseName", sa.String(length=200), nullable=False),
        sa.Column("duration", sa.String(length=60), nullable=False),
        sa.Column("grade", sa.String(length=20), nullable=False),
        sa.Column("issueDate", sa.Date(), nullable=False),
        sa.Column("place", sa.String(length=120), nullable=False),
        sa.Column("createdAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_certificates"),
    )
    op.create_index("ix_certificates_registrationNo", "certificates", ["registrationNo"], unique=True)

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(length=40), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_activity_log"),
    )

def downgrade() -> None:
    op.drop_table("activity_log")
    op.drop_index("ix_certificates_registrationNo", table_name="certificates")
    op.drop_table("certificates")
