"""
Create users.

Emails are stored lower-cased, so the plain unique index makes them unique
case-insensitively.
"""
from alembic import op


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            username VARCHAR(64) NOT NULL,
            email VARCHAR(320) NOT NULL,
            encrypted_password VARCHAR(255) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )
    op.execute("CREATE UNIQUE INDEX IF NOT EXISTS users_email_key ON users (email)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users")
