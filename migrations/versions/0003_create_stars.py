"""
Create stars with one row per (starer, post).

The unique constraint backs the ON CONFLICT insert in StarRepository.create.
"""
from alembic import op


# revision identifiers, used by Alembic.
revision = "0003"
down_revision = "0002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS stars (
            id BIGSERIAL PRIMARY KEY,
            starer_id BIGINT NOT NULL REFERENCES users (id),
            post_id BIGINT NOT NULL REFERENCES posts (id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT stars_starer_post_key UNIQUE (starer_id, post_id)
        )
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS stars_post_id_idx ON stars (post_id)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stars")
