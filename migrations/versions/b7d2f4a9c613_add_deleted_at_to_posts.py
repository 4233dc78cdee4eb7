# Add deleted_at to posts so taken-down posts can never be republished

"""add deleted_at to posts"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "b7d2f4a9c613"
down_revision = "a1c3e5f70b21"
branch_labels = None
depends_on = None


def upgrade():
    op.add_column(
        "posts", sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True)
    )


def downgrade():
    op.drop_column("posts", "deleted_at")
