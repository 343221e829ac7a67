"""create profile_scrape_results table

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profile_scrape_results",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, comment="success, failed"),
        sa.Column("game", sa.String(length=64), nullable=False),
        sa.Column("user", sa.String(length=255), nullable=False),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column(
            "stats",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="Extracted stats object; null when extraction produced nothing usable",
        ),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profile_scrape_results_created_at", "profile_scrape_results", ["created_at"], unique=False)
    op.create_index("ix_profile_scrape_results_game", "profile_scrape_results", ["game"], unique=False)
    op.create_index("ix_profile_scrape_results_status", "profile_scrape_results", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_profile_scrape_results_status", table_name="profile_scrape_results")
    op.drop_index("ix_profile_scrape_results_game", table_name="profile_scrape_results")
    op.drop_index("ix_profile_scrape_results_created_at", table_name="profile_scrape_results")
    op.drop_table("profile_scrape_results")
