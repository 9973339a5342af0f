# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Create the integration_mappings table.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-03-10
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create integration_mappings with its uniqueness guard."""
    op.create_table(
        "integration_mappings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("external_id", sa.BigInteger(), nullable=False),
        sa.Column("internal_id", sa.BigInteger(), nullable=False),
        sa.Column("course_id", sa.BigInteger(), nullable=True),
        sa.Column("group_id", sa.BigInteger(), nullable=True),
        sa.Column("owner_id", sa.BigInteger(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "kind",
            "external_id",
            name="uq_integration_mappings_kind_external",
        ),
    )
    op.create_index(
        "ix_integration_mappings_kind_internal",
        "integration_mappings",
        ["kind", "internal_id"],
    )
    op.create_index(
        "ix_integration_mappings_course",
        "integration_mappings",
        ["course_id"],
    )


def downgrade() -> None:
    """Drop integration_mappings."""
    op.drop_index("ix_integration_mappings_course", table_name="integration_mappings")
    op.drop_index("ix_integration_mappings_kind_internal", table_name="integration_mappings")
    op.drop_table("integration_mappings")
