"""Counter state table.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "counter_state",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("counter_key", sa.String(200), unique=True, nullable=False),
        sa.Column("value", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("value >= 0", name="ck_counter_state_value_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("counter_state")
