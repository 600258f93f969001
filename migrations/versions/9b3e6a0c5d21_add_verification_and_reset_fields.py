"""Add email verification and password reset fields to users."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "9b3e6a0c5d21"
down_revision = "4f1c2d9a7b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Apply the verification and reset columns."""

    op.add_column(
        "users",
        sa.Column("verification_code", sa.String(length=128), nullable=True),
    )
    op.add_column(
        "users",
        sa.Column("verification_expiry", sa.DateTime(), nullable=True),
    )
    op.add_column(
        "users",
        sa.Column("reset_token", sa.String(length=128), nullable=True),
    )
    op.add_column(
        "users",
        sa.Column("reset_token_expiry", sa.DateTime(), nullable=True),
    )
    op.add_column(
        "users",
        sa.Column(
            "verified",
            sa.Boolean(),
            nullable=True,
            server_default=sa.false(),
        ),
    )
    # Accounts that were already active predate email verification.
    op.execute("UPDATE users SET verified = true WHERE status = 'active'")


def downgrade() -> None:
    """Drop the verification and reset columns."""

    op.drop_column("users", "verified")
    op.drop_column("users", "reset_token_expiry")
    op.drop_column("users", "reset_token")
    op.drop_column("users", "verification_expiry")
    op.drop_column("users", "verification_code")
