"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None

SLOTS = (
    "muzzle",
    "barrel",
    "optic",
    "stock",
    "grip",
    "magazine",
    "underbarrel",
    "laser",
    "perk",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("liked_posts", sa.Text(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "models",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "assault", "sniper", "lmg", "smg", "shotgun", "marksman", name="weaponcategory"
            ),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_models_id"), "models", ["id"], unique=False)

    op.create_table(
        "attachment_types",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.Enum(*SLOTS, name="attachmentslot"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_attachment_types_id"), "attachment_types", ["id"], unique=False)

    op.create_table(
        "attachments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("model", sa.Integer(), nullable=False),
        sa.Column("type", sa.Integer(), nullable=False),
        sa.Column("characteristics", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["model"], ["models.id"]),
        sa.ForeignKeyConstraint(["type"], ["attachment_types.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_attachments_id"), "attachments", ["id"], unique=False)
    op.create_index(op.f("ix_attachments_model"), "attachments", ["model"], unique=False)
    op.create_index(op.f("ix_attachments_type"), "attachments", ["type"], unique=False)

    op.create_table(
        "loadouts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=True),
        sa.Column("model", sa.Integer(), nullable=False),
        *[sa.Column(slot, sa.Integer(), nullable=True) for slot in SLOTS],
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["model"], ["models.id"]),
        *[sa.ForeignKeyConstraint([slot], ["attachments.id"]) for slot in SLOTS],
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_loadouts_id"), "loadouts", ["id"], unique=False)
    op.create_index(op.f("ix_loadouts_user_id"), "loadouts", ["user_id"], unique=False)

    op.create_table(
        "loadout_ratings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["id"], ["loadouts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("loadout_ratings")

    op.drop_index(op.f("ix_loadouts_user_id"), table_name="loadouts")
    op.drop_index(op.f("ix_loadouts_id"), table_name="loadouts")
    op.drop_table("loadouts")

    op.drop_index(op.f("ix_attachments_type"), table_name="attachments")
    op.drop_index(op.f("ix_attachments_model"), table_name="attachments")
    op.drop_index(op.f("ix_attachments_id"), table_name="attachments")
    op.drop_table("attachments")

    op.drop_index(op.f("ix_attachment_types_id"), table_name="attachment_types")
    op.drop_table("attachment_types")

    op.drop_index(op.f("ix_models_id"), table_name="models")
    op.drop_table("models")

    op.drop_table("profiles")

    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS weaponcategory")
    op.execute("DROP TYPE IF EXISTS attachmentslot")
