"""Create languages and translations tables."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20250301_0001_translation_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "languages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("language", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("language", name="uq_languages_language"),
    )
    op.create_table(
        "translations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("language_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False, server_default="group"),
        sa.Column("group", sa.String(length=255), nullable=False),
        sa.Column("key", sa.Text(), nullable=False),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["language_id"],
            ["languages.id"],
            name="fk_translations_language_id",
            ondelete="cascade",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "language_id", "kind", "group", "key", name="uq_translations_entry"
        ),
    )
    op.create_index(
        "ix_translations_language_group",
        "translations",
        ["language_id", "group"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_translations_language_group", table_name="translations")
    op.drop_table("translations")
    op.drop_table("languages")
