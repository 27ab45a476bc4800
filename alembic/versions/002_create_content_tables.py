"""Create content tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _media(prefix: str, nullable: bool = True) -> list[sa.Column]:
    return [
        sa.Column(f"{prefix}_url", sa.String(length=1024), nullable=nullable),
        sa.Column(f"{prefix}_key", sa.String(length=1024), nullable=nullable),
    ]


def upgrade() -> None:
    op.create_table(
        "blog",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("slug", sa.String(length=512), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=256), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("author", sa.String(length=256), nullable=True),
        sa.Column("publish_date", sa.DateTime(), nullable=True),
        sa.Column("meta_title", sa.String(length=512), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="draft"),
        *_media("image"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blog_slug"), "blog", ["slug"], unique=True)

    op.create_table(
        "course",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("slug", sa.String(length=512), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("short_description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("original_price", sa.Float(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_ratings", sa.Integer(), nullable=False, server_default="0"),
        *_media("image", nullable=False),
        sa.Column("category", sa.String(length=256), nullable=False),
        sa.Column("instructor", sa.String(length=256), nullable=False, server_default="Admin"),
        sa.Column("duration", sa.String(length=128), nullable=True),
        sa.Column("level", sa.String(length=32), nullable=False, server_default="Beginner"),
        sa.Column("language", sa.String(length=64), nullable=False, server_default="English"),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("requirements", sa.JSON(), nullable=False),
        sa.Column("what_you_will_learn", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("enrollment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("certificate_included", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("lifetime_access", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("mobile_access", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("title"),
    )
    op.create_index(op.f("ix_course_slug"), "course", ["slug"], unique=True)
    op.create_index(op.f("ix_course_category"), "course", ["category"], unique=False)

    op.create_table(
        "service_category",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("slug", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_media("main_image", nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_service_category_slug"), "service_category", ["slug"], unique=True)

    op.create_table(
        "sub_service",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("slug", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_media("image"),
        sa.ForeignKeyConstraint(["category_id"], ["service_category.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sub_service_category_id"), "sub_service", ["category_id"], unique=False)

    op.create_table(
        "student",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.String(length=256), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=True),
        *_media("image"),
        *_media("cover_image"),
        sa.Column("badges", sa.JSON(), nullable=False),
        sa.Column("location", sa.String(length=256), nullable=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("experience", sa.String(length=256), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("specializations", sa.JSON(), nullable=False),
        sa.Column("education", sa.JSON(), nullable=False),
        sa.Column("testimonials", sa.JSON(), nullable=False),
        sa.Column("projects", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_student_slug"), "student", ["slug"], unique=True)

    for table, extra in (
        ("testimonial", []),
        (
            "student_success_story",
            [*_media("profile_image"), sa.Column("location", sa.String(length=256), nullable=True)],
        ),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("name", sa.String(length=256), nullable=False),
            sa.Column("designation", sa.String(length=256), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("rating", sa.Integer(), nullable=False, server_default="5"),
            *_media("media"),
            sa.Column("media_type", sa.String(length=16), nullable=False, server_default="none"),
            *extra,
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
            sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
        )


def downgrade() -> None:
    op.drop_table("student_success_story")
    op.drop_table("testimonial")
    op.drop_index(op.f("ix_student_slug"), table_name="student")
    op.drop_table("student")
    op.drop_index(op.f("ix_sub_service_category_id"), table_name="sub_service")
    op.drop_table("sub_service")
    op.drop_index(op.f("ix_service_category_slug"), table_name="service_category")
    op.drop_table("service_category")
    op.drop_index(op.f("ix_course_category"), table_name="course")
    op.drop_index(op.f("ix_course_slug"), table_name="course")
    op.drop_table("course")
    op.drop_index(op.f("ix_blog_slug"), table_name="blog")
    op.drop_table("blog")
