"""Reports, documents, messages; notification targets for replies and reports.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="Other"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="Medium"),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("attachments", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("resolution_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_user_id", "reports", ["user_id"], unique=False)
    op.create_index("ix_reports_status", "reports", ["status"], unique=False)
    op.create_index("ix_reports_created_at", "reports", ["created_at"], unique=False)

    op.create_table(
        "documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("path", sa.Text(), nullable=False),
        sa.Column("mimetype", sa.String(120), nullable=False),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_documents_user_id", "documents", ["user_id"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sender_id", sa.Uuid(), nullable=False),
        sa.Column("recipient_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"], unique=False)
    op.create_index("ix_messages_recipient_id", "messages", ["recipient_id"], unique=False)
    op.create_index("ix_messages_created_at", "messages", ["created_at"], unique=False)

    # Notifications: recipient/kind naming, nullable actor, reply and report targets
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.alter_column("notifications", "user_id", new_column_name="recipient_id")
    op.alter_column("notifications", "type", new_column_name="kind", type_=sa.String(20))
    op.alter_column("notifications", "target_post_id", new_column_name="post_id")
    op.alter_column("notifications", "target_comment_id", new_column_name="comment_id")
    op.alter_column("notifications", "actor_id", nullable=True)
    op.alter_column("notifications", "is_read", nullable=False, server_default=sa.false())
    op.drop_constraint("notifications_actor_id_fkey", "notifications", type_="foreignkey")
    op.create_foreign_key(
        "notifications_actor_id_fkey", "notifications", "users", ["actor_id"], ["id"], ondelete="SET NULL"
    )
    op.add_column("notifications", sa.Column("parent_comment_id", sa.Uuid(), nullable=True))
    op.add_column("notifications", sa.Column("report_id", sa.Uuid(), nullable=True))
    op.create_foreign_key(
        "notifications_parent_comment_id_fkey",
        "notifications",
        "comments",
        ["parent_comment_id"],
        ["id"],
        ondelete="CASCADE",
    )
    op.create_foreign_key(
        "notifications_report_id_fkey", "notifications", "reports", ["report_id"], ["id"], ondelete="CASCADE"
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"], unique=False)
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_notifications_created_at", table_name="notifications")
    op.drop_index("ix_notifications_recipient_id", table_name="notifications")
    op.drop_constraint("notifications_report_id_fkey", "notifications", type_="foreignkey")
    op.drop_constraint("notifications_parent_comment_id_fkey", "notifications", type_="foreignkey")
    op.drop_column("notifications", "report_id")
    op.drop_column("notifications", "parent_comment_id")
    op.execute("DELETE FROM notifications WHERE actor_id IS NULL OR kind NOT IN ('like', 'comment', 'reply')")
    op.drop_constraint("notifications_actor_id_fkey", "notifications", type_="foreignkey")
    op.create_foreign_key(
        "notifications_actor_id_fkey", "notifications", "users", ["actor_id"], ["id"], ondelete="CASCADE"
    )
    op.alter_column("notifications", "actor_id", nullable=False)
    op.alter_column("notifications", "comment_id", new_column_name="target_comment_id")
    op.alter_column("notifications", "post_id", new_column_name="target_post_id")
    op.alter_column("notifications", "kind", new_column_name="type", type_=sa.String(50))
    op.alter_column("notifications", "recipient_id", new_column_name="user_id")
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"], unique=False)

    op.drop_index("ix_messages_created_at", table_name="messages")
    op.drop_index("ix_messages_recipient_id", table_name="messages")
    op.drop_index("ix_messages_sender_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_documents_user_id", table_name="documents")
    op.drop_table("documents")
    op.drop_index("ix_reports_created_at", table_name="reports")
    op.drop_index("ix_reports_status", table_name="reports")
    op.drop_index("ix_reports_user_id", table_name="reports")
    op.drop_table("reports")
