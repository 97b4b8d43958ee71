"""initial_schema

Users, groups and memberships; servers, probes and alert history;
notification configurations and history; the transactional outbox with
its NOTIFY trigger.

Revision ID: 3f1c2a9b7d40
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

global_role = postgresql.ENUM(
    "SUPER_ADMIN", "ADMIN", "USER", name="global_role", create_type=False
)
group_role = postgresql.ENUM("ADMIN", "MEMBER", name="group_role", create_type=False)
server_type = postgresql.ENUM(
    "DATABASE", "APPLICATION", "MAIL", "OTHER",
    name="server_type",
    create_type=False,
)
probe_type = postgresql.ENUM("HTTP", "WEBHOOK", name="probe_type", create_type=False)
probe_status = postgresql.ENUM(
    "OK", "WARNING", "ERROR", "UNKNOWN", name="probe_status", create_type=False
)
http_method = postgresql.ENUM(
    "GET", "POST", "PUT", "DELETE",
    name="http_method",
    create_type=False,
)
channel_type = postgresql.ENUM("EMAIL", "WEBHOOK", name="channel_type", create_type=False)
notification_level = postgresql.ENUM(
    "INFO", "WARNING", "ERROR", name="notification_level", create_type=False
)
notification_status = postgresql.ENUM(
    "PENDING", "SENT", "FAILED", name="notification_status", create_type=False
)

_ENUMS = (
    global_role,
    group_role,
    server_type,
    probe_type,
    probe_status,
    http_method,
    channel_type,
    notification_level,
    notification_status,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum in _ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", global_role, nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_groups"),
    )
    op.create_index("ix_groups_name", "groups", ["name"])

    op.create_table(
        "group_memberships",
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.Column("role", group_role, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_group_memberships_user_id_users",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["groups.id"],
            name="fk_group_memberships_group_id_groups",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("user_id", "group_id", name="pk_group_memberships"),
    )
    op.create_index(
        "ix_group_memberships_group_id", "group_memberships", ["group_id"]
    )

    op.create_table(
        "servers",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", server_type, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_by_id", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["created_by_id"],
            ["users.id"],
            name="fk_servers_created_by_id_users",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_servers"),
    )
    op.create_index("ix_servers_name", "servers", ["name"])

    op.create_table(
        "server_groups",
        sa.Column("server_id", sa.String(length=26), nullable=False),
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.ForeignKeyConstraint(
            ["server_id"],
            ["servers.id"],
            name="fk_server_groups_server_id_servers",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["groups.id"],
            name="fk_server_groups_group_id_groups",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("server_id", "group_id", name="pk_server_groups"),
    )
    op.create_index("ix_server_groups_group_id", "server_groups", ["group_id"])

    op.create_table(
        "probes",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("server_id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", probe_type, nullable=False),
        sa.Column("status", probe_status, nullable=False),
        sa.Column("last_checked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["server_id"],
            ["servers.id"],
            name="fk_probes_server_id_servers",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_probes"),
    )
    op.create_index("ix_probes_server_id", "probes", ["server_id"])

    op.create_table(
        "probe_groups",
        sa.Column("probe_id", sa.String(length=26), nullable=False),
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.ForeignKeyConstraint(
            ["probe_id"],
            ["probes.id"],
            name="fk_probe_groups_probe_id_probes",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["groups.id"],
            name="fk_probe_groups_group_id_groups",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("probe_id", "group_id", name="pk_probe_groups"),
    )
    op.create_index("ix_probe_groups_group_id", "probe_groups", ["group_id"])

    op.create_table(
        "http_probes",
        sa.Column("probe_id", sa.String(length=26), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("method", http_method, nullable=False),
        sa.Column("headers", postgresql.JSONB(), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("expected_status", sa.Integer(), nullable=True),
        sa.Column("expected_keyword", sa.Text(), nullable=True),
        sa.Column("timeout_ms", sa.Integer(), nullable=False),
        sa.Column("check_interval_s", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["probe_id"],
            ["probes.id"],
            name="fk_http_probes_probe_id_probes",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("probe_id", name="pk_http_probes"),
    )

    op.create_table(
        "webhook_probes",
        sa.Column("probe_id", sa.String(length=26), nullable=False),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("expected_payload", postgresql.JSONB(), nullable=True),
        sa.ForeignKeyConstraint(
            ["probe_id"],
            ["probes.id"],
            name="fk_webhook_probes_probe_id_probes",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("probe_id", name="pk_webhook_probes"),
        sa.UniqueConstraint("token", name="uq_webhook_probes_token"),
    )

    op.create_table(
        "alert_history",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("probe_id", sa.String(length=26), nullable=False),
        sa.Column("status", probe_status, nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved", sa.Boolean(), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["probe_id"],
            ["probes.id"],
            name="fk_alert_history_probe_id_probes",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_alert_history"),
    )
    op.create_index("ix_alert_history_probe_id", "alert_history", ["probe_id"])
    op.create_index("ix_alert_history_created_at", "alert_history", ["created_at"])
    op.create_index(
        "uq_alert_history_open_probe",
        "alert_history",
        ["probe_id"],
        unique=True,
        postgresql_where=sa.text("resolved = false"),
    )

    op.create_table(
        "notification_configs",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.Column("type", channel_type, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["groups.id"],
            name="fk_notification_configs_group_id_groups",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_notification_configs"),
    )
    op.create_index(
        "ix_notification_configs_group_id", "notification_configs", ["group_id"]
    )

    op.create_table(
        "email_notifications",
        sa.Column("config_id", sa.String(length=26), nullable=False),
        sa.Column("recipients", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.ForeignKeyConstraint(
            ["config_id"],
            ["notification_configs.id"],
            name="fk_email_notifications_config_id_notification_configs",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("config_id", name="pk_email_notifications"),
    )

    op.create_table(
        "webhook_notifications",
        sa.Column("config_id", sa.String(length=26), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("headers", postgresql.JSONB(), nullable=False),
        sa.Column("payload_template", postgresql.JSONB(), nullable=False),
        sa.ForeignKeyConstraint(
            ["config_id"],
            ["notification_configs.id"],
            name="fk_webhook_notifications_config_id_notification_configs",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("config_id", name="pk_webhook_notifications"),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("config_id", sa.String(length=26), nullable=True),
        sa.Column("server_id", sa.String(length=26), nullable=True),
        sa.Column("probe_id", sa.String(length=26), nullable=True),
        sa.Column("level", notification_level, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("details", postgresql.JSONB(), nullable=False),
        sa.Column("status", notification_status, nullable=False),
        sa.Column("status_details", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["config_id"],
            ["notification_configs.id"],
            name="fk_notifications_config_id_notification_configs",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["server_id"],
            ["servers.id"],
            name="fk_notifications_server_id_servers",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["probe_id"],
            ["probes.id"],
            name="fk_notifications_probe_id_probes",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
    )
    op.create_index("ix_notifications_config_id", "notifications", ["config_id"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    op.create_table(
        "outbox",
        sa.Column(
            "id",
            sa.UUID(),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("aggregate_type", sa.String(length=64), nullable=False),
        sa.Column("aggregate_id", sa.String(length=255), nullable=False),
        sa.Column("event_type", sa.String(length=255), nullable=False),
        sa.Column("payload", postgresql.JSONB(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("retry_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_outbox"),
    )
    op.create_index(
        "ix_outbox_pending",
        "outbox",
        ["created_at"],
        postgresql_where=sa.text("processed_at IS NULL AND failed_at IS NULL"),
    )
    op.create_index(
        "ix_outbox_failed",
        "outbox",
        ["failed_at"],
        postgresql_where=sa.text("failed_at IS NOT NULL"),
    )

    op.execute("""
        CREATE OR REPLACE FUNCTION notify_outbox_insert()
        RETURNS TRIGGER AS $$
        BEGIN
            PERFORM pg_notify('outbox_events', NEW.id::text);
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER outbox_after_insert
            AFTER INSERT ON outbox
            FOR EACH ROW
            EXECUTE FUNCTION notify_outbox_insert();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS outbox_after_insert ON outbox;")
    op.execute("DROP FUNCTION IF EXISTS notify_outbox_insert();")

    for table in (
        "outbox",
        "notifications",
        "webhook_notifications",
        "email_notifications",
        "notification_configs",
        "alert_history",
        "webhook_probes",
        "http_probes",
        "probe_groups",
        "probes",
        "server_groups",
        "servers",
        "group_memberships",
        "groups",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in reversed(_ENUMS):
        enum.drop(bind, checkfirst=True)
