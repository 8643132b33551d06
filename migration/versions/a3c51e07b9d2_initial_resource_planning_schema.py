"""initial resource planning schema

Revision ID: a3c51e07b9d2
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a3c51e07b9d2"
down_revision = None
branch_labels = None
depends_on = None


def _version_column() -> sa.Column:
    return sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1"))


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PLANNED", "ACTIVE", "ON_HOLD", "COMPLETED", name="projectstatus"),
            nullable=False,
        ),
        sa.Column("client_name", sa.String(), nullable=True),
        sa.Column("planned_budget", sa.Float(), nullable=True),
        sa.Column("currency", sa.String(length=8), nullable=True),
        sa.Column("required_skills_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("required_roles_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "resources",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=True),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("billable_rate", sa.Float(), nullable=True),
        sa.Column("currency_code", sa.String(length=8), nullable=True),
        sa.Column("weekly_capacity_hours", sa.Float(), nullable=True),
        sa.Column("skills_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "allocations",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("utilization", sa.Integer(), nullable=False, server_default=sa.text("100")),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("billable_rate", sa.Float(), nullable=True),
        sa.Column("total_hours", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _version_column(),
        sa.ForeignKeyConstraint(["resource_id"], ["resources.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_allocations_resource", "allocations", ["resource_id"])
    op.create_index("idx_allocations_project", "allocations", ["project_id"])

    op.create_table(
        "scenarios",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("base_scenario_id", sa.String(), nullable=True),
        sa.Column("clone_from_base", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column("resource_changes_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("timeline_changes_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("change_version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("metrics_json", sa.Text(), nullable=True),
        sa.Column("metrics_version", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("promoted_at", sa.DateTime(), nullable=True),
        _version_column(),
        sa.ForeignKeyConstraint(["base_scenario_id"], ["scenarios.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_scenarios_status", "scenarios", ["status"])

    op.create_table(
        "system_settings",
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("value", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    op.drop_table("system_settings")
    op.drop_index("idx_scenarios_status", table_name="scenarios")
    op.drop_table("scenarios")
    op.drop_index("idx_allocations_project", table_name="allocations")
    op.drop_index("idx_allocations_resource", table_name="allocations")
    op.drop_table("allocations")
    op.drop_table("resources")
    op.drop_table("projects")
