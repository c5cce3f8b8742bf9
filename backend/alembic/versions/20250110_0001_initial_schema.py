"""Initial field-service schema: catalogs, schedules, services and users."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "20250110_0001"
down_revision = None
branch_labels = None
depends_on = None


SERVICE_TYPES = ("installation", "maintenance", "removal")
SCHEDULE_STATUSES = ("criado", "agendado", "concluido", "atrasado", "cancelado")
SERVICE_SOURCES = ("validation", "import", "legacy")
USER_ROLES = ("administrator", "scheduling", "support", "validation", "billing")

ENUM_TYPES = {
    "service_type_enum": SERVICE_TYPES,
    "schedule_status_enum": SCHEDULE_STATUSES,
    "service_source_enum": SERVICE_SOURCES,
    "user_role_enum": USER_ROLES,
}


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    is_postgres = op.get_bind().dialect.name == "postgresql"

    uuid_type = postgresql.UUID(as_uuid=True) if is_postgres else sa.CHAR(length=36)

    enums: dict[str, sa.types.TypeEngine] = {}
    for name, values in ENUM_TYPES.items():
        if is_postgres:
            postgresql.ENUM(*values, name=name).create(op.get_bind(), checkfirst=True)
            enums[name] = postgresql.ENUM(*values, name=name, create_type=False)
        else:
            enums[name] = sa.Enum(*values, name=name)

    op.create_table(
        "clients",
        sa.Column("client_id", uuid_type, primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("image", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(), nullable=False, server_default="padrão"),
        *_timestamps(),
    )
    op.create_index("clients_name_idx", "clients", ["name"])

    op.create_table(
        "products",
        sa.Column("product_id", uuid_type, primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("image", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("products_name_idx", "products", ["name"])

    op.create_table(
        "schedules",
        sa.Column("schedule_id", uuid_type, primary_key=True),
        sa.Column("plate", sa.String(), nullable=True),
        sa.Column("vin", sa.String(), nullable=False),
        sa.Column("model", sa.String(), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("service_type", enums["service_type_enum"], nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("client_id", uuid_type, nullable=False),
        sa.Column("product_id", uuid_type, nullable=True),
        sa.Column(
            "status",
            enums["schedule_status_enum"],
            nullable=False,
            server_default="criado",
        ),
        sa.Column("provider", sa.String(), nullable=True),
        sa.Column("order_number", sa.String(), nullable=True),
        sa.Column("service_location", sa.String(), nullable=True),
        sa.Column("responsible_name", sa.String(), nullable=True),
        sa.Column("responsible_phone", sa.String(), nullable=True),
        sa.Column("service_id", uuid_type, nullable=True),
        *_timestamps(),
    )
    op.create_index("schedules_vin_idx", "schedules", ["vin"])
    op.create_index("schedules_status_idx", "schedules", ["status"])
    op.create_index("schedules_client_idx", "schedules", ["client_id"])

    op.create_table(
        "services",
        sa.Column("service_id", uuid_type, primary_key=True),
        sa.Column("plate", sa.String(), nullable=True),
        sa.Column("vin", sa.String(), nullable=False),
        sa.Column("model", sa.String(), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("service_type", enums["service_type_enum"], nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("client_id", uuid_type, nullable=False),
        sa.Column("product_id", uuid_type, nullable=True),
        sa.Column(
            "status",
            enums["schedule_status_enum"],
            nullable=False,
            server_default="concluido",
        ),
        sa.Column("provider", sa.String(), nullable=True),
        sa.Column("order_number", sa.String(), nullable=True),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("technician", sa.String(), nullable=True),
        sa.Column("installation_location", sa.String(), nullable=True),
        sa.Column("service_address", sa.String(), nullable=True),
        sa.Column("odometer", sa.Integer(), nullable=True),
        sa.Column("blocking_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("protocol_number", sa.String(), nullable=True),
        sa.Column("validation_notes", sa.Text(), nullable=True),
        sa.Column("secondary_device", sa.String(), nullable=True),
        sa.Column("validated_by", sa.String(), nullable=True),
        sa.Column(
            "validated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("schedule_id", uuid_type, nullable=True),
        sa.Column(
            "source",
            enums["service_source_enum"],
            nullable=False,
            server_default="validation",
        ),
        *_timestamps(),
    )
    op.create_index("services_vin_idx", "services", ["vin"])
    op.create_index("services_created_at_idx", "services", ["created_at"])
    op.create_index("services_client_idx", "services", ["client_id"])

    op.create_table(
        "users",
        sa.Column("user_id", uuid_type, primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column(
            "role",
            enums["user_role_enum"],
            nullable=False,
            server_default="scheduling",
        ),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_index("services_client_idx", table_name="services")
    op.drop_index("services_created_at_idx", table_name="services")
    op.drop_index("services_vin_idx", table_name="services")
    op.drop_table("services")
    op.drop_index("schedules_client_idx", table_name="schedules")
    op.drop_index("schedules_status_idx", table_name="schedules")
    op.drop_index("schedules_vin_idx", table_name="schedules")
    op.drop_table("schedules")
    op.drop_index("products_name_idx", table_name="products")
    op.drop_table("products")
    op.drop_index("clients_name_idx", table_name="clients")
    op.drop_table("clients")

    if op.get_bind().dialect.name == "postgresql":
        for name in ENUM_TYPES:
            postgresql.ENUM(name=name).drop(op.get_bind(), checkfirst=True)
