"""initial schema: reference data, action audit, stock ledger

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 10:00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    "action_type": (
        "借用",
        "调拨",
        "安装",
        "拆卸",
        "报修",
        "报废",
        "归还",
        "耗材领用",
        "耗材归还",
    ),
    "action_status": ("pending", "completed", "failed"),
    "asset_type": ("机器", "打印机", "路由器", "物联网卡", "耗材"),
    "asset_status": ("可用", "借出", "维修中", "已报废"),
    "item_type": ("耗材",),
    "code_type": ("专码", "通码"),
    "code_status": ("未发", "已发"),
}


def _enum(name):
    # types are created once in upgrade(); tables only reference them
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "location",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "printer_model",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("brand", sa.String(60), nullable=False),
        sa.Column("model", sa.String(60), nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "consumable",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("type", sa.String(60), nullable=False),
        sa.Column("spec", sa.String(120)),
        sa.Column("unit", sa.String(20)),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "compatibility",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "printer_model_id",
            sa.String(36),
            sa.ForeignKey("printer_model.id"),
            nullable=False,
        ),
        sa.Column(
            "consumable_id",
            sa.String(36),
            sa.ForeignKey("consumable.id"),
            nullable=False,
        ),
        sa.Column("code_type", _enum("code_type"), nullable=False),
        sa.UniqueConstraint(
            "printer_model_id", "consumable_id", "code_type", name="uq_compatibility"
        ),
    )
    op.create_table(
        "asset",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("asset_type", _enum("asset_type"), nullable=False),
        sa.Column("model_id", sa.String(36), sa.ForeignKey("printer_model.id")),
        sa.Column("location_id", sa.String(36), sa.ForeignKey("location.id")),
        sa.Column("owner_person", sa.String(120)),
        sa.Column("status", _enum("asset_status"), nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "code",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code_type", _enum("code_type"), nullable=False),
        sa.Column("status", _enum("code_status"), nullable=False),
        sa.Column("bound_printer_id", sa.String(36), sa.ForeignKey("asset.id")),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "action",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("action_type", _enum("action_type"), nullable=False),
        sa.Column("asset_type", _enum("asset_type")),
        sa.Column("asset_id", sa.String(36)),
        sa.Column("qty", sa.Numeric(18, 3), nullable=False),
        sa.Column("from_location_id", sa.String(36)),
        sa.Column("to_location_id", sa.String(36)),
        sa.Column("by_user", sa.String(120), nullable=False),
        sa.Column("related_person", sa.String(120)),
        sa.Column("work_order", sa.String(60)),
        sa.Column("consumable_id", sa.String(36)),
        sa.Column("code_id", sa.String(36)),
        sa.Column("code_type", _enum("code_type")),
        sa.Column("remark", sa.Text()),
        sa.Column("status", _enum("action_status"), nullable=False),
        sa.Column("error_message", sa.Text()),
        sa.Column("at_time", sa.DateTime()),
    )
    op.create_table(
        "stock_ledger",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("item_type", _enum("item_type"), nullable=False),
        sa.Column("item_id", sa.String(36), nullable=False),
        sa.Column("delta", sa.Numeric(18, 3), nullable=False),
        sa.Column("balance", sa.Numeric(18, 3), nullable=False),
        sa.Column(
            "location_id", sa.String(36), sa.ForeignKey("location.id"), nullable=False
        ),
        sa.Column("action_id", sa.String(36), sa.ForeignKey("action.id")),
        sa.Column("created_by", sa.String(120)),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_stock_ledger_partition",
        "stock_ledger",
        ["item_type", "item_id", "location_id", "created_at"],
    )
    op.create_table(
        "action_failure",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("action_id", sa.String(36), nullable=False),
        sa.Column("action_type", sa.String(20)),
        sa.Column("by_user", sa.String(120)),
        sa.Column("payload", sa.JSON()),
        sa.Column("error_type", sa.String(40), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=False),
        sa.Column("failed_at", sa.DateTime()),
    )
    op.create_index("ix_action_failure_action_id", "action_failure", ["action_id"])


def downgrade() -> None:
    op.drop_index("ix_action_failure_action_id", table_name="action_failure")
    op.drop_table("action_failure")
    op.drop_index("ix_stock_ledger_partition", table_name="stock_ledger")
    op.drop_table("stock_ledger")
    op.drop_table("action")
    op.drop_table("code")
    op.drop_table("asset")
    op.drop_table("compatibility")
    op.drop_table("consumable")
    op.drop_table("printer_model")
    op.drop_table("location")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
