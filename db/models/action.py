from configs import db
from datetime import datetime
import enum
from db.models.common import enum_column
from db.models.asset import AssetType
from db.models.code import CodeType


class ActionType(enum.Enum):
    BORROW = "借用"
    TRANSFER = "调拨"
    INSTALL = "安装"
    UNINSTALL = "拆卸"
    REPORT_FAULT = "报修"
    RETIRE = "报废"
    RETURN = "归还"
    CONSUMABLE_CHECKOUT = "耗材领用"
    CONSUMABLE_RETURN = "耗材归还"


class ActionStatus(enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Action(db.Model):
    __tablename__ = "action"
    # plain id columns, no FKs: a failed attempt may reference missing rows

    id = db.Column(db.String(36), primary_key=True)
    action_type = db.Column(enum_column(ActionType, "action_type"), nullable=False)
    asset_type = db.Column(enum_column(AssetType, "asset_type"))
    asset_id = db.Column(db.String(36))
    qty = db.Column(db.Numeric(18, 3), default=1, nullable=False)
    from_location_id = db.Column(db.String(36))
    to_location_id = db.Column(db.String(36))
    by_user = db.Column(db.String(120), nullable=False)
    related_person = db.Column(db.String(120))
    work_order = db.Column(db.String(60))
    consumable_id = db.Column(db.String(36))
    code_id = db.Column(db.String(36))
    code_type = db.Column(enum_column(CodeType, "code_type"))
    remark = db.Column(db.Text)
    status = db.Column(
        enum_column(ActionStatus, "action_status"),
        default=ActionStatus.PENDING,
        nullable=False,
    )
    error_message = db.Column(db.Text)
    at_time = db.Column(db.DateTime, default=datetime.utcnow)


class ActionFailure(db.Model):
    """Out-of-band record of an action whose transaction was rolled back."""

    __tablename__ = "action_failure"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    action_id = db.Column(db.String(36), nullable=False, index=True)  # no FK: row was rolled back
    action_type = db.Column(db.String(20))
    by_user = db.Column(db.String(120))
    payload = db.Column(db.JSON)
    error_type = db.Column(db.String(40), nullable=False)
    error_message = db.Column(db.Text, nullable=False)
    failed_at = db.Column(db.DateTime, default=datetime.utcnow)
