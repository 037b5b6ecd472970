from configs import db
from datetime import datetime
import enum
from db.models.common import new_id, enum_column


class AssetType(enum.Enum):
    MACHINE = "机器"
    PRINTER = "打印机"
    ROUTER = "路由器"
    IOT_CARD = "物联网卡"
    CONSUMABLE = "耗材"


class AssetStatus(enum.Enum):
    AVAILABLE = "可用"
    LOANED = "借出"
    IN_REPAIR = "维修中"
    RETIRED = "已报废"


class Asset(db.Model):
    __tablename__ = "asset"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    asset_type = db.Column(enum_column(AssetType, "asset_type"), nullable=False)
    model_id = db.Column(db.String(36), db.ForeignKey("printer_model.id"))
    location_id = db.Column(db.String(36), db.ForeignKey("location.id"))
    owner_person = db.Column(db.String(120))
    status = db.Column(
        enum_column(AssetStatus, "asset_status"),
        default=AssetStatus.AVAILABLE,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    model = db.relationship("PrinterModel")
    location = db.relationship("Location")
