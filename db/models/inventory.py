from configs import db
from datetime import datetime
import enum
from db.models.common import enum_column


class ItemType(enum.Enum):
    CONSUMABLE = "耗材"


class StockLedger(db.Model):
    """Append-only stock movements; ``balance`` is the running total after ``delta``."""

    __tablename__ = "stock_ledger"
    __table_args__ = (
        db.Index(
            "ix_stock_ledger_partition",
            "item_type",
            "item_id",
            "location_id",
            "created_at",
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    item_type = db.Column(enum_column(ItemType, "item_type"), nullable=False)
    item_id = db.Column(db.String(36), nullable=False)
    delta = db.Column(db.Numeric(18, 3), nullable=False)
    balance = db.Column(db.Numeric(18, 3), nullable=False)
    location_id = db.Column(
        db.String(36), db.ForeignKey("location.id"), nullable=False
    )
    action_id = db.Column(db.String(36), db.ForeignKey("action.id"))
    created_by = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    action = db.relationship("Action", backref="ledger_entries")
