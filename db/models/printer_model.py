from configs import db
from datetime import datetime
from db.models.common import new_id, enum_column
from db.models.code import CodeType


class PrinterModel(db.Model):
    __tablename__ = "printer_model"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    brand = db.Column(db.String(60), nullable=False)  # DNP / 诚研 / 西铁城 ...
    model = db.Column(db.String(60), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Consumable(db.Model):
    __tablename__ = "consumable"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    type = db.Column(db.String(60), nullable=False)  # 相纸 / 色带 ...
    spec = db.Column(db.String(120))
    unit = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Compatibility(db.Model):
    __tablename__ = "compatibility"
    __table_args__ = (
        db.UniqueConstraint(
            "printer_model_id", "consumable_id", "code_type", name="uq_compatibility"
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    printer_model_id = db.Column(
        db.String(36), db.ForeignKey("printer_model.id"), nullable=False
    )
    consumable_id = db.Column(
        db.String(36), db.ForeignKey("consumable.id"), nullable=False
    )
    code_type = db.Column(enum_column(CodeType, "code_type"), nullable=False)

    printer_model = db.relationship("PrinterModel", backref="compatibilities")
    consumable = db.relationship("Consumable")
