from configs import db
from datetime import datetime
import enum
from db.models.common import new_id, enum_column


class CodeType(enum.Enum):
    SPECIALIZED = "专码"  # bound to exactly one printer
    GENERIC = "通码"


class CodeStatus(enum.Enum):
    UNISSUED = "未发"
    ISSUED = "已发"


class Code(db.Model):
    __tablename__ = "code"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    code_type = db.Column(enum_column(CodeType, "code_type"), nullable=False)
    status = db.Column(
        enum_column(CodeStatus, "code_status"),
        default=CodeStatus.UNISSUED,
        nullable=False,
    )
    bound_printer_id = db.Column(db.String(36), db.ForeignKey("asset.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    bound_printer = db.relationship("Asset")
