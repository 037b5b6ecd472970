# dao/compatibility.py
"""Read-only compatibility and code-binding checks.

``is_compatible`` and ``is_binding_allowed`` gate mutations inside the action
transaction; the ``explain_*`` variants add a human readable reason for
inspection endpoints.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from configs import db
from db.models.code import Code, CodeStatus, CodeType
from db.models.printer_model import Compatibility, Consumable, PrinterModel

DNP_BRAND = "DNP"


@dataclass(frozen=True)
class CompatibilityResult:
    is_compatible: bool
    reason: Optional[str] = None
    brand: Optional[str] = None


@dataclass(frozen=True)
class CodeBindingResult:
    can_bind: bool
    reason: Optional[str] = None
    code_type: Optional[CodeType] = None


@dataclass(frozen=True)
class BatchCompatibility:
    compatible: bool
    details: List[CompatibilityResult] = field(default_factory=list)


def is_compatible(
    printer_model_id: str, consumable_id: str, code_type: Optional[CodeType]
) -> bool:
    q = db.session.query(Compatibility.id).filter(
        Compatibility.printer_model_id == printer_model_id,
        Compatibility.consumable_id == consumable_id,
        Compatibility.code_type == code_type,
    )
    return q.limit(1).first() is not None


def _other_specialized_code_on(asset_id: str, code_id: str) -> bool:
    return (
        db.session.query(Code.id)
        .filter(
            Code.bound_printer_id == asset_id,
            Code.code_type == CodeType.SPECIALIZED,
            Code.id != code_id,
        )
        .limit(1)
        .first()
        is not None
    )


def is_binding_allowed(code_id: str, asset_id: str) -> bool:
    code = db.session.get(Code, code_id)
    if code is None:
        return False
    if code.code_type != CodeType.SPECIALIZED:
        return True
    if code.bound_printer_id and code.bound_printer_id != asset_id:
        return False
    return not _other_specialized_code_on(asset_id, code_id)


def explain_compatibility(
    printer_model_id: str, consumable_id: str, code_type: Optional[CodeType]
) -> CompatibilityResult:
    pm = db.session.get(PrinterModel, printer_model_id)
    brand = pm.brand if pm else None

    if is_compatible(printer_model_id, consumable_id, code_type):
        return CompatibilityResult(is_compatible=True, brand=brand)

    if pm is None:
        reason = "printer model does not exist"
    elif brand == DNP_BRAND and code_type == CodeType.GENERIC:
        reason = "DNP printers only accept specialized codes"
    else:
        reason = "consumable not compatible with printer model"
    return CompatibilityResult(is_compatible=False, reason=reason, brand=brand)


def explain_binding(code_id: str, asset_id: str) -> CodeBindingResult:
    code = db.session.get(Code, code_id)
    if code is None:
        return CodeBindingResult(can_bind=False, reason="code does not exist")

    if is_binding_allowed(code_id, asset_id):
        return CodeBindingResult(can_bind=True, code_type=code.code_type)

    if code.bound_printer_id and code.bound_printer_id != asset_id:
        reason = "specialized code already bound to another printer"
    else:
        reason = "target printer already holds another specialized code"
    return CodeBindingResult(can_bind=False, reason=reason, code_type=code.code_type)


def batch_compatibility_check(
    printer_model_id: str, items: Iterable[Dict]
) -> BatchCompatibility:
    """items: [{"consumable_id": ..., "code_type": CodeType}, ...]"""
    details = [
        explain_compatibility(printer_model_id, it["consumable_id"], it.get("code_type"))
        for it in items
    ]
    return BatchCompatibility(
        compatible=all(d.is_compatible for d in details), details=details
    )


def compatible_consumables(printer_model_id: str) -> List[Dict]:
    rows = (
        db.session.query(Consumable, Compatibility.code_type)
        .join(Compatibility, Compatibility.consumable_id == Consumable.id)
        .filter(Compatibility.printer_model_id == printer_model_id)
        .order_by(Consumable.type.asc(), Consumable.id.asc())
        .all()
    )
    return [
        {
            "id": c.id,
            "type": c.type,
            "spec": c.spec,
            "unit": c.unit,
            "code_type": code_type.value,
        }
        for c, code_type in rows
    ]


def available_codes(code_type: Optional[CodeType] = None) -> List[Code]:
    q = Code.query.filter(Code.status == CodeStatus.UNISSUED)
    if code_type is not None:
        q = q.filter(Code.code_type == code_type)
    # 专码 must also be unbound
    if code_type == CodeType.SPECIALIZED:
        q = q.filter(Code.bound_printer_id.is_(None))
    return q.order_by(Code.created_at.desc()).all()
