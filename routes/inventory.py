from decimal import Decimal, InvalidOperation

from flask import Blueprint, current_app, jsonify, request

from dao import compatibility as compat_dao, stock_ledger as ledger_dao
from db.models.code import CodeType

inventory_bp = Blueprint("inventory_api", __name__)


def _num(x):
    return float(x) if x is not None else None


def _ledger_row(r):
    return {
        "id": r.id,
        "item_type": r.item_type.value,
        "item_id": r.item_id,
        "location_id": r.location_id,
        "delta": _num(r.delta),
        "balance": _num(r.balance),
        "action_id": r.action_id,
        "created_by": r.created_by,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


def _stock_row(r):
    return {
        "item_type": r.item_type.value,
        "item_id": r.item_id,
        "location_id": r.location_id,
        "current_stock": _num(r.balance),
        "updated_at": r.created_at.isoformat() if r.created_at else None,
    }


def _code_type_arg():
    raw = (request.args.get("code_type") or "").strip()
    if not raw:
        return None
    for ct in CodeType:
        if raw == ct.value or raw.upper() == ct.name:
            return ct
    raise ValueError(f"invalid code_type: {raw}")


def _required_args(*names):
    values = [(request.args.get(n) or "").strip() for n in names]
    missing = [n for n, v in zip(names, values) if not v]
    if missing:
        raise ValueError("missing query parameters: " + ", ".join(missing))
    return values


@inventory_bp.errorhandler(ValueError)
def _bad_request(e):
    return jsonify({"error": str(e)}), 400


# ---------- stock ----------
@inventory_bp.route("/stock/levels")
def stock_levels():
    return jsonify([_stock_row(r) for r in ledger_dao.stock_levels()])


@inventory_bp.route("/stock/alerts")
def stock_alerts():
    threshold = request.args.get(
        "threshold", current_app.config.get("LOW_STOCK_THRESHOLD", 10), type=float
    )
    return jsonify([_stock_row(r) for r in ledger_dao.low_stock_alerts(threshold)])


@inventory_bp.route("/stock/availability")
def stock_availability():
    item_id, location_id = _required_args("item_id", "location_id")
    raw = request.args.get("qty", "1")
    try:
        qty = Decimal(raw)
    except InvalidOperation:
        raise ValueError("qty must be a number")
    if not qty.is_finite() or qty <= 0:
        raise ValueError(f"qty must be greater than 0: {raw}")
    res = ledger_dao.check_stock_availability(item_id, location_id, qty)
    return jsonify(
        {
            "available": res.available,
            "current_stock": _num(res.current_stock),
            "shortage": _num(res.shortage),
        }
    )


@inventory_bp.route("/stock/ledger")
def stock_ledger():
    item_id, location_id = _required_args("item_id", "location_id")
    rows = ledger_dao.ledger_history(item_id, location_id)
    return jsonify([_ledger_row(r) for r in rows])


# ---------- compatibility / codes ----------
@inventory_bp.route("/compatibility/check")
def compatibility_check():
    printer_model_id, consumable_id = _required_args(
        "printer_model_id", "consumable_id"
    )
    res = compat_dao.explain_compatibility(
        printer_model_id, consumable_id, _code_type_arg()
    )
    return jsonify(
        {"is_compatible": res.is_compatible, "reason": res.reason, "brand": res.brand}
    )


@inventory_bp.route("/compatibility/binding")
def binding_check():
    code_id, asset_id = _required_args("code_id", "asset_id")
    res = compat_dao.explain_binding(code_id, asset_id)
    return jsonify(
        {
            "can_bind": res.can_bind,
            "reason": res.reason,
            "code_type": res.code_type.value if res.code_type else None,
        }
    )


@inventory_bp.route("/printer-models/<model_id>/consumables")
def printer_model_consumables(model_id: str):
    return jsonify(compat_dao.compatible_consumables(model_id))


@inventory_bp.route("/codes/available")
def codes_available():
    codes = compat_dao.available_codes(_code_type_arg())
    return jsonify(
        [
            {
                "id": c.id,
                "code_type": c.code_type.value,
                "status": c.status.value,
                "bound_printer_id": c.bound_printer_id,
            }
            for c in codes
        ]
    )
