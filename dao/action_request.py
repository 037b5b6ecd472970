# dao/action_request.py
"""
Turn the loosely typed action payload into one of three request variants.

Only the required-field check in ``validate_action`` is mandatory before a
transaction may start; ``parse_action`` adds type coercion and per-variant
field requirements. Neither touches the database.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional, Union

from dao.errors import ValidationError
from db.models.action import ActionType
from db.models.asset import AssetType
from db.models.code import CodeType

ASSET_MOVEMENT_TYPES = frozenset(
    {
        ActionType.BORROW,
        ActionType.TRANSFER,
        ActionType.UNINSTALL,
        ActionType.REPORT_FAULT,
        ActionType.RETIRE,
        ActionType.RETURN,
    }
)
CONSUMABLE_TYPES = frozenset(
    {ActionType.CONSUMABLE_CHECKOUT, ActionType.CONSUMABLE_RETURN}
)

_BY_VALUE = {t.value: t for t in ActionType}

QTY_PLACES = 3


@dataclass(frozen=True)
class ActionEnvelope:
    """Fields written to the ``action`` audit row, whatever the variant."""

    action_type: ActionType
    by_user: str
    qty: Decimal = Decimal(1)
    asset_type: Optional[AssetType] = None
    asset_id: Optional[str] = None
    from_location_id: Optional[str] = None
    to_location_id: Optional[str] = None
    related_person: Optional[str] = None
    work_order: Optional[str] = None
    consumable_id: Optional[str] = None
    code_id: Optional[str] = None
    code_type: Optional[CodeType] = None
    remark: Optional[str] = None


@dataclass(frozen=True)
class AssetMovement:
    envelope: ActionEnvelope
    asset_id: str
    to_location_id: Optional[str] = None
    related_person: Optional[str] = None


@dataclass(frozen=True)
class Installation:
    envelope: ActionEnvelope
    asset_id: str
    to_location_id: Optional[str] = None
    consumable_id: Optional[str] = None
    code_id: Optional[str] = None
    code_type: Optional[CodeType] = None


@dataclass(frozen=True)
class ConsumableMovement:
    envelope: ActionEnvelope
    consumable_id: str
    location_id: str
    qty: Decimal


ActionRequest = Union[AssetMovement, Installation, ConsumableMovement]


def _text(payload: Mapping, key: str) -> Optional[str]:
    v = payload.get(key)
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def validate_action(payload) -> None:
    if not isinstance(payload, Mapping):
        raise ValidationError("action must be an object")
    if not _text(payload, "action_type") or not _text(payload, "by_user"):
        raise ValidationError("missing required fields: action_type, by_user")


def _to_qty(raw) -> Decimal:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return Decimal(1)
    if isinstance(raw, bool):
        raise ValidationError(f"qty must be a number: {raw!r}")
    try:
        qty = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"qty must be a number: {raw!r}")
    if not qty.is_finite() or qty <= 0:
        raise ValidationError(f"qty must be greater than 0: {raw}")
    # ledger columns are Numeric(18, 3)
    if qty.normalize().as_tuple().exponent < -QTY_PLACES:
        raise ValidationError(
            f"qty allows at most {QTY_PLACES} decimal places: {raw}"
        )
    return qty


def _to_enum(enum_cls, raw: Optional[str], field: str):
    """Match an enum member by its stored value, or by name in any case."""
    if raw is None:
        return None
    for member in enum_cls:
        if raw == member.value or raw.upper() == member.name:
            return member
    raise ValidationError(f"invalid {field}: {raw}")


def _require(value, field: str, action_type: ActionType):
    if value is None:
        raise ValidationError(f"{field} is required for {action_type.value}")
    return value


def parse_action(payload) -> ActionRequest:
    validate_action(payload)

    raw_type = _text(payload, "action_type")
    action_type = _BY_VALUE.get(raw_type) or _to_enum_name(raw_type)

    env = ActionEnvelope(
        action_type=action_type,
        by_user=_text(payload, "by_user"),
        qty=_to_qty(payload.get("qty")),
        asset_type=_to_enum(AssetType, _text(payload, "asset_type"), "asset_type"),
        asset_id=_text(payload, "asset_id"),
        from_location_id=_text(payload, "from_location_id"),
        to_location_id=_text(payload, "to_location_id"),
        related_person=_text(payload, "related_person"),
        work_order=_text(payload, "work_order"),
        consumable_id=_text(payload, "consumable_id"),
        code_id=_text(payload, "code_id"),
        code_type=_to_enum(CodeType, _text(payload, "code_type"), "code_type"),
        remark=_text(payload, "remark"),
    )

    if action_type in ASSET_MOVEMENT_TYPES:
        return AssetMovement(
            envelope=env,
            asset_id=_require(env.asset_id, "asset_id", action_type),
            to_location_id=env.to_location_id,
            related_person=env.related_person,
        )

    if action_type == ActionType.INSTALL:
        return Installation(
            envelope=env,
            asset_id=_require(env.asset_id, "asset_id", action_type),
            to_location_id=env.to_location_id,
            consumable_id=env.consumable_id,
            code_id=env.code_id,
            code_type=env.code_type,
        )

    # consumable checkout / return
    location_id = env.from_location_id or env.to_location_id
    return ConsumableMovement(
        envelope=env,
        consumable_id=_require(env.consumable_id, "consumable_id", action_type),
        location_id=_require(location_id, "from_location_id or to_location_id", action_type),
        qty=env.qty,
    )


def _to_enum_name(raw: str) -> ActionType:
    try:
        return ActionType[raw.upper()]
    except KeyError:
        raise ValidationError(f"unsupported action type: {raw}")
