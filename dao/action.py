# dao/action.py
"""
Single-document action processing.

``perform_action`` runs one business action (loan, transfer, install,
consumable checkout, ...) in one database transaction: the ``action`` audit
row, the asset/code mutation and the ledger entry are committed together or
not at all. Failed attempts are rolled back completely and logged to
``action_failure`` in a separate transaction.
"""
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from dao import stock_ledger as ledger_dao
from dao.action_request import (
    ActionEnvelope,
    ActionRequest,
    AssetMovement,
    ConsumableMovement,
    Installation,
    parse_action,
)
from dao.compatibility import is_binding_allowed, is_compatible
from dao.errors import (
    ActionError,
    BindingError,
    IncompatibleError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from db.models.action import Action, ActionFailure, ActionStatus, ActionType
from db.models.asset import Asset, AssetStatus, AssetType
from db.models.code import Code, CodeStatus
from db.models.common import new_id
from db.models.inventory import ItemType
from db.models.location import Location
from db.models.printer_model import Consumable

log = logging.getLogger(__name__)

COMPATIBILITY_FAILED = (
    "compatibility check failed: consumable/code type not compatible with printer"
)
BINDING_FAILED = (
    "code binding check failed: code already bound to another device "
    "or device already bound to another code"
)

_STATUS_TRANSITIONS = {
    ActionType.REPORT_FAULT: AssetStatus.IN_REPAIR,
    ActionType.RETIRE: AssetStatus.RETIRED,
    ActionType.BORROW: AssetStatus.LOANED,
    ActionType.RETURN: AssetStatus.AVAILABLE,
}


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of ``perform_action``: ``action_id`` on success, ``error`` otherwise.

    ``attempted_id`` is the id the rolled-back attempt used; it keys the
    ``action_failure`` row and never appears in ``action``.
    """

    action_id: Optional[str] = None
    error: Optional[ActionError] = None
    attempted_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ========================= entry point =========================
def perform_action(payload: Mapping, record_failure: bool = True) -> ActionResult:
    try:
        req = parse_action(payload)
    except ValidationError as e:
        log.info("action rejected: %s", e)
        return ActionResult(error=e)

    env = req.envelope
    action_id = new_id()
    try:
        _insert_action(action_id, env)
        _dispatch(req, action_id)
        _mark(action_id, ActionStatus.COMPLETED)
        _commit()
    except (ActionError, SQLAlchemyError) as ex:
        db.session.rollback()
        error = ex if isinstance(ex, ActionError) else TransactionError(_db_message(ex))
        log.warning(
            "action %s (%s by %s) rolled back: %s",
            action_id,
            env.action_type.value,
            env.by_user,
            error,
        )
        if record_failure:
            _record_failure(action_id, env, payload, error.code, error.message)
        return ActionResult(error=error, attempted_id=action_id)
    except Exception as ex:
        db.session.rollback()
        log.exception("action %s failed unexpectedly", action_id)
        if record_failure:
            _record_failure(action_id, env, payload, type(ex).__name__, str(ex))
        raise

    log.info(
        "action %s (%s by %s) completed", action_id, env.action_type.value, env.by_user
    )
    return ActionResult(action_id=action_id)


def _dispatch(req: ActionRequest, action_id: str) -> None:
    if isinstance(req, AssetMovement):
        _handle_asset_movement(req)
    elif isinstance(req, Installation):
        _handle_installation(req)
    elif isinstance(req, ConsumableMovement):
        _handle_consumable(req, action_id)
    else:
        raise ValidationError(f"unsupported action request: {type(req).__name__}")


# ========================= handlers =========================
def _handle_asset_movement(req: AssetMovement) -> None:
    asset = _lock_asset(req.asset_id)
    _move_asset(asset, req.envelope.action_type, req.to_location_id, req.related_person)


def _handle_installation(req: Installation) -> None:
    asset = _lock_asset(req.asset_id)

    if req.consumable_id:
        if asset.asset_type != AssetType.PRINTER or not asset.model_id:
            raise IncompatibleError(
                f"asset is not a printer or has no model: {asset.id}"
            )
        if not is_compatible(asset.model_id, req.consumable_id, req.code_type):
            raise IncompatibleError(COMPATIBILITY_FAILED)

    if req.code_id:
        code = db.session.get(Code, req.code_id, with_for_update=True)
        if code is None:
            raise NotFoundError(f"code does not exist: {req.code_id}")
        if not is_binding_allowed(code.id, asset.id):
            raise BindingError(BINDING_FAILED)
        code.bound_printer_id = asset.id
        code.status = CodeStatus.ISSUED

    _move_asset(asset, ActionType.INSTALL, req.to_location_id, None)


def _handle_consumable(req: ConsumableMovement, action_id: str) -> None:
    # the consumable row lock serializes read-latest-then-insert on its ledger
    consumable = db.session.get(Consumable, req.consumable_id, with_for_update=True)
    if consumable is None:
        raise NotFoundError(f"consumable does not exist: {req.consumable_id}")
    _require_location(req.location_id)

    direction = (
        ledger_dao.Direction.CHECKOUT
        if req.envelope.action_type == ActionType.CONSUMABLE_CHECKOUT
        else ledger_dao.Direction.RETURN
    )
    ledger_dao.apply_movement(
        item_type=ItemType.CONSUMABLE,
        item_id=consumable.id,
        location_id=req.location_id,
        direction=direction,
        qty=req.qty,
        action_id=action_id,
        by_user=req.envelope.by_user,
    )


# ========================= helpers =========================
def _lock_asset(asset_id: str) -> Asset:
    asset = db.session.get(Asset, asset_id, with_for_update=True)
    if asset is None:
        raise NotFoundError(f"asset does not exist: {asset_id}")
    return asset


def _require_location(location_id: str) -> Location:
    loc = db.session.get(Location, location_id)
    if loc is None:
        raise NotFoundError(f"location does not exist: {location_id}")
    return loc


def _move_asset(
    asset: Asset,
    action_type: ActionType,
    to_location_id: Optional[str],
    related_person: Optional[str],
) -> None:
    if to_location_id:
        _require_location(to_location_id)
        asset.location_id = to_location_id

    new_status = _STATUS_TRANSITIONS.get(action_type)
    if new_status is not None:
        asset.status = new_status

    if action_type == ActionType.BORROW:
        asset.owner_person = related_person
    elif action_type == ActionType.RETURN:
        asset.owner_person = None


def _insert_action(action_id: str, env: ActionEnvelope) -> None:
    db.session.add(
        Action(
            id=action_id,
            action_type=env.action_type,
            asset_type=env.asset_type,
            asset_id=env.asset_id,
            qty=env.qty,
            from_location_id=env.from_location_id,
            to_location_id=env.to_location_id,
            by_user=env.by_user,
            related_person=env.related_person,
            work_order=env.work_order,
            consumable_id=env.consumable_id,
            code_id=env.code_id,
            code_type=env.code_type,
            remark=env.remark,
            status=ActionStatus.PENDING,
        )
    )
    db.session.flush()


def _mark(action_id: str, status: ActionStatus) -> None:
    db.session.get(Action, action_id).status = status


def _db_message(ex: SQLAlchemyError) -> str:
    orig = getattr(ex, "orig", None)
    return str(orig if orig is not None else ex).strip()


def _json_safe(payload: Mapping) -> dict:
    out = {}
    for k, v in dict(payload).items():
        if v is None or isinstance(v, (str, int, float, bool)):
            out[str(k)] = v
        else:
            out[str(k)] = str(v)
    return out


def _record_failure(
    action_id: str,
    env: ActionEnvelope,
    payload: Mapping,
    error_type: str,
    message: str,
) -> None:
    """Best effort: a failure here is logged, never raised."""
    try:
        db.session.add(
            ActionFailure(
                action_id=action_id,
                action_type=env.action_type.value,
                by_user=env.by_user,
                payload=_json_safe(payload),
                error_type=error_type,
                error_message=message,
            )
        )
        _commit()
    except SQLAlchemyError:
        log.exception("could not record failure of action %s", action_id)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


# ========================= queries =========================
def get_action(action_id: str) -> Optional[Action]:
    return db.session.get(Action, action_id)


def list_actions(limit: int = 50) -> List[Action]:
    return Action.query.order_by(Action.at_time.desc()).limit(limit).all()


def list_failures(limit: int = 50) -> List[ActionFailure]:
    return (
        ActionFailure.query.order_by(ActionFailure.failed_at.desc(), ActionFailure.id.desc())
        .limit(limit)
        .all()
    )


def to_dict(a: Action) -> dict:
    return {
        "id": a.id,
        "action_type": a.action_type.value,
        "asset_type": a.asset_type.value if a.asset_type else None,
        "asset_id": a.asset_id,
        "qty": float(a.qty) if a.qty is not None else None,
        "from_location_id": a.from_location_id,
        "to_location_id": a.to_location_id,
        "by_user": a.by_user,
        "related_person": a.related_person,
        "work_order": a.work_order,
        "consumable_id": a.consumable_id,
        "code_id": a.code_id,
        "code_type": a.code_type.value if a.code_type else None,
        "remark": a.remark,
        "status": a.status.value,
        "error_message": a.error_message,
        "at_time": a.at_time.isoformat() if a.at_time else None,
    }


def failure_to_dict(f: ActionFailure) -> dict:
    return {
        "id": f.id,
        "action_id": f.action_id,
        "action_type": f.action_type,
        "by_user": f.by_user,
        "payload": f.payload,
        "error_type": f.error_type,
        "error_message": f.error_message,
        "failed_at": f.failed_at.isoformat() if f.failed_at else None,
    }
