# dao/stock_ledger.py
import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from configs import db
from dao.errors import InsufficientStockError, ValidationError
from db.models.inventory import ItemType, StockLedger

log = logging.getLogger(__name__)


class Direction(enum.Enum):
    CHECKOUT = "checkout"
    RETURN = "return"


@dataclass(frozen=True)
class StockAvailability:
    available: bool
    current_stock: Decimal
    shortage: Optional[Decimal] = None


def _dec(x) -> Decimal:
    return Decimal(str(x or 0))


def fmt_qty(x) -> str:
    """5.000 -> '5', 2.50 -> '2.5'"""
    d = _dec(x).normalize()
    return format(d, "f")


def latest_entry(
    item_type: ItemType, item_id: str, location_id: str
) -> Optional[StockLedger]:
    return (
        StockLedger.query.filter_by(
            item_type=item_type, item_id=item_id, location_id=location_id
        )
        .order_by(StockLedger.created_at.desc(), StockLedger.id.desc())
        .first()
    )


def current_balance(item_type: ItemType, item_id: str, location_id: str) -> Decimal:
    last = latest_entry(item_type, item_id, location_id)
    return _dec(last.balance) if last else Decimal(0)


def apply_movement(
    item_type: ItemType,
    item_id: str,
    location_id: str,
    direction: Direction,
    qty,
    action_id: str,
    by_user: str,
) -> Decimal:
    """
    Append one ledger row for a checkout (-qty) or return (+qty).

    Runs inside the caller's transaction; the caller holds the partition lock.
    Returns the new balance.
    """
    qty = _dec(qty)
    if qty <= 0:
        raise ValidationError(f"qty must be greater than 0: {fmt_qty(qty)}")

    current = current_balance(item_type, item_id, location_id)
    delta = -qty if direction == Direction.CHECKOUT else qty
    new_balance = current + delta

    if direction == Direction.CHECKOUT and new_balance < 0:
        raise InsufficientStockError(
            f"insufficient stock: current balance {fmt_qty(current)}, "
            f"requested {fmt_qty(qty)}"
        )

    db.session.add(
        StockLedger(
            item_type=item_type,
            item_id=item_id,
            delta=delta,
            balance=new_balance,
            location_id=location_id,
            action_id=action_id,
            created_by=by_user,
        )
    )
    db.session.flush()
    log.debug(
        "ledger %s/%s@%s %s -> %s",
        item_type.value,
        item_id,
        location_id,
        fmt_qty(delta),
        fmt_qty(new_balance),
    )
    return new_balance


# ---------- read helpers ----------
def check_stock_availability(
    item_id: str,
    location_id: str,
    required_qty,
    item_type: ItemType = ItemType.CONSUMABLE,
) -> StockAvailability:
    current = current_balance(item_type, item_id, location_id)
    required = _dec(required_qty)
    if current >= required:
        return StockAvailability(available=True, current_stock=current)
    return StockAvailability(
        available=False, current_stock=current, shortage=required - current
    )


def stock_levels(item_type: ItemType = ItemType.CONSUMABLE) -> List[StockLedger]:
    """Latest ledger entry of every (item_id, location_id) partition."""
    latest: Dict[Tuple[str, str], StockLedger] = {}
    rows = (
        StockLedger.query.filter_by(item_type=item_type)
        .order_by(StockLedger.created_at.asc(), StockLedger.id.asc())
        .all()
    )
    for r in rows:
        latest[(r.item_id, r.location_id)] = r  # later rows win
    return [latest[k] for k in sorted(latest)]


def low_stock_alerts(
    threshold=10, item_type: ItemType = ItemType.CONSUMABLE
) -> List[StockLedger]:
    limit = _dec(threshold)
    rows = [r for r in stock_levels(item_type) if _dec(r.balance) < limit]
    return sorted(rows, key=lambda r: _dec(r.balance))


def ledger_history(
    item_id: str, location_id: str, item_type: ItemType = ItemType.CONSUMABLE
) -> List[StockLedger]:
    return (
        StockLedger.query.filter_by(
            item_type=item_type, item_id=item_id, location_id=location_id
        )
        .order_by(StockLedger.created_at.asc(), StockLedger.id.asc())
        .all()
    )
