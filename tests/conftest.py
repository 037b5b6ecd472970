"""Shared pytest fixtures: an app bound to in-memory SQLite plus reference data."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterator

import pytest

from app import create_app
from configs import db
from db.models.asset import Asset, AssetStatus, AssetType
from db.models.code import Code, CodeType
from db.models.inventory import ItemType, StockLedger
from db.models.location import Location
from db.models.printer_model import Compatibility, Consumable, PrinterModel


@pytest.fixture
def app() -> Iterator:
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "ACTION_RECORD_FAILURES": True,
            "LOG_LEVEL": "DEBUG",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def reference_data(app) -> dict:
    """Two locations, a DNP and a Citizen printer, paper and ribbon, three codes."""

    db.session.add_all(
        [
            Location(id="warehouse", name="Warehouse"),
            Location(id="showroom", name="Showroom"),
            PrinterModel(id="dnp-ds40", brand="DNP", model="DS40"),
            PrinterModel(id="citizen-cx02", brand="Citizen", model="CX-02"),
            Consumable(id="paper-6inch", type="paper", spec="6 inch", unit="roll"),
            Consumable(id="ribbon-ds40", type="ribbon", spec="DS40", unit="roll"),
        ]
    )
    db.session.flush()
    db.session.add_all(
        [
            Compatibility(
                printer_model_id="dnp-ds40",
                consumable_id="ribbon-ds40",
                code_type=CodeType.SPECIALIZED,
            ),
            Compatibility(
                printer_model_id="citizen-cx02",
                consumable_id="paper-6inch",
                code_type=CodeType.GENERIC,
            ),
            Asset(
                id="printer-001",
                asset_type=AssetType.PRINTER,
                model_id="dnp-ds40",
                location_id="warehouse",
                status=AssetStatus.AVAILABLE,
            ),
            Asset(
                id="printer-002",
                asset_type=AssetType.PRINTER,
                model_id="dnp-ds40",
                location_id="showroom",
                status=AssetStatus.AVAILABLE,
            ),
            Asset(
                id="printer-003",
                asset_type=AssetType.PRINTER,
                model_id="citizen-cx02",
                location_id="warehouse",
                status=AssetStatus.AVAILABLE,
            ),
            Asset(
                id="router-001",
                asset_type=AssetType.ROUTER,
                location_id="warehouse",
                status=AssetStatus.AVAILABLE,
            ),
        ]
    )
    db.session.flush()
    db.session.add_all(
        [
            Code(id="dnp-code-001", code_type=CodeType.SPECIALIZED),
            Code(id="dnp-code-002", code_type=CodeType.SPECIALIZED),
            Code(id="generic-code-001", code_type=CodeType.GENERIC),
        ]
    )
    db.session.commit()
    return {"warehouse": "warehouse", "showroom": "showroom"}


@pytest.fixture
def opening_balance(reference_data) -> Callable[..., StockLedger]:
    """Insert an opening ledger row so the partition starts at ``balance``."""

    def _apply(item_id: str, location_id: str, balance) -> StockLedger:
        row = StockLedger(
            item_type=ItemType.CONSUMABLE,
            item_id=item_id,
            delta=Decimal(str(balance)),
            balance=Decimal(str(balance)),
            location_id=location_id,
            created_by="opening",
        )
        db.session.add(row)
        db.session.commit()
        return row

    return _apply


@pytest.fixture
def action_payload() -> Callable[..., dict]:
    def _build(action_type: str, **fields) -> dict:
        payload = {"action_type": action_type, "by_user": "tech1"}
        payload.update(fields)
        return payload

    return _build
