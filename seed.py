# seed.py
from configs import db
from dao import action as action_dao
from db.models.location import Location
from db.models.printer_model import PrinterModel, Consumable, Compatibility
from db.models.asset import Asset, AssetType, AssetStatus
from db.models.code import Code, CodeType
from app import create_app


# -------- Locations --------
def seed_locations():
    locations = [
        ("warehouse", "总仓"),
        ("showroom", "展厅"),
        ("personal", "个人"),
    ]
    for loc_id, name in locations:
        loc = db.session.get(Location, loc_id)
        if not loc:
            db.session.add(Location(id=loc_id, name=name))
        else:
            loc.name = name
    db.session.commit()
    print("✓ Locations seeded/updated")


# -------- Printer models & consumables --------
def seed_models_and_consumables():
    models = [
        ("dnp-ds40", "DNP", "DS40"),
        ("citizen-cx02", "西铁城", "CX-02"),
    ]
    for pm_id, brand, model in models:
        if not db.session.get(PrinterModel, pm_id):
            db.session.add(PrinterModel(id=pm_id, brand=brand, model=model))

    consumables = [
        ("paper-6inch", "相纸", "6寸", "卷"),
        ("ribbon-ds40", "色带", "DS40 6x8", "卷"),
    ]
    for c_id, ctype, spec, unit in consumables:
        if not db.session.get(Consumable, c_id):
            db.session.add(Consumable(id=c_id, type=ctype, spec=spec, unit=unit))
    db.session.flush()

    # DNP only takes 专码; Citizen takes both
    pairs = [
        ("dnp-ds40", "ribbon-ds40", CodeType.SPECIALIZED),
        ("dnp-ds40", "paper-6inch", CodeType.SPECIALIZED),
        ("citizen-cx02", "paper-6inch", CodeType.SPECIALIZED),
        ("citizen-cx02", "paper-6inch", CodeType.GENERIC),
    ]
    for pm_id, c_id, code_type in pairs:
        exists = Compatibility.query.filter_by(
            printer_model_id=pm_id, consumable_id=c_id, code_type=code_type
        ).first()
        if not exists:
            db.session.add(
                Compatibility(
                    printer_model_id=pm_id, consumable_id=c_id, code_type=code_type
                )
            )
    db.session.commit()
    print("✓ Printer models, consumables, compatibilities seeded")


# -------- Assets & codes --------
def seed_assets_and_codes():
    printers = [
        ("printer-001", "dnp-ds40", "warehouse"),
        ("printer-002", "dnp-ds40", "showroom"),
        ("printer-003", "citizen-cx02", "warehouse"),
    ]
    for a_id, model_id, loc_id in printers:
        if not db.session.get(Asset, a_id):
            db.session.add(
                Asset(
                    id=a_id,
                    asset_type=AssetType.PRINTER,
                    model_id=model_id,
                    location_id=loc_id,
                    status=AssetStatus.AVAILABLE,
                )
            )

    codes = [
        ("dnp-code-001", CodeType.SPECIALIZED),
        ("dnp-code-002", CodeType.SPECIALIZED),
        ("generic-code-001", CodeType.GENERIC),
    ]
    for code_id, code_type in codes:
        if not db.session.get(Code, code_id):
            db.session.add(Code(id=code_id, code_type=code_type))
    db.session.commit()
    print("✓ Assets and codes seeded")


# -------- Opening stock --------
def seed_opening_stock(qty=100):
    """Opening balances go through the ledger as 耗材归还 actions."""
    for c_id in ("paper-6inch", "ribbon-ds40"):
        result = action_dao.perform_action(
            {
                "action_type": "耗材归还",
                "consumable_id": c_id,
                "qty": qty,
                "to_location_id": "warehouse",
                "by_user": "seed",
                "remark": "opening stock",
            }
        )
        if not result.ok:
            raise RuntimeError(f"Opening stock for '{c_id}' failed: {result.error}")
    print(f"✓ Opening stock {qty} recorded at warehouse")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_locations()
        seed_models_and_consumables()
        seed_assets_and_codes()
        seed_opening_stock()
