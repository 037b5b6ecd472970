"""Compatibility and code-binding predicates."""

from __future__ import annotations

from configs import db
from dao import compatibility as compat_dao
from db.models.code import Code, CodeStatus, CodeType


def test_is_compatible_matches_full_triple(reference_data):
    assert compat_dao.is_compatible("dnp-ds40", "ribbon-ds40", CodeType.SPECIALIZED)
    assert not compat_dao.is_compatible("dnp-ds40", "ribbon-ds40", CodeType.GENERIC)
    assert not compat_dao.is_compatible("dnp-ds40", "paper-6inch", CodeType.SPECIALIZED)
    assert not compat_dao.is_compatible("dnp-ds40", "ribbon-ds40", None)


def test_predicates_are_repeatable(reference_data):
    first = (
        compat_dao.is_compatible("citizen-cx02", "paper-6inch", CodeType.GENERIC),
        compat_dao.is_binding_allowed("dnp-code-001", "printer-001"),
    )
    second = (
        compat_dao.is_compatible("citizen-cx02", "paper-6inch", CodeType.GENERIC),
        compat_dao.is_binding_allowed("dnp-code-001", "printer-001"),
    )
    assert first == second == (True, True)


def test_unknown_code_cannot_be_bound(reference_data):
    assert compat_dao.is_binding_allowed("missing-code", "printer-001") is False


def test_specialized_code_bound_elsewhere_is_rejected(reference_data):
    code = db.session.get(Code, "dnp-code-001")
    code.bound_printer_id = "printer-001"
    db.session.commit()

    assert compat_dao.is_binding_allowed("dnp-code-001", "printer-001") is True
    assert compat_dao.is_binding_allowed("dnp-code-001", "printer-002") is False


def test_printer_holding_a_specialized_code_rejects_another(reference_data):
    db.session.get(Code, "dnp-code-001").bound_printer_id = "printer-001"
    db.session.commit()

    assert compat_dao.is_binding_allowed("dnp-code-002", "printer-001") is False
    assert compat_dao.is_binding_allowed("dnp-code-002", "printer-002") is True


def test_generic_codes_bind_freely(reference_data):
    generic = db.session.get(Code, "generic-code-001")
    generic.bound_printer_id = "printer-002"
    db.session.get(Code, "dnp-code-001").bound_printer_id = "printer-001"
    db.session.commit()

    assert compat_dao.is_binding_allowed("generic-code-001", "printer-001") is True


def test_explain_compatibility_reasons(reference_data):
    dnp_generic = compat_dao.explain_compatibility(
        "dnp-ds40", "ribbon-ds40", CodeType.GENERIC
    )
    assert dnp_generic.is_compatible is False
    assert dnp_generic.brand == "DNP"
    assert dnp_generic.reason == "DNP printers only accept specialized codes"

    missing = compat_dao.explain_compatibility("nope", "ribbon-ds40", CodeType.GENERIC)
    assert missing.reason == "printer model does not exist"

    other = compat_dao.explain_compatibility(
        "citizen-cx02", "ribbon-ds40", CodeType.GENERIC
    )
    assert other.reason == "consumable not compatible with printer model"

    ok = compat_dao.explain_compatibility("citizen-cx02", "paper-6inch", CodeType.GENERIC)
    assert ok.is_compatible is True
    assert ok.brand == "Citizen"
    assert ok.reason is None


def test_explain_binding_reasons(reference_data):
    db.session.get(Code, "dnp-code-001").bound_printer_id = "printer-001"
    db.session.commit()

    taken = compat_dao.explain_binding("dnp-code-001", "printer-002")
    assert taken.can_bind is False
    assert taken.reason == "specialized code already bound to another printer"

    occupied = compat_dao.explain_binding("dnp-code-002", "printer-001")
    assert occupied.reason == "target printer already holds another specialized code"

    generic = compat_dao.explain_binding("generic-code-001", "printer-001")
    assert generic.can_bind is True
    assert generic.code_type == CodeType.GENERIC

    assert compat_dao.explain_binding("nope", "printer-001").reason == "code does not exist"


def test_batch_compatibility_check(reference_data):
    result = compat_dao.batch_compatibility_check(
        "dnp-ds40",
        [
            {"consumable_id": "ribbon-ds40", "code_type": CodeType.SPECIALIZED},
            {"consumable_id": "paper-6inch", "code_type": CodeType.SPECIALIZED},
        ],
    )
    assert result.compatible is False
    assert [d.is_compatible for d in result.details] == [True, False]


def test_compatible_consumables(reference_data):
    rows = compat_dao.compatible_consumables("dnp-ds40")
    assert rows == [
        {
            "id": "ribbon-ds40",
            "type": "ribbon",
            "spec": "DS40",
            "unit": "roll",
            "code_type": "专码",
        }
    ]


def test_available_codes_filters_issued_and_bound(reference_data):
    issued = db.session.get(Code, "dnp-code-002")
    issued.status = CodeStatus.ISSUED
    db.session.commit()

    all_ids = {c.id for c in compat_dao.available_codes()}
    assert all_ids == {"dnp-code-001", "generic-code-001"}

    db.session.get(Code, "dnp-code-001").bound_printer_id = "printer-001"
    db.session.commit()
    specialized = compat_dao.available_codes(CodeType.SPECIALIZED)
    assert specialized == []
