import sys
from pathlib import Path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from backend.ctss.decode import decode_rows, paginate
from backend.ctss.errors import FormatError, StructureError
from backend.ctss.schemes import SCHEMES


ICD10 = SCHEMES["icd-10-cm"]
HCPCS = SCHEMES["hcpcs-LII"]
HPO = SCHEMES["hpo-vocabulary"]
NPI = SCHEMES["npi-organizations"]


def test_icd10_rows():
    body = [25, ["E11.9", "I10"], {}, [["E11.9", "Type 2 diabetes..."], ["I10", "Essential hypertension"]]]
    rows = decode_rows(body, ICD10)
    assert rows == [
        {"code": "E11.9", "name": "Type 2 diabetes..."},
        {"code": "I10", "name": "Essential hypertension"},
    ]
    assert paginate(body[0], 0, len(rows)).model_dump() == {"offset": 0, "count": 2, "hasMore": True}


def test_label_rule_fallbacks():
    body = [3, ["A", "B", "C"], None, [["only"], "scalar"]]
    rows = decode_rows(body, ICD10)
    assert [r["name"] for r in rows] == ["only", "B", "C"]


@pytest.mark.parametrize("body", [["invalid"], "invalid", {"codes": []}, None, [1, [], {}]])
def test_format_error(body):
    with pytest.raises(FormatError, match="Invalid API response format"):
        decode_rows(body, ICD10)


@pytest.mark.parametrize("body", [[1, None, {}, []], [1, [], {}, "x"]])
def test_structure_error(body):
    with pytest.raises(StructureError, match="Invalid response structure"):
        decode_rows(body, HPO)


def test_ragged_extra_columns_are_omitted():
    body = [
        2,
        ["E0100", "E0105"],
        {"short_desc": ["Cane"], "obsolete": [False, True], "long_desc": [None, "Quad cane"]},
        [["E0100", "Cane, adjustable"], ["E0105", "Cane, quad"]],
    ]
    first, second = decode_rows(body, HCPCS)
    assert first == {"code": "E0100", "display": "Cane, adjustable", "shortDescription": "Cane", "obsolete": False}
    assert second == {"code": "E0105", "display": "Cane, quad", "longDescription": "Quad cane", "obsolete": True}
    assert "shortDescription" not in second


def test_joined_display():
    body = [3, ["HP:0001250", "HP:0002", "HP:0003"], None, [["HP:0001250", "Seizure"], "Scalar"]]
    rows = decode_rows(body, HPO)
    assert [r["display"] for r in rows] == ["HP:0001250 | Seizure", "Scalar", "HP:0003"]


def test_passthrough_columns():
    body = [
        1,
        ["HP:0001250"],
        {"definition": ["A seizure is..."], "custom_col": ["x"]},
        [["HP:0001250", "Seizure"]],
    ]
    (row,) = decode_rows(body, HPO)
    assert row["definition"] == "A seizure is..."
    assert row["custom_col"] == "x"

    (row,) = decode_rows(body, HPO, extra_fields=["definition"])
    assert row["definition"] == "A seizure is..."
    assert "custom_col" not in row


def test_mapped_scheme_ignores_unknown_columns():
    body = [1, ["E0100"], {"mystery": ["?"]}, [["E0100", "Cane"]]]
    (row,) = decode_rows(body, HCPCS)
    assert row == {"code": "E0100", "display": "Cane"}


def test_npi_display_columns_and_extras():
    body = [
        1,
        ["1234567890"],
        {"addr_practice.city": ["AUSTIN"], "misc.is_sole_proprietor": [False], "licenses": [[{"state": "TX"}]]},
        [["1234567890", "ACME CLINIC", "Clinic/Center", "1 MAIN ST, AUSTIN, TX"]],
    ]
    (row,) = decode_rows(body, NPI)
    assert row == {
        "code": "1234567890",
        "npi": "1234567890",
        "fullName": "ACME CLINIC",
        "providerType": "Clinic/Center",
        "practiceAddress": "1 MAIN ST, AUSTIN, TX",
        "practiceCity": "AUSTIN",
        "isSoleProprietor": False,
        "licenses": [{"state": "TX"}],
    }


def test_npi_short_display_defaults_to_empty():
    (row,) = decode_rows([1, ["1"], None, [["1"]]], NPI)
    assert row["fullName"] == "" and row["providerType"] == "" and row["practiceAddress"] == ""


def test_round_trip_through_columns():
    rows = [
        {"code": "E0100", "display": "Cane", "shortDescription": "Cane", "isNoc": False},
        {"code": "E0105", "display": "Quad cane", "shortDescription": "Quad", "isNoc": True},
    ]
    body = [
        len(rows),
        [r["code"] for r in rows],
        {"short_desc": [r["shortDescription"] for r in rows], "is_noc": [r["isNoc"] for r in rows]},
        [[r["code"], r["display"]] for r in rows],
    ]
    assert decode_rows(body, HCPCS) == rows


def test_pagination_boundary():
    assert paginate(10, 3, 7).hasMore is False
    assert paginate(11, 3, 7).hasMore is True
    assert paginate(None, 0, 0).hasMore is False


def test_label_rule_null_label_falls_back_to_code():
    rows = decode_rows([1, ["E1"], None, [["E1", None]]], ICD10)
    assert rows == [{"code": "E1", "name": "E1"}]
