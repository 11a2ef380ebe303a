import sys
from pathlib import Path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from backend.ctss.errors import ValidationError
from backend.ctss.schemes import SCHEMES, get_scheme
from backend.ctss.validate import (
    build_request,
    validate_count,
    validate_max_list,
    validate_offset,
    validate_terms,
)


@pytest.mark.parametrize("bad", [None, "", "   ", 5, ["diabetes"]])
def test_terms_rejected(bad):
    with pytest.raises(ValidationError, match='"terms" parameter is required'):
        validate_terms(bad)


def test_terms_stripped():
    assert validate_terms("  diabetes ") == "diabetes"


@pytest.mark.parametrize("value,expected", [
    (None, 7), (0, 7), (-3, 7), (1, 1), (25, 25), (500, 500), (600, 500), (10.0, 10),
])
def test_limits_clamped(value, expected):
    assert validate_max_list(value) == expected
    assert validate_count(value) == expected


def test_limit_uses_given_default():
    assert validate_max_list(None, default=20) == 20


@pytest.mark.parametrize("bad", ["10", True, 2.5, [3]])
def test_limits_type_checked(bad):
    with pytest.raises(ValidationError, match='"maxList" parameter must be an integer'):
        validate_max_list(bad)


def test_offset():
    assert validate_offset(None) == 0
    assert validate_offset(-5) == 0
    assert validate_offset(20) == 20
    with pytest.raises(ValidationError):
        validate_offset("20")


def test_scheme_defaults_applied():
    req = build_request(SCHEMES["hcpcs-LII"], {"terms": "wheelchair"})
    assert req.search_fields == "code,short_desc,long_desc"
    assert req.display_fields == "code,display"
    assert req.code_field == "code"
    assert req.count == 7
    assert req.offset == 0
    assert req.max_list == 7


def test_count_only_sent_when_scheme_pages_or_caller_asks():
    assert build_request(SCHEMES["icd-10-cm"], {"terms": "x"}).count is None
    assert build_request(SCHEMES["icd-10-cm"], {"terms": "x", "count": 900}).count == 500
    assert build_request(SCHEMES["npi-individuals"], {"terms": "x"}).count == 7


def test_short_aliases_and_overrides():
    req = build_request(SCHEMES["hpo-vocabulary"], {
        "terms": "seizure",
        "sf": "id,name",
        "df": "id,name",
        "cf": "id",
        "ef": "definition",
        "q": "is_obsolete:false",
    })
    assert (req.search_fields, req.display_fields, req.code_field) == ("id,name", "id,name", "id")
    assert req.extra_fields == "definition"
    assert req.additional_query == "is_obsolete:false"


def test_hpo_has_no_field_defaults():
    req = build_request(SCHEMES["hpo-vocabulary"], {"terms": "seizure"})
    assert req.search_fields is None and req.display_fields is None


def test_type_defaults_and_choices():
    assert build_request(SCHEMES["icd-11"], {"terms": "heart"}).type == "category"
    assert build_request(SCHEMES["loinc-questions"], {"terms": "bp"}).type is None
    assert build_request(SCHEMES["loinc-questions"], {"terms": "bp", "type": "panel"}).type == "panel"
    with pytest.raises(ValidationError, match='"type" parameter must be one of'):
        build_request(SCHEMES["icd-11"], {"terms": "heart", "type": "panel"})


def test_additional_query_must_be_string():
    with pytest.raises(ValidationError, match="additionalQuery"):
        build_request(SCHEMES["conditions"], {"terms": "x", "additionalQuery": 5})


def test_boolean_flags_type_checked():
    with pytest.raises(ValidationError, match="excludeCopyrighted"):
        build_request(SCHEMES["loinc-questions"], {"terms": "x", "excludeCopyrighted": "yes"})


def test_unknown_method():
    with pytest.raises(ValidationError, match='must be one of: "icd-10-cm"'):
        get_scheme("snomed")
    with pytest.raises(ValidationError, match="required"):
        get_scheme("")


def test_eleven_schemes():
    assert len(SCHEMES) == 11
