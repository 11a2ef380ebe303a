from typing import Any, Dict, Iterable, List, Optional

from .errors import FormatError, StructureError
from .models import Pagination
from .schemes import Scheme


def _at(column: Any, idx: int) -> Any:
    if isinstance(column, list) and idx < len(column):
        return column[idx]
    return None


def _display(scheme: Scheme, code: Any, shown: Any, row: Dict[str, Any]) -> None:
    if scheme.display_rule == "columns":
        for idx, attr in enumerate(scheme.display_columns):
            if attr is not None:
                value = _at(shown, idx)
                row[attr] = value if value is not None else ""
        return

    if scheme.display_rule == "label":
        if isinstance(shown, list) and len(shown) >= 2:
            value = shown[1]
        elif isinstance(shown, list) and len(shown) == 1:
            value = shown[0]
        else:
            value = code
        if value is None:
            value = code
    elif isinstance(shown, list):
        value = " | ".join(str(x) for x in shown if x is not None)
    else:
        value = shown if shown is not None else code
    row[scheme.display_attr] = value


def split_response(response: Any):
    """Returns (total, codes, extra, display) or raises FormatError/StructureError."""
    if not isinstance(response, list) or len(response) < 4:
        raise FormatError("Invalid API response format")
    total, codes, extra, display = response[0], response[1], response[2], response[3]
    if not isinstance(codes, list) or not isinstance(display, list):
        raise StructureError("Invalid response structure")
    return total, codes, extra, display


def decode_rows(response: Any, scheme: Scheme, extra_fields: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
    """
    Turns the parallel-array body `[total, codes, extra, display, ...]` into one
    dict per code.

    Extra columns may be shorter than `codes`; a row only gets an attribute
    when its column holds a non-null value at that index. For passthrough
    schemes, columns the field table does not know are copied under their
    wire name, restricted to `extra_fields` when given.
    """
    _, codes, extra, display = split_response(response)
    if not isinstance(extra, dict):
        extra = {}

    known = {f.wire for f in scheme.fields}
    mapped = [f for f in scheme.fields if f.wire in extra]
    loose: List[str] = []
    if scheme.passthrough:
        wanted = None if extra_fields is None else set(extra_fields)
        loose = [k for k in extra if k not in known and (wanted is None or k in wanted)]

    rows = []
    for idx, code in enumerate(codes):
        row: Dict[str, Any] = {"code": code}
        if scheme.code_alias:
            row[scheme.code_alias] = code
        _display(scheme, code, display[idx] if idx < len(display) else None, row)

        for f in mapped:
            value = _at(extra[f.wire], idx)
            if value is not None:
                row[f.name] = value
        for k in loose:
            value = _at(extra[k], idx)
            if value is not None:
                row[k] = value
        rows.append(row)
    return rows


def paginate(total: Any, offset: int, returned: int) -> Pagination:
    total = total or 0
    return Pagination(offset=offset, count=returned, hasMore=total > offset + returned)
