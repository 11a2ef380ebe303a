"""
Rewrites the optional `q` filter into a form the Clinical Table Search Service
accepts. The service handles flat AND/OR chains but has limited support for
parenthesized grouping, so the common grouped shapes are flattened here.

Nothing is parsed into a tree: structural scans run on a masked copy of the
query where quoted spans and escaped characters are blanked out, and the
match positions are used to slice the original text.
"""
import re
from typing import Any, List, Tuple

TRANSFORMED = "Parentheses grouping detected and transformed"
OR_WITH_AND = "Complex OR with AND grouping detected"
COMPLEX = "Complex parentheses grouping detected"

_OP = re.compile(r"\s+(AND|OR)\s+", re.IGNORECASE)
_OR = re.compile(r"\s+OR\s+", re.IGNORECASE)
_AND = re.compile(r"\s+AND\s+", re.IGNORECASE)

# A AND (B OR C)
_AND_GROUP = re.compile(r"^([^()]+?)\s+AND\s*\(([^()]+)\)$", re.IGNORECASE)
# (A OR B) AND C
_GROUP_AND = re.compile(r"^\(([^()]+)\)\s*AND\s+([^()]+)$", re.IGNORECASE)
# (X)
_GROUP = re.compile(r"^\(([^()]*)\)$")
# A OR (B AND C)
_OR_GROUP = re.compile(r"^([^()]+?)\s+OR\s*\(([^()]+)\)$", re.IGNORECASE)


def _mask(text: str) -> str:
    """Same-length copy of `text` with quoted and escaped characters replaced by '_'."""
    out = []
    quoted = escaped = False
    opened = 0
    for ch in text:
        if escaped:
            out.append("_")
            escaped = False
        elif ch == "\\":
            out.append(ch)
            escaped = True
        elif ch == '"':
            if not quoted:
                opened = len(out)
            out.append(ch)
            quoted = not quoted
        else:
            out.append("_" if quoted else ch)
    if quoted:
        # an unterminated quote hides nothing
        return "".join(out[:opened + 1]) + _mask(text[opened + 1:])
    return "".join(out)


def has_grouping(text: str) -> bool:
    """True when `text` holds a parenthesis outside any quoted span."""
    masked = _mask(text)
    return "(" in masked or ")" in masked


def _tidy(text: str) -> str:
    # single spaces and upper-case around every unquoted operator
    text = text.strip()
    masked = _mask(text)
    out, pos = [], 0
    for m in _OP.finditer(masked):
        out.append(text[pos:m.start()])
        out.append(f" {m.group(1).upper()} ")
        pos = m.end()
    out.append(text[pos:])
    return "".join(out)


def _operands(text: str, masked: str, start: int, end: int, op: "re.Pattern[str]") -> List[str]:
    parts, pos = [], start
    for m in op.finditer(masked, start, end):
        parts.append(text[pos:m.start()])
        pos = m.end()
    parts.append(text[pos:end])
    return [_tidy(p) for p in parts]


def _span(text: str, m: "re.Match[str]", group: int) -> str:
    return text[m.start(group):m.end(group)]


def normalize_filter(raw: Any) -> Tuple[Any, List[str]]:
    """
    Returns (query, warnings).

    None and non-string values pass through untouched; blank strings become
    None. Queries without unquoted parentheses are only stripped. Grouped
    queries are flattened where a known rewrite exists, otherwise returned
    stripped with a warning. Never raises.
    """
    if not isinstance(raw, str):
        return raw, []

    text = raw.strip()
    if not text:
        return None, []
    if not has_grouping(text):
        return text, []

    masked = _mask(text)

    # A AND (B OR C) -> (A AND B) OR (A AND C)
    m = _AND_GROUP.match(masked)
    if m and _OR.search(masked, m.start(2), m.end(2)):
        left = _tidy(_span(text, m, 1))
        ors = _operands(text, masked, m.start(2), m.end(2), _OR)
        out = " OR ".join(f"({left} AND {o})" for o in ors)
        return out, [f"{TRANSFORMED}: {text!r} -> {out!r}"]

    # (A OR B) AND C -> (A AND C) OR (B AND C)
    m = _GROUP_AND.match(masked)
    if m and _OR.search(masked, m.start(1), m.end(1)):
        right = _tidy(_span(text, m, 2))
        ors = _operands(text, masked, m.start(1), m.end(1), _OR)
        out = " OR ".join(f"({o} AND {right})" for o in ors)
        return out, [f"{TRANSFORMED}: {text!r} -> {out!r}"]

    # (A OR B) -> A OR B
    m = _GROUP.match(masked)
    if m and _OP.search(masked, m.start(1), m.end(1)):
        return _span(text, m, 1).strip(), []

    # A OR (B AND C) -> A OR B AND C
    m = _OR_GROUP.match(masked)
    if m and _AND.search(masked, m.start(2), m.end(2)):
        left = _tidy(_span(text, m, 1))
        inner = _tidy(_span(text, m, 2))
        out = f"{left} OR {inner}"
        return out, [f"{OR_WITH_AND}; consider separate queries {left!r} and {inner!r}"]

    return text, [f"{COMPLEX}; the query may not work as expected: {text!r}"]
