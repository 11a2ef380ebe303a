from typing import Any, Mapping, Optional

from .errors import ValidationError
from .models import SearchRequest
from .schemes import Scheme

MAX_LIMIT = 500


def validate_terms(terms: Any) -> str:
    if not isinstance(terms, str) or not terms.strip():
        raise ValidationError('The "terms" parameter is required and must be a string')
    return terms.strip()


def _integer(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'The "{name}" parameter must be an integer')
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'The "{name}" parameter must be an integer')
        value = int(value)
    return value


def _limit(name: str, value: Any, default: int) -> int:
    v = _integer(name, value)
    if v is None or v < 1:
        return default
    return min(v, MAX_LIMIT)


def validate_max_list(value: Any, default: int = 7) -> int:
    return _limit("maxList", value, default)


def validate_count(value: Any, default: int = 7) -> int:
    return _limit("count", value, default)


def validate_offset(value: Any) -> int:
    v = _integer("offset", value)
    return max(v or 0, 0)


def _optional_str(name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'The "{name}" parameter must be a string')
    return value.strip() or None


def _optional_bool(name: str, value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError(f'The "{name}" parameter must be a boolean')


def _pick(args: Mapping[str, Any], *names: str) -> Any:
    """First non-None value among the accepted spellings of a parameter."""
    for n in names:
        if args.get(n) is not None:
            return args[n]
    return None


def build_request(scheme: Scheme, args: Mapping[str, Any]) -> SearchRequest:
    """Validate raw arguments against `scheme` and fill in its defaults."""
    count = args.get("count")
    if scheme.always_count or count is not None:
        count = validate_count(count, scheme.count_default)

    kind = None
    if scheme.type_choices:
        kind = _optional_str("type", args.get("type")) or scheme.default_type
        if kind is not None and kind not in scheme.type_choices:
            allowed = ", ".join(scheme.type_choices)
            raise ValidationError(f'The "type" parameter must be one of: {allowed}')

    # additionalQuery keeps its whitespace; the filter normalizer strips it
    query = _pick(args, "additionalQuery", "q")
    if query is not None and not isinstance(query, str):
        raise ValidationError('The "additionalQuery" parameter must be a string')

    return SearchRequest(
        terms=validate_terms(args.get("terms")),
        max_list=validate_max_list(args.get("maxList"), scheme.max_list_default),
        offset=validate_offset(args.get("offset")),
        count=count,
        search_fields=_optional_str("searchFields", _pick(args, "searchFields", "sf")) or scheme.search_fields,
        display_fields=_optional_str("displayFields", _pick(args, "displayFields", "df")) or scheme.display_fields,
        code_field=_optional_str("codeField", _pick(args, "codeField", "cf")) or scheme.code_field,
        extra_fields=_optional_str("extraFields", _pick(args, "extraFields", "ef")),
        additional_query=query,
        type=kind,
        available=_optional_bool("available", args.get("available")),
        exclude_copyrighted=_optional_bool("excludeCopyrighted", args.get("excludeCopyrighted")),
    )
