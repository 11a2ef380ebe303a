import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from .config import Settings, get_logger, get_settings
from .decode import decode_rows, paginate, split_response
from .errors import FormatError, HttpError, SearchFailedError
from .models import SearchRequest, SearchResponse
from .query_filter import normalize_filter
from .schemes import METHODS, Scheme, get_scheme
from .validate import build_request

logger = get_logger()


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_params(scheme: Scheme, req: SearchRequest) -> Tuple[List[Tuple[str, str]], List[str]]:
    """Ordered query parameters for `req` plus the filter normalizer's warnings."""
    params: List[Tuple[str, str]] = [("terms", req.terms), ("maxList", str(req.max_list))]
    if req.search_fields:
        params.append(("sf", req.search_fields))
    if req.display_fields:
        params.append(("df", req.display_fields))
    if req.code_field:
        params.append(("cf", req.code_field))

    if req.type:
        params.append(("type", req.type))
        if req.available is not None and req.type in scheme.available_types:
            params.append(("available", _flag(req.available)))
    if req.exclude_copyrighted is not None and scheme.supports_exclude_copyrighted:
        params.append(("excludeCopyrighted", _flag(req.exclude_copyrighted)))

    params.append(("offset", str(req.offset)))
    if req.count is not None:
        params.append(("count", str(req.count)))
    if req.extra_fields:
        params.append(("ef", req.extra_fields))

    query, warnings = normalize_filter(req.additional_query)
    if query:
        params.append(("q", query))
    return params, warnings


def compose_url(scheme: Scheme, req: SearchRequest, base_url: str) -> Tuple[httpx.URL, List[str]]:
    params, warnings = build_params(scheme, req)
    return httpx.URL(base_url, params=params), warnings


async def _fetch(session: httpx.AsyncClient, url: httpx.URL, settings: Settings) -> Any:
    r = await session.get(url, headers={"User-Agent": settings.user_agent}, timeout=settings.request_timeout)
    if not r.is_success:
        raise HttpError(r.status_code, r.reason_phrase)
    try:
        return r.json()
    except ValueError:
        raise FormatError("Invalid API response format") from None


async def _run(
    session: httpx.AsyncClient,
    scheme: Scheme,
    args: Mapping[str, Any],
    settings: Settings,
) -> SearchResponse:
    req = build_request(scheme, args)
    url, warnings = compose_url(scheme, req, settings.api_url(scheme.table))
    for w in warnings:
        logger.warning(f"method={scheme.method} {w}")

    data = await _fetch(session, url, settings)
    total, _, _, _ = split_response(data)
    extra = [f.strip() for f in req.extra_fields.split(",")] if req.extra_fields else None
    rows = decode_rows(data, scheme, extra)
    return SearchResponse(
        method=scheme.method,
        totalCount=total or 0,
        results=rows,
        pagination=paginate(total, req.offset, len(rows)),
        warnings=warnings,
    )


async def search(
    method: str,
    args: Mapping[str, Any],
    session: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
) -> SearchResponse:
    """
    Search one vocabulary. Every failure after the scheme is resolved is raised
    as SearchFailedError("Failed to search <label>: <detail>").
    """
    scheme = get_scheme(method)
    settings = settings or get_settings()
    start = time.perf_counter()

    try:
        if session is not None:
            resp = await _run(session, scheme, args, settings)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as own:
                resp = await _run(own, scheme, args, settings)
    except Exception as e:
        logger.warning(f"method={method} failed: {e!r}")
        raise SearchFailedError(method, scheme.label, e) from e

    elapsed = time.perf_counter() - start
    logger.info(
        f"method={method} terms={args.get('terms')!r} total={resp.totalCount} "
        f"returned={len(resp.results)} elapsed={elapsed:.2f}s"
    )
    return resp


def describe_schemes() -> List[Dict[str, Any]]:
    settings = get_settings()
    out = []
    for s in map(get_scheme, METHODS):
        item = s.model_dump(mode="json")
        item["url"] = settings.api_url(s.table)
        out.append(item)
    return out


