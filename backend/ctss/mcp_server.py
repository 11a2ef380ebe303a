from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .config import get_logger, get_settings
from .errors import SearchError
from .schemes import METHODS
from . import clients

logger = get_logger()

mcp = FastMCP("clinical-tables-search")

DESCRIPTION = (
    "Search clinical coding systems through the NLM Clinical Tables API.\n\n"
    "Args:\n"
    f"  method: One of {', '.join(METHODS)}.\n"
    "  terms: Search string, e.g. 'hypertension', 'E11', 'wheelchair', 'BRCA1'.\n"
    "  maxList: Maximum number of results (1-500, default 7).\n"
    "  offset: 0-based starting result for pagination (default 0).\n"
    "  count: Page size (1-500, default 7).\n"
    "  searchFields / displayFields / codeField: Comma-separated upstream field names.\n"
    "  extraFields: Comma-separated extra fields to return, e.g. 'short_desc,obsolete' for HCPCS\n"
    "    or 'addr_practice.city,gender' for NPI.\n"
    "  additionalQuery: Field filter such as 'addr_practice.state:CA AND\n"
    "    (addr_practice.city:\"Los Angeles\" OR addr_practice.city:\"San Diego\")'.\n"
    "    Parenthesized grouping is flattened where possible; warnings are returned.\n"
    "  type: LOINC item type (question, form, form_and_section, panel) or ICD-11 code type\n"
    "    (stem, extension, category).\n"
    "  available / excludeCopyrighted: LOINC only.\n"
    "Returns: {method, totalCount, results[], pagination{offset,count,hasMore}, warnings[]}."
)


async def nlm_ct_codes(
    method: str,
    terms: str,
    maxList: Optional[int] = None,
    offset: Optional[int] = None,
    count: Optional[int] = None,
    searchFields: Optional[str] = None,
    displayFields: Optional[str] = None,
    codeField: Optional[str] = None,
    extraFields: Optional[str] = None,
    additionalQuery: Optional[str] = None,
    type: Optional[str] = None,
    available: Optional[bool] = None,
    excludeCopyrighted: Optional[bool] = None,
) -> Dict[str, Any]:
    args = {
        "terms": terms,
        "maxList": maxList,
        "offset": offset,
        "count": count,
        "searchFields": searchFields,
        "displayFields": displayFields,
        "codeField": codeField,
        "extraFields": extraFields,
        "additionalQuery": additionalQuery,
        "type": type,
        "available": available,
        "excludeCopyrighted": excludeCopyrighted,
    }
    try:
        resp = await clients.search(method, {k: v for k, v in args.items() if v is not None})
    except SearchError as e:
        raise ToolError(str(e)) from e
    return resp.model_dump()


mcp.tool(name="nlm_ct_codes", description=DESCRIPTION)(nlm_ct_codes)


def main():
    settings = get_settings()
    if settings.mcp_transport == "http":
        logger.info(f"serving MCP on {settings.mcp_host}:{settings.mcp_port}{settings.mcp_http_path}")
        mcp.run(transport="http", host=settings.mcp_host, port=settings.mcp_port, path=settings.mcp_http_path)
    else:
        mcp.run()


if __name__ == "__main__":
    main()
