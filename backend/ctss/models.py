from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class SearchArgs(BaseModel):
    """Raw search arguments as callers send them (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    method: str
    terms: str
    max_list: Optional[int] = Field(default=None, alias="maxList")
    offset: Optional[int] = None
    count: Optional[int] = None
    search_fields: Optional[str] = Field(default=None, alias="searchFields")
    display_fields: Optional[str] = Field(default=None, alias="displayFields")
    code_field: Optional[str] = Field(default=None, alias="codeField")
    extra_fields: Optional[str] = Field(default=None, alias="extraFields")
    additional_query: Optional[str] = Field(default=None, alias="additionalQuery")
    type: Optional[str] = None
    available: Optional[bool] = None
    exclude_copyrighted: Optional[bool] = Field(default=None, alias="excludeCopyrighted")

    def to_args(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"method"})


class SearchRequest(BaseModel):
    """Validated, scheme-agnostic request."""
    terms: str
    max_list: int
    offset: int = 0
    count: Optional[int] = None
    search_fields: Optional[str] = None
    display_fields: Optional[str] = None
    code_field: Optional[str] = None
    extra_fields: Optional[str] = None
    additional_query: Optional[str] = None
    type: Optional[str] = None
    available: Optional[bool] = None
    exclude_copyrighted: Optional[bool] = None


class Pagination(BaseModel):
    offset: int
    count: int
    hasMore: bool


class SearchResponse(BaseModel):
    method: str
    totalCount: int
    results: List[Dict[str, Any]]
    pagination: Pagination
    warnings: List[str] = Field(default_factory=list)
