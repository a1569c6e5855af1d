from __future__ import annotations

from typing import Any, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import QueryParamsError


class QueryOptions(BaseModel):
    """
    Base for typed query options.
    Field aliases are the query parameter names; None fields are omitted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ListOptions(QueryOptions):
    page_num: Optional[int] = Field(default=None, alias="pageNum")
    items_per_page: Optional[int] = Field(default=None, alias="itemsPerPage")
    include_count: Optional[bool] = Field(default=None, alias="includeCount")

    @field_validator("page_num", "items_per_page")
    @classmethod
    def _zero_is_unset(cls, value: Optional[int]) -> Optional[int]:
        # 0 is not a valid page or page size; leave it to the server default
        return value or None


def _encode_scalar(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise QueryParamsError(
        f"cannot encode query parameter {key!r} of type {type(value).__name__}"
    )


def encode_options(opts: BaseModel) -> List[Tuple[str, str]]:
    """Turn an options model into (key, value) pairs; lists become repeated keys."""
    if not isinstance(opts, BaseModel):
        raise QueryParamsError(
            f"query options must be a pydantic model, got {type(opts).__name__}"
        )

    # mode="json" renders datetimes/enums as strings but keeps bools and numbers.
    data = opts.model_dump(by_alias=True, exclude_none=True, mode="json")
    pairs: List[Tuple[str, str]] = []
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _encode_scalar(key, v)) for v in value)
        else:
            pairs.append((key, _encode_scalar(key, value)))
    return pairs


def set_query_params(path: str, opts: Optional[BaseModel]) -> str:
    """
    Merge the encoded options into the query string of `path`.
    Keys produced by `opts` replace every existing value of the same key.
    """
    if opts is None:
        return path

    try:
        url = httpx.URL(path)
    except httpx.InvalidURL as exc:
        raise QueryParamsError(f"cannot parse path {path!r}: {exc}") from exc

    new_params = httpx.QueryParams(encode_options(opts))
    return str(url.copy_merge_params(new_params))


__all__ = ["QueryOptions", "ListOptions", "encode_options", "set_query_params"]
