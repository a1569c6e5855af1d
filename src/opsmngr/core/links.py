from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict


class Link(BaseModel):
    """A ``{rel, href}`` relation as returned in ``links`` arrays."""

    rel: str = ""
    href: str = ""

    model_config = ConfigDict(extra="ignore")

    def href_url(self) -> httpx.URL:
        return httpx.URL(self.href)

    def href_query_param(self, param: str) -> Optional[str]:
        """
        Reads one query parameter from the href.
        Example: Link(rel="next", href=".../groups?pageNum=2").href_query_param("pageNum") -> "2"
        """
        return self.href_url().params.get(param)


def get_link(links: Optional[Sequence[Link]], rel: str) -> Optional[Link]:
    """Returns the first link with the given relation, if any."""
    for link in links or ():
        if link.rel == rel:
            return link
    return None


def get_link_href(links: Optional[Sequence[Link]], rel: str) -> Optional[str]:
    link = get_link(links, rel)
    return link.href if link else None


def has_next_page(links: Optional[Sequence[Link]]) -> bool:
    return get_link(links, "next") is not None


__all__: List[str] = ["Link", "get_link", "get_link_href", "has_next_page"]
