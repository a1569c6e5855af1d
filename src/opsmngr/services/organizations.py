from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import Organization, Organizations, Projects

from ._base import Service, public_path, require

ORGS_PATH = "orgs"


class OrganizationsService(Service):
    """Organizations: https://docs.opsmanager.mongodb.com/current/reference/api/organizations/"""

    async def list(
        self, ctx: RequestContext, opts: Optional[ListOptions] = None
    ) -> Tuple[Organizations, Response]:
        path = set_query_params(public_path(ORGS_PATH), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=Organizations)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, org_id: str
    ) -> Tuple[Organization, Response]:
        require(org_id, "orgID")
        req = self.client.new_request("GET", public_path("orgs/%s", org_id))
        return await self.client.do(ctx, req, into=Organization)

    async def projects(
        self, ctx: RequestContext, org_id: str, opts: Optional[ListOptions] = None
    ) -> Tuple[Projects, Response]:
        """Projects that belong to the organization."""
        require(org_id, "orgID")
        path = set_query_params(public_path("orgs/%s/groups", org_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=Projects)
        resp.links = root.links
        return root, resp

    async def create(
        self, ctx: RequestContext, org: Optional[Organization]
    ) -> Tuple[Organization, Response]:
        require(org, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(ORGS_PATH), org)
        return await self.client.do(ctx, req, into=Organization)

    async def delete(self, ctx: RequestContext, org_id: str) -> Response:
        require(org_id, "orgID")
        req = self.client.new_request("DELETE", public_path("orgs/%s", org_id))
        _, resp = await self.client.do(ctx, req)
        return resp


__all__ = ["OrganizationsService"]
