from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.client import Writer
from opsmngr.core.context import RequestContext
from opsmngr.core.query import set_query_params
from opsmngr.core.response import Response
from opsmngr.models import HostAssignments, ServerType, ServerTypeOptions, ServerTypeRequest

from ._base import GZipRequestDoer, Service, public_path, require

USAGE_PROJECT_PATH = "usage/groups/%s"
USAGE_ORG_PATH = "usage/organizations/%s"


class ServerUsageService(Service):
    """Server usage: host assignments and default server types."""

    async def generate_daily_usage_snapshot(self, ctx: RequestContext) -> Response:
        req = self.client.new_request("POST", public_path("usage/dailyCapture"))
        _, resp = await self.client.do(ctx, req)
        return resp

    async def _assignments(
        self, ctx: RequestContext, path: str, opts: Optional[ServerTypeOptions]
    ) -> Tuple[HostAssignments, Response]:
        req = self.client.new_request("GET", set_query_params(path, opts))
        root, resp = await self.client.do(ctx, req, into=HostAssignments)
        resp.links = root.links
        return root, resp

    async def list_all_host_assignments(
        self, ctx: RequestContext, opts: Optional[ServerTypeOptions] = None
    ) -> Tuple[HostAssignments, Response]:
        return await self._assignments(ctx, public_path("usage/assignments"), opts)

    async def project_host_assignments(
        self,
        ctx: RequestContext,
        project_id: str,
        opts: Optional[ServerTypeOptions] = None,
    ) -> Tuple[HostAssignments, Response]:
        require(project_id, "projectID")
        path = f"{public_path(USAGE_PROJECT_PATH, project_id)}/hosts"
        return await self._assignments(ctx, path, opts)

    async def organization_host_assignments(
        self, ctx: RequestContext, org_id: str, opts: Optional[ServerTypeOptions] = None
    ) -> Tuple[HostAssignments, Response]:
        require(org_id, "orgID")
        path = f"{public_path(USAGE_ORG_PATH, org_id)}/hosts"
        return await self._assignments(ctx, path, opts)

    async def get_project_server_type(
        self, ctx: RequestContext, project_id: str
    ) -> Tuple[ServerType, Response]:
        require(project_id, "projectID")
        path = f"{public_path(USAGE_PROJECT_PATH, project_id)}/defaultServerType"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=ServerType)

    async def get_organization_server_type(
        self, ctx: RequestContext, org_id: str
    ) -> Tuple[ServerType, Response]:
        require(org_id, "orgID")
        path = f"{public_path(USAGE_ORG_PATH, org_id)}/defaultServerType"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=ServerType)

    async def update_project_server_type(
        self,
        ctx: RequestContext,
        project_id: str,
        server_type: Optional[ServerTypeRequest],
    ) -> Response:
        require(project_id, "projectID")
        require(server_type, "serverType", "cannot be None")
        path = f"{public_path(USAGE_PROJECT_PATH, project_id)}/defaultServerType"
        req = self.client.new_request("PUT", path, server_type)
        _, resp = await self.client.do(ctx, req)
        return resp

    async def update_organization_server_type(
        self,
        ctx: RequestContext,
        org_id: str,
        server_type: Optional[ServerTypeRequest],
    ) -> Response:
        require(org_id, "orgID")
        require(server_type, "serverType", "cannot be None")
        path = f"{public_path(USAGE_ORG_PATH, org_id)}/defaultServerType"
        req = self.client.new_request("PUT", path, server_type)
        _, resp = await self.client.do(ctx, req)
        return resp


class ServerUsageReportService(Service):
    client: GZipRequestDoer

    async def download(
        self,
        ctx: RequestContext,
        opts: Optional[ServerTypeOptions],
        writer: Writer,
    ) -> Response:
        """Compressed usage report for the timeframe in `opts`."""
        path = set_query_params(public_path("usage/report"), opts)
        req = self.client.new_gzip_request("GET", path)
        _, resp = await self.client.do(ctx, req, writer=writer)
        return resp


__all__ = ["ServerUsageService", "ServerUsageReportService"]
