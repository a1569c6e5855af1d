from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.response import Response
from opsmngr.core.query import set_query_params
from opsmngr.models import Host, HostListOptions, Hosts

from ._base import Service, public_path, require

HOSTS_PATH = "groups/%s/hosts"


class HostsService(Service):
    """Monitored hosts of a project."""

    async def get(
        self, ctx: RequestContext, project_id: str, host_id: str
    ) -> Tuple[Host, Response]:
        require(project_id, "projectID")
        require(host_id, "hostID")
        path = f"{public_path(HOSTS_PATH, project_id)}/{host_id}"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=Host)

    async def get_by_hostname(
        self, ctx: RequestContext, project_id: str, hostname: str, port: int
    ) -> Tuple[Host, Response]:
        require(project_id, "projectID")
        require(hostname, "hostname")
        path = f"{public_path(HOSTS_PATH, project_id)}/byName/{hostname}:{port}"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=Host)

    async def list(
        self,
        ctx: RequestContext,
        project_id: str,
        opts: Optional[HostListOptions] = None,
    ) -> Tuple[Hosts, Response]:
        require(project_id, "projectID")
        path = set_query_params(public_path(HOSTS_PATH, project_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=Hosts)
        resp.links = root.links
        return root, resp

    async def start_monitoring(
        self, ctx: RequestContext, project_id: str, host: Optional[Host]
    ) -> Tuple[Host, Response]:
        require(project_id, "projectID")
        require(host, "host", "cannot be None")
        req = self.client.new_request("POST", public_path(HOSTS_PATH, project_id), host)
        return await self.client.do(ctx, req, into=Host)

    async def update_monitoring(
        self, ctx: RequestContext, project_id: str, host_id: str, host: Optional[Host]
    ) -> Tuple[Host, Response]:
        require(project_id, "projectID")
        require(host_id, "hostID")
        require(host, "host", "cannot be None")
        path = f"{public_path(HOSTS_PATH, project_id)}/{host_id}"
        req = self.client.new_request("PATCH", path, host)
        return await self.client.do(ctx, req, into=Host)

    async def stop_monitoring(
        self, ctx: RequestContext, project_id: str, host_id: str
    ) -> Response:
        require(project_id, "projectID")
        require(host_id, "hostID")
        path = f"{public_path(HOSTS_PATH, project_id)}/{host_id}"
        req = self.client.new_request("DELETE", path)
        _, resp = await self.client.do(ctx, req)
        return resp


__all__ = ["HostsService"]
