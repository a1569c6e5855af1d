from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import Project, Projects

from ._base import Service, public_path, require

PROJECTS_PATH = "groups"


class ProjectsService(Service):
    """
    Projects (called "groups" in the API paths).
    https://docs.opsmanager.mongodb.com/current/reference/api/groups/
    """

    async def list(
        self, ctx: RequestContext, opts: Optional[ListOptions] = None
    ) -> Tuple[Projects, Response]:
        path = set_query_params(public_path(PROJECTS_PATH), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=Projects)
        resp.links = root.links
        return root, resp

    async def get(self, ctx: RequestContext, project_id: str) -> Tuple[Project, Response]:
        require(project_id, "projectID")
        req = self.client.new_request("GET", public_path("groups/%s", project_id))
        return await self.client.do(ctx, req, into=Project)

    async def get_by_name(
        self, ctx: RequestContext, project_name: str
    ) -> Tuple[Project, Response]:
        require(project_name, "projectName")
        path = public_path("groups/byName/%s", project_name)
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=Project)

    async def create(
        self, ctx: RequestContext, project: Optional[Project]
    ) -> Tuple[Project, Response]:
        require(project, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(PROJECTS_PATH), project)
        return await self.client.do(ctx, req, into=Project)

    async def delete(self, ctx: RequestContext, project_id: str) -> Response:
        require(project_id, "projectID")
        req = self.client.new_request("DELETE", public_path("groups/%s", project_id))
        _, resp = await self.client.do(ctx, req)
        return resp


__all__ = ["ProjectsService"]
