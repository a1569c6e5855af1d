from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import Agents

from ._base import Service, public_path, require

AGENTS_PATH = "groups/%s/agents"


class AgentsService(Service):
    async def list_links(
        self, ctx: RequestContext, project_id: str
    ) -> Tuple[Agents, Response]:
        """Links to the per-type agent listings of a project."""
        require(project_id, "projectID")
        req = self.client.new_request("GET", public_path(AGENTS_PATH, project_id))
        root, resp = await self.client.do(ctx, req, into=Agents)
        resp.links = root.links
        return root, resp

    async def list(
        self,
        ctx: RequestContext,
        project_id: str,
        agent_type: str,
        opts: Optional[ListOptions] = None,
    ) -> Tuple[Agents, Response]:
        """Agents of one type (MONITORING, BACKUP, AUTOMATION)."""
        require(project_id, "projectID")
        require(agent_type, "agentType")
        path = f"{public_path(AGENTS_PATH, project_id)}/{agent_type}"
        req = self.client.new_request("GET", set_query_params(path, opts))
        root, resp = await self.client.do(ctx, req, into=Agents)
        resp.links = root.links
        return root, resp


__all__ = ["AgentsService"]
