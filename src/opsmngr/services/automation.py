from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.response import Response
from opsmngr.models import AutomationConfig, AutomationConfigAgent, AutomationStatus

from ._base import Service, public_path, require

AUTOMATION_CONFIG_PATH = "groups/%s/automationConfig"
AUTOMATION_STATUS_PATH = "groups/%s/automationStatus"


class AutomationConfigService(Service):
    async def get(
        self, ctx: RequestContext, project_id: str
    ) -> Tuple[AutomationConfig, Response]:
        require(project_id, "projectID")
        path = public_path(AUTOMATION_CONFIG_PATH, project_id)
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=AutomationConfig)

    async def update(
        self, ctx: RequestContext, project_id: str, config: Optional[AutomationConfig]
    ) -> Response:
        """Replace the whole automation configuration of the project."""
        require(project_id, "projectID")
        require(config, "updateRequest", "cannot be None")
        path = public_path(AUTOMATION_CONFIG_PATH, project_id)
        req = self.client.new_request("PUT", path, config)
        _, resp = await self.client.do(ctx, req)
        return resp

    async def update_agent_versions(
        self, ctx: RequestContext, project_id: str
    ) -> Tuple[AutomationConfigAgent, Response]:
        """Bump every agent of the project to the latest available version."""
        require(project_id, "projectID")
        path = f"{public_path(AUTOMATION_CONFIG_PATH, project_id)}/updateAgentVersions"
        req = self.client.new_request("POST", path)
        return await self.client.do(ctx, req, into=AutomationConfigAgent)


class AutomationStatusService(Service):
    async def get(
        self, ctx: RequestContext, project_id: str
    ) -> Tuple[AutomationStatus, Response]:
        require(project_id, "projectID")
        path = public_path(AUTOMATION_STATUS_PATH, project_id)
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=AutomationStatus)


__all__ = ["AutomationConfigService", "AutomationStatusService"]
