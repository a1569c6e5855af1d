from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import set_query_params
from opsmngr.core.response import Response
from opsmngr.models import AcknowledgeRequest, Alert, AlertsListOptions, AlertsResponse

from ._base import Service, public_path, require

ALERTS_PATH = "groups/%s/alerts"


class AlertsService(Service):
    async def get(
        self, ctx: RequestContext, project_id: str, alert_id: str
    ) -> Tuple[Alert, Response]:
        require(project_id, "projectID")
        require(alert_id, "alertID")
        path = f"{public_path(ALERTS_PATH, project_id)}/{alert_id}"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=Alert)

    async def list(
        self,
        ctx: RequestContext,
        project_id: str,
        opts: Optional[AlertsListOptions] = None,
    ) -> Tuple[AlertsResponse, Response]:
        require(project_id, "projectID")
        path = set_query_params(public_path(ALERTS_PATH, project_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=AlertsResponse)
        resp.links = root.links
        return root, resp

    async def acknowledge(
        self,
        ctx: RequestContext,
        project_id: str,
        alert_id: str,
        params: Optional[AcknowledgeRequest],
    ) -> Tuple[Alert, Response]:
        require(project_id, "projectID")
        require(alert_id, "alertID")
        require(params, "params")
        path = f"{public_path(ALERTS_PATH, project_id)}/{alert_id}"
        req = self.client.new_request("PATCH", path, params)
        return await self.client.do(ctx, req, into=Alert)


__all__ = ["AlertsService"]
