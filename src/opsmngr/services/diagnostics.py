from __future__ import annotations

from opsmngr.core.client import Writer
from opsmngr.core.context import RequestContext
from opsmngr.core.response import Response

from ._base import GZipRequestDoer, Service, public_path, require


class DiagnosticsService(Service):
    """Diagnostic archives, streamed as gzip into a writer."""

    client: GZipRequestDoer

    async def get(
        self, ctx: RequestContext, project_id: str, writer: Writer
    ) -> Response:
        require(project_id, "projectID")
        path = public_path("groups/%s/diagnostics", project_id)
        req = self.client.new_gzip_request("GET", path)
        _, resp = await self.client.do(ctx, req, writer=writer)
        return resp

    async def list(self, ctx: RequestContext, writer: Writer) -> Response:
        """Archive covering every project (global owner role required)."""
        req = self.client.new_gzip_request("GET", public_path("admin/diagnostics"))
        _, resp = await self.client.do(ctx, req, writer=writer)
        return resp


__all__ = ["DiagnosticsService"]
