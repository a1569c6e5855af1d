from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.response import Response, ServiceVersion

from ._base import PlainRequestDoer, Service

VERSION_PATH = "api/private/unauth/version"


class ServiceVersionService(Service):
    client: PlainRequestDoer

    async def get(
        self, ctx: RequestContext
    ) -> Tuple[Optional[ServiceVersion], Response]:
        # The version is only reported in the response header.
        req = self.client.new_plain_request("GET", VERSION_PATH)
        _, resp = await self.client.do(ctx, req)
        return resp.service_version(), resp


__all__ = ["ServiceVersionService"]
