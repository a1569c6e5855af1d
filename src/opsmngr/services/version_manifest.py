from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.response import Response
from opsmngr.models import VersionManifest

from ._base import Service, public_path, require

STATIC_MANIFEST_PATH = "static/version_manifest/%s"


class VersionManifestService(Service):
    async def get(
        self, ctx: RequestContext, version: str
    ) -> Tuple[VersionManifest, Response]:
        """Published manifest for an Ops Manager release line, e.g. "4.4"."""
        require(version, "version")
        req = self.client.new_request("GET", STATIC_MANIFEST_PATH % version)
        return await self.client.do(ctx, req, into=VersionManifest)

    async def update(
        self, ctx: RequestContext, manifest: Optional[VersionManifest]
    ) -> Tuple[VersionManifest, Response]:
        require(manifest, "versionManifest")
        req = self.client.new_request("PUT", public_path("versionManifest"), manifest)
        return await self.client.do(ctx, req, into=VersionManifest)


__all__ = ["VersionManifestService"]
