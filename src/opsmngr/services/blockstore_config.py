from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import BackupStore, BackupStores

from ._base import Service, public_path, require

BLOCKSTORE_PATH = "admin/backup/snapshot/mongoConfigs"


class BlockstoreConfigService(Service):
    """Backup blockstore configurations (admin API)."""

    def _path(self, blockstore_id: str) -> str:
        return f"{public_path(BLOCKSTORE_PATH)}/{blockstore_id}"

    async def list(
        self, ctx: RequestContext, opts: Optional[ListOptions] = None
    ) -> Tuple[BackupStores, Response]:
        path = set_query_params(public_path(BLOCKSTORE_PATH), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=BackupStores)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, blockstore_id: str
    ) -> Tuple[BackupStore, Response]:
        require(blockstore_id, "blockstoreID")
        req = self.client.new_request("GET", self._path(blockstore_id))
        return await self.client.do(ctx, req, into=BackupStore)

    async def create(
        self, ctx: RequestContext, blockstore: Optional[BackupStore]
    ) -> Tuple[BackupStore, Response]:
        require(blockstore, "blockstore", "cannot be None")
        req = self.client.new_request("POST", public_path(BLOCKSTORE_PATH), blockstore)
        return await self.client.do(ctx, req, into=BackupStore)

    async def update(
        self,
        ctx: RequestContext,
        blockstore_id: str,
        blockstore: Optional[BackupStore],
    ) -> Tuple[BackupStore, Response]:
        require(blockstore_id, "blockstoreID")
        require(blockstore, "blockstore", "cannot be None")
        req = self.client.new_request("PUT", self._path(blockstore_id), blockstore)
        return await self.client.do(ctx, req, into=BackupStore)

    async def delete(self, ctx: RequestContext, blockstore_id: str) -> Response:
        require(blockstore_id, "blockstoreID")
        req = self.client.new_request("DELETE", self._path(blockstore_id))
        _, resp = await self.client.do(ctx, req)
        return resp


__all__ = ["BlockstoreConfigService"]
