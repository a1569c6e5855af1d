from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import BackupConfig, BackupConfigs

from ._base import Service, public_path, require

BACKUP_CONFIGS_PATH = "groups/%s/backupConfigs"


class BackupConfigsService(Service):
    """Backup configuration of each cluster in a project."""

    def _path(self, project_id: str, cluster_id: str) -> str:
        return f"{public_path(BACKUP_CONFIGS_PATH, project_id)}/{cluster_id}"

    async def list(
        self, ctx: RequestContext, project_id: str, opts: Optional[ListOptions] = None
    ) -> Tuple[BackupConfigs, Response]:
        require(project_id, "projectID")
        path = set_query_params(public_path(BACKUP_CONFIGS_PATH, project_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=BackupConfigs)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, project_id: str, cluster_id: str
    ) -> Tuple[BackupConfig, Response]:
        require(project_id, "projectID")
        require(cluster_id, "clusterID")
        req = self.client.new_request("GET", self._path(project_id, cluster_id))
        return await self.client.do(ctx, req, into=BackupConfig)

    async def update(
        self,
        ctx: RequestContext,
        project_id: str,
        cluster_id: str,
        config: Optional[BackupConfig],
    ) -> Tuple[BackupConfig, Response]:
        """Change backup state or settings, e.g. ``BackupConfig(status_name="STARTED")``."""
        require(project_id, "projectID")
        require(cluster_id, "clusterID")
        require(config, "backupConfig", "cannot be None")
        req = self.client.new_request("PATCH", self._path(project_id, cluster_id), config)
        return await self.client.do(ctx, req, into=BackupConfig)


__all__ = ["BackupConfigsService"]
