from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.client import Writer
from opsmngr.core.context import RequestContext
from opsmngr.core.query import set_query_params
from opsmngr.core.response import Response
from opsmngr.models import LogCollectionJob, LogCollectionJobs, LogListOptions

from ._base import GZipRequestDoer, Service, public_path, require

LOG_COLLECTION_PATH = "groups/%s/logCollectionJobs"


class LogCollectionService(Service):
    """
    Log collection jobs of a project.
    A job gathers agent and mongod logs into an archive the agents upload;
    the archive itself is fetched with LogsService.download.
    """

    def _job_path(self, project_id: str, job_id: str) -> str:
        return f"{public_path(LOG_COLLECTION_PATH, project_id)}/{job_id}"

    async def list(
        self, ctx: RequestContext, project_id: str, opts: Optional[LogListOptions] = None
    ) -> Tuple[LogCollectionJobs, Response]:
        require(project_id, "projectID")
        path = set_query_params(public_path(LOG_COLLECTION_PATH, project_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=LogCollectionJobs)
        resp.links = root.links
        return root, resp

    async def get(
        self,
        ctx: RequestContext,
        project_id: str,
        job_id: str,
        opts: Optional[LogListOptions] = None,
    ) -> Tuple[LogCollectionJob, Response]:
        require(project_id, "projectID")
        require(job_id, "jobID")
        path = set_query_params(self._job_path(project_id, job_id), opts)
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=LogCollectionJob)

    async def create(
        self, ctx: RequestContext, project_id: str, job: Optional[LogCollectionJob]
    ) -> Tuple[LogCollectionJob, Response]:
        """Start a job; the response only carries the new job id."""
        require(project_id, "projectID")
        require(job, "job", "cannot be None")
        path = public_path(LOG_COLLECTION_PATH, project_id)
        req = self.client.new_request("POST", path, job)
        return await self.client.do(ctx, req, into=LogCollectionJob)

    async def extend(
        self,
        ctx: RequestContext,
        project_id: str,
        job_id: str,
        job: Optional[LogCollectionJob],
    ) -> Response:
        """Push back the expiration date of a job (`job.expiration_date`)."""
        require(project_id, "projectID")
        require(job_id, "jobID")
        require(job, "job", "cannot be None")
        req = self.client.new_request("PATCH", self._job_path(project_id, job_id), job)
        _, resp = await self.client.do(ctx, req)
        return resp

    async def retry(self, ctx: RequestContext, project_id: str, job_id: str) -> Response:
        require(project_id, "projectID")
        require(job_id, "jobID")
        path = f"{self._job_path(project_id, job_id)}/retry"
        req = self.client.new_request("PUT", path)
        _, resp = await self.client.do(ctx, req)
        return resp

    async def delete(self, ctx: RequestContext, project_id: str, job_id: str) -> Response:
        require(project_id, "projectID")
        require(job_id, "jobID")
        req = self.client.new_request("DELETE", self._job_path(project_id, job_id))
        _, resp = await self.client.do(ctx, req)
        return resp


class LogsService(Service):
    """Collected log archives, streamed as gzip into a writer."""

    client: GZipRequestDoer

    async def download(
        self, ctx: RequestContext, project_id: str, job_id: str, writer: Writer
    ) -> Response:
        require(project_id, "projectID")
        require(job_id, "jobID")
        path = public_path(LOG_COLLECTION_PATH + "/%s/download", project_id, job_id)
        req = self.client.new_gzip_request("GET", path)
        _, resp = await self.client.do(ctx, req, writer=writer)
        return resp


__all__ = ["LogCollectionService", "LogsService"]
