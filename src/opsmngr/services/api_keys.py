from __future__ import annotations

from typing import Optional, Sequence, Tuple
from urllib.parse import quote

from opsmngr.core.context import RequestContext
from opsmngr.core.errors import ArgError
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import (
    AccessListAPIKey,
    AccessListAPIKeys,
    AccessListAPIKeysReq,
    APIKey,
    APIKeyInput,
    APIKeys,
    AssignAPIKey,
    GlobalAccessListEntries,
    GlobalAccessListEntry,
    GlobalAccessListRequest,
)

from ._base import Service, public_path, require

ORG_API_KEYS_PATH = "orgs/%s/apiKeys"
PROJECT_API_KEYS_PATH = "groups/%s/apiKeys"
GLOBAL_API_KEYS_PATH = "admin/apiKeys"
ACCESS_LIST_PATH = "orgs/%s/apiKeys/%s/accessList"
GLOBAL_ACCESS_LIST_PATH = "admin/accessList"


def _segment(value: str) -> str:
    # ids, addresses and CIDR blocks all go into a single path segment
    return quote(value, safe="")


class OrganizationAPIKeysService(Service):
    """Programmatic API keys owned by an organization."""

    def _key_path(self, org_id: str, key_id: str) -> str:
        return f"{public_path(ORG_API_KEYS_PATH, org_id)}/{_segment(key_id)}"

    async def list(
        self, ctx: RequestContext, org_id: str, opts: Optional[ListOptions] = None
    ) -> Tuple[APIKeys, Response]:
        require(org_id, "orgID")
        path = set_query_params(public_path(ORG_API_KEYS_PATH, org_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=APIKeys)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, org_id: str, key_id: str
    ) -> Tuple[APIKey, Response]:
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        req = self.client.new_request("GET", self._key_path(org_id, key_id))
        return await self.client.do(ctx, req, into=APIKey)

    async def create(
        self, ctx: RequestContext, org_id: str, key: Optional[APIKeyInput]
    ) -> Tuple[APIKey, Response]:
        """The returned key holds the private key; it is not shown again."""
        require(org_id, "orgID")
        require(key, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(ORG_API_KEYS_PATH, org_id), key)
        return await self.client.do(ctx, req, into=APIKey)

    async def update(
        self, ctx: RequestContext, org_id: str, key_id: str, key: Optional[APIKeyInput]
    ) -> Tuple[APIKey, Response]:
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        require(key, "updateRequest", "cannot be None")
        req = self.client.new_request("PATCH", self._key_path(org_id, key_id), key)
        return await self.client.do(ctx, req, into=APIKey)

    async def delete(self, ctx: RequestContext, org_id: str, key_id: str) -> Response:
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        req = self.client.new_request("DELETE", self._key_path(org_id, key_id))
        _, resp = await self.client.do(ctx, req)
        return resp


class ProjectAPIKeysService(Service):
    """
    API keys assigned to a project.
    Keys belong to the organization; assign/unassign only change project roles.
    """

    def _key_path(self, project_id: str, key_id: str) -> str:
        return f"{public_path(PROJECT_API_KEYS_PATH, project_id)}/{_segment(key_id)}"

    async def list(
        self, ctx: RequestContext, project_id: str, opts: Optional[ListOptions] = None
    ) -> Tuple[APIKeys, Response]:
        require(project_id, "projectID")
        path = set_query_params(public_path(PROJECT_API_KEYS_PATH, project_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=APIKeys)
        resp.links = root.links
        return root, resp

    async def create(
        self, ctx: RequestContext, project_id: str, key: Optional[APIKeyInput]
    ) -> Tuple[APIKey, Response]:
        require(project_id, "projectID")
        require(key, "createRequest", "cannot be None")
        path = public_path(PROJECT_API_KEYS_PATH, project_id)
        req = self.client.new_request("POST", path, key)
        return await self.client.do(ctx, req, into=APIKey)

    async def assign(
        self,
        ctx: RequestContext,
        project_id: str,
        key_id: str,
        assignment: Optional[AssignAPIKey],
    ) -> Response:
        require(project_id, "projectID")
        require(key_id, "keyID")
        require(assignment, "assignAPIKeyRequest", "cannot be None")
        req = self.client.new_request("PATCH", self._key_path(project_id, key_id), assignment)
        _, resp = await self.client.do(ctx, req)
        return resp

    async def unassign(self, ctx: RequestContext, project_id: str, key_id: str) -> Response:
        require(project_id, "projectID")
        require(key_id, "keyID")
        req = self.client.new_request("DELETE", self._key_path(project_id, key_id))
        _, resp = await self.client.do(ctx, req)
        return resp


class GlobalAPIKeysService(Service):
    """Global API keys (admin API, global owner role required)."""

    def _key_path(self, key_id: str) -> str:
        return f"{public_path(GLOBAL_API_KEYS_PATH)}/{_segment(key_id)}"

    async def list(
        self, ctx: RequestContext, opts: Optional[ListOptions] = None
    ) -> Tuple[APIKeys, Response]:
        path = set_query_params(public_path(GLOBAL_API_KEYS_PATH), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=APIKeys)
        resp.links = root.links
        return root, resp

    async def get(self, ctx: RequestContext, key_id: str) -> Tuple[APIKey, Response]:
        require(key_id, "apiKeyID")
        req = self.client.new_request("GET", self._key_path(key_id))
        return await self.client.do(ctx, req, into=APIKey)

    async def create(
        self, ctx: RequestContext, key: Optional[APIKeyInput]
    ) -> Tuple[APIKey, Response]:
        require(key, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(GLOBAL_API_KEYS_PATH), key)
        return await self.client.do(ctx, req, into=APIKey)

    async def update(
        self, ctx: RequestContext, key_id: str, key: Optional[APIKeyInput]
    ) -> Tuple[APIKey, Response]:
        require(key_id, "apiKeyID")
        require(key, "updateRequest", "cannot be None")
        req = self.client.new_request("PATCH", self._key_path(key_id), key)
        return await self.client.do(ctx, req, into=APIKey)

    async def delete(self, ctx: RequestContext, key_id: str) -> Response:
        require(key_id, "apiKeyID")
        req = self.client.new_request("DELETE", self._key_path(key_id))
        _, resp = await self.client.do(ctx, req)
        return resp


class AccessListAPIKeysService(Service):
    """Addresses allowed to call the API with an organization key."""

    def _base(self, org_id: str, key_id: str) -> str:
        return public_path(ACCESS_LIST_PATH, org_id, _segment(key_id))

    async def list(
        self,
        ctx: RequestContext,
        org_id: str,
        key_id: str,
        opts: Optional[ListOptions] = None,
    ) -> Tuple[AccessListAPIKeys, Response]:
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        path = set_query_params(self._base(org_id, key_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=AccessListAPIKeys)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, org_id: str, key_id: str, address: str
    ) -> Tuple[AccessListAPIKey, Response]:
        """`address` is an IP address or a CIDR block."""
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        require(address, "ipAddress")
        path = f"{self._base(org_id, key_id)}/{_segment(address)}"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=AccessListAPIKey)

    async def create(
        self,
        ctx: RequestContext,
        org_id: str,
        key_id: str,
        entries: Optional[Sequence[AccessListAPIKeysReq]],
    ) -> Tuple[AccessListAPIKeys, Response]:
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        if not entries:
            raise ArgError("createRequest", "cannot be empty, at least one entry must be set")
        req = self.client.new_request("POST", self._base(org_id, key_id), list(entries))
        root, resp = await self.client.do(ctx, req, into=AccessListAPIKeys)
        resp.links = root.links
        return root, resp

    async def delete(
        self, ctx: RequestContext, org_id: str, key_id: str, address: str
    ) -> Response:
        require(org_id, "orgID")
        require(key_id, "apiKeyID")
        require(address, "ipAddress")
        path = f"{self._base(org_id, key_id)}/{_segment(address)}"
        req = self.client.new_request("DELETE", path)
        _, resp = await self.client.do(ctx, req)
        return resp


class GlobalAPIKeyAccessListsService(Service):
    """Access list for global API keys (admin API)."""

    def _entry_path(self, entry_id: str) -> str:
        return f"{public_path(GLOBAL_ACCESS_LIST_PATH)}/{_segment(entry_id)}"

    async def list(
        self, ctx: RequestContext, opts: Optional[ListOptions] = None
    ) -> Tuple[GlobalAccessListEntries, Response]:
        path = set_query_params(public_path(GLOBAL_ACCESS_LIST_PATH), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=GlobalAccessListEntries)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, entry_id: str
    ) -> Tuple[GlobalAccessListEntry, Response]:
        require(entry_id, "accessListID")
        req = self.client.new_request("GET", self._entry_path(entry_id))
        return await self.client.do(ctx, req, into=GlobalAccessListEntry)

    async def create(
        self, ctx: RequestContext, entry: Optional[GlobalAccessListRequest]
    ) -> Tuple[GlobalAccessListEntry, Response]:
        require(entry, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(GLOBAL_ACCESS_LIST_PATH), entry)
        return await self.client.do(ctx, req, into=GlobalAccessListEntry)

    async def delete(self, ctx: RequestContext, entry_id: str) -> Response:
        require(entry_id, "accessListID")
        req = self.client.new_request("DELETE", self._entry_path(entry_id))
        _, resp = await self.client.do(ctx, req)
        return resp


__all__ = [
    "OrganizationAPIKeysService",
    "ProjectAPIKeysService",
    "GlobalAPIKeysService",
    "AccessListAPIKeysService",
    "GlobalAPIKeyAccessListsService",
]
