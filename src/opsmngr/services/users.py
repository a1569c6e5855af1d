from __future__ import annotations

from typing import Optional, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import User, UsersResponse

from ._base import Service, public_path, require

USERS_PATH = "users"


class UsersService(Service):
    async def get(self, ctx: RequestContext, user_id: str) -> Tuple[User, Response]:
        require(user_id, "userID")
        req = self.client.new_request("GET", public_path("users/%s", user_id))
        return await self.client.do(ctx, req, into=User)

    async def get_by_name(
        self, ctx: RequestContext, username: str
    ) -> Tuple[User, Response]:
        require(username, "username")
        req = self.client.new_request("GET", public_path("users/byName/%s", username))
        return await self.client.do(ctx, req, into=User)

    async def create(
        self, ctx: RequestContext, user: Optional[User]
    ) -> Tuple[User, Response]:
        require(user, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(USERS_PATH), user)
        return await self.client.do(ctx, req, into=User)

    async def list(
        self, ctx: RequestContext, project_id: str, opts: Optional[ListOptions] = None
    ) -> Tuple[UsersResponse, Response]:
        """Users with a role in the project."""
        require(project_id, "projectID")
        path = set_query_params(public_path("groups/%s/users", project_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=UsersResponse)
        resp.links = root.links
        return root, resp


__all__ = ["UsersService"]
