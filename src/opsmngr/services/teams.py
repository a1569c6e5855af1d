from __future__ import annotations

from typing import Optional, Sequence, Tuple

from opsmngr.core.context import RequestContext
from opsmngr.core.errors import ArgError
from opsmngr.core.query import ListOptions, set_query_params
from opsmngr.core.response import Response
from opsmngr.models import Team, Teams, UsersResponse

from ._base import Service, public_path, require

TEAMS_PATH = "orgs/%s/teams"


class TeamsService(Service):
    """
    Organization teams.
    Teams live under an organization; removal from a project goes through the
    project's own teams path.
    """

    def _team_path(self, org_id: str, team_id: str) -> str:
        return f"{public_path(TEAMS_PATH, org_id)}/{team_id}"

    async def list(
        self, ctx: RequestContext, org_id: str, opts: Optional[ListOptions] = None
    ) -> Tuple[Teams, Response]:
        require(org_id, "orgID")
        path = set_query_params(public_path(TEAMS_PATH, org_id), opts)
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=Teams)
        resp.links = root.links
        return root, resp

    async def get(
        self, ctx: RequestContext, org_id: str, team_id: str
    ) -> Tuple[Team, Response]:
        require(org_id, "orgID")
        require(team_id, "teamID")
        req = self.client.new_request("GET", self._team_path(org_id, team_id))
        return await self.client.do(ctx, req, into=Team)

    async def get_by_name(
        self, ctx: RequestContext, org_id: str, team_name: str
    ) -> Tuple[Team, Response]:
        require(org_id, "orgID")
        require(team_name, "teamName")
        path = f"{public_path(TEAMS_PATH, org_id)}/byName/{team_name}"
        req = self.client.new_request("GET", path)
        return await self.client.do(ctx, req, into=Team)

    async def users_assigned(
        self, ctx: RequestContext, org_id: str, team_id: str
    ) -> Tuple[UsersResponse, Response]:
        require(org_id, "orgID")
        require(team_id, "teamID")
        path = f"{self._team_path(org_id, team_id)}/users"
        req = self.client.new_request("GET", path)
        root, resp = await self.client.do(ctx, req, into=UsersResponse)
        resp.links = root.links
        return root, resp

    async def create(
        self, ctx: RequestContext, org_id: str, team: Optional[Team]
    ) -> Tuple[Team, Response]:
        require(org_id, "orgID")
        require(team, "createRequest", "cannot be None")
        req = self.client.new_request("POST", public_path(TEAMS_PATH, org_id), team)
        return await self.client.do(ctx, req, into=Team)

    async def rename(
        self, ctx: RequestContext, org_id: str, team_id: str, team_name: str
    ) -> Tuple[Team, Response]:
        require(org_id, "orgID")
        require(team_id, "teamID")
        require(team_name, "teamName", "cannot be None")
        path = self._team_path(org_id, team_id)
        req = self.client.new_request("PATCH", path, {"name": team_name})
        return await self.client.do(ctx, req, into=Team)

    async def add_users(
        self, ctx: RequestContext, org_id: str, team_id: str, user_ids: Sequence[str]
    ) -> Tuple[UsersResponse, Response]:
        require(org_id, "orgID")
        require(team_id, "teamID")
        if not user_ids:
            raise ArgError("usersID", "cannot be empty, at least one userID must be set")
        path = f"{self._team_path(org_id, team_id)}/users"
        body = [{"id": user_id} for user_id in user_ids]
        req = self.client.new_request("POST", path, body)
        root, resp = await self.client.do(ctx, req, into=UsersResponse)
        resp.links = root.links
        return root, resp

    async def remove_user(
        self, ctx: RequestContext, org_id: str, team_id: str, user_id: str
    ) -> Response:
        require(org_id, "orgID")
        require(team_id, "teamID")
        require(user_id, "userID")
        path = f"{self._team_path(org_id, team_id)}/users/{user_id}"
        req = self.client.new_request("DELETE", path)
        _, resp = await self.client.do(ctx, req)
        return resp

    async def remove_from_organization(
        self, ctx: RequestContext, org_id: str, team_id: str
    ) -> Response:
        require(org_id, "orgID")
        require(team_id, "teamID")
        req = self.client.new_request("DELETE", self._team_path(org_id, team_id))
        _, resp = await self.client.do(ctx, req)
        return resp

    async def remove_from_project(
        self, ctx: RequestContext, project_id: str, team_id: str
    ) -> Response:
        require(project_id, "projectID")
        require(team_id, "teamID")
        path = public_path("groups/%s/teams/%s", project_id, team_id)
        req = self.client.new_request("DELETE", path)
        _, resp = await self.client.do(ctx, req)
        return resp


__all__ = ["TeamsService"]
