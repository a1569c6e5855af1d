from __future__ import annotations

import logging
from typing import Optional

import httpx

from .core.client import OpsManagerClient
from .core.config import (
    ClientConfig,
    ClientOption,
    config_from_env,
    http_client_from_env,
)
from .services import (
    AccessListAPIKeysService,
    AdvisorService,
    AgentsService,
    AlertsService,
    AutomationConfigService,
    AutomationStatusService,
    BackupConfigsService,
    BlockstoreConfigService,
    DiagnosticsService,
    GlobalAPIKeyAccessListsService,
    GlobalAPIKeysService,
    HostsService,
    LogCollectionService,
    LogsService,
    OrganizationAPIKeysService,
    OrganizationsService,
    ProjectAPIKeysService,
    ProjectsService,
    ServerUsageReportService,
    ServerUsageService,
    ServiceVersionService,
    TeamsService,
    UsersService,
    VersionManifestService,
)


class Client(OpsManagerClient):
    """
    Ops Manager API client with every resource service attached.

        async with new_client(http, set_base_url("https://opsmanager.example.com:8443/")) as c:
            projects, resp = await c.projects.list(RequestContext.background())
    """

    def __init__(
        self,
        *,
        http: Optional[httpx.AsyncClient] = None,
        config: Optional[ClientConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(http=http, config=config, logger=logger)

        self.organizations = OrganizationsService(self)
        self.projects = ProjectsService(self)
        self.hosts = HostsService(self)
        self.agents = AgentsService(self)
        self.automation_config = AutomationConfigService(self)
        self.automation_status = AutomationStatusService(self)
        self.alerts = AlertsService(self)
        self.teams = TeamsService(self)
        self.users = UsersService(self)
        self.diagnostics = DiagnosticsService(self)
        self.server_usage = ServerUsageService(self)
        self.server_usage_report = ServerUsageReportService(self)
        self.service_version = ServiceVersionService(self)
        self.version_manifest = VersionManifestService(self)
        self.blockstore_config = BlockstoreConfigService(self)
        self.backup_configs = BackupConfigsService(self)
        self.logs_collection = LogCollectionService(self)
        self.logs = LogsService(self)
        self.organization_api_keys = OrganizationAPIKeysService(self)
        self.project_api_keys = ProjectAPIKeysService(self)
        self.global_api_keys = GlobalAPIKeysService(self)
        self.access_list_api_keys = AccessListAPIKeysService(self)
        self.global_api_key_access_lists = GlobalAPIKeyAccessListsService(self)
        self.advisor = AdvisorService(self)

    @classmethod
    def from_env(cls, *options: ClientOption, use_dotenv: bool = True) -> "Client":
        """Digest-authenticated client configured from OPS_MANAGER_* variables."""
        http = http_client_from_env(use_dotenv=use_dotenv)
        client = cls(http=http, config=config_from_env(*options, use_dotenv=False))
        # The transport was created here, so the client closes it.
        client._owns_http = True
        return client


def new_client(
    http: Optional[httpx.AsyncClient] = None, *options: ClientOption
) -> Client:
    return Client.new(http, *options)


__all__ = ["Client", "new_client"]
