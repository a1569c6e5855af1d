"""One service class per Ops Manager resource family."""

from ._base import GZipRequestDoer, PlainRequestDoer, RequestDoer, Service
from .advisor import AdvisorService, parse_upgrade_steps
from .agents import AgentsService
from .alerts import AlertsService
from .api_keys import (
    AccessListAPIKeysService,
    GlobalAPIKeyAccessListsService,
    GlobalAPIKeysService,
    OrganizationAPIKeysService,
    ProjectAPIKeysService,
)
from .automation import AutomationConfigService, AutomationStatusService
from .backup_configs import BackupConfigsService
from .blockstore_config import BlockstoreConfigService
from .diagnostics import DiagnosticsService
from .hosts import HostsService
from .logs import LogCollectionService, LogsService
from .organizations import OrganizationsService
from .projects import ProjectsService
from .server_usage import ServerUsageReportService, ServerUsageService
from .service_version import ServiceVersionService
from .teams import TeamsService
from .users import UsersService
from .version_manifest import VersionManifestService

__all__ = [
    "RequestDoer",
    "GZipRequestDoer",
    "PlainRequestDoer",
    "Service",
    "AdvisorService",
    "parse_upgrade_steps",
    "AgentsService",
    "AlertsService",
    "AutomationConfigService",
    "AutomationStatusService",
    "BackupConfigsService",
    "BlockstoreConfigService",
    "DiagnosticsService",
    "HostsService",
    "LogCollectionService",
    "LogsService",
    "OrganizationAPIKeysService",
    "ProjectAPIKeysService",
    "GlobalAPIKeysService",
    "AccessListAPIKeysService",
    "GlobalAPIKeyAccessListsService",
    "OrganizationsService",
    "ProjectsService",
    "ServerUsageService",
    "ServerUsageReportService",
    "ServiceVersionService",
    "TeamsService",
    "UsersService",
    "VersionManifestService",
]
