from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .core.links import Link
from .core.query import ListOptions, QueryOptions


class OpsModel(BaseModel):
    """
    Base for API payloads.
    Field names are snake_case, JSON keys camelCase; unset fields stay None so
    request bodies only carry what the caller set.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class ListEnvelope(OpsModel):
    links: List[Link] = Field(default_factory=list)
    total_count: int = 0


# --- Organizations & projects ---


class Organization(OpsModel):
    id: Optional[str] = None
    name: Optional[str] = None
    links: Optional[List[Link]] = None


class Organizations(ListEnvelope):
    results: List[Organization] = Field(default_factory=list)


class HostCount(OpsModel):
    arbiter: int = 0
    config: int = 0
    master: int = 0
    mongos: int = 0
    primary: int = 0
    secondary: int = 0
    slave: int = 0


class Project(OpsModel):
    id: Optional[str] = None
    name: Optional[str] = None
    org_id: Optional[str] = None
    active_agent_count: Optional[int] = None
    host_counts: Optional[HostCount] = None
    last_active_agent: Optional[str] = None
    public_api_enabled: Optional[bool] = None
    replica_set_count: Optional[int] = None
    shard_count: Optional[int] = None
    tags: Optional[List[str]] = None
    links: Optional[List[Link]] = None


class Projects(ListEnvelope):
    results: List[Project] = Field(default_factory=list)


# --- Hosts & agents ---


class Host(OpsModel):
    id: Optional[str] = None
    hostname: Optional[str] = None
    port: Optional[int] = None
    group_id: Optional[str] = None
    cluster_id: Optional[str] = None
    aliases: Optional[List[str]] = None
    auth_mechanism_name: Optional[str] = None
    created: Optional[str] = None
    ip_address: Optional[str] = None
    last_ping: Optional[str] = None
    last_restart: Optional[str] = None
    replica_set_name: Optional[str] = None
    replica_state_name: Optional[str] = None
    shard_name: Optional[str] = None
    type_name: Optional[str] = None
    version: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    deactivated: Optional[bool] = None
    has_startup_warnings: Optional[bool] = None
    hidden: Optional[bool] = None
    hidden_secondary: Optional[bool] = None
    host_enabled: Optional[bool] = None
    journaling_enabled: Optional[bool] = None
    low_ulimit: Optional[bool] = None
    munin_enabled: Optional[bool] = None
    logs_enabled: Optional[bool] = None
    alerts_enabled: Optional[bool] = None
    profiler_enabled: Optional[bool] = None
    ssl_enabled: Optional[bool] = None
    last_data_size_bytes: Optional[float] = None
    last_index_size_bytes: Optional[float] = None
    munin_port: Optional[int] = None
    slave_delay_sec: Optional[int] = None
    uptime_msec: Optional[int] = None
    links: Optional[List[Link]] = None


class Hosts(ListEnvelope):
    results: List[Host] = Field(default_factory=list)


class HostListOptions(ListOptions):
    cluster_id: Optional[str] = Field(default=None, alias="clusterId")


class Agent(OpsModel):
    type_name: Optional[str] = None
    hostname: Optional[str] = None
    conf_count: Optional[int] = None
    last_conf: Optional[str] = None
    state_name: Optional[str] = None
    ping_count: Optional[int] = None
    is_managed: Optional[bool] = None
    last_ping: Optional[str] = None
    tag: Optional[str] = None


class Agents(ListEnvelope):
    results: List[Agent] = Field(default_factory=list)


# --- Automation ---


class AutomationConfigAgent(OpsModel):
    automation_agent_version: Optional[str] = None
    bi_connector_version: Optional[str] = None


class ReplicaSetMember(OpsModel):
    id: Optional[int] = Field(default=None, alias="_id")
    host: Optional[str] = None
    arbiter_only: Optional[bool] = None
    build_indexes: Optional[bool] = None
    hidden: Optional[bool] = None
    priority: Optional[float] = None
    slave_delay: Optional[float] = None
    votes: Optional[float] = None

    model_config = ConfigDict(extra="allow")


class ReplicaSet(OpsModel):
    id: Optional[str] = Field(default=None, alias="_id")
    protocol_version: Optional[str] = None
    members: List[ReplicaSetMember] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class AutomationProcess(OpsModel):
    name: Optional[str] = None
    hostname: Optional[str] = None
    cluster: Optional[str] = None
    process_type: Optional[str] = None
    version: Optional[str] = None
    feature_compatibility_version: Optional[str] = None
    auth_schema_version: Optional[int] = None
    last_goal_version_achieved: Optional[int] = None
    plan: Optional[List[str]] = None
    disabled: Optional[bool] = None
    manual_mode: Optional[bool] = None
    last_restart: Optional[str] = None
    last_resync: Optional[str] = None
    last_compact: Optional[str] = None
    # mongod/mongos startup options, kept as the raw document
    args2_6: Optional[Dict[str, Any]] = Field(default=None, alias="args2_6")
    log_rotate: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")

    @property
    def port(self) -> int:
        net = (self.args2_6 or {}).get("net") or {}
        return int(net.get("port") or 0)


class Shard(OpsModel):
    id: Optional[str] = Field(default=None, alias="_id")
    rs: Optional[str] = None
    tags: Optional[List[str]] = None

    model_config = ConfigDict(extra="allow")


class ShardingConfig(OpsModel):
    name: Optional[str] = None
    config_server_replica: Optional[str] = None
    shards: List[Shard] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class Role(OpsModel):
    role: Optional[str] = None
    database: Optional[str] = Field(default=None, alias="db")


class ScramShaCreds(OpsModel):
    iteration_count: Optional[int] = None
    salt: Optional[str] = None
    server_key: Optional[str] = None
    stored_key: Optional[str] = None


class MongoDBUser(OpsModel):
    username: Optional[str] = Field(default=None, alias="user")
    database: Optional[str] = Field(default=None, alias="db")
    mechanisms: Optional[List[str]] = None
    roles: Optional[List[Role]] = None
    authentication_restrictions: Optional[List[Any]] = None
    # cleartext password, hashed by the agent
    init_pwd: Optional[str] = None
    scram_sha256_creds: Optional[ScramShaCreds] = Field(
        default=None, alias="scramSha256Creds"
    )
    scram_sha1_creds: Optional[ScramShaCreds] = Field(
        default=None, alias="scramSha1Creds"
    )

    model_config = ConfigDict(extra="allow")


class Auth(OpsModel):
    users_wanted: Optional[List[MongoDBUser]] = None
    users_deleted: Optional[List[Dict[str, Any]]] = None
    disabled: Optional[bool] = None
    authoritative_set: Optional[bool] = None
    auto_auth_mechanisms: Optional[List[str]] = None
    auto_auth_mechanism: Optional[str] = None
    deployment_auth_mechanisms: Optional[List[str]] = None
    auto_user: Optional[str] = None
    key: Optional[str] = None
    keyfile: Optional[str] = None
    keyfile_windows: Optional[str] = None
    auto_pwd: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class IndexConfig(OpsModel):
    db_name: Optional[str] = None
    collection_name: Optional[str] = None
    rs_name: Optional[str] = None
    # ordered [field, type] pairs
    key: List[List[Any]] = Field(default_factory=list)
    options: Optional[Dict[str, Any]] = None
    collation: Optional[Dict[str, Any]] = None


class ConfigVersion(OpsModel):
    """Entry of the monitoringVersions / backupVersions lists."""

    name: Optional[str] = None
    hostname: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class AutomationConfig(OpsModel):
    """
    Automation configuration document.
    Only the commonly edited parts are typed; every other key is preserved as an
    extra so a get/modify/update cycle does not drop settings.
    """

    version: Optional[int] = None
    auth: Optional[Auth] = None
    options: Optional[Dict[str, Any]] = None
    processes: Optional[List[AutomationProcess]] = None
    replica_sets: Optional[List[ReplicaSet]] = None
    sharding: Optional[List[ShardingConfig]] = None
    index_configs: Optional[List[IndexConfig]] = None
    monitoring_versions: Optional[List[ConfigVersion]] = None
    backup_versions: Optional[List[ConfigVersion]] = None
    mongo_db_versions: Optional[List[Dict[str, Any]]] = None
    agent_version: Optional[Dict[str, Any]] = None
    ssl: Optional[Dict[str, Any]] = None
    ui_base_url: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class ProcessStatus(OpsModel):
    name: str = ""
    hostname: str = ""
    plan: List[str] = Field(default_factory=list)
    last_goal_version_achieved: int = 0


class AutomationStatus(OpsModel):
    goal_version: int = 0
    processes: List[ProcessStatus] = Field(default_factory=list)


# --- Alerts ---


class Alert(OpsModel):
    id: Optional[str] = None
    group_id: Optional[str] = None
    alert_config_id: Optional[str] = None
    event_type_name: Optional[str] = None
    status: Optional[str] = None
    type_name: Optional[str] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    resolved: Optional[str] = None
    last_notified: Optional[str] = None
    acknowledged_until: Optional[str] = None
    acknowledgement_comment: Optional[str] = None
    acknowledging_username: Optional[str] = None
    hostname_and_port: Optional[str] = None
    replica_set_name: Optional[str] = None
    cluster_name: Optional[str] = None
    metric_name: Optional[str] = None
    current_value: Optional[Dict[str, Any]] = None
    links: Optional[List[Link]] = None


class AlertsResponse(ListEnvelope):
    results: List[Alert] = Field(default_factory=list)


class AlertsListOptions(ListOptions):
    status: Optional[str] = None


class AcknowledgeRequest(OpsModel):
    acknowledged_until: Optional[str] = None
    acknowledgement_comment: Optional[str] = None


# --- Teams & users ---


class Team(OpsModel):
    id: Optional[str] = None
    name: Optional[str] = None
    usernames: Optional[List[str]] = None
    links: Optional[List[Link]] = None


class Teams(ListEnvelope):
    results: List[Team] = Field(default_factory=list)


class UserRole(OpsModel):
    role_name: Optional[str] = None
    group_id: Optional[str] = None
    org_id: Optional[str] = None


class User(OpsModel):
    id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_address: Optional[str] = None
    roles: Optional[List[UserRole]] = None
    links: Optional[List[Link]] = None


class UsersResponse(ListEnvelope):
    results: List[User] = Field(default_factory=list)


# --- Server usage ---


class ServerTypeOptions(ListOptions):
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    file_format: Optional[str] = Field(default=None, alias="fileFormat")
    redact: Optional[bool] = None


class ServerType(OpsModel):
    name: Optional[str] = None
    label: Optional[str] = None


class ServerTypeRequest(OpsModel):
    server_type: Optional[ServerType] = None


class HostAssignmentProcess(OpsModel):
    cluster: Optional[str] = None
    group_name: Optional[str] = None
    org_name: Optional[str] = None
    group_id: Optional[str] = None
    name: Optional[str] = None
    has_conflicting_server_type: bool = False
    process_type: int = 0


class HostAssignment(OpsModel):
    group_id: Optional[str] = None
    hostname: Optional[str] = None
    processes: Optional[List[HostAssignmentProcess]] = None
    server_type: Optional[ServerType] = None
    mem_size_mb: Optional[int] = Field(default=None, alias="memSizeMB")
    is_chargeable: Optional[bool] = None


class HostAssignments(ListEnvelope):
    results: List[HostAssignment] = Field(default_factory=list)


# --- Version manifest ---


class Build(OpsModel):
    architecture: Optional[str] = None
    git_version: Optional[str] = None
    platform: Optional[str] = None
    url: Optional[str] = None
    flavor: Optional[str] = None
    max_os_version: Optional[str] = None
    min_os_version: Optional[str] = None
    win2008plus: Optional[bool] = Field(default=None, alias="win2008plus")
    win_vc_redist_dll: Optional[str] = Field(default=None, alias="winVCRedistDll")
    win_vc_redist_options: Optional[List[str]] = Field(
        default=None, alias="winVCRedistOptions"
    )
    win_vc_redist_url: Optional[str] = Field(default=None, alias="winVCRedistUrl")
    win_vc_redist_version: Optional[str] = Field(
        default=None, alias="winVCRedistVersion"
    )


class Version(OpsModel):
    name: Optional[str] = None
    builds: Optional[List[Build]] = None


class VersionManifest(OpsModel):
    updated: Optional[int] = None
    versions: Optional[List[Version]] = None


# --- Backup administration ---


class BackupStore(OpsModel):
    id: Optional[str] = None
    uri: Optional[str] = None
    write_concern: Optional[str] = None
    labels: Optional[List[str]] = None
    ssl: Optional[bool] = None
    assignment_enabled: Optional[bool] = None
    encrypted_credentials: Optional[bool] = None
    used_size: Optional[int] = None
    load_factor: Optional[int] = None
    max_capacity_gb: Optional[int] = Field(default=None, alias="maxCapacityGB")
    provisioned: Optional[bool] = None
    sync_source: Optional[str] = None
    username: Optional[str] = None


class BackupStores(ListEnvelope):
    results: List[BackupStore] = Field(default_factory=list)


# --- Log collection ---


class ChildJob(OpsModel):
    automation_agent_id: Optional[str] = None
    error_message: Optional[str] = None
    finish_date: Optional[str] = None
    hostname: Optional[str] = None
    log_collection_type: Optional[str] = None
    path: Optional[str] = None
    start_date: Optional[str] = None
    status: Optional[str] = None
    uncompressed_disk_space_bytes: Optional[int] = None


class LogCollectionJob(OpsModel):
    id: Optional[str] = None
    group_id: Optional[str] = None
    user_id: Optional[str] = None
    creation_date: Optional[str] = None
    expiration_date: Optional[str] = None
    status: Optional[str] = None
    resource_type: Optional[str] = None
    resource_name: Optional[str] = None
    root_resource_name: Optional[str] = None
    root_resource_type: Optional[str] = None
    url: Optional[str] = Field(default=None, alias="downloadUrl")
    redacted: Optional[bool] = None
    log_types: Optional[List[str]] = None
    size_requested_per_file_bytes: Optional[int] = None
    uncompressed_size_total_bytes: Optional[int] = None
    child_jobs: Optional[List[ChildJob]] = None


class LogCollectionJobs(ListEnvelope):
    results: List[LogCollectionJob] = Field(default_factory=list)


class LogListOptions(ListOptions):
    verbose: Optional[bool] = None


# --- Backup configs ---


class BackupConfig(OpsModel):
    group_id: Optional[str] = None
    cluster_id: Optional[str] = None
    status_name: Optional[str] = None
    storage_engine_name: Optional[str] = None
    auth_mechanism_name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    encryption_enabled: Optional[bool] = None
    ssl_enabled: Optional[bool] = None
    sync_source: Optional[str] = None
    provisioned: Optional[bool] = None
    excluded_namespaces: Optional[List[str]] = None
    included_namespaces: Optional[List[str]] = None
    links: Optional[List[Link]] = None


class BackupConfigs(ListEnvelope):
    results: List[BackupConfig] = Field(default_factory=list)


# --- Programmatic API keys ---


class APIKeyRole(OpsModel):
    group_id: Optional[str] = None
    org_id: Optional[str] = None
    role_name: Optional[str] = None


class APIKey(OpsModel):
    id: Optional[str] = None
    desc: Optional[str] = None
    roles: Optional[List[APIKeyRole]] = None
    # only returned in full when the key is created
    private_key: Optional[str] = None
    public_key: Optional[str] = None
    links: Optional[List[Link]] = None


class APIKeys(ListEnvelope):
    results: List[APIKey] = Field(default_factory=list)


class APIKeyInput(OpsModel):
    desc: Optional[str] = None
    roles: Optional[List[str]] = None


class AssignAPIKey(OpsModel):
    roles: Optional[List[str]] = None
    desc: Optional[str] = None


class AccessListAPIKey(OpsModel):
    cidr_block: Optional[str] = None
    count: Optional[int] = None
    created: Optional[str] = None
    ip_address: Optional[str] = None
    last_used: Optional[str] = None
    last_used_address: Optional[str] = None
    links: Optional[List[Link]] = None


class AccessListAPIKeys(ListEnvelope):
    results: List[AccessListAPIKey] = Field(default_factory=list)


class AccessListAPIKeysReq(OpsModel):
    ip_address: Optional[str] = None
    cidr_block: Optional[str] = None


class GlobalAccessListEntry(OpsModel):
    id: Optional[str] = None
    cidr_block: Optional[str] = None
    created: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    updated: Optional[str] = None
    last_used: Optional[str] = None
    last_used_address: Optional[str] = None
    count: Optional[int] = None


class GlobalAccessListEntries(ListEnvelope):
    results: List[GlobalAccessListEntry] = Field(default_factory=list)


class GlobalAccessListRequest(OpsModel):
    cidr_block: Optional[str] = None
    description: Optional[str] = None


# --- Advisor ---


class RawRequirement(OpsModel):
    step_type: str = ""
    base_version: Optional[str] = None
    current_version: str = ""
    target_version: str = ""
    hostnames: Optional[List[str]] = None
    note: str = ""


# JSON null is accepted for every list; the grouping treats it as empty.
class RawStep(OpsModel):
    om_current_version: str = ""
    om_target_version: str = ""
    om_hosts: Optional[List[str]] = None
    os_upgrade_requirements: Optional[List[RawRequirement]] = None
    mongo_upgrade_requirements: Optional[List[RawRequirement]] = None
    agent_post_upgrade_requirements: Optional[List[RawRequirement]] = None


class UpgradeCheckResult(OpsModel):
    # Left undecoded; the advisor service parses it into steps.
    result: Any = None
    error: Optional[str] = None


# Aggregated advisor output; snake_case keys on the wire as well.


class OpsManagerStep(BaseModel):
    current_version: str = ""
    target_version: str = ""
    hosts: List[str] = Field(default_factory=list)


class OperatingSystemStep(BaseModel):
    base_version: str = ""
    current_version: str = ""
    target_version: str = ""
    hosts: List[str] = Field(default_factory=list)


class MongoDBStep(BaseModel):
    current_version: str = ""
    target_version: str = ""
    hosts: List[str] = Field(default_factory=list)


class AgentStep(BaseModel):
    current_version: str = ""
    target_version: str = ""
    hosts: List[str] = Field(default_factory=list)


class UpgradeCheckStep(BaseModel):
    ops_manager: OpsManagerStep = Field(default_factory=OpsManagerStep)
    operating_system: List[OperatingSystemStep] = Field(default_factory=list)
    mongodb: List[MongoDBStep] = Field(default_factory=list)
    agent: List[AgentStep] = Field(default_factory=list)


__all__ = [
    "OpsModel",
    "ListEnvelope",
    "QueryOptions",
    "ListOptions",
    "Organization",
    "Organizations",
    "HostCount",
    "Project",
    "Projects",
    "Host",
    "Hosts",
    "HostListOptions",
    "Agent",
    "Agents",
    "AutomationConfigAgent",
    "ReplicaSetMember",
    "ReplicaSet",
    "AutomationProcess",
    "Shard",
    "ShardingConfig",
    "Role",
    "ScramShaCreds",
    "MongoDBUser",
    "Auth",
    "IndexConfig",
    "ConfigVersion",
    "AutomationConfig",
    "ProcessStatus",
    "AutomationStatus",
    "Alert",
    "AlertsResponse",
    "AlertsListOptions",
    "AcknowledgeRequest",
    "Team",
    "Teams",
    "UserRole",
    "User",
    "UsersResponse",
    "ServerTypeOptions",
    "ServerType",
    "ServerTypeRequest",
    "HostAssignmentProcess",
    "HostAssignment",
    "HostAssignments",
    "Build",
    "Version",
    "VersionManifest",
    "BackupStore",
    "BackupStores",
    "ChildJob",
    "LogCollectionJob",
    "LogCollectionJobs",
    "LogListOptions",
    "BackupConfig",
    "BackupConfigs",
    "APIKeyRole",
    "APIKey",
    "APIKeys",
    "APIKeyInput",
    "AssignAPIKey",
    "AccessListAPIKey",
    "AccessListAPIKeys",
    "AccessListAPIKeysReq",
    "GlobalAccessListEntry",
    "GlobalAccessListEntries",
    "GlobalAccessListRequest",
    "RawRequirement",
    "RawStep",
    "UpgradeCheckResult",
    "OpsManagerStep",
    "OperatingSystemStep",
    "MongoDBStep",
    "AgentStep",
    "UpgradeCheckStep",
]
