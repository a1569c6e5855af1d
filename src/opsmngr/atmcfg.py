"""
Helpers that edit an AutomationConfig in place.

Fetch the document with ``client.automation_config.get``, apply one or more of
these functions, then send it back with ``client.automation_config.update``.
Nothing here talks to the server.

Cluster-wide operations look the cluster up by name, first as a replica set and
then as a sharded cluster (its shards, its config server replica set and its
mongos processes). Where a list of processes is accepted, entries use the
``"hostname:port"`` form and only those processes are touched.
"""

from __future__ import annotations

import base64
import secrets
import string
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .core.errors import OpsManagerClientError
from .models import (
    Auth,
    AutomationConfig,
    AutomationProcess,
    ConfigVersion,
    IndexConfig,
    MongoDBUser,
    ReplicaSet,
    ShardingConfig,
)

AUTOMATION_AGENT_NAME = "mms-automation"
KEY_LENGTH = 500
MONGODB_CR = "MONGODB-CR"
SCRAM_SHA_256 = "SCRAM-SHA-256"
SUPPORTED_MECHANISMS = (MONGODB_CR, SCRAM_SHA_256)
KEYFILE_PATH = "/var/lib/mongodb-mms-automation/keyfile"
KEYFILE_WINDOWS_PATH = "%SystemDrive%\\MMSAutomation\\versions\\keyfile"

# last agent versions released for the legacy monitoring/backup entries
MONITORING_VERSION = "7.2.0.488-1"
BACKUP_VERSION = "7.8.1.1109-1"


class AutomationConfigError(OpsManagerClientError):
    """An edit could not be applied to the automation config."""


class ProcessNotFoundError(AutomationConfigError):
    def __init__(self, cluster_name: str, missing: Sequence[str]):
        self.cluster_name = cluster_name
        self.missing = list(missing)
        super().__init__(
            f"processes not found in cluster '{cluster_name}': {', '.join(self.missing)}"
        )


# --- Lookups --------------------------------------------------------------- #


def _auth(config: AutomationConfig) -> Auth:
    if config.auth is None:
        config.auth = Auth()
    return config.auth


def _ensure_deployment_auth_mechanisms(config: AutomationConfig) -> None:
    # The server rejects a config without this list, even an empty one.
    auth = _auth(config)
    if auth.deployment_auth_mechanisms is None:
        auth.deployment_auth_mechanisms = []


def _find_replica_set(
    config: AutomationConfig, name: Optional[str]
) -> Optional[ReplicaSet]:
    return next((rs for rs in config.replica_sets or () if rs.id == name), None)


def _find_sharding(config: AutomationConfig, name: str) -> Optional[ShardingConfig]:
    return next((s for s in config.sharding or () if s.name == name), None)


def _replica_set_processes(
    config: AutomationConfig, rs_name: Optional[str]
) -> List[AutomationProcess]:
    rs = _find_replica_set(config, rs_name)
    if rs is None:
        return []
    hosts = {member.host for member in rs.members}
    return [p for p in config.processes or () if p.name in hosts]


def cluster_processes(
    config: AutomationConfig, cluster_name: str, *, include_mongos: bool = True
) -> List[AutomationProcess]:
    """Processes that make up `cluster_name`, in config order per component."""
    found = _replica_set_processes(config, cluster_name)
    sharding = _find_sharding(config, cluster_name)
    if sharding is not None:
        for shard in sharding.shards:
            found.extend(_replica_set_processes(config, shard.id))
        found.extend(_replica_set_processes(config, sharding.config_server_replica))
        if include_mongos:
            found.extend(p for p in config.processes or () if p.cluster == cluster_name)
    return found


def process_key(process: AutomationProcess) -> str:
    return f"{process.hostname}:{process.port}"


def _apply(
    config: AutomationConfig,
    cluster_name: str,
    processes: Optional[Iterable[str]],
    update: Callable[[AutomationProcess], None],
    *,
    include_mongos: bool = True,
) -> None:
    _ensure_deployment_auth_mechanisms(config)
    wanted: Dict[str, bool] = dict.fromkeys(processes or (), False)

    for process in cluster_processes(config, cluster_name, include_mongos=include_mongos):
        if wanted:
            key = process_key(process)
            if key not in wanted:
                continue
            wanted[key] = True
        update(process)

    missing = [key for key, seen in wanted.items() if not seen]
    if missing:
        raise ProcessNotFoundError(cluster_name, missing)


def _now() -> str:
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


# --- Cluster lifecycle ----------------------------------------------------- #


def shutdown(
    config: AutomationConfig, cluster_name: str, processes: Optional[Sequence[str]] = None
) -> None:
    """Disable the cluster, or only the listed processes."""

    def disable(process: AutomationProcess) -> None:
        process.disabled = True

    _apply(config, cluster_name, processes, disable)


def startup(
    config: AutomationConfig, cluster_name: str, processes: Optional[Sequence[str]] = None
) -> None:
    def enable(process: AutomationProcess) -> None:
        process.disabled = False

    _apply(config, cluster_name, processes, enable)


def suspend(
    config: AutomationConfig, cluster_name: str, processes: Optional[Sequence[str]] = None
) -> None:
    """Put processes in manual mode so automation leaves them alone."""

    def manual(process: AutomationProcess) -> None:
        process.manual_mode = True

    _apply(config, cluster_name, processes, manual)


def restart(
    config: AutomationConfig, cluster_name: str, processes: Optional[Sequence[str]] = None
) -> None:
    last_restart = _now()

    def mark(process: AutomationProcess) -> None:
        process.last_restart = last_restart

    _apply(config, cluster_name, processes, mark)


def start_initial_sync(
    config: AutomationConfig,
    cluster_name: str,
    processes: Optional[Sequence[str]] = None,
    last_resync: Optional[str] = None,
) -> None:
    """
    Ask the agents to resync the data-bearing members.

    The agents wipe the dbPath of each member before syncing it again. Mongos
    processes hold no data and are skipped.
    """
    last_resync = last_resync or _now()

    def mark(process: AutomationProcess) -> None:
        process.last_resync = last_resync

    _apply(config, cluster_name, processes, mark, include_mongos=False)


def reclaim_free_space(
    config: AutomationConfig,
    cluster_name: str,
    processes: Optional[Sequence[str]] = None,
    last_compact: Optional[str] = None,
) -> None:
    last_compact = last_compact or _now()

    def mark(process: AutomationProcess) -> None:
        process.last_compact = last_compact

    _apply(config, cluster_name, processes, mark, include_mongos=False)


def remove_by_cluster_name(config: AutomationConfig, cluster_name: str) -> None:
    """Drop the cluster and its processes from the config; nothing is stopped."""
    _ensure_deployment_auth_mechanisms(config)
    doomed = cluster_processes(config, cluster_name)
    sharding = _find_sharding(config, cluster_name)

    rs_names = {cluster_name}
    if sharding is not None:
        rs_names.update(shard.id for shard in sharding.shards)
        rs_names.add(sharding.config_server_replica)
        config.sharding = [s for s in config.sharding or () if s is not sharding]

    if config.replica_sets is not None:
        config.replica_sets = [rs for rs in config.replica_sets if rs.id not in rs_names]
    if config.processes is not None:
        gone = {id(p) for p in doomed}
        config.processes = [p for p in config.processes if id(p) not in gone]


# --- Users and authentication --------------------------------------------- #


def add_user(config: AutomationConfig, user: MongoDBUser) -> None:
    auth = _auth(config)
    auth.users_wanted = [*(auth.users_wanted or ()), user]


def remove_user(config: AutomationConfig, username: str, database: str) -> None:
    auth = _auth(config)
    users = auth.users_wanted or []
    for i, user in enumerate(users):
        if user.username == username and user.database == database:
            del users[i]
            return
    raise AutomationConfigError(f"user '{username}' not found for '{database}'")


def _random_ascii(length: int) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def enable_mechanism(config: AutomationConfig, mechanisms: Sequence[str]) -> None:
    """
    Turn on authentication with the given mechanisms.
    Only MONGODB-CR and SCRAM-SHA-256 are supported. The automation agent user,
    its password and the keyfile are generated when missing.
    """
    unsupported = [m for m in mechanisms if m not in SUPPORTED_MECHANISMS]
    if unsupported:
        raise AutomationConfigError(f"unsupported mechanism {unsupported[0]}")

    auth = _auth(config)
    auth.disabled = False
    deployment = auth.deployment_auth_mechanisms or []
    agent = auth.auto_auth_mechanisms or []
    for mechanism in mechanisms:
        if mechanism == SCRAM_SHA_256 and not auth.auto_auth_mechanism:
            auth.auto_auth_mechanism = mechanism
        if mechanism not in deployment:
            deployment.append(mechanism)
        if mechanism not in agent:
            agent.append(mechanism)
    auth.deployment_auth_mechanisms = deployment
    auth.auto_auth_mechanisms = agent

    if not auth.auto_user and not auth.auto_pwd:
        auth.auto_user = AUTOMATION_AGENT_NAME
        auth.auto_pwd = _random_ascii(KEY_LENGTH)
    if not auth.key:
        auth.key = base64.b64encode(secrets.token_bytes(KEY_LENGTH)).decode("ascii")
    if not auth.keyfile:
        auth.keyfile = KEYFILE_PATH
    if not auth.keyfile_windows:
        auth.keyfile_windows = KEYFILE_WINDOWS_PATH


# --- Indexes --------------------------------------------------------------- #


def _same_index(a: IndexConfig, b: IndexConfig) -> bool:
    return (
        a.rs_name == b.rs_name
        and a.db_name == b.db_name
        and a.collection_name == b.collection_name
        and [list(k[:2]) for k in a.key] == [list(k[:2]) for k in b.key]
    )


def add_index_config(config: Optional[AutomationConfig], index: IndexConfig) -> None:
    """Queue an index build; same namespace and keys means a duplicate."""
    if config is None:
        raise AutomationConfigError("the automation config has not been initialized")
    if any(_same_index(existing, index) for existing in config.index_configs or ()):
        raise AutomationConfigError("index already exists")
    config.index_configs = [*(config.index_configs or ()), index]


# --- Monitoring and backup agents ----------------------------------------- #


def _enable_version(
    versions: Optional[List[ConfigVersion]], hostname: str, name: str, what: str
) -> List[ConfigVersion]:
    versions = versions or []
    if any(v.hostname == hostname for v in versions):
        raise AutomationConfigError(f"{what} already enabled for '{hostname}'")
    return [*versions, ConfigVersion(name=name, hostname=hostname)]


def _disable_version(
    versions: Optional[List[ConfigVersion]], hostname: str, what: str
) -> List[ConfigVersion]:
    versions = versions or []
    kept = [v for v in versions if v.hostname != hostname]
    if len(kept) == len(versions):
        raise AutomationConfigError(f"no {what} for '{hostname}'")
    return kept


def enable_monitoring(config: AutomationConfig, hostname: str) -> None:
    config.monitoring_versions = _enable_version(
        config.monitoring_versions, hostname, MONITORING_VERSION, "monitoring"
    )


def disable_monitoring(config: AutomationConfig, hostname: str) -> None:
    config.monitoring_versions = _disable_version(
        config.monitoring_versions, hostname, "monitoring"
    )


def enable_backup(config: AutomationConfig, hostname: str) -> None:
    config.backup_versions = _enable_version(
        config.backup_versions, hostname, BACKUP_VERSION, "backup"
    )


def disable_backup(config: AutomationConfig, hostname: str) -> None:
    config.backup_versions = _disable_version(config.backup_versions, hostname, "backup")


__all__ = [
    "AutomationConfigError",
    "ProcessNotFoundError",
    "cluster_processes",
    "process_key",
    "shutdown",
    "startup",
    "suspend",
    "restart",
    "start_initial_sync",
    "reclaim_free_space",
    "remove_by_cluster_name",
    "add_user",
    "remove_user",
    "enable_mechanism",
    "add_index_config",
    "enable_monitoring",
    "disable_monitoring",
    "enable_backup",
    "disable_backup",
]
