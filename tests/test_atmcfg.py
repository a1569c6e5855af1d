import base64

import pytest
from opsmngr import atmcfg
from opsmngr.atmcfg import AutomationConfigError, ProcessNotFoundError
from opsmngr.models import AutomationConfig, IndexConfig, MongoDBUser, Role


def process(name, hostname, port, cluster=None, process_type="mongod"):
    doc = {
        "name": name,
        "hostname": hostname,
        "processType": process_type,
        "version": "4.4.4",
        "args2_6": {"net": {"port": port}},
        "disabled": False,
        "manualMode": False,
    }
    if cluster:
        doc["cluster"] = cluster
    return doc


def replica_set(rs_id, *hosts):
    return {
        "_id": rs_id,
        "protocolVersion": "1",
        "members": [{"_id": i, "host": host} for i, host in enumerate(hosts)],
    }


def replica_set_config():
    return AutomationConfig.model_validate(
        {
            "version": 3,
            "auth": {"disabled": True},
            "processes": [
                process("myReplicaSet_1", "host0", 27017),
                process("myReplicaSet_2", "host1", 27017),
            ],
            "replicaSets": [replica_set("myReplicaSet", "myReplicaSet_1", "myReplicaSet_2")],
            "sharding": [],
        }
    )


def sharded_config():
    return AutomationConfig.model_validate(
        {
            "version": 7,
            "auth": {"disabled": True},
            "processes": [
                process("myShard_0_0", "host0", 27017),
                process("configRS_1", "host2", 27018),
                process("myCluster_mongos_2", "host1", 27019, "myCluster", "mongos"),
            ],
            "replicaSets": [
                replica_set("myShard_0", "myShard_0_0"),
                replica_set("configRS", "configRS_1"),
            ],
            "sharding": [
                {
                    "name": "myCluster",
                    "configServerReplica": "configRS",
                    "shards": [{"_id": "myShard_0", "rs": "myShard_0", "tags": []}],
                    "collections": [],
                }
            ],
            "someNewSetting": {"kept": True},
        }
    )


def states(config, attr):
    return {p.name: getattr(p, attr) for p in config.processes}


# --- Lookups ---


def test_cluster_processes_of_sharded_cluster():
    config = sharded_config()
    names = [p.name for p in atmcfg.cluster_processes(config, "myCluster")]
    assert names == ["myShard_0_0", "configRS_1", "myCluster_mongos_2"]

    data_only = atmcfg.cluster_processes(config, "myCluster", include_mongos=False)
    assert [p.name for p in data_only] == ["myShard_0_0", "configRS_1"]
    assert atmcfg.process_key(data_only[1]) == "host2:27018"


def test_unknown_cluster_has_no_processes():
    assert atmcfg.cluster_processes(replica_set_config(), "nope") == []


# --- Lifecycle ---


def test_shutdown_and_startup_replica_set():
    config = replica_set_config()

    atmcfg.shutdown(config, "myReplicaSet")
    assert states(config, "disabled") == {"myReplicaSet_1": True, "myReplicaSet_2": True}
    assert config.auth.deployment_auth_mechanisms == []

    atmcfg.startup(config, "myReplicaSet")
    assert states(config, "disabled") == {"myReplicaSet_1": False, "myReplicaSet_2": False}


def test_shutdown_sharded_cluster_covers_every_component():
    config = sharded_config()

    atmcfg.shutdown(config, "myCluster")

    assert all(p.disabled for p in config.processes)


def test_shutdown_only_listed_processes():
    config = sharded_config()

    atmcfg.shutdown(config, "myCluster", ["host2:27018"])

    assert states(config, "disabled") == {
        "myShard_0_0": False,
        "configRS_1": True,
        "myCluster_mongos_2": False,
    }


def test_missing_processes_are_reported_after_the_rest_are_applied():
    config = sharded_config()

    with pytest.raises(ProcessNotFoundError) as exc:
        atmcfg.shutdown(config, "myCluster", ["host0:27017", "host9:1", "host8:2"])

    assert exc.value.missing == ["host9:1", "host8:2"]
    assert exc.value.cluster_name == "myCluster"
    assert str(exc.value) == "processes not found in cluster 'myCluster': host9:1, host8:2"
    assert config.processes[0].disabled is True


def test_suspend_sets_manual_mode():
    config = replica_set_config()

    atmcfg.suspend(config, "myReplicaSet", ["host1:27017"])

    assert states(config, "manual_mode") == {
        "myReplicaSet_1": False,
        "myReplicaSet_2": True,
    }


def test_restart_stamps_every_process_with_the_same_time():
    config = sharded_config()

    atmcfg.restart(config, "myCluster")

    stamps = {p.last_restart for p in config.processes}
    assert len(stamps) == 1
    assert None not in stamps


def test_initial_sync_skips_mongos():
    config = sharded_config()

    atmcfg.start_initial_sync(config, "myCluster", last_resync="2021-03-01T10:00:00Z")

    assert states(config, "last_resync") == {
        "myShard_0_0": "2021-03-01T10:00:00Z",
        "configRS_1": "2021-03-01T10:00:00Z",
        "myCluster_mongos_2": None,
    }


def test_initial_sync_cannot_target_mongos():
    config = sharded_config()
    with pytest.raises(ProcessNotFoundError):
        atmcfg.start_initial_sync(config, "myCluster", ["host1:27019"])


def test_reclaim_free_space_on_one_member():
    config = replica_set_config()

    atmcfg.reclaim_free_space(
        config, "myReplicaSet", ["host0:27017"], last_compact="2021-03-01T10:00:00Z"
    )

    assert states(config, "last_compact") == {
        "myReplicaSet_1": "2021-03-01T10:00:00Z",
        "myReplicaSet_2": None,
    }


def test_remove_sharded_cluster():
    config = sharded_config()

    atmcfg.remove_by_cluster_name(config, "myCluster")

    assert config.processes == []
    assert config.replica_sets == []
    assert config.sharding == []


def test_remove_leaves_other_clusters_alone():
    config = sharded_config()
    other = replica_set_config()
    config.processes.extend(other.processes)
    config.replica_sets.extend(other.replica_sets)

    atmcfg.remove_by_cluster_name(config, "myReplicaSet")

    assert [p.name for p in config.processes] == [
        "myShard_0_0",
        "configRS_1",
        "myCluster_mongos_2",
    ]
    assert [rs.id for rs in config.replica_sets] == ["myShard_0", "configRS"]


def test_edits_keep_unknown_settings():
    config = sharded_config()

    atmcfg.shutdown(config, "myCluster")
    doc = config.model_dump(by_alias=True, exclude_none=True)

    assert doc["someNewSetting"] == {"kept": True}
    assert doc["processes"][0]["args2_6"] == {"net": {"port": 27017}}
    assert doc["sharding"][0]["collections"] == []


# --- Users and authentication ---


def test_add_and_remove_user():
    config = replica_set_config()
    user = MongoDBUser(
        username="app",
        database="admin",
        roles=[Role(role="readWrite", database="app")],
        init_pwd="changeme",
    )

    atmcfg.add_user(config, user)
    assert config.auth.users_wanted == [user]
    dumped = config.model_dump(by_alias=True, exclude_none=True)["auth"]["usersWanted"][0]
    assert dumped["user"] == "app"
    assert dumped["roles"] == [{"role": "readWrite", "db": "app"}]

    atmcfg.remove_user(config, "app", "admin")
    assert config.auth.users_wanted == []


def test_remove_unknown_user():
    with pytest.raises(AutomationConfigError) as exc:
        atmcfg.remove_user(replica_set_config(), "ghost", "admin")
    assert str(exc.value) == "user 'ghost' not found for 'admin'"


def test_enable_scram():
    config = replica_set_config()

    atmcfg.enable_mechanism(config, ["SCRAM-SHA-256"])

    auth = config.auth
    assert auth.disabled is False
    assert auth.auto_auth_mechanism == "SCRAM-SHA-256"
    assert auth.deployment_auth_mechanisms == ["SCRAM-SHA-256"]
    assert auth.auto_auth_mechanisms == ["SCRAM-SHA-256"]
    assert auth.auto_user == "mms-automation"
    assert len(auth.auto_pwd) == atmcfg.KEY_LENGTH
    assert len(base64.b64decode(auth.key)) == atmcfg.KEY_LENGTH
    assert auth.keyfile == atmcfg.KEYFILE_PATH
    assert auth.keyfile_windows == atmcfg.KEYFILE_WINDOWS_PATH


def test_enable_mechanism_keeps_existing_credentials():
    config = replica_set_config()
    config.auth.auto_user = "agent"
    config.auth.auto_pwd = "secret"
    config.auth.key = "existing"

    atmcfg.enable_mechanism(config, ["MONGODB-CR", "MONGODB-CR"])

    assert config.auth.auto_user == "agent"
    assert config.auth.auto_pwd == "secret"
    assert config.auth.key == "existing"
    assert config.auth.auto_auth_mechanism is None
    assert config.auth.deployment_auth_mechanisms == ["MONGODB-CR"]


def test_unsupported_mechanism_changes_nothing():
    config = replica_set_config()

    with pytest.raises(AutomationConfigError) as exc:
        atmcfg.enable_mechanism(config, ["SCRAM-SHA-256", "PLAIN"])

    assert str(exc.value) == "unsupported mechanism PLAIN"
    assert config.auth.disabled is True
    assert config.auth.deployment_auth_mechanisms is None


# --- Indexes ---


def test_add_index_config_rejects_duplicates():
    config = replica_set_config()
    index = IndexConfig(
        db_name="test", collection_name="users", rs_name="myReplicaSet", key=[["email", 1]]
    )

    atmcfg.add_index_config(config, index)
    assert config.index_configs == [index]

    with pytest.raises(AutomationConfigError) as exc:
        atmcfg.add_index_config(
            config, index.model_copy(update={"options": {"unique": True}})
        )
    assert str(exc.value) == "index already exists"

    other_keys = index.model_copy(update={"key": [["email", 1], ["name", -1]]})
    atmcfg.add_index_config(config, other_keys)
    assert len(config.index_configs) == 2


def test_add_index_config_needs_a_config():
    with pytest.raises(AutomationConfigError):
        atmcfg.add_index_config(None, IndexConfig(db_name="test"))


# --- Monitoring and backup agents ---


def test_enable_and_disable_monitoring():
    config = replica_set_config()

    atmcfg.enable_monitoring(config, "host0")
    assert [(v.hostname, v.name) for v in config.monitoring_versions] == [
        ("host0", atmcfg.MONITORING_VERSION)
    ]
    with pytest.raises(AutomationConfigError) as exc:
        atmcfg.enable_monitoring(config, "host0")
    assert str(exc.value) == "monitoring already enabled for 'host0'"

    atmcfg.disable_monitoring(config, "host0")
    assert config.monitoring_versions == []
    with pytest.raises(AutomationConfigError):
        atmcfg.disable_monitoring(config, "host0")


def test_enable_and_disable_backup():
    config = replica_set_config()

    atmcfg.enable_backup(config, "host1")
    assert config.backup_versions[0].name == atmcfg.BACKUP_VERSION

    atmcfg.disable_backup(config, "host1")
    assert config.backup_versions == []
    with pytest.raises(AutomationConfigError) as exc:
        atmcfg.disable_backup(config, "host1")
    assert str(exc.value) == "no backup for 'host1'"
