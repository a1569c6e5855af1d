import io
import json

import pytest
import respx
from httpx import Response
from opsmngr import ArgError, OpsManagerHTTPError, RequestContext, new_client, set_base_url
from opsmngr.models import BackupConfig, LogCollectionJob, LogListOptions

HOST = "https://om.example.com"
API = f"{HOST}/api/public/v1.0"
JOBS = f"{API}/groups/p1/logCollectionJobs"
GZIP_BYTES = b"\x1f\x8b\x08\x00\x00\x00\x00\x00logs"

JOB = {
    "id": "job1",
    "groupId": "p1",
    "userId": "u1",
    "creationDate": "2021-03-01T10:00:00Z",
    "expirationDate": "2021-04-01T10:00:00Z",
    "status": "SUCCESS",
    "resourceType": "REPLICASET",
    "resourceName": "rs0",
    "rootResourceName": "rs0",
    "rootResourceType": "REPLICASET",
    "downloadUrl": f"{JOBS}/job1/download",
    "redacted": True,
    "logTypes": ["FTDC", "MONGODB"],
    "sizeRequestedPerFileBytes": 1000,
    "uncompressedSizeTotalBytes": 52428800,
    "childJobs": [
        {
            "automationAgentId": "a1",
            "hostname": "db1.example.com",
            "logCollectionType": "MONGODB",
            "status": "SUCCESS",
            "uncompressedDiskSpaceBytes": 4096,
        }
    ],
}

BACKUP_CONFIG = {
    "groupId": "p1",
    "clusterId": "c1",
    "statusName": "STARTED",
    "storageEngineName": "WIRED_TIGER",
    "encryptionEnabled": False,
    "sslEnabled": True,
    "excludedNamespaces": ["test.ignored"],
}


@pytest.fixture
def client():
    return new_client(None, set_base_url(HOST))


@pytest.fixture
def ctx():
    return RequestContext.background()


# --- Log collection jobs ---


@pytest.mark.asyncio
@respx.mock
async def test_list_log_collection_jobs(client, ctx):
    route = respx.get(JOBS).mock(
        return_value=Response(200, json={"links": [], "results": [JOB], "totalCount": 1})
    )

    async with client:
        jobs, resp = await client.logs_collection.list(ctx, "p1", LogListOptions(verbose=True))

    assert route.calls[0].request.url.params["verbose"] == "true"
    job = jobs.results[0]
    assert job.url == f"{JOBS}/job1/download"
    assert job.uncompressed_size_total_bytes == 52428800
    assert job.child_jobs[0].hostname == "db1.example.com"
    assert jobs.total_count == 1
    assert resp.links == []


@pytest.mark.asyncio
@respx.mock
async def test_get_log_collection_job(client, ctx):
    respx.get(f"{JOBS}/job1").mock(return_value=Response(200, json=JOB))

    async with client:
        job, _ = await client.logs_collection.get(ctx, "p1", "job1")

    assert job.status == "SUCCESS"
    assert job.log_types == ["FTDC", "MONGODB"]


@pytest.mark.asyncio
@respx.mock
async def test_create_log_collection_job(client, ctx):
    route = respx.post(JOBS).mock(return_value=Response(201, json={"id": "job2"}))

    async with client:
        job, resp = await client.logs_collection.create(
            ctx,
            "p1",
            LogCollectionJob(
                resource_type="CLUSTER",
                resource_name="c1",
                redacted=True,
                size_requested_per_file_bytes=1000,
                log_types=["MONGODB"],
            ),
        )

    assert job.id == "job2"
    assert resp.status_code == 201
    assert json.loads(route.calls[0].request.content) == {
        "resourceType": "CLUSTER",
        "resourceName": "c1",
        "redacted": True,
        "sizeRequestedPerFileBytes": 1000,
        "logTypes": ["MONGODB"],
    }


@pytest.mark.asyncio
@respx.mock
async def test_extend_retry_and_delete_job(client, ctx):
    extend = respx.patch(f"{JOBS}/job1").mock(return_value=Response(200))
    retry = respx.put(f"{JOBS}/job1/retry").mock(return_value=Response(200))
    delete = respx.delete(f"{JOBS}/job1").mock(return_value=Response(204))

    async with client:
        await client.logs_collection.extend(
            ctx, "p1", "job1", LogCollectionJob(expiration_date="2021-05-01T00:00:00Z")
        )
        await client.logs_collection.retry(ctx, "p1", "job1")
        resp = await client.logs_collection.delete(ctx, "p1", "job1")

    assert json.loads(extend.calls[0].request.content) == {
        "expirationDate": "2021-05-01T00:00:00Z"
    }
    assert retry.called
    assert delete.called
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_log_collection_arguments_are_validated(client, ctx):
    async with client:
        with pytest.raises(ArgError):
            await client.logs_collection.list(ctx, "")
        with pytest.raises(ArgError):
            await client.logs_collection.get(ctx, "p1", "")
        with pytest.raises(ArgError) as exc:
            await client.logs_collection.create(ctx, "p1", None)
        with pytest.raises(ArgError):
            await client.logs_collection.retry(ctx, "p1", "")

    assert str(exc.value) == "job is invalid because cannot be None"


@pytest.mark.asyncio
@respx.mock
async def test_logs_download_streams_gzip(client, ctx):
    route = respx.get(f"{JOBS}/job1/download").mock(
        return_value=Response(200, content=GZIP_BYTES)
    )
    sink = io.BytesIO()

    async with client:
        resp = await client.logs.download(ctx, "p1", "job1", sink)

    assert route.calls[0].request.headers["Accept"] == "application/gzip"
    assert sink.getvalue() == GZIP_BYTES
    assert resp.status_code == 200


@pytest.mark.asyncio
@respx.mock
async def test_logs_download_error_leaves_writer_empty(client, ctx):
    respx.get(f"{JOBS}/job1/download").mock(
        return_value=Response(404, json={"errorCode": "RESOURCE_NOT_FOUND", "detail": "gone"})
    )
    sink = io.BytesIO()

    async with client:
        with pytest.raises(OpsManagerHTTPError):
            await client.logs.download(ctx, "p1", "job1", sink)

    assert sink.getvalue() == b""


# --- Backup configs ---


@pytest.mark.asyncio
@respx.mock
async def test_backup_configs_list_and_get(client, ctx):
    base = f"{API}/groups/p1/backupConfigs"
    respx.get(base).mock(
        return_value=Response(
            200, json={"links": [], "results": [BACKUP_CONFIG], "totalCount": 1}
        )
    )
    respx.get(f"{base}/c1").mock(return_value=Response(200, json=BACKUP_CONFIG))

    async with client:
        configs, _ = await client.backup_configs.list(ctx, "p1")
        config, _ = await client.backup_configs.get(ctx, "p1", "c1")

    assert configs.results[0] == config
    assert config.status_name == "STARTED"
    assert config.ssl_enabled is True
    assert config.excluded_namespaces == ["test.ignored"]


@pytest.mark.asyncio
@respx.mock
async def test_backup_config_update_is_a_patch(client, ctx):
    route = respx.patch(f"{API}/groups/p1/backupConfigs/c1").mock(
        return_value=Response(200, json={**BACKUP_CONFIG, "statusName": "STOPPED"})
    )

    async with client:
        updated, _ = await client.backup_configs.update(
            ctx, "p1", "c1", BackupConfig(status_name="STOPPED")
        )

    assert json.loads(route.calls[0].request.content) == {"statusName": "STOPPED"}
    assert updated.status_name == "STOPPED"


@pytest.mark.asyncio
async def test_backup_config_arguments_are_validated(client, ctx):
    async with client:
        with pytest.raises(ArgError):
            await client.backup_configs.get(ctx, "p1", "")
        with pytest.raises(ArgError):
            await client.backup_configs.update(ctx, "p1", "c1", None)
