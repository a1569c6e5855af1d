"""
Upgrade advisor.

The check endpoint reports one raw step per Ops Manager hop, each with flat
per-host requirement lists. parse_upgrade_steps folds those lists so that hosts
sharing the same version transition end up in a single entry.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from opsmngr.core.context import RequestContext
from opsmngr.core.errors import OpsManagerModelValidationError
from opsmngr.core.response import Response
from opsmngr.models import (
    AgentStep,
    MongoDBStep,
    OperatingSystemStep,
    OpsManagerStep,
    RawRequirement,
    RawStep,
    UpgradeCheckResult,
    UpgradeCheckStep,
)

from ._base import Service, require

UPGRADE_CHECK_PATH = "api/private/v1.0/migration/check"

_RAW_STEPS = TypeAdapter(List[RawStep])


def group_os(reqs: Optional[Sequence[RawRequirement]]) -> List[OperatingSystemStep]:
    groups: Dict[Tuple[str, str, str], List[str]] = {}
    for r in reqs or ():
        key = (r.base_version or "", r.current_version, r.target_version)
        groups.setdefault(key, []).extend(r.hostnames or ())
    return [
        OperatingSystemStep(
            base_version=base, current_version=cur, target_version=tgt, hosts=hosts
        )
        for (base, cur, tgt), hosts in groups.items()
    ]


def _group_pairs(
    reqs: Optional[Sequence[RawRequirement]],
) -> Dict[Tuple[str, str], List[str]]:
    groups: Dict[Tuple[str, str], List[str]] = {}
    for r in reqs or ():
        groups.setdefault((r.current_version, r.target_version), []).extend(
            r.hostnames or ()
        )
    return groups


def group_mongo(reqs: Optional[Sequence[RawRequirement]]) -> List[MongoDBStep]:
    return [
        MongoDBStep(current_version=cur, target_version=tgt, hosts=hosts)
        for (cur, tgt), hosts in _group_pairs(reqs).items()
    ]


def group_agent(reqs: Optional[Sequence[RawRequirement]]) -> List[AgentStep]:
    return [
        AgentStep(current_version=cur, target_version=tgt, hosts=hosts)
        for (cur, tgt), hosts in _group_pairs(reqs).items()
    ]


def parse_upgrade_steps(result: Any) -> List[UpgradeCheckStep]:
    """
    Aggregate the raw ``result`` of an upgrade check.

    `result` is the decoded JSON array, or its undecoded text/bytes. None means
    the server sent no steps.
    """
    if result is None:
        return []

    try:
        if isinstance(result, (str, bytes, bytearray)):
            raw_steps = _RAW_STEPS.validate_json(result)
        else:
            raw_steps = _RAW_STEPS.validate_python(result)
    except ValidationError as exc:
        raise OpsManagerModelValidationError(
            f"Upgrade check result is not a list of steps: {exc}"
        ) from exc

    return [
        UpgradeCheckStep(
            ops_manager=OpsManagerStep(
                current_version=raw.om_current_version,
                target_version=raw.om_target_version,
                hosts=list(raw.om_hosts or ()),
            ),
            operating_system=group_os(raw.os_upgrade_requirements),
            mongodb=group_mongo(raw.mongo_upgrade_requirements),
            agent=group_agent(raw.agent_post_upgrade_requirements),
        )
        for raw in raw_steps
    ]


class AdvisorService(Service):
    async def check_upgrade(
        self, ctx: RequestContext, version: str
    ) -> Tuple[List[UpgradeCheckStep], Response]:
        """Steps needed to move the deployment to Ops Manager `version`."""
        require(version, "targetVersion")
        req = self.client.new_request("GET", f"{UPGRADE_CHECK_PATH}/{version}")
        root, resp = await self.client.do(ctx, req, into=UpgradeCheckResult)
        return parse_upgrade_steps(root.result), resp


__all__ = [
    "AdvisorService",
    "parse_upgrade_steps",
    "group_os",
    "group_mongo",
    "group_agent",
]
