"""Status reporting for deployments."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .resources import (
    Client,
    ComponentCondition,
    ConditionStatus,
    GroupVersionKind,
    KubeError,
    NamespacedName,
    NotFoundError,
    StatusReporter,
    unknown_status,
)

logger = logging.getLogger(__name__)

DEPLOYMENT_GVK = GroupVersionKind("apps", "v1", "Deployment")
DEPLOYMENT_AVAILABLE = "Available"
DEPLOYMENT_PROGRESSING = "Progressing"

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def _parse_time(value: Any) -> datetime | None:
    """Turn an RFC 3339 timestamp (or datetime) into an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def _conditions(deployment: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    status = deployment.get("status") or {}
    return list(status.get("conditions") or [])


def _to_component(name: str, condition: Mapping[str, Any]) -> ComponentCondition:
    return ComponentCondition(
        name=name,
        kind="Deployment",
        type=str(condition.get("type", "")),
        status=str(condition.get("status", "")),
        last_update_time=_parse_time(condition.get("lastUpdateTime")),
        last_transition_time=_parse_time(condition.get("lastTransitionTime")),
        reason=str(condition.get("reason", "")),
        message=str(condition.get("message", "")),
        available=False,
    )


def latest_deploy_condition(conditions: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Return the condition with the latest transition time; the first wins ties."""
    if not conditions:
        return {}
    latest = conditions[0]
    for condition in conditions:
        current = _parse_time(condition.get("lastTransitionTime")) or _ZERO_TIME
        best = _parse_time(latest.get("lastTransitionTime")) or _ZERO_TIME
        if current > best:
            latest = condition
    return latest


def progressing_deploy_condition(conditions: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Return the last Progressing condition, or an empty one."""
    progressing: Mapping[str, Any] = {}
    for condition in conditions:
        if condition.get("type") == DEPLOYMENT_PROGRESSING:
            progressing = condition
    return progressing


def successful_deploy(deployment: Mapping[str, Any]) -> bool:
    """Tell whether a deployment is available with no unavailable replicas."""
    if any(
        c.get("type") == DEPLOYMENT_AVAILABLE and c.get("status") == ConditionStatus.FALSE
        for c in _conditions(deployment)
    ):
        return False
    status = deployment.get("status") or {}
    return int(status.get("unavailableReplicas") or 0) <= 0


def map_deployment(deployment: Mapping[str, Any]) -> ComponentCondition:
    """Convert a deployment object into a component condition."""
    metadata = deployment.get("metadata") or {}
    name = metadata.get("name", "") or ""
    conditions = _conditions(deployment)
    if not conditions:
        return unknown_status(name, deployment.get("kind", "") or "")

    latest = latest_deploy_condition(conditions)
    result = _to_component(name, latest)
    if successful_deploy(deployment):
        result.available = True
        result.message = ""

    # The deployment may call itself available while our stricter notion of
    # success disagrees; report its progress instead to avoid confusion.
    if (
        latest.get("type") == DEPLOYMENT_AVAILABLE
        and latest.get("status") == ConditionStatus.TRUE
        and not result.available
    ):
        result = _to_component(name, progressing_deploy_condition(conditions))

    return result


@dataclass(frozen=True)
class DeploymentStatus(StatusReporter):
    """Reports the health of a deployment."""

    namespaced_name: NamespacedName

    @property
    def kind(self) -> str:
        return "Deployment"

    def status(self, client: Client) -> ComponentCondition:
        try:
            deployment = client.get(DEPLOYMENT_GVK, self.name, self.namespace)
        except NotFoundError:
            return unknown_status(self.name, self.kind)
        except KubeError as err:
            logger.error("Err getting deployment: %s", err)
            return unknown_status(self.name, self.kind)
        return map_deployment(deployment)