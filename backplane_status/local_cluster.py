"""Status reporting for the hub's own managed cluster."""

from __future__ import annotations

from collections.abc import Mapping
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
    NoMatchError,
    NotFoundError,
    StatusReporter,
    unknown_status,
)

LCS_KIND = "local-cluster"

ACCEPTED = "HubAcceptedManagedCluster"
JOINED = "ManagedClusterJoined"
AVAILABLE = "ManagedClusterConditionAvailable"

MC_DISABLED = "ManagedClusterDisabled"
MC_IMPORTED = "ManagedClusterImported"

MANAGED_CLUSTER_GVK = GroupVersionKind("cluster.open-cluster-management.io", "v1", "ManagedCluster")


def new_managed_cluster() -> dict[str, Any]:
    """Return an empty managed cluster object."""
    return {
        "apiVersion": MANAGED_CLUSTER_GVK.api_version(),
        "kind": MANAGED_CLUSTER_GVK.kind,
        "metadata": {},
    }


@dataclass(frozen=True)
class LocalClusterStatus(StatusReporter):
    """Reports whether the local managed cluster matches the desired state."""

    namespaced_name: NamespacedName
    enabled: bool = False

    @property
    def kind(self) -> str:
        return LCS_KIND

    def status(self, client: Client) -> ComponentCondition:
        try:
            mc: Mapping[str, Any] | None = client.get(MANAGED_CLUSTER_GVK, self.name, self.namespace)
        except (NotFoundError, NoMatchError):
            mc = None
        except KubeError:
            return unknown_status(self.name, self.kind)
        return self._enabled_status(mc) if self.enabled else self._disabled_status(mc)

    def _condition(self, **fields: Any) -> ComponentCondition:
        now = datetime.now(timezone.utc)
        return ComponentCondition(
            name=self.name, kind=self.kind, last_update_time=now, last_transition_time=now, **fields
        )

    def _enabled_status(self, mc: Mapping[str, Any] | None) -> ComponentCondition:
        if mc is None:
            return unknown_status(self.name, self.kind)
        status = mc.get("status")
        if not isinstance(status, Mapping):
            return unknown_status(self.name, self.kind)
        conditions = status.get("conditions")
        if not isinstance(conditions, list) or not conditions:
            return unknown_status(self.name, self.kind)
        if not all(isinstance(c, Mapping) for c in conditions):
            return unknown_status(self.name, self.kind)

        seen = {c.get("type") for c in conditions}
        latest = conditions[-1]

        if not {ACCEPTED, JOINED, AVAILABLE} <= seen:
            return self._condition(
                available=False,
                type=latest["type"],
                status=latest["status"],
                reason=latest["reason"],
                message=latest["message"],
            )

        metadata = mc.get("metadata") or {}
        if metadata.get("deletionTimestamp"):
            return self._condition(
                available=False,
                type=latest["type"],
                status=latest["status"],
                reason=latest["reason"],
                message="Local-Cluster is currently being detached",
            )

        return self._condition(
            available=True,
            type="ManagedClusterImportSuccess",
            status=ConditionStatus.TRUE,
            reason=MC_IMPORTED,
            message="ManagedCluster is accepted, joined, and available",
        )

    def _disabled_status(self, mc: Mapping[str, Any] | None) -> ComponentCondition:
        if mc is None:
            return self._condition(
                available=True,
                type="NotPresent",
                status=ConditionStatus.TRUE,
                reason=MC_DISABLED,
                message="ManagedCluster resource is not present",
            )
        return self._condition(
            available=False,
            type="NotPresent",
            status=ConditionStatus.FALSE,
            reason=MC_DISABLED,
            message="ManagedCluster resource is still present",
        )