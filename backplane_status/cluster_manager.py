"""Status reporting for the cluster manager and managed cluster add-ons."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .resources import (
    Client,
    ComponentCondition,
    GroupVersionKind,
    KubeError,
    NamespacedName,
    NotFoundError,
    StatusReporter,
    unknown_status,
)

logger = logging.getLogger(__name__)

CLUSTER_MANAGER_GVK = GroupVersionKind("operator.open-cluster-management.io", "v1", "ClusterManager")
MANAGED_CLUSTER_ADDON_GVK = GroupVersionKind("addon.open-cluster-management.io", "v1alpha1", "ManagedClusterAddOn")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _map_conditions(obj: Mapping[str, Any] | None, kind: str, ready_type: str) -> ComponentCondition:
    """Pick the ready condition if it is true, else the last one listed."""
    if obj is None:
        return unknown_status("", "")
    metadata = obj.get("metadata") or {}
    name = _text(metadata.get("name"))
    own_kind = _text(obj.get("kind"))

    status = obj.get("status")
    conditions = status.get("conditions") if isinstance(status, Mapping) else None
    if not isinstance(conditions, list):
        return unknown_status(name, own_kind)

    result = ComponentCondition()
    for condition in conditions:
        if not isinstance(condition, Mapping):
            return unknown_status(name, own_kind)
        now = datetime.now(timezone.utc)
        result = ComponentCondition(
            name=name,
            kind=kind,
            type=_text(condition.get("type")),
            status=_text(condition.get("status")),
            last_update_time=now,
            last_transition_time=now,
            reason=_text(condition.get("reason")),
            message=_text(condition.get("message")),
            available=False,
        )
        if result.type == ready_type and result.status == "True":
            result.available = True
            return result
    return result


def map_cluster_manager(obj: Mapping[str, Any] | None) -> ComponentCondition:
    """Convert a cluster manager object into a component condition."""
    return _map_conditions(obj, "ClusterManager", "Applied")


def map_managed_cluster_addon(obj: Mapping[str, Any] | None) -> ComponentCondition:
    """Convert a managed cluster add-on object into a component condition."""
    return _map_conditions(obj, "ManagedClusterAddOn", "Available")


@dataclass(frozen=True)
class ClusterManagerStatus(StatusReporter):
    """Reports the health of the cluster manager."""

    namespaced_name: NamespacedName

    @property
    def namespace(self) -> str:
        return ""

    @property
    def kind(self) -> str:
        return "ClusterManager"

    def status(self, client: Client) -> ComponentCondition:
        try:
            obj = client.get(CLUSTER_MANAGER_GVK, self.name, self.namespaced_name.namespace)
        except NotFoundError:
            return unknown_status(self.name, self.kind)
        except KubeError as err:
            logger.error("Err getting cluster manager: %s", err)
            return unknown_status(self.name, self.kind)
        return map_cluster_manager(obj)


@dataclass(frozen=True)
class ManagedClusterAddOnStatus(StatusReporter):
    """Reports the health of a managed cluster add-on."""

    namespaced_name: NamespacedName

    @property
    def kind(self) -> str:
        return "ManagedClusterAddOn"

    def status(self, client: Client) -> ComponentCondition:
        try:
            obj = client.get(MANAGED_CLUSTER_ADDON_GVK, self.name, self.namespace)
        except NotFoundError:
            return unknown_status(self.name, self.kind)
        except KubeError as err:
            logger.error("Err getting ManagedClusterAddOn: %s", err)
            return unknown_status(self.name, self.kind)
        return map_managed_cluster_addon(obj)