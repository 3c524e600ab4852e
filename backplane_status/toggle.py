"""Status reporters for components that can be switched on and off."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .deployment import DeploymentStatus
from .generic import new_unstructured
from .resources import (
    Client,
    ComponentCondition,
    ConditionStatus,
    GroupVersionKind,
    KubeError,
    NamespacedName,
    NotFoundError,
    StatusReporter,
)

MANAGED_SERVICE_ACCOUNT_CHART_DIR = "pkg/templates/charts/toggle/managed-serviceaccount"
CONSOLE_MCE_CHARTS_DIR = "pkg/templates/charts/toggle/console-mce"
MANAGED_SERVICE_ACCOUNT_CRD_PATH = "pkg/templates/managed-serviceaccount/crds"
IMAGE_BASED_INSTALL_OPERATOR_CHART_DIR = "pkg/templates/charts/toggle/image-based-install-operator"
DISCOVERY_CHART_DIR = "pkg/templates/charts/toggle/discovery-operator"
HOSTED_IMPORT_CHART_DIR = "pkg/templates/charts/hosted/server-foundation"
HOSTING_IMPORT_CHART_DIR = "pkg/templates/charts/hosting/server-foundation"
HIVE_CHART_DIR = "pkg/templates/charts/toggle/hive-operator"
ASSISTED_SERVICE_CHART_DIR = "pkg/templates/charts/toggle/assisted-service"
CLUSTER_LIFECYCLE_CHART_DIR = "pkg/templates/charts/toggle/cluster-lifecycle"
CLUSTER_MANAGER_CHART_DIR = "pkg/templates/charts/toggle/cluster-manager"
SERVER_FOUNDATION_CHART_DIR = "pkg/templates/charts/toggle/server-foundation"
HYPERSHIFT_CHART_DIR = "pkg/templates/charts/toggle/hypershift"
CLUSTER_PROXY_ADDON_DIR = "pkg/templates/charts/toggle/cluster-proxy-addon"


def _identify(obj: Mapping[str, Any]) -> tuple[NamespacedName, GroupVersionKind]:
    metadata = obj.get("metadata") or {}
    nn = NamespacedName(metadata.get("name", "") or "", metadata.get("namespace", "") or "")
    group, _, version = (obj.get("apiVersion", "") or "").rpartition("/")
    return nn, GroupVersionKind(group, version, obj.get("kind", "") or "")


@dataclass(frozen=True)
class ToggledOffStatus(StatusReporter):
    """Reports a switched-off component, checking that all its resources are removed."""

    namespaced_name: NamespacedName
    resources: tuple[dict[str, Any], ...] = field(default=(), hash=False)

    @property
    def kind(self) -> str:
        return "Component"

    def _condition(self, **fields: Any) -> ComponentCondition:
        now = datetime.now(timezone.utc)
        return ComponentCondition(
            name=self.name, kind=self.kind, last_update_time=now, last_transition_time=now, **fields
        )

    def status(self, client: Client) -> ComponentCondition:
        remaining: list[str] = []
        for resource in self.resources:
            nn, gvk = _identify(resource)
            try:
                found = client.get(gvk, nn.name, nn.namespace)
            except NotFoundError:
                continue
            except KubeError:
                return self._condition(
                    type="Unknown",
                    status=ConditionStatus.UNKNOWN,
                    reason="Error checking status",
                    message="Error getting resource",
                    available=False,
                )
            remaining.append(f"<{found.get('kind') or gvk.kind} {nn}>")

        if not remaining:
            return self._condition(
                type="NotPresent",
                status=ConditionStatus.TRUE,
                reason="ComponentDisabled",
                message="No resources present",
                available=True,
            )
        listing = "".join(f" {item}" for item in remaining)
        return self._condition(
            type="Uninstalled",
            status=ConditionStatus.FALSE,
            reason="ResourcesPresent",
            message=f"The following resources remain:{listing}",
            available=False,
        )


def enabled_status(namespaced_name: NamespacedName) -> DeploymentStatus:
    """Return the reporter for a switched-on component backed by a deployment."""
    return DeploymentStatus(namespaced_name=namespaced_name)


def disabled_status(
    namespaced_name: NamespacedName, resource_list: Iterable[Mapping[str, Any]]
) -> ToggledOffStatus:
    """Return the reporter checking that the listed resources have been removed."""
    removals = tuple(new_unstructured(*_identify(obj)) for obj in resource_list)
    return ToggledOffStatus(namespaced_name=namespaced_name, resources=removals)