"""Generic status reporters: static, disabled and present components."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from .condition import COMPONENT_DISABLED_REASON, DEPLOY_FAILED_REASON, DEPLOY_SUCCESS_REASON
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
)


def new_unstructured(namespaced_name: NamespacedName, gvk: GroupVersionKind) -> dict[str, Any]:
    """Build a bare object of the given type carrying only its name and namespace."""
    return {
        "apiVersion": gvk.api_version(),
        "kind": gvk.kind,
        "metadata": {"name": namespaced_name.name, "namespace": namespaced_name.namespace},
    }


def _gvk_of(obj: Mapping[str, Any]) -> GroupVersionKind:
    api_version = obj.get("apiVersion", "") or ""
    group, _, version = api_version.rpartition("/")
    return GroupVersionKind(group, version, obj.get("kind", "") or "")


def _name_of(obj: Mapping[str, Any]) -> NamespacedName:
    metadata = obj.get("metadata") or {}
    return NamespacedName(metadata.get("name", "") or "", metadata.get("namespace", "") or "")


def _error_condition(name: str, kind: str) -> ComponentCondition:
    now = datetime.now(timezone.utc)
    return ComponentCondition(
        name=name,
        kind=kind,
        type="Unknown",
        status=ConditionStatus.UNKNOWN,
        last_update_time=now,
        last_transition_time=now,
        reason="Error checking status",
        message="Error getting resource",
        available=False,
    )


def _describe(kind: str, nn: NamespacedName) -> str:
    return f"<{kind} {nn}>"


@dataclass(frozen=True)
class StaticStatus(StatusReporter):
    """Reports a predefined condition."""

    namespaced_name: NamespacedName
    kind: str = ""
    condition: ComponentCondition = field(default_factory=ComponentCondition)

    def status(self, client: Client) -> ComponentCondition:
        condition = replace(self.condition)
        if not condition.kind:
            condition.kind = "Component"
        return condition


@dataclass(frozen=True)
class DisabledStatus(StatusReporter):
    """Reports a component that must be absent, checking that its resources are gone."""

    namespaced_name: NamespacedName
    message: str = ""
    resources: tuple[dict[str, Any], ...] = field(default=(), hash=False)

    @property
    def kind(self) -> str:
        return "Component"

    def status(self, client: Client) -> ComponentCondition:
        remaining: list[str] = []
        for resource in self.resources:
            nn = _name_of(resource)
            gvk = _gvk_of(resource)
            try:
                found = client.get(gvk, nn.name, nn.namespace)
            except NotFoundError:
                continue
            except KubeError:
                return _error_condition(self.name, self.kind)
            remaining.append(_describe(found.get("kind") or gvk.kind, nn))

        if not remaining:
            return ComponentCondition(
                name=self.name,
                kind=self.kind,
                type="NotPresent",
                status=ConditionStatus.TRUE,
                reason=COMPONENT_DISABLED_REASON,
                message=self.message,
                available=True,
            )
        remain = "".join(f" {item}" for item in remaining)
        return ComponentCondition(
            name=self.name,
            kind=self.kind,
            type="NotPresent",
            status=ConditionStatus.FALSE,
            reason="ResourcesPresent",
            message=f"{self.message}. The following resources remain:{remain}",
            available=False,
        )


@dataclass(frozen=True)
class PresentStatus(StatusReporter):
    """Reports a component whose resource must exist."""

    namespaced_name: NamespacedName
    gvk: GroupVersionKind

    @property
    def kind(self) -> str:
        return self.gvk.kind

    def status(self, client: Client) -> ComponentCondition:
        try:
            client.get(self.gvk, self.name, self.namespace)
        except (NoMatchError, NotFoundError):
            return ComponentCondition(
                name=self.name,
                kind=self.kind,
                type="Present",
                status=ConditionStatus.FALSE,
                reason=DEPLOY_FAILED_REASON,
                message=f"The following resource is missing: {_describe(self.kind, self.namespaced_name)}",
                available=False,
            )
        except KubeError:
            return _error_condition(self.name, self.kind)
        return ComponentCondition(
            name=self.name,
            kind=self.kind,
            type="Present",
            status=ConditionStatus.TRUE,
            reason=DEPLOY_SUCCESS_REASON,
            available=True,
        )


def new_disabled_status(
    namespaced_name: NamespacedName, explanation: str, resource_list: Iterable[Mapping[str, Any]]
) -> DisabledStatus:
    """Create a reporter that checks the listed resources have been removed."""
    removals = tuple(new_unstructured(_name_of(obj), _gvk_of(obj)) for obj in resource_list)
    return DisabledStatus(namespaced_name=namespaced_name, message=explanation, resources=removals)


def new_present_status(namespaced_name: NamespacedName, gvk: GroupVersionKind) -> PresentStatus:
    """Create a reporter that checks the named resource exists."""
    return PresentStatus(namespaced_name=namespaced_name, gvk=gvk)