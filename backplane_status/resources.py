"""Core data types, errors, the object client and the status reporter base."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class ConditionStatus(_StrEnum):
    """Status value carried by a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionType(_StrEnum):
    """Well-known condition types of a multicluster engine."""

    PROGRESSING = "Progressing"
    AVAILABLE = "Available"
    COMPONENT_FAILURE = "ComponentFailure"


class Phase(_StrEnum):
    """Overall phase of a multicluster engine."""

    AVAILABLE = "Available"
    PROGRESSING = "Progressing"
    ERROR = "Error"
    UNINSTALLING = "Uninstalling"
    PAUSED = "Paused"


@dataclass(frozen=True)
class NamespacedName:
    """Name of an object, optionally qualified by its namespace."""

    name: str
    namespace: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@dataclass(frozen=True)
class GroupVersionKind:
    """API group, version and kind identifying a resource type."""

    group: str
    version: str
    kind: str

    def api_version(self) -> str:
        """Return the apiVersion string, e.g. ``v1`` or ``group/v1``."""
        return f"{self.group}/{self.version}" if self.group else self.version


@dataclass
class ComponentCondition:
    """Health of one tracked component."""

    name: str = ""
    kind: str = ""
    type: str = ""
    status: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""
    available: bool = False


@dataclass
class MultiClusterEngineCondition:
    """A condition recorded on the multicluster engine itself."""

    type: str = ""
    status: str = ""
    last_update_time: datetime | None = None
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""


@dataclass
class MultiClusterEngineStatus:
    """Aggregated status of a multicluster engine."""

    components: list[ComponentCondition] = field(default_factory=list)
    conditions: list[MultiClusterEngineCondition] = field(default_factory=list)
    phase: str = ""
    desired_version: str = ""
    current_version: str = ""


@dataclass
class MultiClusterEngine:
    """The parts of a multicluster engine resource that status reporting reads."""

    name: str
    target_namespace: str = ""
    deletion_timestamp: datetime | None = None
    status: MultiClusterEngineStatus = field(default_factory=MultiClusterEngineStatus)


class KubeError(Exception):
    """An error returned while reading from the cluster."""


class NotFoundError(KubeError):
    """The requested object does not exist."""


class NoMatchError(KubeError):
    """The requested resource type is not known to the cluster."""


def _object_key(obj: Mapping[str, Any]) -> tuple[str, str, str, str]:
    metadata = obj.get("metadata") or {}
    return (
        obj.get("apiVersion", ""),
        obj.get("kind", ""),
        metadata.get("namespace", "") or "",
        metadata.get("name", "") or "",
    )


class Client:
    """An object store answering lookups of unstructured objects.

    Objects are plain dictionaries with ``apiVersion``, ``kind`` and
    ``metadata``. When ``known_kinds`` is given, lookups of any other
    resource type raise :class:`NoMatchError`.
    """

    def __init__(
        self,
        objects: Iterable[Mapping[str, Any]] = (),
        known_kinds: Iterable[GroupVersionKind] | None = None,
    ) -> None:
        self._known_kinds = None if known_kinds is None else frozenset(known_kinds)
        self._objects = {_object_key(obj): copy.deepcopy(dict(obj)) for obj in objects}

    def get(self, gvk: GroupVersionKind, name: str, namespace: str = "") -> dict[str, Any]:
        """Return a copy of the named object or raise a :class:`KubeError`."""
        if self._known_kinds is not None and gvk not in self._known_kinds:
            raise NoMatchError(f"no matches for kind {gvk.kind!r} in version {gvk.api_version()!r}")
        key = (gvk.api_version(), gvk.kind, namespace or "", name)
        try:
            return copy.deepcopy(self._objects[key])
        except KeyError:
            where = f"{namespace}/{name}" if namespace else name
            raise NotFoundError(f"{gvk.kind} {where!r} not found") from None


class StatusReporter(ABC):
    """A resource that can report back a component status."""

    namespaced_name: NamespacedName

    @property
    def name(self) -> str:
        return self.namespaced_name.name

    @property
    def namespace(self) -> str:
        return self.namespaced_name.namespace

    @property
    @abstractmethod
    def kind(self) -> str:
        """Kind of the reported component."""

    @abstractmethod
    def status(self, client: Client) -> ComponentCondition:
        """Read the component from the cluster and describe its health."""


def unknown_status(name: str, kind: str) -> ComponentCondition:
    """Return the condition used when no status can be determined."""
    now = datetime.now(timezone.utc)
    return ComponentCondition(
        name=name,
        kind=kind,
        type="Unknown",
        status=ConditionStatus.UNKNOWN,
        last_update_time=now,
        last_transition_time=now,
        reason="No conditions available",
        message="No conditions available",
        available=False,
    )