"""Tracking component health and rolling it up into a multicluster engine status."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .condition import (
    COMPONENTS_AVAILABLE_REASON,
    COMPONENTS_UNAVAILABLE_REASON,
    PAUSED_REASON,
    condition_present_with_substring,
    get_condition,
    new_condition,
    set_condition,
)
from .resources import (
    Client,
    ComponentCondition,
    ConditionStatus,
    ConditionType,
    MultiClusterEngine,
    MultiClusterEngineCondition,
    MultiClusterEngineStatus,
    Phase,
    StatusReporter,
)

logger = logging.getLogger(__name__)

# Availability of each component seen at the previous check, used to log changes only.
_prev_availability: dict[str, bool] = {}


def _identity(reporter: StatusReporter) -> tuple[str, str, str]:
    return reporter.name, reporter.namespace, reporter.kind


def all_components_ready(components: Iterable[ComponentCondition]) -> bool:
    """Tell whether there is at least one component and every one is available."""
    components = list(components)
    if not components:
        return False

    all_available = True
    for component in components:
        previous = _prev_availability.get(component.name)
        if component.available:
            if previous is None or not previous:
                logger.info("The component is now available. Kind=%s Name=%s", component.kind, component.name)
            _prev_availability[component.name] = True
        else:
            if previous is None or previous:
                logger.info(
                    "The component is not yet available. Kind=%s Name=%s Reason=%s",
                    component.kind,
                    component.name,
                    component.reason,
                )
            _prev_availability[component.name] = False
            all_available = False
    return all_available


@dataclass
class StatusTracker:
    """Collects component reporters and conditions for one multicluster engine."""

    client: Client | None = None
    uid: str = ""
    components: list[StatusReporter] = field(default_factory=list)
    conditions: list[MultiClusterEngineCondition] = field(default_factory=list)
    version: str = ""

    def reset(self, uid: str) -> None:
        """Drop everything tracked and assign the tracker to ``uid``."""
        self.uid = uid
        self.components = []
        self.conditions = []

    def add_component(self, reporter: StatusReporter) -> None:
        """Track a reporter unless one with the same name, namespace and kind is tracked."""
        key = _identity(reporter)
        if any(_identity(c) == key for c in self.components):
            return
        self.components.append(reporter)

    def remove_component(self, reporter: StatusReporter) -> None:
        """Stop tracking the reporter matching this one's name, namespace and kind."""
        key = _identity(reporter)
        self.components = self._without_first(self.components, key)

    @staticmethod
    def _without_first(components: Sequence[StatusReporter], key: tuple[str, str, str]) -> list[StatusReporter]:
        result = list(components)
        match = next((c for c in result if _identity(c) == key), None)
        if match is not None:
            result.remove(match)
        return result

    def add_condition(self, condition: MultiClusterEngineCondition) -> None:
        """Set a condition, replacing any existing one of the same type."""
        self.conditions = set_condition(self.conditions, condition)

    def report_conditions(self) -> list[MultiClusterEngineCondition]:
        """Return the tracked conditions."""
        return self.conditions

    def report_status(self, mce: MultiClusterEngine) -> MultiClusterEngineStatus:
        """Query every component and build the overall status."""
        components = [reporter.status(self.client) for reporter in self.components]

        if all_components_ready(components):
            self.add_condition(
                new_condition(ConditionType.AVAILABLE, ConditionStatus.TRUE, COMPONENTS_AVAILABLE_REASON, "")
            )
        else:
            self.add_condition(
                new_condition(ConditionType.AVAILABLE, ConditionStatus.FALSE, COMPONENTS_UNAVAILABLE_REASON, "")
            )

        conditions = self.report_conditions()
        phase = self._report_phase(mce, components, conditions)

        current_version = mce.status.current_version
        if phase == Phase.AVAILABLE:
            current_version = self.version

        return MultiClusterEngineStatus(
            components=components,
            conditions=list(conditions),
            phase=phase,
            desired_version=self.version,
            current_version=current_version,
        )

    @staticmethod
    def _report_phase(
        mce: MultiClusterEngine,
        components: Sequence[ComponentCondition],
        conditions: Sequence[MultiClusterEngineCondition],
    ) -> Phase:
        if any(c.reason == PAUSED_REASON for c in conditions):
            return Phase.PAUSED

        progress = get_condition(conditions, ConditionType.PROGRESSING)
        if progress is not None and progress.status == ConditionStatus.FALSE:
            return Phase.ERROR

        if mce.deletion_timestamp is not None:
            return Phase.UNINSTALLING

        if not components:
            return Phase.PROGRESSING

        if condition_present_with_substring(conditions, ConditionType.COMPONENT_FAILURE.value):
            return Phase.ERROR

        if not all_components_ready(components):
            return Phase.PROGRESSING

        return Phase.AVAILABLE