from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from backplane_status.condition import (
    COMPONENTS_AVAILABLE_REASON,
    COMPONENTS_UNAVAILABLE_REASON,
    DEPLOY_SUCCESS_REASON,
    PAUSED_REASON,
    get_condition,
    new_condition,
)
from backplane_status.resources import (
    Client,
    ComponentCondition,
    ConditionStatus,
    ConditionType,
    MultiClusterEngine,
    NamespacedName,
    Phase,
    StatusReporter,
)
from backplane_status.status import StatusTracker, all_components_ready


@dataclass(frozen=True)
class MockStatus(StatusReporter):
    namespaced_name: NamespacedName
    status_func: Callable[[], ComponentCondition] | None = None

    @property
    def kind(self) -> str:
        return "Mock"

    def status(self, client: Client) -> ComponentCondition:
        if self.status_func is not None:
            return self.status_func()
        now = datetime.now(timezone.utc)
        return ComponentCondition(
            name=self.name,
            kind="Deployment",
            type="Available",
            status="true",
            last_update_time=now,
            last_transition_time=now,
            reason="Running",
            message="Mock is running",
            available=True,
        )


def _running() -> ComponentCondition:
    return ComponentCondition(
        name="mock-name", kind="Deployment", type="Available", status="true",
        reason="Running", message="Mock is running", available=True,
    )


def _not_running() -> ComponentCondition:
    return ComponentCondition(
        name="mock-name", kind="Deployment", type="Pending", status="true",
        reason="NotRunning", message="Mock is not running", available=False,
    )


def _mce(**kwargs) -> MultiClusterEngine:
    return MultiClusterEngine(name="test", target_namespace="mock-ns", **kwargs)


def test_add_component_is_idempotent():
    tracker = StatusTracker(client=Client())
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns")))
    assert len(tracker.components) == 1
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns")))
    assert len(tracker.components) == 1


def test_remove_component():
    tracker = StatusTracker(client=Client())
    tracker.add_component(MockStatus(NamespacedName("mock-name-a", "mock-ns")))
    tracker.add_component(MockStatus(NamespacedName("mock-name-b", "mock-ns")))

    tracker.remove_component(MockStatus(NamespacedName("mock-name-a", "mock-ns")))
    assert [c.name for c in tracker.components] == ["mock-name-b"]

    tracker.remove_component(MockStatus(NamespacedName("mock-name-a", "mock-ns")))
    assert [c.name for c in tracker.components] == ["mock-name-b"]


def test_add_condition():
    tracker = StatusTracker()
    tracker.add_condition(
        new_condition(ConditionType.PROGRESSING, ConditionStatus.TRUE, DEPLOY_SUCCESS_REASON, "All components deployed")
    )
    assert len(tracker.report_conditions()) == 1

    tracker.add_condition(
        new_condition(ConditionType.AVAILABLE, ConditionStatus.TRUE, COMPONENTS_AVAILABLE_REASON, "All components available")
    )
    assert len(tracker.report_conditions()) == 2

    tracker.add_condition(
        new_condition(
            ConditionType.AVAILABLE, ConditionStatus.FALSE, COMPONENTS_UNAVAILABLE_REASON, "Not all components available"
        )
    )
    conditions = tracker.report_conditions()
    assert len(conditions) == 2
    assert get_condition(conditions, ConditionType.AVAILABLE).status == ConditionStatus.FALSE


def test_report_status_single_running():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _running))
    got = tracker.report_status(_mce())
    assert got.phase == Phase.AVAILABLE
    assert got.desired_version == "9.9.9"
    assert got.current_version == "9.9.9"


def test_report_status_single_not_running():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _not_running))
    got = tracker.report_status(_mce())
    assert got.phase == Phase.PROGRESSING
    assert got.desired_version == "9.9.9"
    assert got.current_version == ""


def test_report_status_no_components():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    got = tracker.report_status(_mce())
    assert got.phase == Phase.PROGRESSING
    assert got.desired_version == "9.9.9"
    assert got.current_version == ""


def test_report_status_sets_available_condition():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _running))
    got = tracker.report_status(_mce())
    available = get_condition(got.conditions, ConditionType.AVAILABLE)
    assert available.status == ConditionStatus.TRUE
    assert available.reason == COMPONENTS_AVAILABLE_REASON
    assert [c.name for c in got.components] == ["mock-name"]


def test_report_status_paused():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _running))
    tracker.add_condition(new_condition(ConditionType.PROGRESSING, ConditionStatus.UNKNOWN, PAUSED_REASON, ""))
    assert tracker.report_status(_mce()).phase == Phase.PAUSED


def test_report_status_not_progressing_is_error():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _running))
    tracker.add_condition(new_condition(ConditionType.PROGRESSING, ConditionStatus.FALSE, "Stuck", ""))
    assert tracker.report_status(_mce()).phase == Phase.ERROR


def test_report_status_deleting_is_uninstalling():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _running))
    mce = _mce(deletion_timestamp=datetime.now(timezone.utc))
    assert tracker.report_status(mce).phase == Phase.UNINSTALLING


def test_report_status_component_failure_is_error():
    tracker = StatusTracker(client=Client(), version="9.9.9")
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _running))
    tracker.add_condition(
        new_condition(f"{ConditionType.COMPONENT_FAILURE}: foo (Kind: Deployment)", ConditionStatus.TRUE, "x", "")
    )
    assert tracker.report_status(_mce()).phase == Phase.ERROR


def test_reset():
    tracker = StatusTracker(client=Client())
    tracker.add_component(MockStatus(NamespacedName("mock-name", "mock-ns"), _not_running))
    tracker.add_condition(new_condition(ConditionType.PROGRESSING, ConditionStatus.TRUE, DEPLOY_SUCCESS_REASON, ""))
    assert len(tracker.components) == 1
    tracker.reset("123")
    assert tracker.components == []
    assert tracker.conditions == []
    assert tracker.uid == "123"


def test_all_components_ready():
    assert all_components_ready([]) is False
    assert all_components_ready([_running()]) is True
    assert all_components_ready([_running(), _not_running()]) is False