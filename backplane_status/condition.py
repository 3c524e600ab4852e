"""Creating and maintaining multicluster engine conditions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime, timezone

from .resources import MultiClusterEngineCondition

# The hub failed to apply a resource.
APPLY_FAILED_REASON = "FailedApplyingComponent"
# All desired components are running successfully.
COMPONENTS_AVAILABLE_REASON = "ComponentsAvailable"
# One or more components are in an unready state.
COMPONENTS_UNAVAILABLE_REASON = "ComponentsUnavailable"
# The hub failed to deploy a resource.
DEPLOY_FAILED_REASON = "FailedDeployingComponent"
# All components have been deployed.
DEPLOY_SUCCESS_REASON = "ComponentsDeployed"
# Something is missing or misconfigured and prevents progress.
REQUIREMENTS_NOT_MET_REASON = "RequirementsNotMet"
# The resource is scheduled for deletion.
DELETE_TIMESTAMP_REASON = "DeletionTimestampPresent"
# The reconciler is waiting on a resource before it can progress.
WAITING_FOR_RESOURCE_REASON = "WaitingForResource"
# A managed cluster was deleted and awaits finalization.
MANAGED_CLUSTER_TERMINATING_REASON = "ManagedClusterTerminating"
# A managed cluster's namespace was deleted and awaits finalization.
NAMESPACE_TERMINATING_REASON = "ManagedClusterNamespaceTerminating"
# The multicluster engine is paused.
PAUSED_REASON = "Paused"
# The resource cannot be deployed as intended with the current configuration.
UNSUPPORTED_CONFIG_REASON = "UnsupportedConfiguration"
# The component was disabled by the user.
COMPONENT_DISABLED_REASON = "ComponentDisabled"


def new_condition(cond_type: str, status: str, reason: str, message: str) -> MultiClusterEngineCondition:
    """Create a condition stamped with the current time."""
    now = datetime.now(timezone.utc)
    return MultiClusterEngineCondition(
        type=cond_type,
        status=status,
        last_update_time=now,
        last_transition_time=now,
        reason=reason,
        message=message,
    )


def get_condition(
    conditions: Iterable[MultiClusterEngineCondition], cond_type: str
) -> MultiClusterEngineCondition | None:
    """Return the first condition of the given type, or None."""
    return next((c for c in conditions if c.type == cond_type), None)


def filter_out_condition(
    conditions: Iterable[MultiClusterEngineCondition], cond_type: str
) -> list[MultiClusterEngineCondition]:
    """Return the conditions whose type differs from ``cond_type``."""
    return [c for c in conditions if c.type != cond_type]


def filter_out_condition_with_substring(
    conditions: Iterable[MultiClusterEngineCondition], cond_type: str
) -> list[MultiClusterEngineCondition]:
    """Return the conditions whose type does not contain ``cond_type``."""
    return [c for c in conditions if str(cond_type) not in c.type]


def condition_present_with_substring(conditions: Iterable[MultiClusterEngineCondition], substring: str) -> bool:
    """Tell whether any condition's type contains ``substring``."""
    return any(str(substring) in c.type for c in conditions)


def set_condition(
    conditions: Sequence[MultiClusterEngineCondition], condition: MultiClusterEngineCondition
) -> list[MultiClusterEngineCondition]:
    """Return the conditions with ``condition`` replacing any of the same type.

    An identical existing condition is kept as is; when only the reason or
    message changes, the previous transition time is preserved.
    """
    current = get_condition(conditions, condition.type)
    if current is not None:
        if (current.status, current.reason, current.message) == (
            condition.status,
            condition.reason,
            condition.message,
        ):
            return list(conditions)
        if current.status == condition.status:
            condition = replace(condition, last_transition_time=current.last_transition_time)
    return [*filter_out_condition(conditions, condition.type), condition]