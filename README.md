# backplane-status

Status reporting for the components of a multicluster engine. Each component has a
*status reporter*. A reporter looks up resources through a `Client` and turns what it
finds into a `ComponentCondition`. A `StatusTracker` collects those conditions and works
out the engine's overall phase and version.

The package has no runtime dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `backplane_status.resources` holds the data types and the client:
  - `ComponentCondition`, `MultiClusterEngineCondition`, `MultiClusterEngine` and
    `MultiClusterEngineStatus`.
  - `NamespacedName` and `GroupVersionKind`. `GroupVersionKind.api_version()` returns
    `v1` or `group/v1`.
  - The enums `ConditionStatus`, `ConditionType` and `Phase`.
  - The errors `KubeError`, `NotFoundError` and `NoMatchError`.
  - `Client`, an in-memory object store.
  - The abstract `StatusReporter` base class.
  - `unknown_status(name, kind)`.
- `backplane_status.condition` holds the reason constants, such as `PAUSED_REASON` and
  `COMPONENT_DISABLED_REASON`, and helpers for engine conditions:
  - `new_condition`
  - `set_condition`
  - `get_condition`
  - `filter_out_condition`
  - `filter_out_condition_with_substring`
  - `condition_present_with_substring`
- The reporters:
  - `backplane_status.deployment.DeploymentStatus` reports on a deployment. The module
    also exports `map_deployment`, `latest_deploy_condition`,
    `progressing_deploy_condition` and `successful_deploy`.
  - `backplane_status.cluster_manager` provides `ClusterManagerStatus` and
    `ManagedClusterAddOnStatus`, with `map_cluster_manager` and
    `map_managed_cluster_addon`.
  - `backplane_status.generic` provides `StaticStatus`, `DisabledStatus` and
    `PresentStatus`, with the factories `new_disabled_status`, `new_present_status` and
    `new_unstructured`.
  - `backplane_status.local_cluster` provides `LocalClusterStatus`, which checks the hub's
    own managed cluster. It also provides `new_managed_cluster`.
  - `backplane_status.toggle` provides `ToggledOffStatus`, `enabled_status` (which returns a
    `DeploymentStatus`) and `disabled_status`. A switched-off component counts as available
    once none of its resources remain.
- `backplane_status.status` provides `StatusTracker` and `all_components_ready`.

## The client

`Client(objects=..., known_kinds=...)` holds objects as plain dictionaries. Each object has
`apiVersion`, `kind` and `metadata` (`name`, and optionally `namespace`).

`get(gvk, name, namespace="")` behaves as follows:
- It returns a copy of the object when it is found.
- It raises `NotFoundError` when the object is absent.
- It raises `NoMatchError` when `known_kinds` was given and `gvk` is not among them.

To read from a real cluster, subclass `Client` and override `get`. It must return
dictionaries in the same shape and raise the same errors.

## Usage

```python
from backplane_status.resources import Client, MultiClusterEngine, NamespacedName
from backplane_status.toggle import enabled_status
from backplane_status.status import StatusTracker

client = Client(objects=[{
    "apiVersion": "apps/v1",
    "kind": "Deployment",
    "metadata": {"name": "ocm-controller", "namespace": "multicluster-engine"},
    "status": {"conditions": [{"type": "Available", "status": "True"}]},
}])

tracker = StatusTracker(client=client, version="2.0.0")
tracker.add_component(enabled_status(NamespacedName("ocm-controller", "multicluster-engine")))

status = tracker.report_status(MultiClusterEngine(name="multiclusterengine"))
print(status.phase, status.current_version, status.desired_version)
```

### What `report_status` does

`report_status` queries every tracked reporter and sets the `Available` condition from the
results. It then chooses the phase by checking these rules in order:

1. `Paused` if any condition has the paused reason.
2. `Error` if the `Progressing` condition is false.
3. `Uninstalling` if the engine has a deletion timestamp.
4. `Progressing` if no components are tracked.
5. `Error` if any condition type contains `ComponentFailure`.
6. `Progressing` if any component is unavailable.
7. `Available` otherwise.

The returned versions work like this:
- `desired_version` is always the tracker's `version`.
- `current_version` becomes the tracker's `version` only when the phase is `Available`.
  Otherwise it keeps the engine's previous value.

### Other tracker methods

- `add_component` and `remove_component` identify a reporter by its name, namespace and
  kind.
- `reset(uid)` clears all components and conditions.

Changes in component availability are logged through the standard `logging` module.

## What this package does not do

- It does not connect to a cluster. The bundled `Client` only serves objects held in
  memory.
- It does not watch resources.
- It does not run a reconcile loop.
- It does not write the computed status back anywhere.