from dataclasses import dataclass

import pytest

from backplane_status.resources import (
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

NAMESPACE_GVK = GroupVersionKind(group="", version="v1", kind="Namespace")
CM_GVK = GroupVersionKind(group="operator.open-cluster-management.io", version="v1", kind="ClusterManager")


def _namespace(name):
    return {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": name}}


def test_api_version_core_group():
    assert NAMESPACE_GVK.api_version() == "v1"


def test_api_version_named_group():
    assert CM_GVK.api_version() == "operator.open-cluster-management.io/v1"


def test_namespaced_name_defaults_to_cluster_scope():
    assert NamespacedName("test").namespace == ""


def test_client_returns_stored_object():
    client = Client([_namespace("test")])
    obj = client.get(NAMESPACE_GVK, "test", "")
    assert obj["metadata"]["name"] == "test"
    assert obj["kind"] == "Namespace"


def test_client_returns_copies():
    client = Client([_namespace("test")])
    first = client.get(NAMESPACE_GVK, "test", "")
    first["metadata"]["name"] = "changed"
    assert client.get(NAMESPACE_GVK, "test", "")["metadata"]["name"] == "test"


def test_client_not_found():
    client = Client()
    with pytest.raises(NotFoundError):
        client.get(NAMESPACE_GVK, "test", "")


def test_client_namespace_must_match():
    obj = {"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "d", "namespace": "a"}}
    client = Client([obj])
    gvk = GroupVersionKind("apps", "v1", "Deployment")
    assert client.get(gvk, "d", "a")["metadata"]["namespace"] == "a"
    with pytest.raises(NotFoundError):
        client.get(gvk, "d", "b")


def test_client_unknown_kind_raises_no_match():
    client = Client(known_kinds=[NAMESPACE_GVK])
    with pytest.raises(NoMatchError):
        client.get(CM_GVK, "cluster-manager", "")


def test_not_found_caught_as_kube_error():
    with pytest.raises(KubeError):
        Client().get(NAMESPACE_GVK, "missing", "")


def test_no_match_caught_as_kube_error():
    client = Client(known_kinds=[NAMESPACE_GVK])
    with pytest.raises(KubeError):
        client.get(CM_GVK, "cluster-manager", "")


def test_unknown_status_fields():
    cond = unknown_status("cluster-manager", "ClusterManager")
    assert cond.name == "cluster-manager"
    assert cond.kind == "ClusterManager"
    assert cond.type == "Unknown"
    assert cond.status == ConditionStatus.UNKNOWN
    assert cond.reason == "No conditions available"
    assert cond.message == "No conditions available"
    assert cond.available is False
    assert cond.last_update_time is not None and cond.last_transition_time is not None


def test_condition_status_compares_as_string():
    cond = unknown_status("x", "Deployment")
    assert cond.status == "Unknown"
    assert ConditionStatus("True") is ConditionStatus.TRUE


def test_status_reporter_is_abstract():
    with pytest.raises(TypeError):
        StatusReporter()


@dataclass
class _Reporter(StatusReporter):
    namespaced_name: NamespacedName

    @property
    def kind(self):
        return "Mock"

    def status(self, client):
        return ComponentCondition(name=self.name, kind=self.kind, available=True)


def test_status_reporter_subclass_uses_namespaced_name():
    reporter = _Reporter(NamespacedName("mock-name", "mock-ns"))
    assert reporter.name == "mock-name"
    assert reporter.namespace == "mock-ns"
    cond = reporter.status(Client())
    assert cond.name == "mock-name"
    assert cond.available is True