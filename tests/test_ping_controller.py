import pytest

from dockkit.ping_controller import NotFoundError, PingReconciler, ignore_not_found
from dockkit.ping_types import GROUP_VERSION, Ping, PingSpec


class FakeClient:
    def __init__(self, pings=(), get_error=None, create_error=None):
        self.pings = {(p.namespace, p.name): p for p in pings}
        self.get_error = get_error
        self.create_error = create_error
        self.created = []

    def get(self, namespace, name):
        if self.get_error is not None:
            raise self.get_error
        try:
            return self.pings[(namespace, name)]
        except KeyError:
            raise NotFoundError(f"{namespace}/{name}") from None

    def create(self, obj):
        if self.create_error is not None:
            raise self.create_error
        self.created.append(obj)


def _ping():
    return Ping(name="web", namespace="prod", spec=PingSpec(hostname="example.com", attempts=3))


def test_ping_registered_under_group_version():
    assert Ping().api_version == "monitors.demo.io/v1beta1"
    assert str(GROUP_VERSION) == Ping().api_version


def test_build_job():
    job = PingReconciler(FakeClient()).build_job(_ping())
    assert job["apiVersion"] == "batch/v1"
    assert job["kind"] == "Job"
    assert job["metadata"] == {"name": "web-job", "namespace": "prod"}
    pod = job["spec"]["template"]["spec"]
    assert pod["restartPolicy"] == "Never"
    assert pod["containers"] == [
        {"name": "ping", "image": "bash", "command": ["/bin/ping"], "args": ["-c3", "example.com"]}
    ]


def test_reconcile_creates_job():
    client = FakeClient([_ping()])
    job = PingReconciler(client).reconcile("prod", "web")
    assert client.created == [job]
    assert job["metadata"]["name"] == "web-job"


def test_reconcile_missing_ping_is_ignored():
    client = FakeClient()
    assert PingReconciler(client).reconcile("prod", "gone") is None
    assert client.created == []


def test_reconcile_get_error_propagates():
    client = FakeClient(get_error=RuntimeError("api down"))
    with pytest.raises(RuntimeError, match="api down"):
        PingReconciler(client).reconcile("prod", "web")


def test_reconcile_create_not_found_is_ignored():
    client = FakeClient([_ping()], create_error=NotFoundError("namespace gone"))
    assert PingReconciler(client).reconcile("prod", "web") is None


def test_reconcile_create_error_propagates():
    client = FakeClient([_ping()], create_error=RuntimeError("exists"))
    with pytest.raises(RuntimeError, match="exists"):
        PingReconciler(client).reconcile("prod", "web")


def test_ignore_not_found():
    other = RuntimeError("boom")
    assert ignore_not_found(NotFoundError("x")) is None
    assert ignore_not_found(other) is other
    assert ignore_not_found(None) is None