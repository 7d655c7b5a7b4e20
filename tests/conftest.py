import json
import httpx
import pytest
from faker import Faker

from insight_sync.loader import Credentials, SyncTarget, collection_url


class Recorder:
    """MockTransport handler that records every request and can fail or drop the n-th one."""

    def __init__(self, fail_on=None, status=500, disconnect_on=None):
        self.fail_on = fail_on
        self.disconnect_on = disconnect_on
        self.status = status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request, body))
        if len(self.requests) == self.disconnect_on:
            raise httpx.ConnectError("connection refused", request=request)
        if len(self.requests) == self.fail_on:
            return httpx.Response(self.status, text="server exploded")
        if isinstance(body, list):
            return httpx.Response(200, json={"created": len(body)})
        return httpx.Response(200, json={"ok": True})

    @property
    def bodies(self):
        return [body for _, body in self.requests]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def fake():
    f = Faker()
    f.seed_instance(1234)
    return f


@pytest.fixture
def make_records(fake):
    def _make(n):
        return [
            {
                "id": f"S{i:04d}",
                "first_name": fake.first_name(),
                "last_name": fake.last_name(),
                "email": fake.email(),
                "birth_date": fake.date_of_birth(minimum_age=10, maximum_age=18).isoformat(),
            }
            for i in range(n)
        ]
    return _make


@pytest.fixture
def creds():
    return Credentials(sub_id="sub1", token="tok", url="https://insight.test")


@pytest.fixture
def make_target(creds):
    def _make(data, record_type="student"):
        return SyncTarget(data=data, creds=creds, url=collection_url(creds, record_type))
    return _make


@pytest.fixture
def write_json(tmp_path):
    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
