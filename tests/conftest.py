# tests/conftest.py
import pytest

from tck_core.client import JsonRpcClient
from tck_core.config import Settings
from tck_core.keys import generate_key, ed25519
from tck_core.mirror import MirrorNodeClient
from tck_core.transport import LocalTransport

from fake_server import FakeMirrorSession, FakeTckServer


@pytest.fixture
def server():
    return FakeTckServer()


@pytest.fixture
def transport(server):
    return LocalTransport(server)


@pytest.fixture
def client(transport):
    return JsonRpcClient(transport)


@pytest.fixture
def operator():
    return generate_key(ed25519()).private_keys[0]


@pytest.fixture
def settings(operator):
    return Settings(
        transport="local",
        operator_account_id="0.0.2",
        operator_private_key=operator.private_to_wire(),
        retry_max_attempts=5,
        retry_delay=0.0,
    )


@pytest.fixture
def mirror(server):
    return MirrorNodeClient("http://mirror.local", session=FakeMirrorSession(server))


@pytest.fixture
def lagging_mirror(server):
    return MirrorNodeClient("http://mirror.local", session=FakeMirrorSession(server, lag=2))
