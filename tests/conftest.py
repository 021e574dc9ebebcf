"""Shared test fixtures for the pitcli test suite."""

from io import StringIO
from unittest.mock import patch

import pytest
from loguru import logger

from pitcli.engine.connector import ConnectionEstablisher
from pitcli.engine.session import Session
from tests.fakes import FakeClientFactory, FakeRemoteClient


@pytest.fixture
def client() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture
def factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def said() -> list[str]:
    """Collects everything the inbound pump writes."""
    return []


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def schema_session() -> Session:
    return Session(docs="connector.getprotos")


@pytest.fixture
def establisher(factory) -> ConnectionEstablisher:
    # short datagram deadline so timeout tests stay fast
    return ConnectionEstablisher(factory, datagramTimeout=0.05)


@pytest.fixture
def make_app(establisher, said):
    """Build a RemoteCmdlineApp without touching log files or the network."""

    def build(**kwargs):
        from pitcli.cli import RemoteCmdlineApp

        with patch("pitcli.cli.RemoteCmdlineApp.setupLogging"):
            kwargs.setdefault("clientFactory", "")
            app = RemoteCmdlineApp(historyPath="/dev/null", **kwargs)

        app.establisher = establisher
        app.output = said.append
        return app

    return build


@pytest.fixture
def app(make_app):
    return make_app(docs="")


@pytest.fixture
def log_capture():
    """Capture loguru output for assertion. Yields a StringIO buffer."""
    buf = StringIO()
    handler_id = logger.add(buf, format="{message}", level="DEBUG")
    yield buf
    logger.remove(handler_id)
