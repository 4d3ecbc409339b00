import logging
from unittest.mock import AsyncMock

import pytest

from vapi_client.config.settings import Configuration
from vapi_client.models.web_call import WebCallResponse
from vapi_client.services.provisioning_client import ProvisioningClient
from vapi_client.services.transport import CallTransport


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)

    # configure_logging() detaches the client logger from the root logger
    client_logger = logging.getLogger("vapi_client")
    for handler in client_logger.handlers[:]:
        client_logger.removeHandler(handler)
    client_logger.setLevel(logging.NOTSET)
    client_logger.propagate = True
    yield


@pytest.fixture
def configuration():
    return Configuration(public_key="test-public-key", host="api.example.com")


@pytest.fixture
def web_call_response():
    return WebCallResponse(
        id="call-123",
        webCallUrl="https://rooms.example.com/room-123",
        artifactPlan={"videoRecordingEnabled": False},
    )


@pytest.fixture
def transport():
    """A transport whose primitives all succeed."""
    return AsyncMock(spec=CallTransport)


@pytest.fixture
def provisioning_client(web_call_response):
    client = AsyncMock(spec=ProvisioningClient)
    client.create_web_call.return_value = web_call_response
    return client
