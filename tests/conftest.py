from unittest.mock import MagicMock

import pytest

from micex_iss.logger.logger import Logger
from micex_iss.platforms.micex.client import MicexClient
from tests.stubs import StubTransport


@pytest.fixture
def logger():
    return MagicMock(spec=Logger)


@pytest.fixture
def transport():
    return StubTransport()


@pytest.fixture
def client(logger, transport):
    return MicexClient(logger=logger, transport=transport)
