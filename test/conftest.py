"""Shared fixtures for discovery engine tests."""

import pytest
from iotile.core.utilities.async_tools import BackgroundEventLoop


@pytest.fixture(scope='function')
def loop():
    loop = BackgroundEventLoop()

    loop.start()
    yield loop
    loop.stop()
