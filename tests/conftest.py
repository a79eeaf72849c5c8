"""Shared fixtures for threadpin tests."""

import pytest

from threadpin.config import WorkerConfig
from threadpin.mailbox import Mailbox
from threadpin.worker import WorkerThread


@pytest.fixture
def fast_config():
    return WorkerConfig(poll_interval=0.01, name="test-worker")


@pytest.fixture
def worker(fast_config):
    w = WorkerThread(fast_config)
    yield w
    w.close()
    assert w.join(timeout=2.0)


@pytest.fixture
def mailbox():
    return Mailbox()
