import pytest
from apps.notifications.sinks import MemoryNotificationSink


@pytest.fixture(autouse=True)
def memory_outbox():
    """Give every test an empty in-memory notification sink."""
    return MemoryNotificationSink.reset()
