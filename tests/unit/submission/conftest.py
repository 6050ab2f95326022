import pytest

from cfxsdk.submission import PollPolicy


@pytest.fixture
def policy() -> PollPolicy:
    return PollPolicy(interval=0, max_attempts=20, timeout=0, max_lookup_errors=3, drop_after_not_found=0)
