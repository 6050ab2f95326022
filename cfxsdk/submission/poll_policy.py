from typing import NamedTuple, Union

from cfxsdk import configure as conf


class PollPolicy(NamedTuple):
    """How long a submitted transaction is observed and when observation gives up.

    0 disables `max_attempts`, `timeout`, `max_lookup_errors` and `drop_after_not_found`.
    """
    interval: Union[int, float] = 1.0
    max_attempts: int = 0
    timeout: Union[int, float] = 0
    max_lookup_errors: int = 3
    drop_after_not_found: int = 0

    @classmethod
    def from_conf(cls):
        return cls(interval=conf.POLL_INTERVAL,
                   max_attempts=conf.POLL_MAX_ATTEMPTS,
                   timeout=conf.POLL_TIMEOUT,
                   max_lookup_errors=conf.POLL_MAX_LOOKUP_ERRORS,
                   drop_after_not_found=conf.POLL_DROP_AFTER_NOT_FOUND)
