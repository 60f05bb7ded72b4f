"""
Bounded retries with jittered exponential backoff around an RpcGateway.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .config import Config
from .rpc_client import RpcGateway

logger = logging.getLogger(__name__)


@dataclass
class RetryState:
    attempt: int = 0
    delay: float = 0.0


class RetryPolicy:
    """
    Attempt a gateway call up to max_attempts times.

    The wait before attempt n+1 is min(base_delay * 2**(n-1), max_delay) plus a random
    jitter in [0, jitter], so concurrent resolutions against one endpoint do not retry
    in lockstep.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.1,
        max_delay: float = 2.0,
        jitter: float = 0.15,
        sleep: Callable[[float], None] = time.sleep,
        rand: Callable[[float, float], float] = random.uniform,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.max_attempts = int(max_attempts)
        self.base_delay = max(0.0, float(base_delay))
        self.max_delay = max(self.base_delay, float(max_delay))
        self.jitter = max(0.0, float(jitter))
        self._sleep = sleep
        self._rand = rand

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_retries,
            base_delay=config.backoff_seconds,
            max_delay=config.backoff_max_seconds,
            jitter=config.jitter_seconds,
            **kwargs,
        )

    def compute_delay(self, attempt: int) -> float:
        """Delay after the given (1-indexed) failed attempt."""
        backoff = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        jitter = self._rand(0.0, self.jitter) if self.jitter else 0.0
        return backoff + jitter

    def call(self, gateway: RpcGateway, to: str, data: bytes) -> Optional[bytes]:
        state = RetryState()
        while state.attempt < self.max_attempts:
            state.attempt += 1
            result = gateway.call(to, data)
            if result:
                return result
            if state.attempt >= self.max_attempts:
                break
            state.delay = self.compute_delay(state.attempt)
            logger.debug(
                "No data from %s (attempt %d/%d), retrying in %.3fs",
                to,
                state.attempt,
                self.max_attempts,
                state.delay,
            )
            self._sleep(state.delay)

        logger.debug("Giving up on %s after %d attempts", to, state.attempt)
        return None

    def wrap(self, gateway: RpcGateway) -> "RetryingGateway":
        return RetryingGateway(gateway, self)


class RetryingGateway:
    """RpcGateway that applies a RetryPolicy to every call."""

    def __init__(self, gateway: RpcGateway, policy: RetryPolicy) -> None:
        self.gateway = gateway
        self.policy = policy

    def call(self, to: str, data: bytes) -> Optional[bytes]:
        return self.policy.call(self.gateway, to, data)
