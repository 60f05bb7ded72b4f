"""
Tests for the retry policy around the RPC gateway.
"""

import random
from typing import List, Optional

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ens_resolver.config import Config
from ens_resolver.retry import RetryingGateway, RetryPolicy


class ScriptedGateway:
    """Plays back a fixed list of responses, one per call."""

    def __init__(self, responses: List[Optional[bytes]]) -> None:
        self.responses = list(responses)
        self.calls = 0

    def call(self, to: str, data: bytes) -> Optional[bytes]:
        self.calls += 1
        if self.responses:
            return self.responses.pop(0)
        return None


def make_policy(max_attempts: int, sleeps: List[float], **kwargs) -> RetryPolicy:
    kwargs.setdefault("rand", lambda _a, _b: 0.0)
    return RetryPolicy(max_attempts=max_attempts, sleep=sleeps.append, **kwargs)


class TestRetryBehaviour:
    def test_succeeds_on_third_attempt(self) -> None:
        sleeps: List[float] = []
        gateway = ScriptedGateway([None, None, b"\x01" * 32])
        policy = make_policy(3, sleeps)

        assert policy.call(gateway, "0xabc", b"") == b"\x01" * 32
        assert gateway.calls == 3
        assert len(sleeps) == 2

    def test_exhaustion_reports_absent(self) -> None:
        sleeps: List[float] = []
        gateway = ScriptedGateway([None] * 10)
        policy = make_policy(4, sleeps)

        assert policy.call(gateway, "0xabc", b"") is None
        assert gateway.calls == 4
        assert len(sleeps) == 3

    def test_empty_bytes_count_as_no_data(self) -> None:
        sleeps: List[float] = []
        gateway = ScriptedGateway([b"", b"\x02"])
        assert make_policy(3, sleeps).call(gateway, "0xabc", b"") == b"\x02"
        assert gateway.calls == 2

    def test_first_success_does_not_sleep(self) -> None:
        sleeps: List[float] = []
        gateway = ScriptedGateway([b"\x03"])
        assert make_policy(3, sleeps).call(gateway, "0xabc", b"") == b"\x03"
        assert sleeps == []

    def test_exponential_delays_without_jitter(self) -> None:
        sleeps: List[float] = []
        policy = make_policy(5, sleeps, base_delay=0.1, max_delay=0.3)
        policy.call(ScriptedGateway([]), "0xabc", b"")
        assert sleeps == pytest.approx([0.1, 0.2, 0.3, 0.3])

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_wrap_returns_gateway(self) -> None:
        sleeps: List[float] = []
        inner = ScriptedGateway([None, b"\x04"])
        wrapped = make_policy(2, sleeps).wrap(inner)
        assert isinstance(wrapped, RetryingGateway)
        assert wrapped.call("0xabc", b"") == b"\x04"

    def test_from_config(self) -> None:
        config = Config(
            rpc_url="http://localhost:8545",
            max_retries=5,
            backoff_seconds=0.2,
            backoff_max_seconds=1.0,
            jitter_seconds=0.05,
        )
        policy = RetryPolicy.from_config(config)
        assert policy.max_attempts == 5
        assert policy.base_delay == 0.2
        assert policy.max_delay == 1.0
        assert policy.jitter == 0.05


class TestJitteredBackoffProperty:
    @given(
        attempt=st.integers(min_value=1, max_value=10),
        base_delay=st.floats(min_value=0.001, max_value=0.5),
        max_delay=st.floats(min_value=0.5, max_value=5.0),
        jitter=st.floats(min_value=0.0, max_value=0.5),
    )
    @settings(max_examples=200)
    def test_delay_within_bounds(self, attempt, base_delay, max_delay, jitter) -> None:
        policy = RetryPolicy(
            base_delay=base_delay,
            max_delay=max_delay,
            jitter=jitter,
            rand=random.Random(attempt).uniform,
        )
        backoff = min(base_delay * 2 ** (attempt - 1), max_delay)
        delay = policy.compute_delay(attempt)
        assert backoff <= delay <= backoff + jitter + 1e-12

    @given(attempt=st.integers(min_value=1, max_value=8))
    @settings(max_examples=50)
    def test_backoff_never_decreases(self, attempt) -> None:
        policy = RetryPolicy(base_delay=0.05, max_delay=10.0, jitter=0.0)
        assert policy.compute_delay(attempt + 1) >= policy.compute_delay(attempt)
