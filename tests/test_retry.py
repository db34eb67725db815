from __future__ import annotations

from unittest.mock import patch

import pytest

from shared.retry import RetryConfig, _compute_sleep_seconds, call_with_retry


class _Result:
    def __init__(self, status_code: int, headers: dict | None = None):
        self.status_code = status_code
        self.headers = headers or {}


@patch("shared.retry.time.sleep")
def test_retries_retryable_result_until_success(mock_sleep) -> None:
    results = iter([_Result(502), _Result(429), _Result(200)])

    result = call_with_retry(
        operation_name="op",
        fn=lambda: next(results),
        is_retryable_exception=lambda exc: False,
        is_retryable_result=lambda r: r.status_code >= 429,
    )

    assert result.status_code == 200
    assert mock_sleep.call_count == 2


@patch("shared.retry.time.sleep")
def test_returns_last_result_when_attempts_exhausted(mock_sleep) -> None:
    result = call_with_retry(
        operation_name="op",
        fn=lambda: _Result(503),
        is_retryable_exception=lambda exc: False,
        is_retryable_result=lambda r: True,
        config=RetryConfig(max_attempts=3),
    )

    assert result.status_code == 503
    assert mock_sleep.call_count == 2


@patch("shared.retry.time.sleep")
def test_honors_retry_after_header(mock_sleep) -> None:
    results = iter([_Result(429, {"Retry-After": "3"}), _Result(200)])

    call_with_retry(
        operation_name="op",
        fn=lambda: next(results),
        is_retryable_exception=lambda exc: False,
        is_retryable_result=lambda r: r.status_code == 429,
    )

    mock_sleep.assert_called_once_with(3.0)


@patch("shared.retry.time.sleep")
def test_non_retryable_exception_propagates_immediately(mock_sleep) -> None:
    calls = []

    def _boom():
        calls.append(1)
        raise KeyError("nope")

    with pytest.raises(KeyError):
        call_with_retry(operation_name="op", fn=_boom, is_retryable_exception=lambda exc: False)

    assert len(calls) == 1
    mock_sleep.assert_not_called()


@patch("shared.retry.time.sleep")
def test_retryable_exception_raised_after_max_attempts(mock_sleep) -> None:
    with pytest.raises(ConnectionError):
        call_with_retry(
            operation_name="op",
            fn=lambda: (_ for _ in ()).throw(ConnectionError("down")),
            is_retryable_exception=lambda exc: isinstance(exc, ConnectionError),
            config=RetryConfig(max_attempts=2),
        )

    assert mock_sleep.call_count == 1


def test_sleep_is_capped() -> None:
    cfg = RetryConfig(base_delay_seconds=1.0, max_delay_seconds=2.0, jitter_ratio=0.0)
    assert _compute_sleep_seconds(10, cfg) == 2.0
