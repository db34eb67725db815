import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from shared.logging import get_logger

logger = get_logger("retry")

T = TypeVar("T")


@dataclass
class RetryConfig:
    max_attempts: int = 5
    base_delay_seconds: float = 0.25
    max_delay_seconds: float = 10.0
    jitter_ratio: float = 0.30


def _compute_sleep_seconds(attempt: int, config: RetryConfig) -> float:
    exponential = min(config.base_delay_seconds * (2 ** (attempt - 1)), config.max_delay_seconds)
    jitter_multiplier = 1 + random.uniform(0, config.jitter_ratio)
    return exponential * jitter_multiplier


def _retry_after_seconds(result: Any, config: RetryConfig) -> Optional[float]:
    """Read a numeric ``Retry-After`` header off an HTTP response, capped at the max delay."""
    headers = getattr(result, "headers", None) or {}
    value = headers.get("Retry-After") if hasattr(headers, "get") else None
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return max(0.0, min(seconds, config.max_delay_seconds))


def call_with_retry(
    operation_name: str,
    fn: Callable[[], T],
    is_retryable_exception: Callable[[Exception], bool],
    is_retryable_result: Optional[Callable[[T], bool]] = None,
    config: Optional[RetryConfig] = None,
) -> T:
    cfg = config or RetryConfig()
    last_exception: Optional[Exception] = None

    for attempt in range(1, cfg.max_attempts + 1):
        try:
            result = fn()
            if is_retryable_result and is_retryable_result(result):
                if attempt == cfg.max_attempts:
                    return result
                delay = _retry_after_seconds(result, cfg)
                if delay is None:
                    delay = _compute_sleep_seconds(attempt, cfg)
                logger.warning(
                    "retrying_result",
                    extra={"extra": {
                        "operation": operation_name,
                        "attempt": attempt,
                        "status_code": getattr(result, "status_code", None),
                        "delay_seconds": round(delay, 3),
                    }},
                )
                time.sleep(delay)
                continue
            return result
        except Exception as exc:  # noqa: BLE001
            last_exception = exc
            if not is_retryable_exception(exc) or attempt == cfg.max_attempts:
                raise
            delay = _compute_sleep_seconds(attempt, cfg)
            logger.warning(
                "retrying_exception",
                extra={"extra": {
                    "operation": operation_name,
                    "attempt": attempt,
                    "error": str(exc),
                    "delay_seconds": round(delay, 3),
                }},
            )
            time.sleep(delay)

    if last_exception:
        raise last_exception

    raise RuntimeError(f"Retry loop exhausted unexpectedly for {operation_name}")
