"""Retry handling for transient api.php failures."""

from dataclasses import dataclass
from typing import Literal

import httpx

FetchErrorType = Literal["http", "url", "protocol", "timeout"]


@dataclass(frozen=True)
class FetchRetryPolicy:
    max_retries: int
    backoff_factor: float = 2.0
    jitter: float = 0.1
    max_delay: float | None = 30.0


@dataclass(frozen=True)
class FetchRetryState:
    retry_count: int = 0
    delay: float = 1.0


@dataclass(frozen=True)
class FetchError:
    error_type: FetchErrorType
    error_detail: object
    status_code: int | None = None


def classify_retryable_fetch_error(url, err, *, logger):
    if isinstance(err, httpx.HTTPStatusError):
        status_code = err.response.status_code
        return FetchError("http", status_code, status_code=status_code)
    if isinstance(err, httpx.LocalProtocolError):
        logger.error("HTTP/2 Protocol error for url: %r", url)
        return FetchError("protocol", str(err))
    if isinstance(err, httpx.TimeoutException):
        logger.error("Timeout for url: %r", url)
        return FetchError("timeout", str(err))
    if isinstance(err, httpx.RequestError):
        return FetchError("url", str(err))
    raise TypeError("not a retryable fetch error")


def should_retry(error_type: FetchErrorType, error_code=None, retry_count=0, max_retries=0):
    if retry_count >= max_retries:
        return False
    if error_type == "http":
        return error_code == 429 or (500 <= error_code < 600)
    return error_type in {"url", "protocol", "timeout"}


def compute_effective_delay(delay, jitter, max_delay, *, uniform_fn):
    effective = delay
    if jitter:
        effective *= uniform_fn(1.0 - jitter, 1.0 + jitter)
    if max_delay is not None:
        effective = min(effective, max_delay)
    return effective


def retry_or_raise(*, url, error, retry_state, retry_policy, logger, sleep_fn, uniform_fn):
    """Sleep and return the next retry state, or None when the error is final."""
    code_for_retry = error.status_code if error.error_type == "http" else None
    if not should_retry(
        error.error_type, code_for_retry, retry_state.retry_count, retry_policy.max_retries
    ):
        logger.error(
            f"{error.error_type} error {error.error_detail} for {url} "
            f"after {retry_state.retry_count} retries"
        )
        return None

    retry_count = retry_state.retry_count + 1
    delay = compute_effective_delay(
        retry_state.delay, retry_policy.jitter, retry_policy.max_delay, uniform_fn=uniform_fn
    )
    if error.error_type == "http" and error.error_detail == 429:
        logger.warning(
            f"Rate limit exceeded (HTTP 429) for {url}. "
            f"Retrying in {delay:.1f} seconds. Retry {retry_count}/{retry_policy.max_retries}"
        )
    else:
        logger.warning(
            f"{error.error_type} error {error.error_detail} for {url}. "
            f"Retrying in {delay:.1f} seconds. Retry {retry_count}/{retry_policy.max_retries}"
        )
    sleep_fn(delay)
    return FetchRetryState(retry_count=retry_count, delay=delay * retry_policy.backoff_factor)
