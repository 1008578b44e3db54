"""Retry policy for embedding service calls."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from ..core.config import RetryConfig
from ..core.exceptions import EmbeddingServiceError


logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({408, 409, 429})


def is_transient_error(error: BaseException) -> bool:
    """Network failures, rate limits and server errors are worth retrying."""
    if isinstance(error, EmbeddingServiceError):
        status = error.status_code
        return status is None or status in RETRYABLE_STATUS_CODES or status >= 500
    return isinstance(error, (ConnectionError, TimeoutError))


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff around a collaborator call.

    ``is_valid`` optionally rejects a returned value; a rejected value is
    retried like a transient error. When attempts run out the last value is
    returned as-is so the caller's own validation can report it.
    """

    max_attempts: int = 3
    backoff_multiplier: float = 1.0
    backoff_min: float = 1.0
    backoff_max: float = 10.0
    should_retry: Callable[[BaseException], bool] = is_transient_error
    is_valid: Optional[Callable[[Any], bool]] = None

    @classmethod
    def from_config(cls,
                    config: RetryConfig,
                    is_valid: Optional[Callable[[Any], bool]] = None) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            backoff_multiplier=config.backoff_multiplier,
            backoff_min=config.backoff_min,
            backoff_max=config.backoff_max,
            is_valid=is_valid,
        )

    def with_validity(self, is_valid: Optional[Callable[[Any], bool]]) -> "RetryPolicy":
        return RetryPolicy(
            max_attempts=self.max_attempts,
            backoff_multiplier=self.backoff_multiplier,
            backoff_min=self.backoff_min,
            backoff_max=self.backoff_max,
            should_retry=self.should_retry,
            is_valid=is_valid,
        )

    def call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Run ``fn`` under this policy."""
        condition = retry_if_exception(self.should_retry)
        if self.is_valid is not None:
            is_valid = self.is_valid
            condition = condition | retry_if_result(lambda value: not is_valid(value))

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.backoff_multiplier,
                min=self.backoff_min,
                max=self.backoff_max,
            ),
            retry=condition,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            # Re-raise the last error, or hand back the last (invalid) value
            retry_error_callback=lambda state: state.outcome.result(),
        )
        return retrying(fn, *args, **kwargs)
