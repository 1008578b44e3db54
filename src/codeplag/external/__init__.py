"""External structural comparison service client."""

from .client import (
    ExternalComparisonClient,
    CodeSample,
    parse_external_result,
    format_external_result,
)

__all__ = [
    "ExternalComparisonClient",
    "CodeSample",
    "parse_external_result",
    "format_external_result",
]
