"""
Transport Context

Responsibilities:
- Talks to the report API over HTTP
- Maps error responses onto an ApiError taxonomy and classifies failures
- Retries transient failures with exponential backoff

Owns: HTTP calls, error classification, retry policy
Never: Interprets assessment content
"""

from leveler.contexts.transport.client import ReportClient, report_saver
from leveler.contexts.transport.errors import (
    ApiError,
    ErrorKind,
    NetworkError,
    classify_error,
    error_from_response,
)
from leveler.contexts.transport.retry import RetryPolicy, call_with_retry, should_retry

__all__ = [
    "ReportClient",
    "report_saver",
    "ApiError",
    "NetworkError",
    "ErrorKind",
    "classify_error",
    "error_from_response",
    "RetryPolicy",
    "call_with_retry",
    "should_retry",
]
