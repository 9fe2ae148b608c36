"""Upstream fetch clients."""

from attendance_sync.core.upstream._retrying_transport import CircuitOpenError, RetryingTransport
from attendance_sync.core.upstream.graphql import CORRELATION_HEADER, GraphQLEntityFetcher

__all__ = ["CORRELATION_HEADER", "CircuitOpenError", "GraphQLEntityFetcher", "RetryingTransport"]
