"""CGate Python SDK."""

from ._version import __version__
from .client import CGateClient
from .config import ClientConfig
from .errors import (
    CGateAPIError,
    CGateCancelledError,
    CGateConfigError,
    CGateConnectionError,
    CGateError,
    CGateResponseError,
    CGateTimeoutError,
    ErrorKind,
)
from .streaming import EventStream
from .tracer import SessionTracer
from .types import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    CreateVectorIndexRequest,
    CreateVectorProviderRequest,
    EmbeddingRequest,
    EmbeddingResponse,
    ListFilesQuery,
    QueryVectorsRequest,
    TracingAgent,
    TracingEvent,
    TracingSessionRequest,
    TracingSummary,
    UpdateVectorIndexRequest,
    UploadFileRequest,
    UpsertVectorsRequest,
    Vector,
    VectorQuery,
)

__all__ = [
    "CGateAPIError",
    "CGateCancelledError",
    "CGateClient",
    "CGateConfigError",
    "CGateConnectionError",
    "CGateError",
    "CGateResponseError",
    "CGateTimeoutError",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatMessage",
    "ClientConfig",
    "CreateVectorIndexRequest",
    "CreateVectorProviderRequest",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "ErrorKind",
    "EventStream",
    "ListFilesQuery",
    "QueryVectorsRequest",
    "SessionTracer",
    "TracingAgent",
    "TracingEvent",
    "TracingSessionRequest",
    "TracingSummary",
    "UpdateVectorIndexRequest",
    "UploadFileRequest",
    "UpsertVectorsRequest",
    "Vector",
    "VectorQuery",
    "__version__",
]
