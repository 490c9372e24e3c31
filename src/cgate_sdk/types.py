"""Pydantic models for CGate API requests and responses.

Chat and embedding payloads use the OpenAI-style snake_case wire names.
Vector, file and tracing payloads are camelCase on the wire; their models
expose snake_case attributes and accept either spelling on input.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ChatRole = Literal["system", "user", "assistant", "tool"]
VectorProviderStatus = Literal["active", "inactive", "error"]
VectorMetric = Literal["cosine", "euclidean", "dotproduct"]


class WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, protected_namespaces=())


class CamelModel(WireModel):
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        protected_namespaces=(),
        alias_generator=to_camel,
    )


# Chat


class ToolCallFunction(WireModel):
    name: str
    arguments: str


class ToolCall(WireModel):
    id: str
    type: Literal["function"] = "function"
    function: ToolCallFunction


class ToolFunction(WireModel):
    name: str
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class Tool(WireModel):
    type: Literal["function"] = "function"
    function: ToolFunction


class ChatMessage(WireModel):
    role: ChatRole
    content: Optional[str] = None
    name: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None


class ChatCompletionRequest(WireModel):
    model: str
    messages: List[ChatMessage]
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    stream: Optional[bool] = None
    stop: Optional[Union[str, List[str]]] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    user: Optional[str] = None
    request_id: Optional[str] = None
    tools: Optional[List[Tool]] = None
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None


class Usage(WireModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cached_tokens: Optional[int] = None


class ChatChoice(WireModel):
    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None


class ChatCompletionResponse(WireModel):
    id: str
    object: str
    created: int
    model: str
    choices: List[ChatChoice]
    usage: Optional[Usage] = None
    request_id: Optional[str] = None


class ChatDelta(WireModel):
    role: Optional[ChatRole] = None
    content: Optional[str] = None
    tool_calls: Optional[List[Dict[str, Any]]] = None


class ChatChunkChoice(WireModel):
    index: int
    delta: ChatDelta = Field(default_factory=ChatDelta)
    finish_reason: Optional[str] = None


class ChatCompletionChunk(WireModel):
    id: str
    object: str
    created: int
    model: str
    choices: List[ChatChunkChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None


# Embeddings


class EmbeddingRequest(WireModel):
    model: str
    input: Union[str, List[str]]
    encoding_format: Optional[Literal["float", "base64"]] = None
    user: Optional[str] = None
    request_id: Optional[str] = None


class Embedding(WireModel):
    object: str
    index: int
    embedding: List[float]


class EmbeddingResponse(WireModel):
    object: str
    data: List[Embedding]
    model: str
    usage: Optional[Usage] = None
    request_id: Optional[str] = None


# Vectors


class VectorProvider(CamelModel):
    id: str = Field(alias="_id")
    key: str
    driver: str
    label: str
    description: Optional[str] = None
    status: VectorProviderStatus
    credentials: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    capabilities: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreateVectorProviderRequest(CamelModel):
    key: str
    driver: str
    label: str
    credentials: Dict[str, Any]
    description: Optional[str] = None
    status: Optional[VectorProviderStatus] = None
    settings: Optional[Dict[str, Any]] = None
    capabilities_override: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None


class VectorIndex(CamelModel):
    id: str = Field(alias="_id")
    key: str
    index_id: str
    name: str
    dimension: int
    metric: VectorMetric
    provider_key: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreateVectorIndexRequest(CamelModel):
    name: str
    dimension: int
    metric: Optional[VectorMetric] = None
    metadata: Optional[Dict[str, Any]] = None


class UpdateVectorIndexRequest(CamelModel):
    name: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class Vector(CamelModel):
    id: str
    values: List[float]
    metadata: Optional[Dict[str, Any]] = None


class UpsertVectorsRequest(CamelModel):
    vectors: List[Vector]


class VectorQuery(CamelModel):
    vector: List[float]
    top_k: Optional[int] = None
    filter: Optional[Dict[str, Any]] = None


class QueryVectorsRequest(CamelModel):
    query: VectorQuery


class VectorMatch(CamelModel):
    id: str
    score: float
    values: Optional[List[float]] = None
    metadata: Optional[Dict[str, Any]] = None


class QueryResult(CamelModel):
    matches: List[VectorMatch] = Field(default_factory=list)


class QueryVectorsResponse(CamelModel):
    result: QueryResult


class SuccessResponse(CamelModel):
    success: bool


class VectorProviderList(CamelModel):
    providers: List[VectorProvider]


class VectorProviderEnvelope(CamelModel):
    provider: VectorProvider


class VectorIndexList(CamelModel):
    indexes: List[VectorIndex]


class VectorIndexEnvelope(CamelModel):
    index: VectorIndex
    provider: Optional[VectorProvider] = None
    reused: Optional[bool] = None


# Files


class FileBucket(CamelModel):
    id: str = Field(alias="_id")
    key: str
    name: str
    description: Optional[str] = None
    provider: str
    status: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FileObject(CamelModel):
    id: str = Field(alias="_id")
    key: str
    bucket_key: str
    file_name: str
    content_type: str
    size: int
    metadata: Optional[Dict[str, Any]] = None
    markdown_content: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UploadFileRequest(CamelModel):
    file_name: str
    data: str
    content_type: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    convert_to_markdown: Optional[bool] = None
    key_hint: Optional[str] = None

    @classmethod
    def from_bytes(cls, file_name: str, payload: bytes, **fields: Any) -> "UploadFileRequest":
        """Build an upload request with ``payload`` base64-encoded into ``data``."""
        return cls(file_name=file_name, data=base64.b64encode(payload).decode("ascii"), **fields)


class ListFilesQuery(CamelModel):
    search: Optional[str] = None
    limit: Optional[int] = None
    cursor: Optional[str] = None


class FileList(CamelModel):
    files: List[FileObject]
    count: int
    next_cursor: Optional[str] = None


class UploadFileResponse(CamelModel):
    file: FileObject
    message: Optional[str] = None


class FileBucketList(CamelModel):
    buckets: List[FileBucket]
    count: int


class FileBucketEnvelope(CamelModel):
    bucket: FileBucket


# Tracing


class TracingAgent(CamelModel):
    name: Optional[str] = None
    version: Optional[str] = None
    model: Optional[str] = None


class TracingSummary(CamelModel):
    total_input_tokens: Optional[int] = None
    total_output_tokens: Optional[int] = None
    total_cached_input_tokens: Optional[int] = None
    total_bytes_in: Optional[int] = None
    total_bytes_out: Optional[int] = None
    event_counts: Optional[Dict[str, int]] = None


class TracingEvent(CamelModel):
    id: Optional[str] = None
    type: Optional[str] = None
    label: Optional[str] = None
    sequence: Optional[int] = None
    timestamp: Optional[str] = None
    status: Optional[str] = None
    model: Optional[str] = None
    model_name: Optional[str] = None
    tool_name: Optional[str] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cached_input_tokens: Optional[int] = None
    actor: Optional[Dict[str, Any]] = None
    sections: Optional[List[Dict[str, Any]]] = None
    metadata: Optional[Dict[str, Any]] = None
    usage: Optional[Dict[str, Any]] = None


class TracingSessionRequest(CamelModel):
    session_id: str
    agent: Optional[TracingAgent] = None
    config: Optional[Dict[str, Any]] = None
    summary: Optional[TracingSummary] = None
    status: Optional[str] = None
    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    duration_ms: Optional[int] = None
    errors: Optional[List[Dict[str, Any]]] = None
    events: Optional[List[TracingEvent]] = None


class IngestResponse(CamelModel):
    success: bool
    session_id: Optional[str] = None
