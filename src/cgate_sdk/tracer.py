"""Framework-neutral recorder that turns agent lifecycle hooks into tracing sessions.

Agent frameworks call the ``*_start`` / ``*_end`` / ``*_error`` hooks (or wrap
work in :meth:`SessionTracer.trace_llm` / :meth:`SessionTracer.trace_tool`).
Events are buffered in memory and sent as one ``TracingSessionRequest`` per
flush through ``client.tracing.ingest``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional
from uuid import uuid4

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from .buffer import OfflineBuffer
from .client import CGateClient
from .errors import CGateError, CGateResponseError
from .resources._base import to_payload
from .types import TracingAgent, TracingEvent, TracingSessionRequest, TracingSummary

logger = logging.getLogger("cgate_sdk.tracer")

_USAGE_KEYS = {
    "promptTokens": ("prompt_tokens", "promptTokens", "input_tokens"),
    "completionTokens": ("completion_tokens", "completionTokens", "output_tokens"),
    "totalTokens": ("total_tokens", "totalTokens"),
}


def new_id() -> str:
    return uuid4().hex


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _jsonable(value: Any) -> Any:
    return to_jsonable_python(value, fallback=str)


def _describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


def extract_usage(output: Any) -> Optional[Dict[str, int]]:
    """Pull token usage out of a chat response or framework LLM result."""
    if isinstance(output, BaseModel):
        output = output.model_dump()
    if not isinstance(output, Mapping):
        return None

    raw = output.get("usage") or output.get("token_usage")
    if raw is None:
        llm_output = output.get("llm_output") or output.get("llmOutput") or {}
        if isinstance(llm_output, Mapping):
            raw = llm_output.get("token_usage") or llm_output.get("tokenUsage")
    if not isinstance(raw, Mapping):
        return None

    usage: Dict[str, int] = {}
    for target, candidates in _USAGE_KEYS.items():
        for key in candidates:
            if isinstance(raw.get(key), int):
                usage[target] = raw[key]
                break
    return usage or None


@dataclass
class TraceSpan:
    run_id: str
    output: Any = None


class SessionTracer:
    def __init__(
        self,
        client: CGateClient,
        *,
        session_id: Optional[str] = None,
        agent: Optional[TracingAgent] = None,
        summary: Optional[TracingSummary] = None,
        config: Optional[Dict[str, Any]] = None,
        auto_flush: bool = True,
        offline_path: Optional[str] = None,
    ) -> None:
        self._client = client
        self.session_id = session_id or new_id()
        self.agent = agent
        self.summary = summary.model_copy(deep=True) if summary is not None else None
        self.config = config
        self.auto_flush = auto_flush
        self._events: List[TracingEvent] = []
        self._sequence = 0
        self._buffer = OfflineBuffer(offline_path)

    @property
    def events(self) -> List[TracingEvent]:
        return list(self._events)

    def record(
        self,
        event_type: str,
        *,
        run_id: Optional[str] = None,
        label: Optional[str] = None,
        status: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **fields: Any,
    ) -> TracingEvent:
        self._sequence += 1
        event = TracingEvent(
            id=run_id or new_id(),
            type=event_type,
            label=label,
            status=status,
            sequence=self._sequence,
            timestamp=_now(),
            metadata=_jsonable(metadata) if metadata is not None else None,
            **fields,
        )
        self._events.append(event)
        self._count_event(event_type)
        return event

    async def chain_start(self, name: Optional[str], inputs: Any, run_id: Optional[str] = None) -> None:
        self.record("chain_start", run_id=run_id, label=name, metadata={"inputs": inputs})

    async def chain_end(self, outputs: Any, run_id: Optional[str] = None) -> None:
        self.record("chain_end", run_id=run_id, status="completed", metadata={"outputs": outputs})
        if self.auto_flush:
            await self.flush("running")

    async def chain_error(self, error: BaseException, run_id: Optional[str] = None) -> None:
        self.record("chain_error", run_id=run_id, status="error", metadata={"error": _describe_error(error)})
        await self.flush("error")

    async def llm_start(self, name: Optional[str], prompts: List[str], run_id: Optional[str] = None) -> None:
        self.record("llm_start", run_id=run_id, label=name, metadata={"prompts": prompts})

    async def llm_end(self, output: Any, run_id: Optional[str] = None) -> None:
        usage = extract_usage(output)
        self.record(
            "llm_end",
            run_id=run_id,
            status="completed",
            metadata={"usage": usage} if usage else None,
            usage=usage,
            input_tokens=usage.get("promptTokens") if usage else None,
            output_tokens=usage.get("completionTokens") if usage else None,
        )
        if usage:
            self._add_usage(usage)
        if self.auto_flush:
            await self.flush("running")

    async def llm_error(self, error: BaseException, run_id: Optional[str] = None) -> None:
        self.record("llm_error", run_id=run_id, status="error", metadata={"error": _describe_error(error)})
        await self.flush("error")

    async def tool_start(self, name: Optional[str], tool_input: Any, run_id: Optional[str] = None) -> None:
        self.record("tool_start", run_id=run_id, label=name, tool_name=name, metadata={"input": tool_input})

    async def tool_end(self, output: Any, run_id: Optional[str] = None) -> None:
        self.record("tool_end", run_id=run_id, status="completed", metadata={"output": output})
        if self.auto_flush:
            await self.flush("running")

    async def tool_error(self, error: BaseException, run_id: Optional[str] = None) -> None:
        self.record("tool_error", run_id=run_id, status="error", metadata={"error": _describe_error(error)})
        await self.flush("error")

    @asynccontextmanager
    async def trace_llm(self, name: Optional[str], prompts: List[str]) -> AsyncIterator[TraceSpan]:
        """Record an LLM call around the block; set ``span.output`` to capture usage."""
        span = TraceSpan(run_id=new_id())
        await self.llm_start(name, prompts, span.run_id)
        try:
            yield span
        except Exception as exc:
            await self._record_failure(self.llm_error, exc, span.run_id)
            raise
        await self.llm_end(span.output, span.run_id)

    @asynccontextmanager
    async def trace_tool(self, name: str, tool_input: Any) -> AsyncIterator[TraceSpan]:
        span = TraceSpan(run_id=new_id())
        await self.tool_start(name, tool_input, span.run_id)
        try:
            yield span
        except Exception as exc:
            await self._record_failure(self.tool_error, exc, span.run_id)
            raise
        await self.tool_end(span.output, span.run_id)

    async def _record_failure(self, hook, error: Exception, run_id: str) -> None:
        # The caller's exception must win over a failed upload.
        try:
            await hook(error, run_id)
        except CGateError:
            logger.exception("Failed to flush tracing session %s after error", self.session_id)

    def build_session(self, status: str) -> TracingSessionRequest:
        return TracingSessionRequest(
            session_id=self.session_id,
            agent=self.agent,
            config=self.config,
            summary=self.summary,
            status=status,
            events=list(self._events),
        )

    async def flush(self, status: str = "running") -> None:
        """Send buffered events as one session payload; no-op when nothing is buffered."""
        if not self._events:
            return
        session = self.build_session(status)
        logger.debug("Flushing %d tracing events for session %s", len(self._events), self.session_id)
        try:
            await self._client.tracing.ingest(session)
        except CGateResponseError:
            # 2xx reply: the gateway stored the session.
            self._events.clear()
            raise
        except CGateError:
            if self._buffer.enabled():
                self._buffer.append(to_payload(session))
                self._events.clear()
                logger.warning("Tracing session %s stored offline after ingest failure", self.session_id)
            raise
        self._events.clear()

    async def end(self, status: str = "completed") -> None:
        await self.flush(status)

    async def replay_offline(self) -> int:
        """Re-send sessions stored after failed flushes; returns how many were sent."""
        if not self._buffer.enabled():
            return 0
        return await self._buffer.replay(self._client.tracing.ingest)

    def _add_usage(self, usage: Dict[str, int]) -> None:
        summary = self.summary or TracingSummary()
        summary.total_input_tokens = (summary.total_input_tokens or 0) + usage.get("promptTokens", 0)
        summary.total_output_tokens = (summary.total_output_tokens or 0) + usage.get("completionTokens", 0)
        self.summary = summary

    def _count_event(self, event_type: str) -> None:
        summary = self.summary or TracingSummary()
        counts = dict(summary.event_counts or {})
        counts[event_type] = counts.get(event_type, 0) + 1
        summary.event_counts = counts
        self.summary = summary


__all__ = ["SessionTracer", "TraceSpan", "extract_usage", "new_id"]
