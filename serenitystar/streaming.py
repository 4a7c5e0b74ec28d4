"""
Serenity Star SDK - Streaming execution events

Decodes the ``data: <json>`` line protocol of streaming agent executions into
typed events. The parser is independent of HTTP: it consumes any iterable (or
async iterable) of text lines, so it works on ``httpx`` responses and on plain
lists alike.

Usage:
    ```python
    for event in iter_events(response.iter_lines()):
        if isinstance(event, StreamContent):
            print(event.text, end="")
        elif isinstance(event, StreamStop):
            print(event.result.instance_id)
    ```
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncIterable, AsyncIterator, Iterable, Iterator, Optional, Union

from .models import AgentResult, is_empty_id, normalize_fields, parse_datetime, parse_duration_ms

logger = logging.getLogger("serenitystar.streaming")

FRAME_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class StreamEventType(str, Enum):
    """Discriminator values of the streaming protocol."""

    START = "start"
    TASK_START = "task_start"
    CONTENT = "content"
    TASK_END = "task_end"
    TASK_STOP = "task_stop"
    STOP = "stop"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StreamStart:
    """Opens every stream. Emitted locally before any frame is read."""

    start_time: datetime = field(default_factory=_utcnow)
    type: StreamEventType = field(default=StreamEventType.START, init=False)

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass
class StreamTaskStart:
    """An agent task began."""

    key: str
    input: Any = None
    type: StreamEventType = field(default=StreamEventType.TASK_START, init=False)

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass
class StreamContent:
    """A fragment of the agent's textual answer."""

    text: str
    type: StreamEventType = field(default=StreamEventType.CONTENT, init=False)

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass
class StreamTaskEnd:
    """An agent task finished."""

    key: str
    result: Any = None
    duration_ms: int = 0
    type: StreamEventType = field(default=StreamEventType.TASK_END, init=False)

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass
class StreamTaskStop:
    """An agent task was stopped before finishing."""

    key: str
    result: Any = None
    duration_ms: int = 0
    type: StreamEventType = field(default=StreamEventType.TASK_STOP, init=False)

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass
class StreamStop:
    """Closes a successful stream and carries the complete result."""

    result: Optional[AgentResult] = None
    instance_id: Optional[str] = None
    stop_time: Optional[datetime] = None
    type: StreamEventType = field(default=StreamEventType.STOP, init=False)

    @property
    def is_terminal(self) -> bool:
        return True

    @property
    def continuity_id(self) -> Optional[str]:
        """The conversation id announced by this stop, preferring the embedded result."""
        if self.result is not None and not is_empty_id(self.result.instance_id):
            return self.result.instance_id
        if not is_empty_id(self.instance_id):
            return self.instance_id
        return None


@dataclass
class StreamError:
    """
    An in-band error.

    Frames with an unknown discriminator are reported as a non-terminal
    ``StreamError`` with ``unsupported_type`` set; the stream continues.
    """

    error: str
    status_code: Optional[int] = None
    unsupported_type: Optional[str] = None
    type: StreamEventType = field(default=StreamEventType.ERROR, init=False)

    @property
    def is_terminal(self) -> bool:
        return self.unsupported_type is None


StreamEvent = Union[
    StreamStart,
    StreamTaskStart,
    StreamContent,
    StreamTaskEnd,
    StreamTaskStop,
    StreamStop,
    StreamError,
]


def _duration(d: dict[str, Any]) -> int:
    return parse_duration_ms(d.get("durationms", d.get("duration")))


def _decode_stop(d: dict[str, Any]) -> StreamStop:
    # optional fields decode leniently: a Stop is never dropped
    raw_id = d.get("instanceid")
    instance_id = None if raw_id is None else str(raw_id)

    result = None
    raw_result = d.get("result")
    if isinstance(raw_result, dict):
        try:
            result = AgentResult.from_dict(raw_result)
        except (TypeError, ValueError, AttributeError) as e:
            logger.debug("Stop frame carries an undecodable result: %s", e)
            embedded_id = normalize_fields(raw_result).get("instanceid")
            if instance_id is None and embedded_id is not None:
                instance_id = str(embedded_id)

    try:
        stop_time = parse_datetime(d.get("stoptimeutc"))
    except (TypeError, ValueError):
        logger.debug("Ignoring unreadable stop time %r", d.get("stoptimeutc"))
        stop_time = None

    return StreamStop(result=result, instance_id=instance_id, stop_time=stop_time)


def _decode(event_type: str, d: dict[str, Any]) -> StreamEvent:
    if event_type == StreamEventType.TASK_START:
        return StreamTaskStart(key=d.get("key") or "", input=d.get("input"))
    if event_type == StreamEventType.CONTENT:
        return StreamContent(text=d.get("text") or "")
    if event_type == StreamEventType.TASK_END:
        return StreamTaskEnd(key=d.get("key") or "", result=d.get("result"), duration_ms=_duration(d))
    if event_type == StreamEventType.TASK_STOP:
        return StreamTaskStop(key=d.get("key") or "", result=d.get("result"), duration_ms=_duration(d))
    if event_type == StreamEventType.STOP:
        return _decode_stop(d)
    if event_type == StreamEventType.ERROR:
        status_code = d.get("statuscode")
        return StreamError(
            error=d.get("error") or d.get("message") or "",
            status_code=None if status_code is None else int(status_code),
        )
    return StreamError(
        error=f"Unsupported message type: {event_type}",
        unsupported_type=event_type,
    )


def parse_event(payload: str) -> Optional[StreamEvent]:
    """
    Decode the JSON payload of one frame.

    Returns None for payloads that are not JSON objects, lack the ``type``
    discriminator or repeat the ``start`` event; such frames are skipped.
    """
    try:
        data = json.loads(payload)
    except ValueError:
        logger.debug("Skipping undecodable stream frame: %.80s", payload)
        return None

    if not isinstance(data, dict):
        logger.debug("Skipping non-object stream frame: %.80s", payload)
        return None

    d = normalize_fields(data)
    event_type = d.get("type")
    if not isinstance(event_type, str):
        logger.debug("Skipping stream frame without type: %.80s", payload)
        return None
    if event_type == StreamEventType.START:
        # StreamStart is emitted locally before any frame
        logger.debug("Skipping server start frame")
        return None

    try:
        return _decode(event_type, d)
    except (TypeError, ValueError, AttributeError) as e:
        logger.debug("Skipping malformed %s frame: %s", event_type, e)
        return None


def frame_payload(line: str) -> Optional[str]:
    """Return the payload of a ``data:`` line, or None for padding and comments."""
    if not line or not line.strip() or not line.startswith(FRAME_PREFIX):
        return None
    return line[len(FRAME_PREFIX):].strip()


def iter_events(lines: Iterable[str]) -> Iterator[StreamEvent]:
    """
    Turn response lines into stream events.

    Yields ``StreamStart`` before reading anything, then one event per decoded
    frame. Ends at the ``[DONE]`` sentinel, after the first terminal event, or
    when ``lines`` is exhausted.
    """
    yield StreamStart()

    for line in lines:
        payload = frame_payload(line)
        if payload is None:
            continue
        if payload == DONE_SENTINEL:
            return

        event = parse_event(payload)
        if event is None:
            continue
        yield event
        if event.is_terminal:
            return


async def aiter_events(lines: AsyncIterable[str]) -> AsyncIterator[StreamEvent]:
    """Async counterpart of :func:`iter_events`."""
    yield StreamStart()

    async for line in lines:
        payload = frame_payload(line)
        if payload is None:
            continue
        if payload == DONE_SENTINEL:
            return

        event = parse_event(payload)
        if event is None:
            continue
        yield event
        if event.is_terminal:
            return
