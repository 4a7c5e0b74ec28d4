"""
Serenity Star SDK - Data models for agent execution, results and volatile knowledge.

Response models decode from camelCase, snake_case or PascalCase bodies alike;
request option models are immutable values turned into wire frames by the
agent frame builders.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, Iterable, Mapping, Optional, Union

EMPTY_ID = "00000000-0000-0000-0000-000000000000"

_FRACTION = re.compile(r"(\.\d{6})\d+")


def normalize_key(key: str) -> str:
    """Fold a wire field name so camelCase, snake_case and PascalCase match."""
    return key.replace("_", "").replace("-", "").lower()


def normalize_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {normalize_key(k): v for k, v in data.items()}


def is_empty_id(value: Optional[str]) -> bool:
    return not value or value == EMPTY_ID


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as sent by the API (``Z`` suffix, 7-digit fractions)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(_FRACTION.sub(r"\1", text))


_TIMESPAN = re.compile(r"^(?:(\d+)\.)?(\d+):(\d{2}):(\d{2})(?:\.(\d+))?$")


def parse_duration_ms(value: Any) -> int:
    """Milliseconds from a number or a ``[d.]hh:mm:ss[.fffffff]`` time span; 0 when unreadable."""
    if value is None or isinstance(value, bool):
        return 0
    text = str(value).strip()
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        pass

    match = _TIMESPAN.match(text)
    if match is None:
        return 0
    days, hours, minutes, seconds, fraction = match.groups()
    total_seconds = ((int(days or 0) * 24 + int(hours)) * 60 + int(minutes)) * 60 + int(seconds)
    millis = int((fraction or "0").ljust(3, "0")[:3])
    return total_seconds * 1000 + millis


def _str_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class VolatileKnowledgeStatus(str, Enum):
    """Processing status of an uploaded volatile knowledge item."""

    ANALYZING = "analyzing"
    INVALID = "invalid"
    SUCCESS = "success"
    ERROR = "error"
    EXPIRED = "expired"


# ==================== Execution options ====================


@dataclass(frozen=True)
class ExecuteParameter:
    """A single ``{key, value}`` input parameter of a list-shaped frame."""

    key: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value}


InputParameters = Union[Mapping[str, Any], Iterable[Union[ExecuteParameter, tuple[str, Any]]]]


def to_parameters(input_parameters: Optional[InputParameters]) -> tuple[ExecuteParameter, ...]:
    """Normalize caller input parameters, keeping order and duplicate keys."""
    if not input_parameters:
        return ()
    items = input_parameters.items() if isinstance(input_parameters, Mapping) else input_parameters
    params = []
    for item in items:
        if isinstance(item, ExecuteParameter):
            params.append(item)
        else:
            key, value = item
            params.append(ExecuteParameter(key, value))
    return tuple(params)


@dataclass(frozen=True)
class AgentExecutionOptions:
    """Options shared by activity and conversational agent executions."""

    input_parameters: tuple[ExecuteParameter, ...] = ()
    agent_version: Optional[int] = None
    user_identifier: Optional[str] = None
    channel: Optional[str] = None
    group_identifier: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_parameters", to_parameters(self.input_parameters))


@dataclass(frozen=True)
class ChatMessage:
    """A prior message of a chat completion history."""

    role: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatCompletionOptions:
    """Options for a chat-completion agent execution."""

    message: str
    messages: tuple[ChatMessage, ...] = ()
    input_parameters: tuple[ExecuteParameter, ...] = ()
    agent_version: Optional[int] = None
    user_identifier: Optional[str] = None
    channel: Optional[str] = None
    group_identifier: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))
        object.__setattr__(self, "input_parameters", to_parameters(self.input_parameters))


@dataclass(frozen=True)
class ProxyExecutionMessage:
    """A message forwarded to the model behind a proxy agent."""

    role: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ProxyExecutionOptions:
    """Options for a proxy agent execution. ``model`` and ``messages`` are required."""

    model: str
    messages: tuple[ProxyExecutionMessage, ...] = ()
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    user_identifier: Optional[str] = None
    vendor: Optional[str] = None
    group_identifier: Optional[str] = None
    use_vision: Optional[bool] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))


# ==================== Agent results ====================


@dataclass
class CompletionUsage:
    """Token usage of one execution."""

    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompletionUsage":
        d = normalize_fields(data)
        return cls(
            prompt_tokens=int(d.get("prompttokens") or 0),
            completion_tokens=int(d.get("completiontokens") or 0),
        )


@dataclass
class ExecutorTaskResult:
    """Execution log entry of one agent task."""

    task_name: str
    duration_ms: int = 0
    success: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExecutorTaskResult":
        d = normalize_fields(data)
        duration = d.get("durationinms", d.get("durationms", d.get("duration")))
        return cls(
            task_name=d.get("taskname") or d.get("name") or "",
            duration_ms=parse_duration_ms(duration),
            success=d.get("success"),
        )


@dataclass
class PendingAction:
    """An action the user must complete out of band before the agent can continue."""

    type: str
    id: Optional[str] = None
    description: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PendingAction":
        d = normalize_fields(data)
        action_type = d.get("type") or ""
        if action_type == ConnectionPendingAction.TYPE:
            return ConnectionPendingAction(
                type=action_type,
                id=_str_or_none(d.get("id")),
                description=d.get("description") or "",
                metadata=d.get("metadata") or {},
                url=d.get("url") or "",
                connector_id=_str_or_none(d.get("connectorid")),
                connector_name=d.get("connectorname") or "",
                connector_img_url=d.get("connectorimgurl") or "",
            )
        return cls(
            type=action_type,
            id=_str_or_none(d.get("id")),
            description=d.get("description") or "",
            metadata=d.get("metadata") or {},
        )


@dataclass
class ConnectionPendingAction(PendingAction):
    """The user must authorize a connector through ``url``."""

    TYPE = "connection"

    url: str = ""
    connector_id: Optional[str] = None
    connector_name: str = ""
    connector_img_url: str = ""


@dataclass
class SensitiveDataEntry:
    """A span of sensitive data redacted from the agent input or output."""

    original: str
    redacted: str
    score: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SensitiveDataEntry":
        d = normalize_fields(data)
        return cls(
            original=d.get("originalvalue") or d.get("original") or "",
            redacted=d.get("redactedvalue") or d.get("redacted") or d.get("placeholder") or "",
            score=d.get("score", d.get("confidence")),
        )


@dataclass
class AgentResult:
    """
    Terminal outcome of one agent execution.

    ``instance_id`` is the correlation id the conversation continues with.
    """

    content: str = ""
    instance_id: Optional[str] = None
    json_content: Optional[Any] = None
    completion_usage: Optional[CompletionUsage] = None
    executor_task_logs: list[ExecutorTaskResult] = field(default_factory=list)
    action_results: dict[str, Any] = field(default_factory=dict)
    pending_actions: list[PendingAction] = field(default_factory=list)
    sensitive_data: list[SensitiveDataEntry] = field(default_factory=list)
    time_to_first_token: Optional[int] = None
    cost: Optional[Any] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def has_pending_actions(self) -> bool:
        return len(self.pending_actions) > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AgentResult":
        d = normalize_fields(data)
        usage = d.get("completionusage")
        instance_id = _str_or_none(d.get("instanceid"))
        return cls(
            content=d.get("content") or "",
            instance_id=None if is_empty_id(instance_id) else instance_id,
            json_content=d.get("jsoncontent"),
            completion_usage=CompletionUsage.from_dict(usage) if usage else None,
            executor_task_logs=[
                ExecutorTaskResult.from_dict(item) for item in d.get("executortasklogs") or []
            ],
            action_results=d.get("actionresults") or {},
            pending_actions=[PendingAction.from_dict(item) for item in d.get("pendingactions") or []],
            sensitive_data=[
                SensitiveDataEntry.from_dict(item) for item in d.get("sensitivedata") or []
            ],
            time_to_first_token=d.get("timetofirsttoken"),
            cost=d.get("cost"),
            metadata=d.get("metadata") or {},
        )


# ==================== Volatile knowledge ====================


@dataclass
class UploadVolatileKnowledgeRequest:
    """
    Upload request for volatile knowledge.

    Exactly one of ``content`` (plain text) or ``file`` (bytes or a binary
    file object, with ``file_name``) must be given.
    """

    content: Optional[str] = None
    file: Optional[Union[bytes, BinaryIO]] = None
    file_name: Optional[str] = None
    callback_url: Optional[str] = None


@dataclass
class VolatileKnowledge:
    """An uploaded volatile knowledge item and its processing status."""

    id: str
    status: str = ""
    expiration_date: Optional[datetime] = None
    filename: str = ""
    file_size: Optional[int] = None
    file_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == VolatileKnowledgeStatus.SUCCESS.value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VolatileKnowledge":
        d = normalize_fields(data)
        return cls(
            id=str(d.get("id") or ""),
            status=d.get("status") or "",
            expiration_date=parse_datetime(d.get("expirationdate")),
            filename=d.get("filename") or "",
            file_size=d.get("filesize"),
            file_id=_str_or_none(d.get("fileid")),
            error=d.get("error"),
        )


# ==================== Conversations ====================


@dataclass
class ConversationInfo:
    """Start-up information of a conversational agent."""

    initial_message: str = ""
    starters: list[str] = field(default_factory=list)
    version: Optional[int] = None
    vision_enabled: bool = False
    is_realtime: bool = False
    image_id: Optional[str] = None
    channel: Optional[dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversationInfo":
        d = normalize_fields(data)
        conversation = normalize_fields(d.get("conversation") or {})
        agent = normalize_fields(d.get("agent") or {})
        return cls(
            initial_message=conversation.get("initialmessage") or "",
            starters=list(conversation.get("starters") or []),
            version=agent.get("version"),
            vision_enabled=bool(agent.get("visionenabled")),
            is_realtime=bool(agent.get("isrealtime")),
            image_id=_str_or_none(agent.get("imageid")),
            channel=d.get("channel"),
        )


@dataclass
class ConversationMessage:
    """A message stored in a conversation transcript."""

    sender: str
    value: str
    type: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversationMessage":
        d = normalize_fields(data)
        return cls(
            sender=d.get("sender") or "",
            value=d.get("value") or "",
            type=d.get("type") or "",
            id=_str_or_none(d.get("id")),
            created_at=parse_datetime(d.get("createdat")),
        )


@dataclass
class ConversationDetails:
    """A stored conversation with its transcript."""

    id: str
    messages: list[ConversationMessage] = field(default_factory=list)
    open: bool = False
    name: str = ""
    user_identifier: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    executor_task_logs: Optional[list[Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversationDetails":
        d = normalize_fields(data)
        return cls(
            id=str(d.get("id") or ""),
            messages=[ConversationMessage.from_dict(m) for m in d.get("messages") or []],
            open=bool(d.get("open")),
            name=d.get("name") or "",
            user_identifier=d.get("useridentifier") or "",
            start_date=parse_datetime(d.get("startdate")),
            end_date=parse_datetime(d.get("enddate")),
            executor_task_logs=d.get("executortasklogs"),
        )


@dataclass(frozen=True)
class SubmitFeedbackOptions:
    agent_message_id: str
    feedback: bool


@dataclass(frozen=True)
class RemoveFeedbackOptions:
    agent_message_id: str


# ==================== Connectors ====================


@dataclass(frozen=True)
class ConnectorStatusOptions:
    agent_instance_id: str
    connector_id: str


@dataclass
class ConnectorStatus:
    """Whether a connector is authorized for an agent instance."""

    is_connected: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConnectorStatus":
        d = normalize_fields(data)
        return cls(is_connected=bool(d.get("isconnected")))
