"""
Serenity Star SDK - Python client for Serenity Star agents.

Execute activity, chat completion, proxy and conversational agents, either
waiting for the complete result or streaming typed events as they arrive.
"""

from .agents import (
    Activity,
    AgentHandle,
    AsyncActivity,
    AsyncAgentHandle,
    AsyncChatCompletion,
    AsyncConversation,
    AsyncProxy,
    ChatCompletion,
    Conversation,
    FrameBuilder,
    Proxy,
)
from .client import AsyncSerenityClient, SerenityClient
from .config import ClientConfig
from .exceptions import (
    APIError,
    AuthenticationError,
    DecodeError,
    NotFoundError,
    SerenityError,
    ValidationError,
)
from .knowledge import (
    AsyncConversationVolatileKnowledgeScope,
    AsyncVolatileKnowledgeScope,
    ConversationVolatileKnowledgeScope,
    VolatileKnowledgeScope,
)
from .models import (
    AgentExecutionOptions,
    AgentResult,
    ChatCompletionOptions,
    ChatMessage,
    CompletionUsage,
    ConnectionPendingAction,
    ConnectorStatus,
    ConnectorStatusOptions,
    ConversationDetails,
    ConversationInfo,
    ConversationMessage,
    ExecuteParameter,
    ExecutorTaskResult,
    PendingAction,
    ProxyExecutionMessage,
    ProxyExecutionOptions,
    RemoveFeedbackOptions,
    SensitiveDataEntry,
    SubmitFeedbackOptions,
    UploadVolatileKnowledgeRequest,
    VolatileKnowledge,
    VolatileKnowledgeStatus,
)
from .state import ConversationState
from .streaming import (
    StreamContent,
    StreamError,
    StreamEvent,
    StreamEventType,
    StreamStart,
    StreamStop,
    StreamTaskEnd,
    StreamTaskStart,
    StreamTaskStop,
    aiter_events,
    iter_events,
    parse_event,
)
from .validation import InputValidationError

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "Activity",
    "AgentExecutionOptions",
    "AgentHandle",
    "AgentResult",
    "AsyncActivity",
    "AsyncAgentHandle",
    "AsyncChatCompletion",
    "AsyncConversation",
    "AsyncConversationVolatileKnowledgeScope",
    "AsyncProxy",
    "AsyncSerenityClient",
    "AsyncVolatileKnowledgeScope",
    "AuthenticationError",
    "ChatCompletion",
    "ChatCompletionOptions",
    "ChatMessage",
    "ClientConfig",
    "CompletionUsage",
    "ConnectionPendingAction",
    "ConnectorStatus",
    "ConnectorStatusOptions",
    "Conversation",
    "ConversationDetails",
    "ConversationInfo",
    "ConversationMessage",
    "ConversationState",
    "ConversationVolatileKnowledgeScope",
    "DecodeError",
    "ExecuteParameter",
    "ExecutorTaskResult",
    "FrameBuilder",
    "InputValidationError",
    "NotFoundError",
    "PendingAction",
    "Proxy",
    "ProxyExecutionMessage",
    "ProxyExecutionOptions",
    "RemoveFeedbackOptions",
    "SensitiveDataEntry",
    "SerenityClient",
    "SerenityError",
    "StreamContent",
    "StreamError",
    "StreamEvent",
    "StreamEventType",
    "StreamStart",
    "StreamStop",
    "StreamTaskEnd",
    "StreamTaskStart",
    "StreamTaskStop",
    "SubmitFeedbackOptions",
    "UploadVolatileKnowledgeRequest",
    "ValidationError",
    "VolatileKnowledge",
    "VolatileKnowledgeScope",
    "VolatileKnowledgeStatus",
    "aiter_events",
    "iter_events",
    "parse_event",
]
