"""
Serenity Star SDK - Agent kinds and their scopes.
"""

import httpx

from .activity import (
    Activity,
    ActivitiesScope,
    ActivityFrameBuilder,
    AsyncActivitiesScope,
    AsyncActivity,
)
from .base import (
    AgentHandle,
    AsyncAgentHandle,
    FrameBuilder,
    ParameterFrameBuilder,
    execute_path,
)
from .chat_completion import (
    AsyncChatCompletion,
    AsyncChatCompletionsScope,
    ChatCompletion,
    ChatCompletionFrameBuilder,
    ChatCompletionsScope,
)
from .connector import aget_connector_status, get_connector_status
from .conversation import (
    AssistantsScope,
    AsyncAssistantsScope,
    AsyncConversation,
    AsyncCopilotsScope,
    Conversation,
    ConversationFrameBuilder,
    CopilotsScope,
)
from .proxy import AsyncProxiesScope, AsyncProxy, ProxiesScope, Proxy, ProxyFrameBuilder


class AgentsScope:
    """Access to every agent kind."""

    def __init__(self, http: httpx.Client):
        self.activities = ActivitiesScope(http)
        self.chat_completions = ChatCompletionsScope(http)
        self.proxies = ProxiesScope(http)
        self.assistants = AssistantsScope(http)
        self.copilots = CopilotsScope(http)


class AsyncAgentsScope:
    """Access to every agent kind (async)."""

    def __init__(self, http: httpx.AsyncClient):
        self.activities = AsyncActivitiesScope(http)
        self.chat_completions = AsyncChatCompletionsScope(http)
        self.proxies = AsyncProxiesScope(http)
        self.assistants = AsyncAssistantsScope(http)
        self.copilots = AsyncCopilotsScope(http)


__all__ = [
    "Activity",
    "ActivitiesScope",
    "ActivityFrameBuilder",
    "AgentHandle",
    "AgentsScope",
    "AssistantsScope",
    "AsyncActivitiesScope",
    "AsyncActivity",
    "AsyncAgentHandle",
    "AsyncAgentsScope",
    "AsyncAssistantsScope",
    "AsyncChatCompletion",
    "AsyncChatCompletionsScope",
    "AsyncConversation",
    "AsyncCopilotsScope",
    "AsyncProxiesScope",
    "AsyncProxy",
    "ChatCompletion",
    "ChatCompletionFrameBuilder",
    "ChatCompletionsScope",
    "Conversation",
    "ConversationFrameBuilder",
    "CopilotsScope",
    "FrameBuilder",
    "ParameterFrameBuilder",
    "ProxiesScope",
    "Proxy",
    "ProxyFrameBuilder",
    "aget_connector_status",
    "execute_path",
    "get_connector_status",
]
