"""
Serenity Star SDK - Proxy agents.

Proxy agents forward an OpenAI-style completion request to a configured
model. Their body is a flat JSON object instead of a parameter list, and
optional fields are omitted rather than sent as null.
"""

from typing import Any

import httpx

from ..models import AgentResult, ProxyExecutionOptions
from ..state import ConversationState
from ..validation import (
    InputValidationError,
    validate_non_negative,
    validate_positive_int,
    validate_required,
)
from .base import CHAT_ID_KEY, STREAM_KEY, AgentHandle, AsyncAgentHandle, FrameBuilder

# attribute name -> wire name
_OPTIONAL_FIELDS = (
    ("temperature", "temperature"),
    ("max_tokens", "max_tokens"),
    ("top_p", "top_p"),
    ("top_k", "top_k"),
    ("frequency_penalty", "frequency_penalty"),
    ("presence_penalty", "presence_penalty"),
    ("user_identifier", "userIdentifier"),
    ("vendor", "vendor"),
    ("group_identifier", "groupIdentifier"),
    ("use_vision", "useVision"),
)


class ProxyFrameBuilder(FrameBuilder):
    kind = "proxy"

    def __init__(self, options: ProxyExecutionOptions):
        if options is None:
            raise InputValidationError("options are required", field="options")
        validate_required(options.model, "model")
        if not options.messages:
            raise InputValidationError("messages cannot be empty", field="messages")
        validate_non_negative(options.temperature, "temperature")
        validate_positive_int(options.max_tokens, "max_tokens")
        self.options = options

    def build_frame(self, state: ConversationState, stream: bool) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if state.conversation_id:
            body[CHAT_ID_KEY] = state.conversation_id
        body["model"] = self.options.model
        body["messages"] = [m.to_dict() for m in self.options.messages]

        for attr, wire_name in _OPTIONAL_FIELDS:
            value = getattr(self.options, attr)
            if value is not None:
                body[wire_name] = value

        if stream:
            body[STREAM_KEY] = True
        return body

    def on_dispatched(self, state: ConversationState) -> None:
        pass


class Proxy(AgentHandle):
    """A proxy agent."""

    def __init__(self, http: httpx.Client, agent_code: str, options: ProxyExecutionOptions):
        super().__init__(http, agent_code, ProxyFrameBuilder(options))


class AsyncProxy(AsyncAgentHandle):
    """Asynchronous proxy agent."""

    def __init__(self, http: httpx.AsyncClient, agent_code: str, options: ProxyExecutionOptions):
        super().__init__(http, agent_code, ProxyFrameBuilder(options))


class ProxiesScope:
    """Create and execute proxy agents."""

    def __init__(self, http: httpx.Client):
        self._http = http

    def create(self, agent_code: str, options: ProxyExecutionOptions) -> Proxy:
        return Proxy(self._http, agent_code, options)

    def execute(self, agent_code: str, options: ProxyExecutionOptions) -> AgentResult:
        return self.create(agent_code, options).execute()


class AsyncProxiesScope:
    """Create and execute proxy agents asynchronously."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    def create(self, agent_code: str, options: ProxyExecutionOptions) -> AsyncProxy:
        return AsyncProxy(self._http, agent_code, options)

    async def execute(self, agent_code: str, options: ProxyExecutionOptions) -> AgentResult:
        return await self.create(agent_code, options).execute()
