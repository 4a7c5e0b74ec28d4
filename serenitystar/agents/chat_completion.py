"""
Serenity Star SDK - Chat completion agents.
"""

import json

import httpx

from ..knowledge import AsyncConversationVolatileKnowledgeScope, ConversationVolatileKnowledgeScope
from ..models import AgentResult, ChatCompletionOptions, ExecuteParameter
from ..validation import InputValidationError, validate_required
from .base import AgentHandle, AsyncAgentHandle, ParameterFrameBuilder


class ChatCompletionFrameBuilder(ParameterFrameBuilder):
    """Sends the new message, then the prior history as a JSON string."""

    kind = "chat_completion"

    def __init__(self, options: ChatCompletionOptions):
        if options is None:
            raise InputValidationError("options are required", field="options")
        validate_required(options.message, "message")
        super().__init__(options)

    def leading_parameters(self) -> list[ExecuteParameter]:
        params = [ExecuteParameter("message", self.options.message)]
        if self.options.messages:
            history = json.dumps([m.to_dict() for m in self.options.messages])
            params.append(ExecuteParameter("messages", history))
        return params


class ChatCompletion(AgentHandle):
    """A chat completion agent."""

    def __init__(self, http: httpx.Client, agent_code: str, options: ChatCompletionOptions):
        super().__init__(http, agent_code, ChatCompletionFrameBuilder(options))
        self.volatile_knowledge = ConversationVolatileKnowledgeScope(http, self.state)


class AsyncChatCompletion(AsyncAgentHandle):
    """Asynchronous chat completion agent."""

    def __init__(self, http: httpx.AsyncClient, agent_code: str, options: ChatCompletionOptions):
        super().__init__(http, agent_code, ChatCompletionFrameBuilder(options))
        self.volatile_knowledge = AsyncConversationVolatileKnowledgeScope(http, self.state)


class ChatCompletionsScope:
    """Create and execute chat completion agents."""

    def __init__(self, http: httpx.Client):
        self._http = http

    def create(self, agent_code: str, options: ChatCompletionOptions) -> ChatCompletion:
        return ChatCompletion(self._http, agent_code, options)

    def execute(self, agent_code: str, options: ChatCompletionOptions) -> AgentResult:
        return self.create(agent_code, options).execute()


class AsyncChatCompletionsScope:
    """Create and execute chat completion agents asynchronously."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    def create(self, agent_code: str, options: ChatCompletionOptions) -> AsyncChatCompletion:
        return AsyncChatCompletion(self._http, agent_code, options)

    async def execute(self, agent_code: str, options: ChatCompletionOptions) -> AgentResult:
        return await self.create(agent_code, options).execute()
