"""
Serenity Star SDK - Conversational agents (assistants and copilots).

A conversation is created server-side by its first message. The
``instanceId`` of that first result becomes the conversation id and is sent
as ``chatId`` with every later message.

Usage:
    ```python
    conversation = client.agents.assistants.create_conversation("support-bot")
    first = conversation.send_message("Hi!")
    for event in conversation.stream_message("What can you do?"):
        ...
    ```
"""

from typing import Any, AsyncIterator, Iterator, Optional

import httpx

from ..knowledge import AsyncConversationVolatileKnowledgeScope, ConversationVolatileKnowledgeScope
from ..models import (
    AgentExecutionOptions,
    AgentResult,
    ConversationDetails,
    ConversationInfo,
    ExecuteParameter,
    RemoveFeedbackOptions,
    SubmitFeedbackOptions,
)
from ..responses import decode_model, handle_response
from ..state import ConversationState
from ..streaming import StreamEvent
from ..validation import InputValidationError, validate_required
from .base import AgentHandle, AsyncAgentHandle, ParameterFrameBuilder


class ConversationFrameBuilder(ParameterFrameBuilder):
    """Frame of one conversation turn; adopts the first result's instance id."""

    kind = "conversation"

    def __init__(self, options: Optional[AgentExecutionOptions] = None, message: Optional[str] = None):
        super().__init__(options)
        self.message = message

    def leading_parameters(self) -> list[ExecuteParameter]:
        if self.message is None:
            return []
        return [ExecuteParameter("message", self.message)]

    def with_message(self, message: str) -> "ConversationFrameBuilder":
        validate_required(message, "message")
        return ConversationFrameBuilder(self.options, message)

    def on_completed(self, state: ConversationState, instance_id: Optional[str]) -> None:
        state.capture_id(instance_id)


def _version_segment(options: AgentExecutionOptions) -> str:
    return f"/{options.agent_version}" if options.agent_version is not None else ""


def info_request(agent_code: str, options: AgentExecutionOptions) -> tuple[str, dict[str, Any]]:
    path = f"/api/v2/agent/{agent_code}{_version_segment(options)}/conversation/info"
    body: dict[str, Any] = {}
    if options.input_parameters:
        body["inputParameters"] = {p.key: p.value for p in options.input_parameters}
    if options.user_identifier:
        body["userIdentifier"] = options.user_identifier
    if options.channel:
        body["channel"] = options.channel
    return path, body


def conversation_path(agent_code: str, conversation_id: str, options: AgentExecutionOptions) -> str:
    validate_required(conversation_id, "conversation_id")
    return f"/api/v2/agent/{agent_code}/conversation/{conversation_id}{_version_segment(options)}"


def feedback_path(agent_code: str, conversation_id: Optional[str], agent_message_id: str) -> str:
    if not conversation_id:
        raise InputValidationError("Conversation not initialized", field="conversation_id")
    validate_required(agent_message_id, "agent_message_id")
    return f"/api/v2/agent/{agent_code}/conversation/{conversation_id}/message/{agent_message_id}/feedback"


class Conversation(AgentHandle):
    """A conversation with an assistant or copilot agent."""

    def __init__(
        self,
        http: httpx.Client,
        agent_code: str,
        options: Optional[AgentExecutionOptions] = None,
        conversation_id: Optional[str] = None,
    ):
        super().__init__(http, agent_code, ConversationFrameBuilder(options))
        self.options = self._builder.options
        self.info: Optional[ConversationInfo] = None
        self.volatile_knowledge = ConversationVolatileKnowledgeScope(http, self.state)
        if conversation_id:
            self.state.set_id(conversation_id)

    @property
    def conversation_id(self) -> Optional[str]:
        return self.state.get_id()

    def send_message(self, message: str) -> AgentResult:
        """Send a message and wait for the agent's answer."""
        return self._execute(self._builder.with_message(message))

    def stream_message(self, message: str) -> Iterator[StreamEvent]:
        """Send a message and yield the answer as stream events."""
        return self._stream(self._builder.with_message(message))

    def get_info(self) -> ConversationInfo:
        """Fetch the agent's conversation start-up information."""
        path, body = info_request(self.agent_code, self.options)
        response = self._http.post(path, json=body)
        self.info = decode_model(response, ConversationInfo.from_dict)
        return self.info

    def get_conversation_by_id(
        self, conversation_id: str, show_executor_task_logs: bool = False
    ) -> ConversationDetails:
        """Fetch a stored conversation and its messages."""
        path = conversation_path(self.agent_code, conversation_id, self.options)
        response = self._http.get(
            path, params={"showExecutorTaskLogs": "true" if show_executor_task_logs else "false"}
        )
        return decode_model(response, ConversationDetails.from_dict)

    def submit_feedback(self, options: SubmitFeedbackOptions) -> None:
        """Rate one agent message of this conversation."""
        path = feedback_path(self.agent_code, self.conversation_id, options.agent_message_id)
        handle_response(self._http.post(path, json={"feedback": options.feedback}))

    def remove_feedback(self, options: RemoveFeedbackOptions) -> None:
        """Remove the rating of one agent message of this conversation."""
        path = feedback_path(self.agent_code, self.conversation_id, options.agent_message_id)
        handle_response(self._http.delete(path))


class AsyncConversation(AsyncAgentHandle):
    """Asynchronous conversation with an assistant or copilot agent."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        agent_code: str,
        options: Optional[AgentExecutionOptions] = None,
        conversation_id: Optional[str] = None,
    ):
        super().__init__(http, agent_code, ConversationFrameBuilder(options))
        self.options = self._builder.options
        self.info: Optional[ConversationInfo] = None
        self.volatile_knowledge = AsyncConversationVolatileKnowledgeScope(http, self.state)
        if conversation_id:
            self.state.set_id(conversation_id)

    @property
    def conversation_id(self) -> Optional[str]:
        return self.state.get_id()

    async def send_message(self, message: str) -> AgentResult:
        return await self._execute(self._builder.with_message(message))

    def stream_message(self, message: str) -> AsyncIterator[StreamEvent]:
        return self._stream(self._builder.with_message(message))

    async def get_info(self) -> ConversationInfo:
        path, body = info_request(self.agent_code, self.options)
        response = await self._http.post(path, json=body)
        self.info = decode_model(response, ConversationInfo.from_dict)
        return self.info

    async def get_conversation_by_id(
        self, conversation_id: str, show_executor_task_logs: bool = False
    ) -> ConversationDetails:
        path = conversation_path(self.agent_code, conversation_id, self.options)
        response = await self._http.get(
            path, params={"showExecutorTaskLogs": "true" if show_executor_task_logs else "false"}
        )
        return decode_model(response, ConversationDetails.from_dict)

    async def submit_feedback(self, options: SubmitFeedbackOptions) -> None:
        path = feedback_path(self.agent_code, self.conversation_id, options.agent_message_id)
        handle_response(await self._http.post(path, json={"feedback": options.feedback}))

    async def remove_feedback(self, options: RemoveFeedbackOptions) -> None:
        path = feedback_path(self.agent_code, self.conversation_id, options.agent_message_id)
        handle_response(await self._http.delete(path))


class ConversationalScope:
    """Entry point for one family of conversational agents."""

    def __init__(self, http: httpx.Client):
        self._http = http

    def create_conversation(
        self,
        agent_code: str,
        conversation_id: Optional[str] = None,
        options: Optional[AgentExecutionOptions] = None,
    ) -> Conversation:
        """
        Start a conversation, or resume one when ``conversation_id`` is given.

        Nothing is sent until the first message.
        """
        return Conversation(self._http, agent_code, options, conversation_id=conversation_id)

    def get_info_by_code(
        self, agent_code: str, options: Optional[AgentExecutionOptions] = None
    ) -> ConversationInfo:
        return Conversation(self._http, agent_code, options).get_info()

    def get_conversation_by_id(
        self, agent_code: str, conversation_id: str, show_executor_task_logs: bool = False
    ) -> ConversationDetails:
        return Conversation(self._http, agent_code).get_conversation_by_id(
            conversation_id, show_executor_task_logs
        )


class AssistantsScope(ConversationalScope):
    """Assistant agents."""


class CopilotsScope(ConversationalScope):
    """Copilot agents."""


class AsyncConversationalScope:
    """Async entry point for one family of conversational agents."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    def create_conversation(
        self,
        agent_code: str,
        conversation_id: Optional[str] = None,
        options: Optional[AgentExecutionOptions] = None,
    ) -> AsyncConversation:
        return AsyncConversation(self._http, agent_code, options, conversation_id=conversation_id)

    async def get_info_by_code(
        self, agent_code: str, options: Optional[AgentExecutionOptions] = None
    ) -> ConversationInfo:
        return await AsyncConversation(self._http, agent_code, options).get_info()

    async def get_conversation_by_id(
        self, agent_code: str, conversation_id: str, show_executor_task_logs: bool = False
    ) -> ConversationDetails:
        return await AsyncConversation(self._http, agent_code).get_conversation_by_id(
            conversation_id, show_executor_task_logs
        )


class AsyncAssistantsScope(AsyncConversationalScope):
    """Assistant agents (async)."""


class AsyncCopilotsScope(AsyncConversationalScope):
    """Copilot agents (async)."""
