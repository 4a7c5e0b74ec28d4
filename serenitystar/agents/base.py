"""
Serenity Star SDK - Agent execution core.

An agent handle pairs one ``ConversationState`` with a frame builder, the
strategy that knows how its agent kind shapes the execution body and what
happens to the state once a turn is dispatched and completed.
"""

import logging
from typing import Any, AsyncIterator, Iterator, Optional, Union

import httpx

from ..models import AgentExecutionOptions, AgentResult, ExecuteParameter
from ..responses import aensure_stream_success, decode_model, ensure_stream_success
from ..state import ConversationState
from ..streaming import StreamEvent, StreamStop, aiter_events, iter_events
from ..validation import validate_required

logger = logging.getLogger("serenitystar.agents")

Frame = Union[list[dict[str, Any]], dict[str, Any]]

CHAT_ID_KEY = "chatId"
STREAM_KEY = "stream"
KNOWLEDGE_IDS_KEY = "volatileKnowledgeIds"


def execute_path(agent_code: str, agent_version: Optional[int] = None) -> str:
    path = f"/api/v2/agent/{agent_code}/execute"
    if agent_version is not None:
        path += f"/{agent_version}"
    return path


def _pair(key: str, value: Any) -> dict[str, Any]:
    return {"key": key, "value": value}


class FrameBuilder:
    """
    Strategy building the execution body of one agent kind.

    ``build_frame`` only reads the state. ``on_dispatched`` runs as soon as
    the request has been sent and ``on_completed`` once the turn's result
    (or its stop event) has been observed.
    """

    kind = "agent"
    agent_version: Optional[int] = None

    def build_frame(self, state: ConversationState, stream: bool) -> Frame:
        raise NotImplementedError

    def on_dispatched(self, state: ConversationState) -> None:
        state.clear_knowledge_ids()

    def on_completed(self, state: ConversationState, instance_id: Optional[str]) -> None:
        pass


class ParameterFrameBuilder(FrameBuilder):
    """Builds the ``[{key, value}, ...]`` frame of activity-like agents."""

    def __init__(self, options: Optional[AgentExecutionOptions] = None):
        self.options = options or AgentExecutionOptions()
        self.agent_version = self.options.agent_version

    def leading_parameters(self) -> list[ExecuteParameter]:
        return []

    def trailing_parameters(self) -> list[ExecuteParameter]:
        params = []
        if self.options.user_identifier:
            params.append(ExecuteParameter("userIdentifier", self.options.user_identifier))
        if self.options.channel:
            params.append(ExecuteParameter("channel", self.options.channel))
        if self.options.group_identifier:
            params.append(ExecuteParameter("groupIdentifier", self.options.group_identifier))
        return params

    def build_frame(self, state: ConversationState, stream: bool) -> list[dict[str, Any]]:
        frame = []
        reserved = set()
        if state.conversation_id:
            frame.append(_pair(CHAT_ID_KEY, state.conversation_id))
            reserved.add(CHAT_ID_KEY)
        if stream:
            frame.append(_pair(STREAM_KEY, True))
            reserved.add(STREAM_KEY)
        if state.knowledge_ids:
            reserved.add(KNOWLEDGE_IDS_KEY)

        params = self.leading_parameters() + list(self.options.input_parameters)
        for param in params + self.trailing_parameters():
            if param.key in reserved:
                logger.debug("Ignoring caller parameter %r managed by the SDK", param.key)
                continue
            frame.append(param.to_dict())

        if state.knowledge_ids:
            frame.append(_pair(KNOWLEDGE_IDS_KEY, list(state.knowledge_ids)))
        return frame


class AgentHandle:
    """
    Synchronous handle executing one agent over ``httpx.Client``.

    Turns on a handle must be sequential: the continuity id and knowledge
    queue are updated as side effects of each turn.
    """

    def __init__(
        self,
        http: httpx.Client,
        agent_code: str,
        builder: FrameBuilder,
        state: Optional[ConversationState] = None,
    ):
        validate_required(agent_code, "agent_code")
        self._http = http
        self.agent_code = agent_code
        self._builder = builder
        self.state = state if state is not None else ConversationState()

    def execute(self) -> AgentResult:
        """Execute the agent and wait for the complete result."""
        return self._execute(self._builder)

    def stream(self) -> Iterator[StreamEvent]:
        """
        Execute the agent and yield events as they arrive.

        The request is sent when iteration starts. Closing the iterator
        early (``break`` or ``close()``) aborts the read and closes the
        response.
        """
        return self._stream(self._builder)

    def _execute(self, builder: FrameBuilder) -> AgentResult:
        frame = builder.build_frame(self.state, stream=False)
        path = execute_path(self.agent_code, builder.agent_version)
        logger.debug("Executing %s agent %s", builder.kind, self.agent_code)

        response = self._http.post(path, json=frame)
        builder.on_dispatched(self.state)

        result = decode_model(response, AgentResult.from_dict)
        builder.on_completed(self.state, result.instance_id)
        return result

    def _stream(self, builder: FrameBuilder) -> Iterator[StreamEvent]:
        frame = builder.build_frame(self.state, stream=True)
        path = execute_path(self.agent_code, builder.agent_version)
        return self._stream_events(builder, path, frame)

    def _stream_events(self, builder: FrameBuilder, path: str, frame: Frame) -> Iterator[StreamEvent]:
        logger.debug("Streaming %s agent %s", builder.kind, self.agent_code)
        with self._http.stream("POST", path, json=frame) as response:
            builder.on_dispatched(self.state)
            ensure_stream_success(response)

            for event in iter_events(response.iter_lines()):
                if isinstance(event, StreamStop):
                    builder.on_completed(self.state, event.continuity_id)
                yield event


class AsyncAgentHandle:
    """Asynchronous handle executing one agent over ``httpx.AsyncClient``."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        agent_code: str,
        builder: FrameBuilder,
        state: Optional[ConversationState] = None,
    ):
        validate_required(agent_code, "agent_code")
        self._http = http
        self.agent_code = agent_code
        self._builder = builder
        self.state = state if state is not None else ConversationState()

    async def execute(self) -> AgentResult:
        """Execute the agent and wait for the complete result."""
        return await self._execute(self._builder)

    def stream(self) -> AsyncIterator[StreamEvent]:
        """
        Execute the agent and yield events as they arrive.

        Cancelling the consuming task, or calling ``aclose()``, aborts the
        read without updating the conversation id.
        """
        return self._stream(self._builder)

    async def _execute(self, builder: FrameBuilder) -> AgentResult:
        frame = builder.build_frame(self.state, stream=False)
        path = execute_path(self.agent_code, builder.agent_version)
        logger.debug("Executing %s agent %s", builder.kind, self.agent_code)

        response = await self._http.post(path, json=frame)
        builder.on_dispatched(self.state)

        result = decode_model(response, AgentResult.from_dict)
        builder.on_completed(self.state, result.instance_id)
        return result

    def _stream(self, builder: FrameBuilder) -> AsyncIterator[StreamEvent]:
        frame = builder.build_frame(self.state, stream=True)
        path = execute_path(self.agent_code, builder.agent_version)
        return self._stream_events(builder, path, frame)

    async def _stream_events(
        self, builder: FrameBuilder, path: str, frame: Frame
    ) -> AsyncIterator[StreamEvent]:
        logger.debug("Streaming %s agent %s", builder.kind, self.agent_code)
        async with self._http.stream("POST", path, json=frame) as response:
            builder.on_dispatched(self.state)
            await aensure_stream_success(response)

            async for event in aiter_events(response.aiter_lines()):
                if isinstance(event, StreamStop):
                    builder.on_completed(self.state, event.continuity_id)
                yield event
