"""
Tests for the asynchronous client and agent handles.
"""

import asyncio
import json

import httpx
import pytest

from serenitystar import (
    AgentExecutionOptions,
    APIError,
    AsyncSerenityClient,
    ConnectorStatusOptions,
    InputValidationError,
    ProxyExecutionMessage,
    ProxyExecutionOptions,
    StreamContent,
    StreamStart,
    StreamStop,
    SubmitFeedbackOptions,
    UploadVolatileKnowledgeRequest,
)

BASE_URL = "https://api.test"

STREAM_BODY = (
    'data: {"type":"content","text":"a"}\n\n'
    'data: {"type":"content","text":"b"}\n\n'
    'data: {"type":"stop","result":{"instanceId":"X"}}\n\n'
    "data: [DONE]\n\n"
)


class AsyncRecorder:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request {request.method} {request.url}")
        return self.responses.pop(0)

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


def make_client(handler):
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return AsyncSerenityClient(api_key="test-key", base_url=BASE_URL, http_client=http)


class TestAsyncActivity:
    @pytest.mark.asyncio
    async def test_execute(self):
        recorder = AsyncRecorder(httpx.Response(200, json={"content": "done", "instanceId": "i-1"}))
        async with make_client(recorder) as client:
            result = await client.agents.activities.execute(
                "translator", AgentExecutionOptions(input_parameters={"word": "hi"})
            )

        assert result.content == "done"
        assert recorder.requests[0].headers["X-API-KEY"] == "test-key"
        assert recorder.body() == [{"key": "word", "value": "hi"}]

    @pytest.mark.asyncio
    async def test_knowledge_attached_once(self):
        recorder = AsyncRecorder(
            httpx.Response(200, json={"id": "k-1"}),
            httpx.Response(200, json={"content": "a"}),
            httpx.Response(200, json={"content": "b"}),
        )
        client = make_client(recorder)
        activity = client.agents.activities.create("summarizer")

        await activity.volatile_knowledge.upload(UploadVolatileKnowledgeRequest(content="notes"))
        await activity.execute()
        assert recorder.body() == [{"key": "volatileKnowledgeIds", "value": ["k-1"]}]

        await activity.execute()
        assert recorder.body() == []

    @pytest.mark.asyncio
    async def test_stream(self):
        recorder = AsyncRecorder(httpx.Response(200, text=STREAM_BODY))
        activity = make_client(recorder).agents.activities.create("translator")

        events = [event async for event in activity.stream()]

        assert [type(e) for e in events] == [StreamStart, StreamContent, StreamContent, StreamStop]
        assert activity.state.conversation_id is None


class TestAsyncConversation:
    @pytest.mark.asyncio
    async def test_turns_carry_chat_id(self):
        recorder = AsyncRecorder(
            httpx.Response(200, json={"content": "hi", "instanceId": "A"}),
            httpx.Response(200, json={"content": "again", "instanceId": "A"}),
        )
        conversation = make_client(recorder).agents.assistants.create_conversation("support")

        await conversation.send_message("first")
        await conversation.send_message("second")

        assert "chatId" not in [p["key"] for p in recorder.body(0)]
        assert recorder.body(1)[0] == {"key": "chatId", "value": "A"}

    @pytest.mark.asyncio
    async def test_stream_captures_id(self):
        recorder = AsyncRecorder(httpx.Response(200, text=STREAM_BODY))
        conversation = make_client(recorder).agents.copilots.create_conversation("copilot")

        texts = []
        async for event in conversation.stream_message("hi"):
            if isinstance(event, StreamContent):
                texts.append(event.text)

        assert texts == ["a", "b"]
        assert conversation.conversation_id == "X"

    @pytest.mark.asyncio
    async def test_stream_http_error(self):
        recorder = AsyncRecorder(httpx.Response(503, text="unavailable"))
        conversation = make_client(recorder).agents.assistants.create_conversation("support")
        conversation.state.add_knowledge_id("k-1")

        with pytest.raises(APIError) as exc:
            async for _ in conversation.stream_message("hi"):
                pass

        assert exc.value.status_code == 503
        assert exc.value.body == "unavailable"
        assert conversation.state.knowledge_ids == []

    @pytest.mark.asyncio
    async def test_aclose_before_stop_keeps_id_unset(self):
        recorder = AsyncRecorder(httpx.Response(200, text=STREAM_BODY))
        conversation = make_client(recorder).agents.assistants.create_conversation("support")

        events = conversation.stream_message("hi")
        async for event in events:
            if isinstance(event, StreamContent):
                break
        await events.aclose()

        assert conversation.conversation_id is None

    @pytest.mark.asyncio
    async def test_task_cancellation_keeps_id_unset(self):
        async def body():
            yield b'data: {"type":"content","text":"a"}\n\n'
            await asyncio.sleep(3600)
            yield b'data: {"type":"stop","instanceId":"late"}\n\n'

        async def handler(request):
            return httpx.Response(200, content=body())

        conversation = make_client(handler).agents.assistants.create_conversation("support")
        seen_content = asyncio.Event()

        async def consume():
            async for event in conversation.stream_message("hi"):
                if isinstance(event, StreamContent):
                    seen_content.set()

        task = asyncio.create_task(consume())
        await asyncio.wait_for(seen_content.wait(), timeout=5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert conversation.conversation_id is None

    @pytest.mark.asyncio
    async def test_feedback(self):
        recorder = AsyncRecorder(httpx.Response(200))
        conversation = make_client(recorder).agents.assistants.create_conversation("support", "c-1")

        await conversation.submit_feedback(SubmitFeedbackOptions(agent_message_id="m-1", feedback=False))

        assert recorder.requests[0].url.path == "/api/v2/agent/support/conversation/c-1/message/m-1/feedback"
        assert recorder.body() == {"feedback": False}

    @pytest.mark.asyncio
    async def test_get_info_by_code(self):
        recorder = AsyncRecorder(
            httpx.Response(200, json={"conversation": {"initialMessage": "Hello!", "starters": ["Help"]}})
        )
        info = await make_client(recorder).agents.assistants.get_info_by_code("support")
        assert info.initial_message == "Hello!"
        assert info.starters == ["Help"]


class TestAsyncProxy:
    @pytest.mark.asyncio
    async def test_execute(self):
        recorder = AsyncRecorder(httpx.Response(200, json={"content": "pong"}))
        options = ProxyExecutionOptions(model="m", messages=[ProxyExecutionMessage("user", "ping")])

        result = await make_client(recorder).agents.proxies.execute("proxy", options)

        assert result.content == "pong"
        assert recorder.body() == {"model": "m", "messages": [{"role": "user", "content": "ping"}]}

    @pytest.mark.asyncio
    async def test_validation_before_network(self):
        recorder = AsyncRecorder()
        with pytest.raises(InputValidationError):
            await make_client(recorder).agents.proxies.execute("proxy", ProxyExecutionOptions(model="m"))
        assert recorder.requests == []


class TestAsyncConnectorStatus:
    @pytest.mark.asyncio
    async def test_connector_status(self):
        recorder = AsyncRecorder(httpx.Response(200, json={"isConnected": True}))
        client = make_client(recorder)

        status = await client.get_connector_status(
            "agent", ConnectorStatusOptions(agent_instance_id="inst-1", connector_id="conn-1")
        )

        request = recorder.requests[0]
        assert request.url.path == "/api/v2/agent/agent/connector/conn-1/status"
        assert request.url.params["agentInstanceId"] == "inst-1"
        assert status.is_connected is True
