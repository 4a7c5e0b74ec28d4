"""
Tests for the streaming event parser.
"""

import pytest

from serenitystar.streaming import (
    StreamContent,
    StreamError,
    StreamEventType,
    StreamStart,
    StreamStop,
    StreamTaskEnd,
    StreamTaskStart,
    StreamTaskStop,
    aiter_events,
    frame_payload,
    iter_events,
    parse_event,
)

BASIC_STREAM = [
    'data: {"type":"content","text":"a"}',
    "",
    'data: {"type":"content","text":"b"}',
    "",
    'data: {"type":"stop","result":{"instanceId":"X","content":"ab"}}',
    "",
    "data: [DONE]",
]


async def _lines(lines):
    for line in lines:
        yield line


class TestFramePayload:
    def test_strips_prefix_and_whitespace(self):
        assert frame_payload('data:  {"a": 1}  ') == '{"a": 1}'

    def test_blank_line(self):
        assert frame_payload("") is None
        assert frame_payload("   ") is None

    def test_comment_and_other_fields(self):
        assert frame_payload(": keepalive") is None
        assert frame_payload("event: message") is None

    def test_prefix_without_space_is_ignored(self):
        assert frame_payload('data:{"a":1}') is None


class TestParseEvent:
    def test_content(self):
        event = parse_event('{"type":"content","text":"hello"}')
        assert event == StreamContent(text="hello")
        assert event.type == StreamEventType.CONTENT

    def test_task_start(self):
        event = parse_event('{"type":"task_start","key":"search","input":"query"}')
        assert isinstance(event, StreamTaskStart)
        assert event.key == "search"
        assert event.input == "query"

    def test_task_end(self):
        event = parse_event('{"type":"task_end","key":"search","result":{"hits":3},"duration":42}')
        assert isinstance(event, StreamTaskEnd)
        assert event.result == {"hits": 3}
        assert event.duration_ms == 42

    def test_task_stop_snake_case_duration(self):
        event = parse_event('{"type":"task_stop","key":"k","duration_ms":7}')
        assert isinstance(event, StreamTaskStop)
        assert event.duration_ms == 7

    def test_stop_with_result(self):
        event = parse_event(
            '{"type":"stop","stop_time_utc":"2025-01-01T00:00:00Z",'
            '"result":{"instance_id":"abc","content":"done","completion_usage":'
            '{"prompt_tokens":10,"completion_tokens":5}}}'
        )
        assert isinstance(event, StreamStop)
        assert event.result.instance_id == "abc"
        assert event.result.completion_usage.total_tokens == 15
        assert event.continuity_id == "abc"
        assert event.stop_time is not None

    def test_stop_falls_back_to_top_level_instance_id(self):
        event = parse_event('{"type":"stop","instanceId":"top"}')
        assert event.result is None
        assert event.continuity_id == "top"

    def test_stop_without_any_id(self):
        event = parse_event('{"type":"stop","result":{"content":"x"}}')
        assert event.continuity_id is None

    def test_stop_with_unreadable_stop_time(self):
        event = parse_event('{"type":"stop","stop_time_utc":"01/02/2025 10:00:00","result":{"instanceId":"X"}}')
        assert isinstance(event, StreamStop)
        assert event.stop_time is None
        assert event.continuity_id == "X"

    def test_stop_with_undecodable_result_keeps_instance_id(self):
        event = parse_event(
            '{"type":"stop","result":{"instanceId":"X","completionUsage":{"promptTokens":"many"}}}'
        )
        assert isinstance(event, StreamStop)
        assert event.result is None
        assert event.instance_id == "X"
        assert event.continuity_id == "X"

    def test_task_end_time_span_duration(self):
        event = parse_event('{"type":"task_end","key":"k","duration":"00:00:01.5"}')
        assert event.duration_ms == 1500

    def test_server_start_frame_is_skipped(self):
        assert parse_event('{"type":"start"}') is None

    def test_error(self):
        event = parse_event('{"type":"error","error":"boom","statusCode":500}')
        assert event == StreamError(error="boom", status_code=500)
        assert event.is_terminal

    def test_unknown_type_is_non_terminal_error(self):
        event = parse_event('{"type":"ping"}')
        assert isinstance(event, StreamError)
        assert event.error == "Unsupported message type: ping"
        assert event.unsupported_type == "ping"
        assert not event.is_terminal

    @pytest.mark.parametrize("payload", ["not json", "[1, 2]", '{"text":"no type"}', '{"type": 5}'])
    def test_noise_is_skipped(self, payload):
        assert parse_event(payload) is None


class TestIterEvents:
    def test_basic_sequence(self):
        events = list(iter_events(BASIC_STREAM))
        assert [type(e) for e in events] == [StreamStart, StreamContent, StreamContent, StreamStop]
        assert [e.text for e in events if isinstance(e, StreamContent)] == ["a", "b"]
        assert events[-1].result.instance_id == "X"

    def test_start_is_emitted_before_reading(self):
        def lines():
            raise AssertionError("read too early")
            yield  # pragma: no cover

        events = iter_events(lines())
        assert isinstance(next(events), StreamStart)

    def test_done_sentinel_stops_reading(self):
        consumed = []

        def lines():
            for line in ['data: {"type":"content","text":"a"}', "data: [DONE]", "data: unreachable"]:
                consumed.append(line)
                yield line

        events = list(iter_events(lines()))
        assert len(events) == 2
        assert consumed[-1] == "data: [DONE]"

    def test_unknown_type_does_not_abort(self):
        lines = [
            'data: {"type":"ping"}',
            'data: {"type":"content","text":"still here"}',
            'data: {"type":"stop","result":{"instanceId":"Y"}}',
        ]
        events = list(iter_events(lines))
        assert isinstance(events[1], StreamError)
        assert events[2] == StreamContent(text="still here")
        assert isinstance(events[3], StreamStop)

    def test_stop_with_unreadable_fields_is_delivered(self):
        lines = [
            'data: {"type":"content","text":"a"}',
            'data: {"type":"stop","stop_time_utc":"01/02/2025 10:00:00",'
            '"result":{"instanceId":"X","executorTaskLogs":[{"taskName":"t","duration":"00:00:01.5"}]}}',
            "data: [DONE]",
        ]
        events = list(iter_events(lines))
        assert [type(e) for e in events] == [StreamStart, StreamContent, StreamStop]
        assert events[-1].continuity_id == "X"
        assert events[-1].result.executor_task_logs[0].duration_ms == 1500

    def test_server_start_frame_is_not_repeated(self):
        lines = ['data: {"type":"start"}', 'data: {"type":"content","text":"a"}']
        events = list(iter_events(lines))
        assert [type(e) for e in events] == [StreamStart, StreamContent]

    def test_malformed_frames_are_skipped(self):
        lines = ["data: {broken", ": comment", "retry: 100", 'data: {"type":"content","text":"ok"}']
        events = list(iter_events(lines))
        assert events[1:] == [StreamContent(text="ok")]

    def test_nothing_follows_terminal_event(self):
        lines = [
            'data: {"type":"error","error":"fatal"}',
            'data: {"type":"content","text":"late"}',
        ]
        events = list(iter_events(lines))
        assert isinstance(events[-1], StreamError)
        assert len(events) == 2

    def test_exhausted_stream_without_stop(self):
        events = list(iter_events(['data: {"type":"content","text":"partial"}']))
        assert not any(isinstance(e, StreamStop) for e in events)

    def test_empty_stream_yields_only_start(self):
        events = list(iter_events([]))
        assert len(events) == 1
        assert isinstance(events[0], StreamStart)


class TestAiterEvents:
    @pytest.mark.asyncio
    async def test_basic_sequence(self):
        events = [e async for e in aiter_events(_lines(BASIC_STREAM))]
        assert [type(e) for e in events] == [StreamStart, StreamContent, StreamContent, StreamStop]
        assert events[-1].continuity_id == "X"

    @pytest.mark.asyncio
    async def test_unknown_type_does_not_abort(self):
        lines = ['data: {"type":"ping"}', 'data: {"type":"content","text":"x"}']
        events = [e async for e in aiter_events(_lines(lines))]
        assert events[-1] == StreamContent(text="x")
