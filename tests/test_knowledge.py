"""
Tests for volatile knowledge uploads and the per-handle knowledge queue.
"""

import httpx
import pytest

from serenitystar import (
    ConversationState,
    InputValidationError,
    SerenityClient,
    UploadVolatileKnowledgeRequest,
    VolatileKnowledgeStatus,
)
from serenitystar.knowledge import VOLATILE_KNOWLEDGE_PATH, build_upload

BASE_URL = "https://api.test"


def make_client(handler):
    http = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return SerenityClient(api_key="test-key", base_url=BASE_URL, http_client=http)


def never_called(request):
    raise AssertionError(f"Unexpected request {request.method} {request.url}")


class TestBuildUpload:
    def test_text_content(self):
        kwargs = build_upload(
            UploadVolatileKnowledgeRequest(content="some notes"),
            process_embeddings=True,
            no_expiration=False,
            expiration_days=None,
        )
        assert kwargs["params"] == {"processEmbeddings": "true", "noExpiration": "false"}
        assert kwargs["files"] == {"Content": (None, "some notes")}
        assert kwargs["data"] == {}

    def test_file_with_expiration_and_callback(self):
        request = UploadVolatileKnowledgeRequest(
            file=b"%PDF-1.4", file_name="report.pdf", callback_url="https://hooks.test/done"
        )
        kwargs = build_upload(request, process_embeddings=False, no_expiration=False, expiration_days=7)
        assert kwargs["params"]["expirationDays"] == "7"
        assert kwargs["params"]["processEmbeddings"] == "false"
        assert kwargs["files"] == {"File": ("report.pdf", b"%PDF-1.4", "application/pdf")}
        assert kwargs["data"] == {"CallbackUrl": "https://hooks.test/done"}

    def test_both_content_and_file(self):
        request = UploadVolatileKnowledgeRequest(content="x", file=b"y", file_name="y.txt")
        with pytest.raises(InputValidationError, match="not both"):
            build_upload(request, True, False, None)

    def test_neither_content_nor_file(self):
        with pytest.raises(InputValidationError):
            build_upload(UploadVolatileKnowledgeRequest(), True, False, None)

    def test_unsupported_extension(self):
        request = UploadVolatileKnowledgeRequest(file=b"x", file_name="archive.zip")
        with pytest.raises(InputValidationError):
            build_upload(request, True, False, None)

    def test_invalid_expiration_days(self):
        with pytest.raises(InputValidationError):
            build_upload(UploadVolatileKnowledgeRequest(content="x"), True, False, 0)


class TestVolatileKnowledgeScope:
    def test_upload_text(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "id": "k-1",
                    "status": "analyzing",
                    "expirationDate": "2026-01-01T00:00:00Z",
                },
            )

        knowledge = make_client(handler).volatile_knowledge.upload(
            UploadVolatileKnowledgeRequest(content="meeting notes"), expiration_days=3
        )

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == VOLATILE_KNOWLEDGE_PATH
        assert request.url.params["expirationDays"] == "3"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="Content"' in request.content
        assert b"meeting notes" in request.content
        assert knowledge.id == "k-1"
        assert knowledge.expiration_date.year == 2026
        assert not knowledge.is_ready

    def test_upload_file(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"id": "k-2", "status": "success", "fileName": "a.csv"})

        knowledge = make_client(handler).volatile_knowledge.upload(
            UploadVolatileKnowledgeRequest(file=b"a,b\n1,2\n", file_name="a.csv")
        )

        body = seen[0].content
        assert b'name="File"; filename="a.csv"' in body
        assert b"Content-Type: text/csv" in body
        assert knowledge.status == VolatileKnowledgeStatus.SUCCESS.value
        assert knowledge.is_ready

    def test_invalid_upload_sends_nothing(self):
        client = make_client(never_called)
        request = UploadVolatileKnowledgeRequest(content="x", file=b"y", file_name="y.txt")
        with pytest.raises(InputValidationError):
            client.volatile_knowledge.upload(request)

    def test_get_status(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"Id": "k-1", "Status": "error", "Error": "unreadable"})

        knowledge = make_client(handler).volatile_knowledge.get_status("k-1")

        assert seen[0].method == "GET"
        assert seen[0].url.path == f"{VOLATILE_KNOWLEDGE_PATH}/k-1"
        assert knowledge.error == "unreadable"

    def test_get_status_requires_id(self):
        with pytest.raises(InputValidationError):
            make_client(never_called).volatile_knowledge.get_status("")


class TestKnowledgeQueue:
    def test_ids_are_deduplicated_in_order(self):
        state = ConversationState()
        state.add_knowledge_id("a")
        state.add_knowledge_id("b")
        state.add_knowledge_id("a")
        assert state.pending_knowledge_ids == ("a", "b")

    def test_clear_is_idempotent(self):
        state = ConversationState(knowledge_ids=["a"])
        state.clear_knowledge_ids()
        state.clear_knowledge_ids()
        assert state.pending_knowledge_ids == ()

    def test_upload_on_handle_queues_id(self):
        ids = iter(["k-1", "k-2"])

        def handler(request):
            return httpx.Response(200, json={"id": next(ids)})

        conversation = make_client(handler).agents.assistants.create_conversation("support")
        conversation.volatile_knowledge.upload(UploadVolatileKnowledgeRequest(content="one"))
        conversation.volatile_knowledge.upload(UploadVolatileKnowledgeRequest(content="two"))

        assert conversation.volatile_knowledge.knowledge_ids == ("k-1", "k-2")

    def test_client_scope_does_not_queue(self):
        def handler(request):
            return httpx.Response(200, json={"id": "k-1"})

        client = make_client(handler)
        activity = client.agents.activities.create("summarizer")
        client.volatile_knowledge.upload(UploadVolatileKnowledgeRequest(content="loose"))

        assert activity.volatile_knowledge.knowledge_ids == ()
