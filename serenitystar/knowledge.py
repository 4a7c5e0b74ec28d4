"""
Serenity Star SDK - Volatile knowledge uploads.

Volatile knowledge is a short-lived document or text snippet. Uploaded
through a handle's ``volatile_knowledge`` scope, it is attached to that
handle's next execution and then released.

Usage:
    ```python
    activity = client.agents.activities.create("summarizer")
    activity.volatile_knowledge.upload(
        UploadVolatileKnowledgeRequest(file=open("report.pdf", "rb"), file_name="report.pdf")
    )
    result = activity.execute()  # carries volatileKnowledgeIds once
    ```
"""

import logging
from typing import Any, Optional

import httpx

from .models import UploadVolatileKnowledgeRequest, VolatileKnowledge
from .responses import decode_model
from .state import ConversationState
from .validation import (
    content_type_for,
    validate_positive_int,
    validate_required,
    validate_upload_request,
)

logger = logging.getLogger("serenitystar.knowledge")

VOLATILE_KNOWLEDGE_PATH = "/api/v2/volatileknowledge"


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def build_upload(
    request: UploadVolatileKnowledgeRequest,
    process_embeddings: bool,
    no_expiration: bool,
    expiration_days: Optional[int],
) -> dict[str, Any]:
    """Validate an upload and return the ``httpx`` request arguments."""
    validate_upload_request(request.content, request.file, request.file_name)
    validate_positive_int(expiration_days, "expiration_days")

    params: dict[str, str] = {
        "processEmbeddings": _bool_param(process_embeddings),
        "noExpiration": _bool_param(no_expiration),
    }
    if expiration_days is not None:
        params["expirationDays"] = str(expiration_days)

    data: dict[str, str] = {}
    files: dict[str, Any] = {}
    if request.content:
        # no filename: sent as a plain multipart field
        files["Content"] = (None, request.content)
    else:
        file_name = request.file_name or ""
        files["File"] = (file_name, request.file, content_type_for(file_name))
    if request.callback_url:
        data["CallbackUrl"] = request.callback_url

    return {"params": params, "data": data, "files": files}


class VolatileKnowledgeScope:
    """Upload volatile knowledge and poll its processing status."""

    def __init__(self, http: httpx.Client):
        self._http = http

    def upload(
        self,
        request: UploadVolatileKnowledgeRequest,
        process_embeddings: bool = True,
        no_expiration: bool = False,
        expiration_days: Optional[int] = None,
    ) -> VolatileKnowledge:
        """
        Upload text or a file as volatile knowledge.

        Args:
            request: Exactly one of content or file (with file name).
            process_embeddings: Whether the service should embed the content.
            no_expiration: Keep the knowledge until explicitly removed.
            expiration_days: Days until the knowledge expires.

        Returns:
            The created VolatileKnowledge, usually still analyzing.
        """
        kwargs = build_upload(request, process_embeddings, no_expiration, expiration_days)
        response = self._http.post(VOLATILE_KNOWLEDGE_PATH, **kwargs)
        knowledge = decode_model(response, VolatileKnowledge.from_dict)
        logger.info("Uploaded volatile knowledge %s", knowledge.id)
        return knowledge

    def get_status(self, knowledge_id: str) -> VolatileKnowledge:
        """Fetch the current status of an uploaded knowledge item."""
        validate_required(knowledge_id, "knowledge_id")
        response = self._http.get(f"{VOLATILE_KNOWLEDGE_PATH}/{knowledge_id}")
        return decode_model(response, VolatileKnowledge.from_dict)


class ConversationVolatileKnowledgeScope(VolatileKnowledgeScope):
    """Volatile knowledge bound to one handle's next execution."""

    def __init__(self, http: httpx.Client, state: ConversationState):
        super().__init__(http)
        self._state = state

    @property
    def knowledge_ids(self) -> tuple[str, ...]:
        return self._state.pending_knowledge_ids

    def upload(
        self,
        request: UploadVolatileKnowledgeRequest,
        process_embeddings: bool = True,
        no_expiration: bool = False,
        expiration_days: Optional[int] = None,
    ) -> VolatileKnowledge:
        knowledge = super().upload(request, process_embeddings, no_expiration, expiration_days)
        self._state.add_knowledge_id(knowledge.id)
        return knowledge

    def clear(self) -> None:
        self._state.clear_knowledge_ids()


class AsyncVolatileKnowledgeScope:
    """Async counterpart of :class:`VolatileKnowledgeScope`."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def upload(
        self,
        request: UploadVolatileKnowledgeRequest,
        process_embeddings: bool = True,
        no_expiration: bool = False,
        expiration_days: Optional[int] = None,
    ) -> VolatileKnowledge:
        """Upload text or a file as volatile knowledge."""
        kwargs = build_upload(request, process_embeddings, no_expiration, expiration_days)
        response = await self._http.post(VOLATILE_KNOWLEDGE_PATH, **kwargs)
        knowledge = decode_model(response, VolatileKnowledge.from_dict)
        logger.info("Uploaded volatile knowledge %s", knowledge.id)
        return knowledge

    async def get_status(self, knowledge_id: str) -> VolatileKnowledge:
        """Fetch the current status of an uploaded knowledge item."""
        validate_required(knowledge_id, "knowledge_id")
        response = await self._http.get(f"{VOLATILE_KNOWLEDGE_PATH}/{knowledge_id}")
        return decode_model(response, VolatileKnowledge.from_dict)


class AsyncConversationVolatileKnowledgeScope(AsyncVolatileKnowledgeScope):
    """Async counterpart of :class:`ConversationVolatileKnowledgeScope`."""

    def __init__(self, http: httpx.AsyncClient, state: ConversationState):
        super().__init__(http)
        self._state = state

    @property
    def knowledge_ids(self) -> tuple[str, ...]:
        return self._state.pending_knowledge_ids

    async def upload(
        self,
        request: UploadVolatileKnowledgeRequest,
        process_embeddings: bool = True,
        no_expiration: bool = False,
        expiration_days: Optional[int] = None,
    ) -> VolatileKnowledge:
        knowledge = await super().upload(request, process_embeddings, no_expiration, expiration_days)
        self._state.add_knowledge_id(knowledge.id)
        return knowledge

    def clear(self) -> None:
        self._state.clear_knowledge_ids()
