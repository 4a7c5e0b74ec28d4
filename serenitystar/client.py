"""
Serenity Star SDK - HTTP client for Serenity Star agents.

Provides both synchronous and asynchronous clients.
"""

from typing import Any, Optional

import httpx

from .agents import AgentsScope, AsyncAgentsScope, aget_connector_status, get_connector_status
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig
from .knowledge import AsyncVolatileKnowledgeScope, VolatileKnowledgeScope
from .models import ConnectorStatus, ConnectorStatusOptions

API_KEY_HEADER = "X-API-KEY"


def _configure(
    api_key: str,
    base_url: str,
    timeout: float,
) -> dict[str, Any]:
    ClientConfig(api_key=api_key, base_url=base_url, timeout=timeout).validate()
    return {
        "base_url": base_url.rstrip("/"),
        "headers": {API_KEY_HEADER: api_key},
        "timeout": timeout,
    }


class SerenityClient:
    """
    Synchronous client for Serenity Star agents.

    Example:
        ```python
        with SerenityClient(api_key="your-api-key") as client:
            result = client.agents.activities.execute(
                "translator", AgentExecutionOptions(input_parameters={"word": "hello"})
            )

            conversation = client.agents.assistants.create_conversation("support-bot")
            for event in conversation.stream_message("Hi!"):
                if isinstance(event, StreamContent):
                    print(event.text, end="")
        ```
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        settings = _configure(api_key, base_url, timeout)
        self.base_url = settings["base_url"]
        if http_client is None:
            self._client = httpx.Client(**settings)
        else:
            http_client.headers[API_KEY_HEADER] = api_key
            self._client = http_client
        self.agents = AgentsScope(self._client)
        self.volatile_knowledge = VolatileKnowledgeScope(self._client)

    @classmethod
    def from_config(cls, config: ClientConfig, http_client: Optional[httpx.Client] = None) -> "SerenityClient":
        return cls(config.api_key, config.base_url, config.timeout, http_client=http_client)

    def get_connector_status(self, agent_code: str, options: ConnectorStatusOptions) -> ConnectorStatus:
        """
        Check whether a connector has been authorized for an agent instance.

        Args:
            agent_code: The agent that requested the connection.
            options: Agent instance and connector identifiers.

        Returns:
            The ConnectorStatus.
        """
        return get_connector_status(self._client, agent_code, options)

    def close(self) -> None:
        """Close the HTTP client connection."""
        self._client.close()

    def __enter__(self) -> "SerenityClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncSerenityClient:
    """
    Asynchronous client for Serenity Star agents.

    Example:
        ```python
        async with AsyncSerenityClient(api_key="your-api-key") as client:
            conversation = client.agents.assistants.create_conversation("support-bot")
            async for event in conversation.stream_message("Hi!"):
                ...
        ```
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = _configure(api_key, base_url, timeout)
        self.base_url = settings["base_url"]
        if http_client is None:
            self._client = httpx.AsyncClient(**settings)
        else:
            http_client.headers[API_KEY_HEADER] = api_key
            self._client = http_client
        self.agents = AsyncAgentsScope(self._client)
        self.volatile_knowledge = AsyncVolatileKnowledgeScope(self._client)

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> "AsyncSerenityClient":
        return cls(config.api_key, config.base_url, config.timeout, http_client=http_client)

    async def get_connector_status(
        self, agent_code: str, options: ConnectorStatusOptions
    ) -> ConnectorStatus:
        """Check whether a connector has been authorized for an agent instance."""
        return await aget_connector_status(self._client, agent_code, options)

    async def close(self) -> None:
        """Close the HTTP client connection."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncSerenityClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
