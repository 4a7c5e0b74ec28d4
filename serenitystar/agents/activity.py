"""
Serenity Star SDK - Activity agents.

Activities are single-task agents driven by input parameters.
"""

from typing import Optional

import httpx

from ..knowledge import AsyncConversationVolatileKnowledgeScope, ConversationVolatileKnowledgeScope
from ..models import AgentExecutionOptions, AgentResult
from .base import AgentHandle, AsyncAgentHandle, ParameterFrameBuilder


class ActivityFrameBuilder(ParameterFrameBuilder):
    kind = "activity"


class Activity(AgentHandle):
    """
    An activity agent.

    Example:
        ```python
        activity = client.agents.activities.create(
            "translator", AgentExecutionOptions(input_parameters={"word": "running"})
        )
        result = activity.execute()
        ```
    """

    def __init__(self, http: httpx.Client, agent_code: str, options: Optional[AgentExecutionOptions] = None):
        super().__init__(http, agent_code, ActivityFrameBuilder(options))
        self.volatile_knowledge = ConversationVolatileKnowledgeScope(http, self.state)


class AsyncActivity(AsyncAgentHandle):
    """Asynchronous activity agent."""

    def __init__(
        self, http: httpx.AsyncClient, agent_code: str, options: Optional[AgentExecutionOptions] = None
    ):
        super().__init__(http, agent_code, ActivityFrameBuilder(options))
        self.volatile_knowledge = AsyncConversationVolatileKnowledgeScope(http, self.state)


class ActivitiesScope:
    """Create and execute activity agents."""

    def __init__(self, http: httpx.Client):
        self._http = http

    def create(self, agent_code: str, options: Optional[AgentExecutionOptions] = None) -> Activity:
        return Activity(self._http, agent_code, options)

    def execute(self, agent_code: str, options: Optional[AgentExecutionOptions] = None) -> AgentResult:
        return self.create(agent_code, options).execute()


class AsyncActivitiesScope:
    """Create and execute activity agents asynchronously."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    def create(self, agent_code: str, options: Optional[AgentExecutionOptions] = None) -> AsyncActivity:
        return AsyncActivity(self._http, agent_code, options)

    async def execute(
        self, agent_code: str, options: Optional[AgentExecutionOptions] = None
    ) -> AgentResult:
        return await self.create(agent_code, options).execute()
