"""
Serenity Star SDK - Connector status checks.

Agents that call third-party services return a ``connection`` pending action
until the user authorizes the connector; these calls poll that status.
"""

import httpx

from ..models import ConnectorStatus, ConnectorStatusOptions
from ..responses import decode_model
from ..validation import validate_required


def connector_status_request(agent_code: str, options: ConnectorStatusOptions) -> tuple[str, dict[str, str]]:
    validate_required(agent_code, "agent_code")
    validate_required(options.connector_id, "connector_id")
    validate_required(options.agent_instance_id, "agent_instance_id")
    path = f"/api/v2/agent/{agent_code}/connector/{options.connector_id}/status"
    return path, {"agentInstanceId": options.agent_instance_id}


def get_connector_status(
    http: httpx.Client, agent_code: str, options: ConnectorStatusOptions
) -> ConnectorStatus:
    path, params = connector_status_request(agent_code, options)
    return decode_model(http.get(path, params=params), ConnectorStatus.from_dict)


async def aget_connector_status(
    http: httpx.AsyncClient, agent_code: str, options: ConnectorStatusOptions
) -> ConnectorStatus:
    path, params = connector_status_request(agent_code, options)
    response = await http.get(path, params=params)
    return decode_model(response, ConnectorStatus.from_dict)
