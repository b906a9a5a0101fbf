import logging
import time
import uuid
from typing import Any, Optional

import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

SCHEDULED_PHRASE = "successfully scheduled"
SCHEDULED_EVENT = "appointment_scheduled"


class AgentForceClient:
    """Proxy for the Salesforce AgentForce (Einstein agent) API"""

    def __init__(
        self,
        org_domain: Optional[str],
        api_host: Optional[str],
        client_id: Optional[str],
        client_secret: Optional[str],
        agent_id: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.org_domain = org_domain
        self.api_host = api_host
        self.client_id = client_id
        self.client_secret = client_secret
        self.agent_id = agent_id
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config, transport: Optional[httpx.BaseTransport] = None):
        return cls(
            org_domain=config.get("SF_ORG_DOMAIN"),
            api_host=config.get("SF_API_HOST"),
            client_id=config.get("SF_CLIENT_ID"),
            client_secret=config.get("SF_CLIENT_SECRET"),
            agent_id=config.get("SF_AGENT_ID"),
            timeout=config.get("EXTERNAL_HTTP_TIMEOUT", 30.0),
            transport=transport,
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def _get_access_token(self, client: httpx.Client) -> str:
        response = client.post(
            f"{self.org_domain}/services/oauth2/token",
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
        )
        if response.status_code != 200:
            logger.error("AgentForce token exchange failed: %s", response.status_code)
            raise UpstreamError("Failed to create AgentForce session",
                                details=f"token exchange returned {response.status_code}")
        try:
            return response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError("Failed to create AgentForce session",
                                details=f"unexpected token reply: {e!r}")

    def create_session(self) -> dict[str, Any]:
        """Obtain a bearer token and open a new agent conversation."""
        if not (self.org_domain and self.api_host and self.agent_id):
            raise UpstreamError("Failed to create AgentForce session",
                                details="AgentForce is not configured")
        try:
            with self._client() as client:
                access_token = self._get_access_token(client)
                response = client.post(
                    f"{self.api_host}/einstein/ai-agent/v1/agents/{self.agent_id}/sessions",
                    headers={"Authorization": f"Bearer {access_token}"},
                    json={
                        "externalSessionKey": str(uuid.uuid4()),
                        "instanceConfig": {"endpoint": self.org_domain},
                        "tz": "America/Los_Angeles",
                        "variables": [
                            {
                                "name": "$Context.EndUserLanguage",
                                "type": "Text",
                                "value": "en_US",
                            }
                        ],
                        "featureSupport": "Streaming",
                        "streamingCapabilities": {"chunkTypes": ["Text"]},
                        "bypassUser": True,
                    },
                )
        except httpx.HTTPError as e:
            raise UpstreamError("Failed to create AgentForce session", details=str(e))

        if response.status_code >= 300:
            raise UpstreamError("Failed to create AgentForce session",
                                details=f"session creation returned {response.status_code}")

        try:
            session = response.json()
            session_id = session["sessionId"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError("Failed to create AgentForce session",
                                details=f"unexpected session reply: {e!r}")

        logger.info("AgentForce session created: %s", session_id)
        return {
            "sessionId": session_id,
            "externalSessionKey": session.get("externalSessionKey"),
            "accessToken": access_token,
        }

    def send_message(self, session_id: str, access_token: str, text: str) -> dict[str, Any]:
        """Forward a single text turn and return the upstream JSON untouched."""
        try:
            with self._client() as client:
                response = client.post(
                    f"{self.api_host}/einstein/ai-agent/v1/sessions/{session_id}/messages",
                    headers={"Authorization": f"Bearer {access_token}"},
                    json={
                        "message": {
                            "sequenceId": int(time.time() * 1000),
                            "type": "Text",
                            "text": text,
                        },
                        "variables": [],
                    },
                )
        except httpx.HTTPError as e:
            raise UpstreamError("Failed to send message to AgentForce", details=str(e))

        if response.status_code >= 300:
            raise UpstreamError("Failed to send message to AgentForce",
                                details=f"upstream returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Failed to send message to AgentForce",
                                details=f"non-JSON reply: {e}")
        logger.debug("AgentForce response: %s", data)
        return data


def _reply_messages(reply: Any) -> list:
    if not isinstance(reply, dict):
        return []
    messages = reply.get("messages")
    return messages if isinstance(messages, list) else []


def reply_text(reply: Any) -> str:
    messages = _reply_messages(reply)
    if not messages:
        return ""
    first = messages[0]
    if isinstance(first, str):
        return first
    if not isinstance(first, dict):
        return ""
    text = first.get("message") or first.get("text")
    return text if isinstance(text, str) else ""


def is_appointment_scheduled(reply: Any) -> bool:
    """True when an assistant reply reports a scheduled appointment.

    An explicit ``event``/``intent`` on any returned message wins; otherwise
    the first message's text is searched for "successfully scheduled".
    """
    for message in _reply_messages(reply):
        if not isinstance(message, dict):
            continue
        if SCHEDULED_EVENT in (message.get("event"), message.get("intent")):
            return True
    return SCHEDULED_PHRASE in reply_text(reply).lower()

