import datetime
import logging
from typing import Optional

import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


def build_appointment_blocks(patient_name, doctor_name, appointment_time):
    """Slack Block Kit payload announcing a scheduled appointment."""
    return {
        "blocks": [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": "🏥 New Second Opinion Appointment",
                    "emoji": True,
                },
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Patient:*\n{patient_name or 'Not specified'}"},
                    {"type": "mrkdwn", "text": f"*Doctor:*\n{doctor_name or 'Dr. Sarah Johnson'}"},
                ],
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": "*Status:*\nSuccessfully Scheduled"},
                    {
                        "type": "mrkdwn",
                        "text": f"*Time:*\n{appointment_time or datetime.datetime.now().strftime('%Y-%m-%d %H:%M')}",
                    },
                ],
            },
        ]
    }


class SlackNotifier:
    def __init__(
        self,
        webhook_url: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config, transport: Optional[httpx.BaseTransport] = None):
        return cls(
            webhook_url=config.get("SLACK_WEBHOOK_URL"),
            timeout=config.get("EXTERNAL_HTTP_TIMEOUT", 30.0),
            transport=transport,
        )

    def notify(self, patient_name=None, doctor_name=None, appointment_time=None) -> bool:
        if not self.webhook_url:
            raise UpstreamError("Failed to send Slack notification",
                                details="Slack webhook URL is not configured")

        payload = build_appointment_blocks(patient_name, doctor_name, appointment_time)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            raise UpstreamError("Failed to send Slack notification", details=str(e))

        if response.status_code >= 300:
            raise UpstreamError("Failed to send Slack notification",
                                details=f"webhook returned {response.status_code}")

        logger.info("Slack notification sent for patient %r", patient_name)
        return True

    def notify_quietly(self, patient_name=None, doctor_name=None, appointment_time=None) -> bool:
        """Best-effort notify: failures are logged, never raised."""
        try:
            return self.notify(patient_name, doctor_name, appointment_time)
        except UpstreamError as e:
            logger.error("Slack notification failed: %s", e.details)
            return False
