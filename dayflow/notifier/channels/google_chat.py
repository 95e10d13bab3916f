"""Google Chat webhook notification channel."""

import logging

import httpx

logger = logging.getLogger(__name__)


class GoogleChatChannel:
    """Posts the "up next" notification to a Google Chat space webhook.

    The notification title becomes the card header and the event title its
    body; the plain `text` field carries both for clients without cards.
    """

    name = "google_chat"

    def __init__(
        self,
        webhook_url: str,
        dry_run: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.dry_run = dry_run
        self._transport = transport

    async def send(self, title: str, body: str) -> dict:
        payload = self._format_payload(title, body)

        if self.dry_run:
            logger.info("DRY RUN: Google Chat payload %s", payload)
            return {"status": "dry_run", "success": True, "payload": payload}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(self.webhook_url, json=payload, timeout=10.0)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Google Chat HTTP error: %s", e)
            return {"status": "error", "success": False, "error": str(e)}
        except httpx.RequestError as e:
            logger.error("Google Chat request error: %s", e)
            return {"status": "error", "success": False, "error": str(e)}

        return {"status": "sent", "success": True, "message_id": _message_name(response)}

    def _format_payload(self, title: str, body: str) -> dict:
        return {
            "text": f"{title}: {body}",
            "cardsV2": [
                {
                    "cardId": "dayflow-upcoming",
                    "card": {
                        "header": {"title": title, "subtitle": "Dayflow"},
                        "sections": [{"widgets": [{"textParagraph": {"text": body}}]}],
                    },
                }
            ],
        }


def _message_name(response: httpx.Response) -> str:
    """Created message name, or "" when the webhook answered without JSON."""
    try:
        data = response.json()
    except ValueError:
        logger.debug("Google Chat response was not JSON: %r", response.text[:200])
        return ""
    return data.get("name", "") if isinstance(data, dict) else ""
