"""Forward processed shipping events to a downstream service."""

from typing import Any, Dict, Optional

import httpx

from commerce_control.core.logger import setup_logger

logger = setup_logger(__name__)

FORWARDER_TIMEOUT = 10.0


class WebhookForwarder:
    """Posts shipping event payloads to a configured URL.

    Exactly one attempt per event; failures are reported, never retried.
    """

    def __init__(
        self,
        forward_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize forwarder.

        Args:
            forward_url: URL to forward events to (None = disabled)
            client: Optional shared HTTP client (a short-lived one is used otherwise)
        """
        self.forward_url = forward_url
        self.client = client
        self.enabled = bool(forward_url)

        if self.enabled:
            logger.debug(f"Shipping event forwarding enabled: {forward_url}")

    async def forward(self, event_payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Forward one event.

        Args:
            event_payload: Shipping event parameters as received

        Returns:
            Dict with keys: success (bool), status_code (int|None), last_error (str|None)
        """
        if not self.enabled:
            return {"success": False, "status_code": None, "last_error": "Disabled"}

        try:
            if self.client is not None:
                response = await self.client.post(self.forward_url, json=event_payload)
            else:
                async with httpx.AsyncClient(timeout=FORWARDER_TIMEOUT) as client:
                    response = await client.post(self.forward_url, json=event_payload)

            response.raise_for_status()

            logger.info(f"Forwarded shipping event (status={response.status_code})")
            return {"success": True, "status_code": response.status_code, "last_error": None}

        except httpx.HTTPStatusError as e:
            last_error = f"HTTP {e.response.status_code}: {e.response.text}"
            logger.error(f"HTTP error forwarding shipping event: {last_error}")
            return {
                "success": False,
                "status_code": e.response.status_code,
                "last_error": last_error,
            }

        except httpx.HTTPError as e:
            last_error = f"{type(e).__name__}: {e}"
            logger.warning(f"Forwarding shipping event failed: {last_error}")
            return {"success": False, "status_code": None, "last_error": last_error}
