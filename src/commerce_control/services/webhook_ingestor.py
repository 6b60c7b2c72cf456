"""
Webhook ingestion: log first, process second.

Every received payload is stored as a ``pending`` log row before the event
processor runs, so a failing processor still leaves an audit record. The row
is then moved to ``success`` or ``error`` exactly once.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from commerce_control.config.constants import STATUS_ERROR, STATUS_SUCCESS
from commerce_control.core.logger import setup_logger
from commerce_control.core.monitoring import capture_exception, set_webhook_context
from commerce_control.core.result import Err, Result
from commerce_control.services.log_service import WebhookLogService

logger = setup_logger(__name__)


class EventProcessor(Protocol):
    """Capability the ingestor delegates event handling to."""

    async def process(self, params: Optional[Any]) -> Result:
        ...


@dataclass
class IngestResult:
    """Outcome of one webhook delivery."""

    success: bool
    log_id: int
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def status_code(self) -> int:
        return 200 if self.success else 500

    def to_response(self) -> Dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "message": "Event received and processed",
                "log_id": self.log_id,
                "data": self.data,
            }
        return {
            "success": False,
            "message": "Error processing event",
            "error": self.error,
            "log_id": self.log_id,
        }


def resolve_client_ip(headers: Mapping[str, str], remote_addr: Optional[str]) -> str:
    """
    Client address for the audit record.

    ``X-Client-IP``, then ``X-Forwarded-For``, then the socket address; the
    first non-empty value wins. Header values are client-controlled, so this
    is audit metadata only.
    """
    lowered = {key.lower(): value for key, value in headers.items()}
    for candidate in (lowered.get("x-client-ip"), lowered.get("x-forwarded-for"), remote_addr):
        if candidate and candidate.strip():
            return candidate.strip()[:45]
    return ""


class WebhookIngestor:
    """Receives shipping webhooks and keeps their log rows in step."""

    def __init__(
        self,
        log_service: WebhookLogService,
        processor: EventProcessor,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.log_service = log_service
        self.processor = processor
        self.clock = clock

    async def receive(
        self,
        raw_body: str,
        params: Optional[Any],
        headers: Mapping[str, str],
        client_ip: str,
    ) -> IngestResult:
        """
        Log, process and record the outcome of one delivery.

        Args:
            raw_body: Request body as text
            params: Parsed JSON body (None when not JSON)
            headers: Request headers
            client_ip: Resolved client address

        Returns:
            IngestResult carrying the log id and the processor data or error
        """
        log_id = await self.log_service.record_request(
            request_body=raw_body,
            request_params=params,
            request_headers=dict(headers),
            ip_address=client_ip,
            created_at=self.clock(),
        )

        order_id = params.get("order_id") if isinstance(params, dict) else None
        set_webhook_context(
            log_id=log_id,
            order_id=str(order_id) if order_id is not None else None,
            event_type=params.get("event_type") if isinstance(params, dict) else None,
        )

        try:
            result = await self.processor.process(params)
        except Exception as e:
            logger.error(f"Unhandled error processing webhook {log_id}: {e}", exc_info=True)
            capture_exception(e, context={"log_id": log_id})
            result = Err(str(e) or type(e).__name__)

        if isinstance(result, Err):
            await self.log_service.record_outcome(
                log_id, STATUS_ERROR, {"error": result.reason}, self.clock()
            )
            logger.warning(f"Webhook {log_id} failed: {result.reason}")
            return IngestResult(success=False, log_id=log_id, error=result.reason)

        await self.log_service.record_outcome(log_id, STATUS_SUCCESS, result.data, self.clock())
        return IngestResult(success=True, log_id=log_id, data=result.data)
