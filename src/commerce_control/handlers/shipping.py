"""
Shipping Event Handler

Applies shipping platform callbacks to store orders: records the tracking
number, the reported shipping status and an order note, then forwards the
event downstream when a forward URL is configured.
"""

from datetime import datetime
from typing import Any, Callable, Optional

from commerce_control.core.logger import setup_logger
from commerce_control.core.result import Err, Ok, Result
from commerce_control.db.repository import OrderRepository
from commerce_control.integrations.forwarder import WebhookForwarder
from commerce_control.models.webhook import ShippingEvent

logger = setup_logger(__name__)


class ShippingEventProcessor:
    """Processes one shipping event and reports the outcome as a Result."""

    def __init__(
        self,
        orders: OrderRepository,
        forwarder: Optional[WebhookForwarder] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            orders: Order storage
            forwarder: Optional downstream forwarder
            clock: Store-local clock for ``processed_at``
        """
        self.orders = orders
        self.forwarder = forwarder
        self.clock = clock

    async def process(self, params: Optional[Any]) -> Result:
        """
        Process parsed webhook parameters.

        Args:
            params: Parsed JSON body (None when the body was not JSON)

        Returns:
            Ok with the processed fields, or Err with the failure reason
        """
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return Err("Payload must be a JSON object")

        event = ShippingEvent.model_validate(params)

        order_updated = False
        if event.order_id:
            try:
                order = await self.orders.get(event.order_id)
                if order is not None:
                    note = f"Shipping status updated: {event.status}" if event.status else None
                    await self.orders.update_shipping(
                        order,
                        tracking_number=event.tracking_number,
                        status=event.status,
                        note=note,
                    )
                    order_updated = True
                    logger.info(f"Updated shipping info for order {event.order_id}")
                else:
                    logger.info(f"Order {event.order_id} not found, nothing to update")
            except Exception as e:
                logger.error(f"Error updating order {event.order_id}: {e}", exc_info=True)
                return Err(str(e))

        forwarded = False
        if self.forwarder and self.forwarder.enabled:
            forward_result = await self.forwarder.forward(params)
            forwarded = forward_result["success"]

        return Ok({
            "order_id": event.order_id,
            "tracking_number": event.tracking_number,
            "status": event.status,
            "event_type": event.event_type,
            "order_updated": order_updated,
            "forwarded": forwarded,
            "processed_at": self.clock().isoformat(timespec="seconds"),
        })
