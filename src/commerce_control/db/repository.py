"""Repositories for webhook logs, orders and products."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order, OrderNote, Product, WebhookLog


class WebhookLogRepository:
    """Data access layer for WebhookLog model."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with async session."""
        self.session = session

    async def insert_pending(
        self,
        request_body: str,
        request_params: Optional[Any],
        request_headers: Dict[str, Any],
        ip_address: str,
        created_at: datetime,
    ) -> int:
        """Insert a ``pending`` row and commit it. Returns the new row id."""
        log = WebhookLog(
            request_body=request_body,
            request_params=request_params,
            request_headers=request_headers,
            ip_address=ip_address,
            created_at=created_at,
        )
        self.session.add(log)
        await self.session.commit()
        return log.id

    async def update_status(
        self,
        log_id: int,
        status: str,
        response_data: Optional[Any],
        processed_at: datetime,
    ) -> None:
        """Record the terminal status of a row."""
        stmt = (
            update(WebhookLog)
            .where(WebhookLog.id == log_id)
            .values(status=status, response_data=response_data, processed_at=processed_at)
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def get(self, log_id: int) -> Optional[WebhookLog]:
        return await self.session.get(WebhookLog, log_id)

    async def count(self, status: Optional[str] = None) -> int:
        """Count rows, optionally restricted to one status."""
        query = select(func.count(WebhookLog.id))
        if status is not None:
            query = query.where(WebhookLog.status == status)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def recent(self, limit: int) -> List[WebhookLog]:
        """Most recent rows first."""
        query = (
            select(WebhookLog)
            .order_by(WebhookLog.created_at.desc(), WebhookLog.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())


class OrderRepository:
    """Data access layer for orders and their notes."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with async session."""
        self.session = session

    async def get(self, order_id: str) -> Optional[Order]:
        return await self.session.get(Order, order_id)

    async def update_shipping(
        self,
        order: Order,
        tracking_number: Optional[str] = None,
        status: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Order:
        """Apply shipping fields and an optional note in one commit."""
        if tracking_number:
            order.shipping_tracking_number = tracking_number
        if status:
            order.shipping_status = status
        if note:
            self.session.add(OrderNote(order_id=order.id, note=note))
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return order

    async def create(self, order_id: str) -> Order:
        """Register an order so shipping events can update it."""
        order = await self.get(order_id)
        if order is None:
            order = Order(id=order_id)
            self.session.add(order)
            await self.session.commit()
        return order

    async def get_notes(self, order_id: str) -> List[OrderNote]:
        query = (
            select(OrderNote)
            .where(OrderNote.order_id == order_id)
            .order_by(OrderNote.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())


class ProductRepository:
    """Data access layer for catalog products."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with async session."""
        self.session = session

    async def get(self, product_id: int) -> Optional[Product]:
        return await self.session.get(Product, product_id)

    async def set_currency_prices(self, product: Product, prices: Dict[str, float]) -> Product:
        """Replace the product's per-currency fixed prices."""
        product.currency_prices = dict(prices)
        await self.session.commit()
        return product

    async def upsert(
        self,
        product_id: int,
        name: str,
        base_price: float,
        category_ids: List[int],
    ) -> Product:
        """Create or replace a catalog entry, keeping its currency prices."""
        product = await self.get(product_id)
        if product is None:
            product = Product(id=product_id, currency_prices={})
            self.session.add(product)
        product.name = name
        product.base_price = base_price
        product.category_ids = list(category_ids)
        await self.session.commit()
        return product
