"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from bookstore.domain.model.order import Order, OrderLine, OrderStatus, TrackingInfo
from bookstore.domain.model.pricing import PricingBreakdown
from bookstore.domain.model.value_objects import (
    Money,
    PaymentMethod,
    Quantity,
    ShippingAddress,
)
from bookstore.domain.repository.order_repository import OrderRepository
from bookstore.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        self._sequence = JsonFile(file_path.with_name(f"{file_path.stem}_sequence.json"))

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        # Ids are handed out under lock so concurrent checkouts never share one
        with self._sequence.update() as records:
            last = records[0]["last_id"] if records else 0
            last = max([last, *(o["id"] for o in self._file.load())])
            records[:] = [{"last_id": last + 1}]
        return last + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def find_for_user(self, order_id: int, user_id: str) -> Order | None:
        order = self.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            return None
        return order

    def list_for_user(
        self, user_id: str, status: OrderStatus | None = None
    ) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["user_id"] == user_id
            and (status is None or raw["status"] == status.value)
        ]
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    def save(self, order: Order) -> None:
        with self._file.update() as orders:
            if order.id is None:
                order.id = max((o["id"] for o in orders), default=0) + 1

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        tracking = order.tracking
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "book_id": item.book_id,
                    "title": item.title,
                    "author": item.author,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "image_url": item.image_url,
                }
                for item in order.items
            ],
            "shipping_address": _address_to_raw(order.shipping_address),
            "billing_address": _address_to_raw(order.billing_address),
            "payment_method": {
                "type": order.payment_method.type,
                "card_last4": order.payment_method.card_last4,
                "card_brand": order.payment_method.card_brand,
                "payment_intent_id": order.payment_method.payment_intent_id,
            },
            "pricing": {
                "subtotal": str(order.pricing.subtotal.amount),
                "tax": str(order.pricing.tax.amount),
                "shipping": str(order.pricing.shipping.amount),
                "discount": str(order.pricing.discount.amount),
                "total": str(order.pricing.total.amount),
            },
            "cancellation_reason": order.cancellation_reason,
            "tracking": (
                {
                    "tracking_number": tracking.tracking_number,
                    "tracking_url": tracking.tracking_url,
                    "estimated_delivery": (
                        tracking.estimated_delivery.isoformat()
                        if tracking.estimated_delivery
                        else None
                    ),
                }
                if tracking
                else None
            ),
            "notes": order.notes,
            "stock_committed": order.stock_committed,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLine(
                book_id=i["book_id"],
                title=i["title"],
                author=i["author"],
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                quantity=Quantity(i["quantity"]),
                image_url=i.get("image_url", ""),
            )
            for i in raw["items"]
        ]
        pricing = raw["pricing"]
        tracking = raw.get("tracking")
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            items=items,
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            billing_address=ShippingAddress(**raw["billing_address"]),
            payment_method=PaymentMethod(**raw["payment_method"]),
            pricing=PricingBreakdown(
                subtotal=Money(Decimal(pricing["subtotal"])),
                tax=Money(Decimal(pricing["tax"])),
                shipping=Money(Decimal(pricing["shipping"])),
                discount=Money(Decimal(pricing["discount"])),
                total=Money(Decimal(pricing["total"])),
            ),
            status=OrderStatus(raw["status"]),
            cancellation_reason=raw.get("cancellation_reason"),
            tracking=(
                TrackingInfo(
                    tracking_number=tracking["tracking_number"],
                    tracking_url=tracking.get("tracking_url"),
                    estimated_delivery=(
                        datetime.fromisoformat(tracking["estimated_delivery"])
                        if tracking.get("estimated_delivery")
                        else None
                    ),
                )
                if tracking
                else None
            ),
            notes=raw.get("notes"),
            stock_committed=raw.get("stock_committed", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at", raw["created_at"])),
        )


def _address_to_raw(address: ShippingAddress) -> dict:
    return {
        "full_name": address.full_name,
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zip_code": address.zip_code,
        "phone": address.phone,
        "country": address.country,
    }
