"""
Maps commerce backend events onto notification emails.
"""

from typing import Any, Dict, Optional

from storefront.notifications.service import NotificationService
from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

EMAIL_EVENTS = (
    "order.placed",
    "order.shipment_created",
    "order.canceled",
    "customer.password_token_generated",
)


def _customer_name(customer: Dict[str, Any], default: str) -> str:
    return customer.get("first_name") or customer.get("email") or default


def _currency(data: Dict[str, Any]) -> str:
    return (data.get("currency_code") or "usd").upper()


def _order_items(items) -> list:
    result = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        result.append({
            "title": item.get("product_title") or item.get("title"),
            "variant": item.get("variant_title"),
            "quantity": item.get("quantity"),
            "price": item.get("unit_price"),
        })
    return result


def order_placed_payload(data: Dict[str, Any], store_url: str) -> Dict[str, Any]:
    customer = data.get("customer") or {}
    return {
        "email": data.get("email") or customer.get("email"),
        "customerName": _customer_name(customer, "Customer"),
        "orderId": data.get("display_id") or data.get("id"),
        "orderTotal": data.get("total") or 0,
        "currency": _currency(data),
        "orderItems": _order_items(data.get("items")),
        "storeUrl": store_url,
    }


def order_shipped_payload(data: Dict[str, Any], store_url: str) -> Dict[str, Any]:
    order = data.get("order") or {}
    customer = order.get("customer") or {}
    fulfillment = data.get("fulfillment") or {}
    tracking_numbers = fulfillment.get("tracking_numbers") or []

    return {
        "email": customer.get("email") or order.get("email"),
        "customerName": _customer_name(customer, "Customer"),
        "orderId": order.get("display_id") or data.get("order_id"),
        "trackingNumber": tracking_numbers[0] if tracking_numbers else "TBA",
        "carrier": fulfillment.get("provider_id") or "Shipping Carrier",
        "storeUrl": store_url,
    }


def order_canceled_payload(data: Dict[str, Any], store_url: str) -> Dict[str, Any]:
    customer = data.get("customer") or {}
    return {
        "email": data.get("email") or customer.get("email"),
        "customerName": _customer_name(customer, "Customer"),
        "orderId": data.get("display_id") or data.get("id"),
        "reason": data.get("cancel_reason") or "Order cancellation requested",
        "refundAmount": data.get("total") or 0,
        "currency": _currency(data),
        "storeUrl": store_url,
    }


def password_reset_payload(data: Dict[str, Any], store_url: str) -> Dict[str, Any]:
    customer = data.get("customer") or {}
    return {
        "email": customer.get("email") or data.get("email"),
        "customerName": _customer_name(customer, "User"),
        "resetLink": f"{store_url}/account/reset-password?token={data.get('token')}",
        "storeUrl": store_url,
    }


# event name -> (notification event, payload builder)
EVENT_MAP = {
    "order.placed": ("order.placed", order_placed_payload),
    "order.shipment_created": ("order.shipped", order_shipped_payload),
    "order.canceled": ("order.canceled", order_canceled_payload),
    "customer.password_token_generated": ("password_reset", password_reset_payload),
}


def handle_event(
    name: str,
    data: Optional[Dict[str, Any]],
    service: Optional[NotificationService],
    store_url: str
) -> bool:
    """
    Send the email for a backend event, if one is configured.

    Errors are logged and never raised.

    Returns:
        True if an email was sent
    """
    if service is None:
        logger.warning("Notification service not available")
        return False

    mapping = EVENT_MAP.get(name)
    if mapping is None:
        log_with_context(logger, "INFO", "No email notification configured for event", event=name)
        return False

    notification_event, build_payload = mapping
    try:
        payload = build_payload(data or {}, store_url.rstrip("/"))
        if not payload.get("email"):
            log_with_context(logger, "WARNING", "No email address found", event=name)
            return False

        sent = service.send_notification(notification_event, payload)
        log_with_context(
            logger, "INFO" if sent else "WARNING",
            "Email notification processed",
            event=name,
            order_id=payload.get("orderId"),
            sent=sent
        )
        return sent

    except Exception:
        logger.exception("Error processing email notification for event %s", name)
        return False
