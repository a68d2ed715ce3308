"""
Transactional email service.

Renders the HTML templates shipped in ``notifications/templates`` and
delivers them through a NotificationProvider.
"""

import os
from typing import Any, Dict, Optional

from storefront.notifications.base import NotificationError, NotificationProvider, OutgoingEmail
from storefront.notifications.template_engine import render_template
from storefront.utils.logger import get_logger, hash_email, log_with_context

logger = get_logger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


def format_amount(cents) -> str:
    """Minor currency units to a two-decimal string; falsy amounts give "0.00"."""
    if not cents:
        return "0.00"
    return "%.2f" % (float(cents) / 100)


class NotificationService:
    """Sends order and account emails."""

    def __init__(
        self,
        provider: NotificationProvider,
        templates_dir: str = TEMPLATES_DIR,
        store_name: str = "Your Store",
        store_url: str = "https://yourstore.com",
        sender: Optional[str] = None
    ):
        self.provider = provider
        self.templates_dir = templates_dir
        self.store_name = store_name
        self.store_url = store_url.rstrip("/")
        self.sender = sender

        self._handlers = {
            "order.placed": self.send_order_placed,
            "order.shipped": self.send_order_shipped,
            "order.canceled": self.send_order_canceled,
            "password_reset": self.send_password_reset,
        }

    @property
    def configured(self) -> bool:
        return self.provider is not None and self.provider.is_configured()

    def load_template(self, name: str, variables: Optional[Dict[str, Any]] = None) -> Optional[str]:
        """
        Read ``<templates_dir>/<name>.html`` and render it.

        Returns:
            Rendered HTML, or None if the template is missing or unreadable
        """
        path = os.path.join(self.templates_dir, f"{name}.html")
        if not os.path.isfile(path):
            log_with_context(logger, "ERROR", "Template not found", template=name, path=path)
            return None

        try:
            with open(path, encoding="utf-8") as f:
                html = f.read()
        except OSError as e:
            log_with_context(logger, "ERROR", "Error loading template", template=name, error=str(e))
            return None

        context = {"storeName": self.store_name}
        context.update(variables or {})
        return render_template(html, context)

    def send(
        self,
        to: str,
        data: Optional[Dict[str, Any]] = None,
        template: Optional[str] = None,
        channel_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send one notification, rendering ``template`` or using ``data["html"]``.

        Returns:
            {"id": message_id} on success, or {"success": False, "message": ...}
            for channels other than email

        Raises:
            NotificationError: If the provider is unconfigured, there is no
                content, or delivery fails
        """
        if not self.configured:
            logger.error("Notification provider not configured. Cannot send notification.")
            raise NotificationError("Notification provider not configured")

        if channel_type and channel_type != "email":
            return {"success": False, "message": "Channel not supported"}

        data = data or {}
        html = None
        if template:
            html = self.load_template(template, data)
        elif data.get("html"):
            html = data["html"]

        if not html:
            raise NotificationError("No email content provided")

        message_id = self.provider.send(OutgoingEmail(
            to=to,
            subject=data.get("subject") or f"Notification from {self.store_name}",
            html=html,
            from_addr=self.sender,
        ))
        return {"id": message_id}

    def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        from_addr: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send an already-rendered email. Never raises.

        Returns:
            {"success": True, "message_id": ...} or {"success": False, "error": ...}
        """
        if not self.configured:
            logger.error("Notification provider not configured. Cannot send email.")
            return {"success": False, "error": "Notification provider not configured"}

        try:
            message_id = self.provider.send(OutgoingEmail(
                to=to,
                subject=subject,
                html=html,
                text=text,
                from_addr=from_addr or self.sender,
            ))
        except NotificationError as e:
            log_with_context(
                logger, "ERROR",
                "Failed to send email",
                recipient_hash=hash_email(to),
                error=str(e)
            )
            return {"success": False, "error": str(e)}

        return {"success": True, "message_id": message_id}

    def send_notification(self, event: str, data: Dict[str, Any]) -> bool:
        """
        Send the email for a named notification event.

        Supported events: order.placed, order.shipped, order.canceled,
        password_reset.

        Returns:
            True if the email was delivered
        """
        if not self.configured:
            logger.error("Notification provider not configured. Cannot send notification.")
            return False

        handler = self._handlers.get(event)
        if handler is None:
            log_with_context(logger, "INFO", "Unknown notification event", event=event)
            return False

        log_with_context(logger, "INFO", "Processing notification event", event=event)
        try:
            return handler(data or {})
        except Exception:
            logger.exception("Error processing notification %s", event)
            return False

    def _base_url(self, data: Dict[str, Any]) -> str:
        return (data.get("storeUrl") or self.store_url).rstrip("/")

    def _deliver(self, template: str, subject: str, to: str, variables: Dict[str, Any]) -> bool:
        html = self.load_template(template, variables)
        if not html:
            return False
        return self.send_email(to, subject, html)["success"]

    def send_order_placed(self, data: Dict[str, Any]) -> bool:
        email = data.get("email")
        if not email:
            logger.error("Order placed notification: Missing email address")
            return False

        order_id = data.get("orderId") or "N/A"
        currency = data.get("currency") or "USD"
        base_url = self._base_url(data)

        items = [
            {
                "title": item.get("title") or "",
                "variant": item.get("variant") or "",
                "quantity": item.get("quantity") or 1,
                "price": format_amount(item.get("price")),
                "currency": currency,
            }
            for item in data.get("orderItems") or []
            if isinstance(item, dict)
        ]

        variables = {
            "customerName": data.get("customerName") or "Customer",
            "orderId": order_id,
            "orderTotal": format_amount(data.get("orderTotal")),
            "currency": currency,
            "orderItems": items,
            "storeUrl": base_url,
            "orderUrl": f"{base_url}/account/orders/{order_id}",
        }
        return self._deliver("orderPlaced", f"Order Confirmation #{order_id}", email, variables)

    def send_order_shipped(self, data: Dict[str, Any]) -> bool:
        email = data.get("email")
        if not email:
            logger.error("Order shipped notification: Missing email address")
            return False

        order_id = data.get("orderId") or "N/A"
        base_url = self._base_url(data)
        variables = {
            "customerName": data.get("customerName") or "Customer",
            "orderId": order_id,
            "trackingNumber": data.get("trackingNumber") or "TBA",
            "carrier": data.get("carrier") or "Shipping Carrier",
            "storeUrl": base_url,
            "orderUrl": f"{base_url}/account/orders/{order_id}",
        }
        return self._deliver("orderShipped", f"Your Order #{order_id} Has Shipped!", email, variables)

    def send_order_canceled(self, data: Dict[str, Any]) -> bool:
        email = data.get("email")
        if not email:
            logger.error("Order canceled notification: Missing email address")
            return False

        order_id = data.get("orderId") or "N/A"
        base_url = self._base_url(data)
        variables = {
            "customerName": data.get("customerName") or "Customer",
            "orderId": order_id,
            "reason": data.get("reason") or "Order cancellation requested",
            "refundAmount": format_amount(data.get("refundAmount")),
            "currency": data.get("currency") or "USD",
            "storeUrl": base_url,
            "supportUrl": f"{base_url}/contact",
        }
        return self._deliver(
            "orderCanceled", f"Order #{order_id} Cancellation Confirmation", email, variables
        )

    def send_password_reset(self, data: Dict[str, Any]) -> bool:
        email = data.get("email")
        reset_link = data.get("resetLink")
        if not email or not reset_link:
            logger.error("Password reset notification: Missing email or reset link")
            return False

        base_url = self._base_url(data)
        variables = {
            "customerName": data.get("customerName") or "User",
            "resetLink": reset_link,
            "storeUrl": base_url,
            "supportUrl": f"{base_url}/contact",
        }
        return self._deliver("passwordReset", "Password Reset Request", email, variables)
