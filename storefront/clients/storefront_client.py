"""
Outbound webhook that asks the storefront to drop cached pages after
promotional content or catalogue changes.
"""

import requests
from typing import Any, Dict, Optional

from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)


class StorefrontRevalidator:
    """Calls the storefront revalidation endpoint with a shared secret."""

    def __init__(self, endpoint: str, secret: str, timeout: int = 10):
        """
        Args:
            endpoint: Full URL of the storefront's /api/revalidate route
            secret: Shared secret sent as the ``secret`` query parameter
            timeout: Request timeout in seconds
        """
        self.endpoint = endpoint
        self.secret = secret
        self.timeout = timeout
        self.session = requests.Session()

    def trigger(
        self,
        event: str,
        id: Optional[str] = None,
        position: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Trigger storefront cache revalidation.

        Never raises: a failed revalidation must not fail the admin request
        that caused it.

        Args:
            event: Event name, e.g. "promotional-banner.updated"
            id: Affected entity id
            position: Banner position, when relevant
            data: Event payload forwarded in the body so the storefront can
                resolve related ids such as product_id

        Returns:
            True if the storefront answered with a 2xx status
        """
        if not self.endpoint or not self.secret:
            log_with_context(
                logger, "WARNING",
                "Skipping storefront revalidation - REVALIDATE_ENDPOINT or REVALIDATE_SECRET not set",
                event=event
            )
            return False

        log_with_context(
            logger, "INFO",
            "Triggering storefront revalidation",
            endpoint=self.endpoint,
            event=event,
            id=id,
            position=position
        )

        try:
            response = self.session.post(
                self.endpoint,
                params={"secret": self.secret, "event": event},
                json=dict(data or {}, event=event, id=id, position=position),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            log_with_context(
                logger, "ERROR",
                "Error triggering storefront revalidation",
                event=event,
                error=str(e)
            )
            return False

        if not response.ok:
            log_with_context(
                logger, "ERROR",
                "Failed to revalidate storefront",
                event=event,
                status=response.status_code,
                body=response.text[:500]
            )
            return False

        try:
            result = response.json()
        except ValueError:
            result = {}

        log_with_context(
            logger, "INFO",
            "Storefront revalidated",
            event=event,
            result=result
        )
        return True
