"""
Webhook endpoint for commerce backend events.
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from storefront.notifications.subscribers import handle_event
from storefront.utils.logger import get_logger, log_with_context
from storefront.utils.validators import validate_webhook_secret

bp = Blueprint('events', __name__)
logger = get_logger(__name__)

# events with these prefixes change what the storefront renders
CATALOGUE_EVENT_PREFIXES = (
    "product.",
    "product-variant.",
    "variant.",
    "inventory_item.",
    "collection.",
    "product-collection.",
    "category.",
    "product-category.",
    "price_list.",
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@bp.route('/webhook/events', methods=['POST'])
def receive_event():
    """
    Dispatch a backend event to emails, search indexing and revalidation.

    Expected payload:
    {
        "name": "order.placed",
        "data": {...}
    }

    Returns:
    {
        "status": "success",
        "event": "order.placed",
        "email_sent": true,
        "indexed": false,
        "revalidated": false,
        "timestamp": "2025-10-30T12:34:56Z"
    }
    """
    try:
        token = request.headers.get('X-Webhook-Token')
        if not validate_webhook_secret(token):
            log_with_context(
                logger, "WARNING",
                "Unauthorized webhook attempt",
                ip=request.remote_addr
            )
            return jsonify({"status": "error", "message": "Unauthorized"}), 401

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not isinstance(payload.get('name'), str) or not payload['name']:
            return jsonify({"status": "error", "message": "Missing event name"}), 400

        name = payload['name']
        data = payload.get('data')
        if not isinstance(data, dict):
            data = {}

        from storefront import get_notification_service, get_revalidator, get_search_indexer

        email_sent = handle_event(
            name,
            data,
            get_notification_service(),
            current_app.config.get("STORE_URL", "")
        )

        indexed = False
        revalidated = False
        if name.startswith(CATALOGUE_EVENT_PREFIXES):
            indexer = get_search_indexer()
            if indexer is not None and indexer.handles(name):
                indexed = indexer.handle_event(name, data)
            revalidated = get_revalidator().trigger(name, id=data.get('id'), data=data)

        log_with_context(
            logger, "INFO",
            "Webhook event processed",
            event=name,
            email_sent=email_sent,
            indexed=indexed,
            revalidated=revalidated
        )

        return jsonify({
            "status": "success",
            "event": name,
            "email_sent": email_sent,
            "indexed": indexed,
            "revalidated": revalidated,
            "timestamp": _timestamp()
        }), 200

    except Exception:
        logger.exception("Unexpected error in events webhook")
        return jsonify({
            "status": "error",
            "message": "Internal server error",
            "timestamp": _timestamp()
        }), 500
