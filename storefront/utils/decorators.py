from functools import wraps

from flask import current_app, jsonify, request

from storefront.utils.logger import get_logger, log_with_context
from storefront.utils.validators import validate_secret

logger = get_logger(__name__)


def admin_required(fn):
    """Require ``Authorization: Bearer <ADMIN_API_TOKEN>``."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")

        if scheme.lower() != "bearer" or not validate_secret(
            token.strip(), current_app.config.get("ADMIN_API_TOKEN")
        ):
            log_with_context(
                logger, "WARNING",
                "Unauthorized admin request",
                path=request.path,
                ip=request.remote_addr
            )
            return jsonify({"message": "Unauthorized"}), 401

        return fn(*args, **kwargs)
    return wrapper
