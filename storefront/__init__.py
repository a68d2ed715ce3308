"""
Flask application factory and service initialization.
"""

from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from storefront.clients.commerce_client import CommerceClient
from storefront.clients.search_client import MeiliSearchClient
from storefront.clients.storefront_client import StorefrontRevalidator
from storefront.config import Config
from storefront.errors import register_error_handlers
from storefront.extensions import db
from storefront.notifications.base import NotificationProvider
from storefront.notifications.service import NotificationService
from storefront.notifications.smtp import GmailOAuth2Provider, SmtpProvider
from storefront.services.promotional_content import PromotionalContentService
from storefront.services.search_indexer import SearchIndexer
from storefront.utils.logger import get_logger
from storefront.web.cache import TaggedCache
from storefront.web.data import StorefrontData
from storefront.web.middleware import region_middleware
from storefront.web.regions import RegionMapCache
from storefront.web.revalidation import RevalidationPlanner

logger = get_logger(__name__)

# Global service instances
_content_service = None
_commerce_client = None
_search_client = None
_search_indexer = None
_revalidator = None
_storefront_cache = None
_storefront_data = None
_region_cache = None
_revalidation_planner = None
_notification_service = None


def _split_origins(value: str) -> list:
    return [origin.strip() for origin in (value or "").split(",") if origin.strip()]


def build_email_provider(config) -> NotificationProvider:
    """Pick the email provider for EMAIL_AUTH_TYPE (oauth2 or smtp)."""
    if (config.EMAIL_AUTH_TYPE or "oauth2").lower() == "oauth2":
        return GmailOAuth2Provider(
            config.GMAIL_USER,
            config.GOOGLE_CLIENT_ID,
            config.GOOGLE_CLIENT_SECRET,
            config.GOOGLE_REFRESH_TOKEN,
            store_name=config.STORE_NAME,
            timeout=config.API_TIMEOUT
        )

    return SmtpProvider(
        config.GMAIL_USER,
        config.SMTP_PASSWORD,
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        store_name=config.STORE_NAME,
        timeout=config.API_TIMEOUT
    )


def create_app(config_class=Config):
    """
    Create and configure Flask application.

    Args:
        config_class: Configuration class, Config by default

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Validate configuration
    try:
        config_class.validate()
        logger.info("Configuration validated successfully")
    except ValueError as e:
        logger.error(f"Configuration validation failed: {str(e)}")
        raise

    app.config.from_object(config_class)
    app.config["SQLALCHEMY_DATABASE_URI"] = config_class.DATABASE_URL
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)

    # Database
    db.init_app(app)
    with app.app_context():
        from storefront import models  # noqa: F401
        db.create_all()
    logger.info("Initialized database")

    register_error_handlers(app)

    # CORS: admin and auth routes carry credentials, store routes are public
    CORS(app, resources={
        r"/admin/*": {"origins": _split_origins(config_class.ADMIN_CORS), "supports_credentials": True},
        r"/auth/*": {"origins": _split_origins(config_class.ADMIN_CORS), "supports_credentials": True},
        r"/store/*": {"origins": _split_origins(config_class.STORE_CORS)},
    })

    # Initialize clients and services
    global _content_service, _commerce_client, _search_client, _search_indexer
    global _revalidator, _storefront_cache, _storefront_data, _region_cache
    global _revalidation_planner, _notification_service

    _content_service = PromotionalContentService()

    _commerce_client = CommerceClient(
        config_class.COMMERCE_BACKEND_URL,
        config_class.COMMERCE_PUBLISHABLE_KEY,
        config_class.API_TIMEOUT
    )
    logger.info("Initialized commerce client")

    _search_client = MeiliSearchClient(
        config_class.MEILISEARCH_HOST,
        config_class.MEILISEARCH_API_KEY,
        config_class.MEILISEARCH_INDEX,
        config_class.API_TIMEOUT
    )
    _search_indexer = SearchIndexer(_commerce_client, _search_client)
    logger.info("Initialized search client")

    _revalidator = StorefrontRevalidator(
        config_class.REVALIDATE_ENDPOINT,
        config_class.REVALIDATE_SECRET,
        config_class.API_TIMEOUT
    )

    _storefront_cache = TaggedCache(
        ttl=config_class.STOREFRONT_CACHE_TTL or None,
        max_entries=config_class.STOREFRONT_CACHE_MAX_ENTRIES
    )
    _storefront_data = StorefrontData(_commerce_client, _storefront_cache)
    _region_cache = RegionMapCache(
        _commerce_client,
        config_class.DEFAULT_REGION,
        config_class.REGION_CACHE_TTL
    )
    _revalidation_planner = RevalidationPlanner(_commerce_client)
    logger.info("Initialized storefront cache and region map")

    _notification_service = NotificationService(
        build_email_provider(config_class),
        store_name=config_class.STORE_NAME,
        store_url=config_class.STORE_URL
    )
    if not _notification_service.configured:
        logger.warning("Email credentials missing, notifications are disabled")

    # Region routing for storefront pages
    region_middleware(app)

    # Register blueprints
    from storefront.api import admin, store
    from storefront.web import routes
    from storefront.webhooks import events, test_email
    app.register_blueprint(admin.bp)
    app.register_blueprint(store.bp)
    app.register_blueprint(events.bp)
    app.register_blueprint(test_email.bp)
    app.register_blueprint(routes.bp)
    logger.info("Registered blueprints")

    from storefront.cli import register_commands
    register_commands(app)

    # Health check endpoint
    @app.route('/health', methods=['GET'])
    def health():
        """
        Health check endpoint.

        Returns:
            200 OK if application is healthy
        """
        return jsonify({"status": "healthy"}), 200

    logger.info("Application initialized successfully")

    return app


def get_content_service() -> PromotionalContentService:
    return _content_service


def get_search_client() -> MeiliSearchClient:
    return _search_client


def get_search_indexer() -> Optional[SearchIndexer]:
    return _search_indexer


def get_revalidator() -> StorefrontRevalidator:
    return _revalidator


def get_storefront_cache() -> TaggedCache:
    return _storefront_cache


def get_storefront_data() -> StorefrontData:
    return _storefront_data


def get_region_cache() -> RegionMapCache:
    return _region_cache


def get_revalidation_planner() -> RevalidationPlanner:
    return _revalidation_planner


def get_notification_service() -> Optional[NotificationService]:
    return _notification_service
