"""
Application configuration from environment variables.
"""

import os


class Config:
    """Application configuration from environment variables."""

    # Database (promotional content)
    DATABASE_URL: str = os.getenv('DATABASE_URL', 'sqlite:///storefront.db')

    # Commerce backend (Medusa store API)
    COMMERCE_BACKEND_URL: str = os.getenv('COMMERCE_BACKEND_URL', 'http://localhost:9000')
    COMMERCE_PUBLISHABLE_KEY: str = os.getenv('COMMERCE_PUBLISHABLE_KEY', '')

    # Regions
    DEFAULT_REGION: str = os.getenv('DEFAULT_REGION', 'vn')
    REGION_CACHE_TTL: int = int(os.getenv('REGION_CACHE_TTL', '3600'))

    # Storefront data cache; a TTL of 0 keeps entries until revalidated
    STOREFRONT_CACHE_TTL: int = int(os.getenv('STOREFRONT_CACHE_TTL', '0'))
    STOREFRONT_CACHE_MAX_ENTRIES: int = int(os.getenv('STOREFRONT_CACHE_MAX_ENTRIES', '1000'))

    # Storefront revalidation
    REVALIDATE_SECRET: str = os.getenv('REVALIDATE_SECRET', '')
    REVALIDATE_ENDPOINT: str = os.getenv('REVALIDATE_ENDPOINT', '')

    # Webhooks / admin
    WEBHOOK_SECRET: str = os.getenv('WEBHOOK_SECRET', '')
    ADMIN_API_TOKEN: str = os.getenv('ADMIN_API_TOKEN', '')
    ADMIN_CORS: str = os.getenv('ADMIN_CORS', 'http://localhost:7001')
    STORE_CORS: str = os.getenv('STORE_CORS', 'http://localhost:8000')

    # Search
    MEILISEARCH_HOST: str = os.getenv('MEILISEARCH_HOST', 'http://localhost:7700')
    MEILISEARCH_API_KEY: str = os.getenv('MEILISEARCH_API_KEY', 'masterKey')
    MEILISEARCH_INDEX: str = os.getenv('MEILISEARCH_INDEX', 'products')

    # Email
    EMAIL_AUTH_TYPE: str = os.getenv('EMAIL_AUTH_TYPE', 'oauth2')
    GMAIL_USER: str = os.getenv('GMAIL_USER', '')
    GOOGLE_CLIENT_ID: str = os.getenv('GOOGLE_CLIENT_ID', '')
    GOOGLE_CLIENT_SECRET: str = os.getenv('GOOGLE_CLIENT_SECRET', '')
    GOOGLE_REFRESH_TOKEN: str = os.getenv('GOOGLE_REFRESH_TOKEN', '')
    SMTP_HOST: str = os.getenv('SMTP_HOST', 'smtp.gmail.com')
    SMTP_PORT: int = int(os.getenv('SMTP_PORT', '465'))
    SMTP_PASSWORD: str = os.getenv('SMTP_PASSWORD', '')
    STORE_NAME: str = os.getenv('STORE_NAME', 'Your Store')
    STORE_URL: str = os.getenv('STORE_URL', 'https://yourstore.com')

    # Application
    API_TIMEOUT: int = int(os.getenv('API_TIMEOUT', '10'))

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.getenv('LOG_FILE', '')

    @classmethod
    def validate(cls) -> None:
        """
        Validate required configuration on startup.

        Raises:
            ValueError: If required variables missing
        """
        required = [
            'DATABASE_URL',
            'COMMERCE_BACKEND_URL',
        ]

        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
