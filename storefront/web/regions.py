"""
Locale and region lookup for country-prefixed storefront URLs.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from storefront.clients.commerce_client import CommerceAPIError, CommerceClient
from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

LOCALES = ("en", "vi", "ja", "zh")
DEFAULT_LOCALE = "en"

LOCALE_NAMES = {
    "en": "English",
    "vi": "Tiếng Việt",
    "ja": "日本語",
    "zh": "中文",
}

LOCALE_TO_COUNTRY_CODE = {
    "en": "us",
    "vi": "vn",
    "ja": "jp",
    "zh": "cn",
}

COUNTRY_CODE_TO_LOCALE = {
    "us": "en",
    "vn": "vi",
    "jp": "ja",
    "cn": "zh",
    "gb": "en",
    "au": "en",
    "ca": "en",
}


def locale_for_country(country_code: Optional[str]) -> str:
    return COUNTRY_CODE_TO_LOCALE.get((country_code or "").lower(), DEFAULT_LOCALE)


def available_locales() -> List[Dict[str, str]]:
    """Language switcher entries: locale code, display name and storefront country."""
    return [
        {
            "code": locale,
            "name": LOCALE_NAMES[locale],
            "country_code": LOCALE_TO_COUNTRY_CODE[locale],
        }
        for locale in LOCALES
    ]


def fallback_region_map(default_region: str) -> Dict[str, Dict[str, Any]]:
    """Single-region map used when the backend cannot be reached."""
    now = datetime.now(timezone.utc).isoformat()
    return {
        default_region: {
            "id": "vn-region",
            "name": "Vietnam",
            "currency_code": "vnd",
            "countries": [
                {"iso_2": default_region, "iso_3": "VNM", "name": "Vietnam", "num_code": "704"}
            ],
            "automatic_taxes": False,
            "created_at": now,
            "updated_at": now,
            "metadata": None,
        }
    }


class RegionMapCache:
    """
    Country code -> region map, refreshed when empty or older than ttl.

    Not locked: two requests may refresh concurrently, and the later one
    simply overwrites the map.
    """

    def __init__(
        self,
        commerce_client: CommerceClient,
        default_region: str = "vn",
        ttl: int = 3600,
        clock: Callable[[], float] = time.time
    ):
        self.commerce_client = commerce_client
        self.default_region = default_region.lower()
        self.ttl = ttl
        self.clock = clock
        self.region_map: Dict[str, Dict[str, Any]] = {}
        self.updated_at = clock()

    def _stale(self) -> bool:
        return not self.region_map or self.updated_at < self.clock() - self.ttl

    def get_region_map(self) -> Dict[str, Dict[str, Any]]:
        if self._stale():
            self.region_map = self._load()
            self.updated_at = self.clock()
        return self.region_map

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.commerce_client.configured:
            return fallback_region_map(self.default_region)

        try:
            regions = self.commerce_client.list_regions()
        except CommerceAPIError as e:
            log_with_context(
                logger, "WARNING",
                "Region fetch failed, using fallback region",
                error=str(e)
            )
            return fallback_region_map(self.default_region)

        region_map: Dict[str, Dict[str, Any]] = {}
        for region in regions:
            for country in region.get("countries") or []:
                iso_2 = (country.get("iso_2") or "").lower()
                if iso_2:
                    region_map[iso_2] = region

        if not region_map:
            return fallback_region_map(self.default_region)

        log_with_context(
            logger, "INFO",
            "Region map refreshed",
            countries=sorted(region_map)
        )
        return region_map

    def get_region(self, country_code: str) -> Optional[Dict[str, Any]]:
        return self.get_region_map().get((country_code or "").lower())


def get_country_code(
    path: str,
    ip_country: Optional[str],
    region_map: Dict[str, Any],
    default_region: str
) -> Optional[str]:
    """
    Pick the country for a request.

    Order: first URL segment, then the edge's IP country header, then the
    default region, then any known country.
    """
    segments = path.split("/")
    url_country = segments[1].lower() if len(segments) > 1 else ""
    ip_country = (ip_country or "").lower()

    if url_country and url_country in region_map:
        return url_country
    if ip_country and ip_country in region_map:
        return ip_country
    if default_region in region_map:
        return default_region
    return next(iter(region_map), None)
