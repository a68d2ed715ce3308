"""
Region routing: every storefront page lives under /<country_code>/.
"""

import re
import uuid

from flask import current_app, g, redirect, request

from storefront.web.regions import get_country_code

CACHE_ID_COOKIE = "_medusa_cache_id"
CACHE_ID_MAX_AGE = 60 * 60 * 24

# Backend routes and static assets are never country-prefixed.
EXCLUDED_PATHS = re.compile(
    r"^/(api|admin|auth|store|webhook|test-email|health|static|_next|favicon\.ico|images|assets)(/|$)"
)


def _has_country_prefix(path: str, country_code: str) -> bool:
    return path == f"/{country_code}" or path.startswith(f"/{country_code}/")


def region_middleware(app):
    @app.before_request
    def route_to_region():
        if request.method not in ("GET", "HEAD"):
            return None

        path = request.path
        if EXCLUDED_PATHS.match(path):
            return None

        from storefront import get_region_cache
        region_cache = get_region_cache()

        cache_id = request.cookies.get(CACHE_ID_COOKIE)
        region_map = region_cache.get_region_map()

        country_code = get_country_code(
            path,
            request.headers.get("x-vercel-ip-country"),
            region_map,
            current_app.config["DEFAULT_REGION"].lower(),
        )

        url_has_country_code = bool(country_code) and _has_country_prefix(path, country_code)

        if url_has_country_code:
            if not cache_id:
                g.new_cache_id = str(uuid.uuid4())
            g.country_code = country_code
            return None

        if "." in path:
            return None

        if country_code:
            redirect_path = "" if path == "/" else path
            query = request.query_string.decode()
            location = f"/{country_code}{redirect_path}"
            if query:
                location = f"{location}?{query}"
            return redirect(location, code=307)

        return None

    @app.after_request
    def set_cache_id_cookie(response):
        new_cache_id = g.pop("new_cache_id", None)
        if new_cache_id:
            response.set_cookie(CACHE_ID_COOKIE, new_cache_id, max_age=CACHE_ID_MAX_AGE)
        return response
