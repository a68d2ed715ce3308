"""
Promotional content module: banners, homepage sections, service features
and testimonials managed from the admin and rendered on the homepage.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from storefront.errors import ContentNotFoundError, ContentValidationError
from storefront.extensions import db
from storefront.models import (
    BANNER_POSITIONS,
    LINK_TYPES,
    SECTION_TYPES,
    HomepageSection,
    PromotionalBanner,
    ServiceFeature,
    Testimonial,
)
from storefront.utils.logger import get_logger, log_with_context
from storefront.utils.transaction import transactional

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContentKind:
    """
    Describes one promotional content entity and how its payloads are
    validated.

    ``fields`` maps payload key -> column attribute. Type groups list the
    payload keys that need coercion.
    """

    name: str
    model: Any
    object_name: str
    event_prefix: str
    required: Tuple[str, ...]
    fields: Dict[str, str]
    enums: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    int_fields: Tuple[str, ...] = ("display_order",)
    bool_fields: Tuple[str, ...] = ("is_active",)
    datetime_fields: Tuple[str, ...] = ()


def _fields(*names: str) -> Dict[str, str]:
    mapping = {name: name for name in names}
    mapping.update({
        "display_order": "display_order",
        "is_active": "is_active",
        "metadata": "metadata_",
    })
    return mapping


BANNER = ContentKind(
    name="banner",
    model=PromotionalBanner,
    object_name="banner",
    event_prefix="promotional-banner",
    required=("title", "image_url"),
    fields=_fields(
        "title", "subtitle", "description", "image_url", "mobile_image_url",
        "link_type", "link_value", "button_text", "start_date", "end_date",
        "position",
    ),
    enums={"link_type": LINK_TYPES, "position": BANNER_POSITIONS},
    datetime_fields=("start_date", "end_date"),
)

HOMEPAGE_SECTION = ContentKind(
    name="homepage_section",
    model=HomepageSection,
    object_name="homepage_section",
    event_prefix="homepage-section",
    required=("section_type", "title"),
    fields=_fields(
        "section_type", "title", "subtitle", "collection_id", "category_id",
        "product_limit", "promotional_banner_id", "show_category_images",
    ),
    enums={"section_type": SECTION_TYPES},
    int_fields=("display_order", "product_limit"),
    bool_fields=("is_active", "show_category_images"),
)

SERVICE_FEATURE = ContentKind(
    name="service_feature",
    model=ServiceFeature,
    object_name="service_feature",
    event_prefix="service-feature",
    required=("title",),
    fields=_fields("title", "description", "icon_url"),
)

TESTIMONIAL = ContentKind(
    name="testimonial",
    model=Testimonial,
    object_name="testimonial",
    event_prefix="testimonial",
    required=("customer_name", "comment", "rating"),
    fields=_fields(
        "customer_name", "customer_title", "customer_avatar_url", "rating",
        "comment",
    ),
    int_fields=("display_order", "rating"),
)

CONTENT_KINDS: Dict[str, ContentKind] = {
    kind.name: kind
    for kind in (BANNER, HOMEPAGE_SECTION, SERVICE_FEATURE, TESTIMONIAL)
}


def _parse_datetime(key: str, value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ContentValidationError(f"Invalid datetime for {key}: {value}")
    else:
        raise ContentValidationError(f"Invalid datetime for {key}: {value}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_int(key: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ContentValidationError(f"Invalid integer for {key}: {value}")
    if isinstance(value, float) and not value.is_integer():
        raise ContentValidationError(f"Invalid integer for {key}: {value}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ContentValidationError(f"Invalid integer for {key}: {value}")


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ContentValidationError(f"Invalid boolean for {key}: {value}")


def missing_required(kind: ContentKind, data: Optional[Dict[str, Any]]) -> List[str]:
    """Required payload keys that are absent or blank."""
    data = data or {}
    return [
        key for key in kind.required
        if data.get(key) is None or data.get(key) == ""
    ]


class PromotionalContentService:
    """
    CRUD and read helpers over the four promotional content entities.

    Mutations raise ContentValidationError / ContentNotFoundError. The
    store-facing read helpers never raise: they log and return [] so the
    storefront simply hides the section.
    """

    def _kind(self, kind: str) -> ContentKind:
        try:
            return CONTENT_KINDS[kind]
        except KeyError:
            raise ValueError(f"Unknown content kind: {kind}")

    def _clean(
        self,
        kind: ContentKind,
        data: Optional[Dict[str, Any]],
        partial: bool,
    ) -> Dict[str, Any]:
        """
        Validate a payload and map it onto column attributes.

        Unknown keys are dropped.
        """
        if data is not None and not isinstance(data, dict):
            raise ContentValidationError("Request body must be a JSON object")
        data = data or {}

        if not partial:
            missing = missing_required(kind, data)
            if missing:
                raise ContentValidationError(
                    f"Missing required fields: {', '.join(missing)}"
                )

        cleaned: Dict[str, Any] = {}
        for key, attr in kind.fields.items():
            if key not in data:
                continue
            value = data[key]

            if key in kind.required and (value is None or value == ""):
                raise ContentValidationError(f"Field {key} cannot be empty")

            if key in kind.int_fields:
                value = _parse_int(key, value)
            elif key in kind.bool_fields:
                if value is None:
                    raise ContentValidationError(f"Field {key} cannot be null")
                value = _parse_bool(key, value)
            elif key in kind.datetime_fields:
                value = _parse_datetime(key, value)
            elif key == "metadata":
                if value is not None and not isinstance(value, dict):
                    raise ContentValidationError("metadata must be an object")

            choices = kind.enums.get(key)
            if choices and value is not None and value not in choices:
                raise ContentValidationError(
                    f"Invalid {key}: {value}. Expected one of: {', '.join(choices)}"
                )

            cleaned[attr] = value

        if "display_order" in cleaned and cleaned["display_order"] is None:
            cleaned["display_order"] = 0

        if kind is TESTIMONIAL and "rating" in cleaned:
            if not 1 <= cleaned["rating"] <= 5:
                raise ContentValidationError("rating must be between 1 and 5")

        if kind is BANNER and "position" in cleaned and cleaned["position"] is None:
            raise ContentValidationError("Field position cannot be null")

        banner_id = cleaned.get("promotional_banner_id")
        if banner_id and db.session.get(PromotionalBanner, banner_id) is None:
            raise ContentValidationError(
                f"Promotional banner {banner_id} does not exist"
            )

        return cleaned

    # ------------------------------------------------------------------
    # Generic CRUD
    # ------------------------------------------------------------------

    def create(self, kind: str, data: Dict[str, Any]):
        content_kind = self._kind(kind)
        values = self._clean(content_kind, data, partial=False)

        requested_id = (data or {}).get("id")
        if requested_id:
            if db.session.get(content_kind.model, requested_id) is not None:
                raise ContentValidationError(
                    f"{content_kind.object_name} with id {requested_id} already exists"
                )
            values["id"] = str(requested_id)

        item = content_kind.model(**values)
        with transactional():
            db.session.add(item)

        log_with_context(
            logger, "INFO",
            "Promotional content created",
            kind=kind,
            id=item.id
        )
        return item

    def retrieve(self, kind: str, item_id: str):
        content_kind = self._kind(kind)
        item = db.session.get(content_kind.model, item_id)
        if item is None:
            raise ContentNotFoundError(
                f"{content_kind.object_name} with id {item_id} was not found"
            )
        return item

    def update(self, kind: str, item_id: str, data: Dict[str, Any]):
        content_kind = self._kind(kind)
        item = self.retrieve(kind, item_id)
        values = self._clean(content_kind, data, partial=True)

        with transactional():
            for attr, value in values.items():
                setattr(item, attr, value)

        log_with_context(
            logger, "INFO",
            "Promotional content updated",
            kind=kind,
            id=item.id,
            fields=sorted(values)
        )
        return item

    def delete(self, kind: str, item_id: str) -> None:
        item = self.retrieve(kind, item_id)

        with transactional():
            if kind == BANNER.name:
                HomepageSection.query.filter_by(
                    promotional_banner_id=item_id
                ).update({"promotional_banner_id": None})
            db.session.delete(item)

        log_with_context(
            logger, "INFO",
            "Promotional content deleted",
            kind=kind,
            id=item_id
        )

    def list(self, kind: str, filters: Optional[Dict[str, Any]] = None) -> list:
        """
        List rows of one kind ordered by display_order.

        Filters with a None value are ignored.
        """
        content_kind = self._kind(kind)
        model = content_kind.model

        query = model.query
        for key, value in (filters or {}).items():
            if value is None:
                continue
            query = query.filter(getattr(model, content_kind.fields[key]) == value)

        return query.order_by(
            model.display_order.asc(),
            model.created_at.asc()
        ).all()

    # ------------------------------------------------------------------
    # Banners
    # ------------------------------------------------------------------

    def list_banners(
        self,
        position: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> list:
        """
        List banners; is_active=None returns active and inactive ones.
        """
        try:
            return self.list(BANNER.name, {"position": position, "is_active": is_active})
        except Exception as e:
            log_with_context(logger, "ERROR", "Error listing banners", error=str(e))
            return []

    def get_active_banners_by_position(self, position: str) -> list:
        try:
            return self.list(BANNER.name, {"position": position, "is_active": True})
        except Exception as e:
            log_with_context(
                logger, "ERROR",
                "Error fetching banners for position",
                position=position,
                error=str(e)
            )
            return []

    # ------------------------------------------------------------------
    # Homepage sections
    # ------------------------------------------------------------------

    def list_active_homepage_sections(self) -> list:
        try:
            return self.list(HOMEPAGE_SECTION.name, {"is_active": True})
        except Exception as e:
            log_with_context(logger, "ERROR", "Error listing homepage sections", error=str(e))
            return []

    def get_homepage_sections_by_type(self, section_type: str) -> list:
        try:
            return self.list(
                HOMEPAGE_SECTION.name,
                {"section_type": section_type, "is_active": True}
            )
        except Exception as e:
            log_with_context(
                logger, "ERROR",
                "Error fetching homepage sections by type",
                section_type=section_type,
                error=str(e)
            )
            return []

    # ------------------------------------------------------------------
    # Service features / testimonials
    # ------------------------------------------------------------------

    def list_active_service_features(self) -> list:
        try:
            return self.list(SERVICE_FEATURE.name, {"is_active": True})
        except Exception as e:
            log_with_context(logger, "ERROR", "Error listing service features", error=str(e))
            return []

    def list_active_testimonials(self) -> list:
        try:
            return self.list(TESTIMONIAL.name, {"is_active": True})
        except Exception as e:
            log_with_context(logger, "ERROR", "Error listing testimonials", error=str(e))
            return []

    def get_homepage_content(self) -> Dict[str, list]:
        """
        Everything the homepage renders, active items only.

        Each list degrades to [] independently.
        """
        return {
            "hero_banners": self.get_active_banners_by_position("hero"),
            "homepage_sections": self.list_active_homepage_sections(),
            "service_features": self.list_active_service_features(),
            "testimonials": self.list_active_testimonials(),
        }
