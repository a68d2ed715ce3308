from .banner import PromotionalBanner, LINK_TYPES, BANNER_POSITIONS
from .homepage_section import HomepageSection, SECTION_TYPES
from .service_feature import ServiceFeature
from .testimonial import Testimonial

__all__ = [
    "PromotionalBanner",
    "HomepageSection",
    "ServiceFeature",
    "Testimonial",
    "LINK_TYPES",
    "BANNER_POSITIONS",
    "SECTION_TYPES",
]
