from storefront.extensions import db
from .base import BaseModel, DisplayMixin

SECTION_TYPES = (
    "featured_products",
    "new_arrivals",
    "best_sellers",
    "categories",
    "testimonials",
    "promotional",
)


class HomepageSection(BaseModel, DisplayMixin):
    __tablename__ = "homepage_section"

    section_type = db.Column(db.String(32), nullable=False, index=True)
    title = db.Column(db.Text, nullable=False)
    subtitle = db.Column(db.Text, nullable=True)

    # product sections
    collection_id = db.Column(db.String(64), nullable=True)
    category_id = db.Column(db.String(64), nullable=True)
    product_limit = db.Column(db.Integer, nullable=True)

    # promotional sections
    promotional_banner_id = db.Column(
        db.String(64),
        db.ForeignKey("promotional_banner.id", ondelete="SET NULL"),
        nullable=True,
    )

    # categories section
    show_category_images = db.Column(db.Boolean, nullable=False, default=False)
