from storefront.extensions import db
from .base import BaseModel, DisplayMixin

LINK_TYPES = ("product", "collection", "category", "external")
BANNER_POSITIONS = ("hero", "homepage", "category", "product", "sidebar")


class PromotionalBanner(BaseModel, DisplayMixin):
    __tablename__ = "promotional_banner"

    title = db.Column(db.Text, nullable=False)
    subtitle = db.Column(db.Text, nullable=True)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.Text, nullable=False)
    mobile_image_url = db.Column(db.Text, nullable=True)
    link_type = db.Column(db.String(20), nullable=True)
    link_value = db.Column(db.Text, nullable=True)
    button_text = db.Column(db.Text, nullable=True)
    start_date = db.Column(db.DateTime(timezone=True), nullable=True)
    end_date = db.Column(db.DateTime(timezone=True), nullable=True)
    position = db.Column(db.String(20), nullable=False, default="homepage", index=True)
