from storefront.extensions import db
from .base import BaseModel, DisplayMixin


class Testimonial(BaseModel, DisplayMixin):
    __tablename__ = "testimonial"

    customer_name = db.Column(db.Text, nullable=False)
    customer_title = db.Column(db.Text, nullable=True)
    customer_avatar_url = db.Column(db.Text, nullable=True)
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    comment = db.Column(db.Text, nullable=False)
