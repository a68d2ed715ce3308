from storefront.extensions import db
from .base import BaseModel, DisplayMixin


class ServiceFeature(BaseModel, DisplayMixin):
    __tablename__ = "service_feature"

    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=True)
    icon_url = db.Column(db.Text, nullable=True)
