"""
Flask CLI commands.

    flask search init
    flask search reindex [--batch-size N]
    flask content seed
"""

import click
from flask.cli import AppGroup

from storefront.clients.commerce_client import CommerceAPIError
from storefront.services.promotional_content import (
    BANNER,
    HOMEPAGE_SECTION,
    SERVICE_FEATURE,
    TESTIMONIAL,
)
from storefront.utils.logger import get_logger

logger = get_logger(__name__)

search_cli = AppGroup("search", help="Manage the product search index.")
content_cli = AppGroup("content", help="Manage promotional content.")

_UNSPLASH = "https://images.unsplash.com"
_ICONS = "https://cdn-icons-png.flaticon.com/512/2830"

SEED_BANNERS = [
    {
        "title": "iPhone 17 Pro Max",
        "subtitle": "Pro đỉnh cao",
        "description": "Trải nghiệm công nghệ tiên tiến nhất",
        "image_url": f"{_UNSPLASH}/photo-1592750475338-74b7b21085ab?w=1920&h=1080&fit=crop",
        "mobile_image_url": f"{_UNSPLASH}/photo-1592750475338-74b7b21085ab?w=800&h=1200&fit=crop",
        "position": "hero",
        "display_order": 1,
        "link_type": "product",
        "button_text": "Đặt hàng ngay",
    },
    {
        "title": "MacBook Air M3",
        "subtitle": "Hiệu năng vượt trội",
        "description": "Làm việc mọi lúc, mọi nơi",
        "image_url": f"{_UNSPLASH}/photo-1541807084-5c52b6b3adef?w=1920&h=1080&fit=crop",
        "mobile_image_url": f"{_UNSPLASH}/photo-1541807084-5c52b6b3adef?w=800&h=1200&fit=crop",
        "position": "hero",
        "display_order": 2,
        "link_type": "category",
        "link_value": "laptops",
        "button_text": "Xem sản phẩm",
    },
    {
        "title": "Phụ kiện công nghệ",
        "subtitle": "Nâng cấp thiết bị của bạn",
        "description": "Sạc nhanh, ốp lưng, tai nghe và nhiều hơn nữa",
        "image_url": f"{_UNSPLASH}/photo-1505740420928-5e560c06d30e?w=1920&h=1080&fit=crop",
        "mobile_image_url": f"{_UNSPLASH}/photo-1505740420928-5e560c06d30e?w=800&h=1200&fit=crop",
        "position": "hero",
        "display_order": 3,
        "link_type": "category",
        "link_value": "accessories",
        "button_text": "Khám phá",
    },
]

SEED_FEATURES = [
    {"title": "Miễn phí vận chuyển", "description": "Cho đơn hàng trên 500.000đ",
     "icon_url": f"{_ICONS}/2830284.png", "display_order": 1},
    {"title": "Đổi trả dễ dàng", "description": "Trong vòng 7 ngày",
     "icon_url": f"{_ICONS}/2830285.png", "display_order": 2},
    {"title": "Bảo hành chính hãng", "description": "12 tháng cho tất cả sản phẩm",
     "icon_url": f"{_ICONS}/2830286.png", "display_order": 3},
    {"title": "Hỗ trợ 24/7", "description": "Luôn sẵn sàng phục vụ",
     "icon_url": f"{_ICONS}/2830287.png", "display_order": 4},
]

SEED_TESTIMONIALS = [
    {"customer_name": "Nguyễn Văn A", "customer_title": "Khách hàng thân thiết",
     "customer_avatar_url": f"{_UNSPLASH}/photo-1507003211169-0a1dd7228f2d?w=150&h=150&fit=crop",
     "rating": 5, "display_order": 1,
     "comment": "Sản phẩm chất lượng tốt, giao hàng nhanh. Rất hài lòng với dịch vụ!"},
    {"customer_name": "Trần Thị B", "customer_title": "Khách hàng VIP",
     "customer_avatar_url": f"{_UNSPLASH}/photo-1494790108377-be9c29b29330?w=150&h=150&fit=crop",
     "rating": 5, "display_order": 2,
     "comment": "Đổi trả dễ dàng, nhân viên tư vấn nhiệt tình. Sẽ quay lại mua tiếp!"},
    {"customer_name": "Lê Văn C", "customer_title": "Khách hàng mới",
     "customer_avatar_url": f"{_UNSPLASH}/photo-1472099645785-5658abf4ff4e?w=150&h=150&fit=crop",
     "rating": 4, "display_order": 3,
     "comment": "Giá cả hợp lý, sản phẩm đúng như mô tả. Đáng để mua!"},
    {"customer_name": "Phạm Thị D", "customer_title": "Khách hàng thân thiết",
     "customer_avatar_url": f"{_UNSPLASH}/photo-1438761681033-6461ffad8d80?w=150&h=150&fit=crop",
     "rating": 5, "display_order": 4,
     "comment": "Bảo hành tốt, hỗ trợ nhanh chóng. Cảm ơn shop rất nhiều!"},
]

SEED_SECTIONS = [
    {"section_type": "categories", "title": "Shop by Category",
     "subtitle": "Browse our products by category", "display_order": 1,
     "show_category_images": False},
    {"section_type": "featured_products", "title": "Featured Products",
     "subtitle": "Our best picks for you", "display_order": 2, "product_limit": 8},
    {"section_type": "testimonials", "title": "What Our Customers Say",
     "subtitle": "Real reviews from real customers", "display_order": 3},
]


def seed_promotional_content(service) -> dict:
    """
    Create sample content for every kind that has none yet.

    Returns:
        Number of rows created per kind
    """
    created = {}
    existing = {
        BANNER.name: service.list_banners(position="hero"),
        SERVICE_FEATURE.name: service.list(SERVICE_FEATURE.name),
        TESTIMONIAL.name: service.list(TESTIMONIAL.name),
        HOMEPAGE_SECTION.name: service.list(HOMEPAGE_SECTION.name),
    }
    seeds = {
        BANNER.name: SEED_BANNERS,
        SERVICE_FEATURE.name: SEED_FEATURES,
        TESTIMONIAL.name: SEED_TESTIMONIALS,
        HOMEPAGE_SECTION.name: SEED_SECTIONS,
    }

    for kind, rows in seeds.items():
        if existing[kind]:
            created[kind] = 0
            continue
        for row in rows:
            service.create(kind, dict(row, is_active=True))
        created[kind] = len(rows)

    return created


@search_cli.command("init")
def init_search():
    """Create and configure the products index."""
    from storefront import get_search_client

    if get_search_client().initialize_index():
        click.echo("Search index initialized")
    else:
        raise click.ClickException("Failed to initialize search index")


@search_cli.command("reindex")
@click.option("--batch-size", default=100, show_default=True, type=int)
def reindex(batch_size):
    """Index every store product."""
    from storefront import get_search_indexer

    try:
        count = get_search_indexer().reindex_all(batch_size=batch_size)
    except CommerceAPIError as e:
        raise click.ClickException(f"Failed to list products: {e}")

    click.echo(f"Indexed {count} products")


@content_cli.command("seed")
def seed():
    """Seed sample banners, features, testimonials and sections."""
    from storefront import get_content_service

    created = seed_promotional_content(get_content_service())
    for kind, count in created.items():
        if count:
            click.echo(f"Created {count} {kind} rows")
        else:
            click.echo(f"{kind} rows already exist, skipped")


def register_commands(app):
    app.cli.add_command(search_cli)
    app.cli.add_command(content_cli)
