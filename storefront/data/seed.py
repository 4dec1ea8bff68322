# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models import CategoryModel, ProductModel, UserModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    {
        "name": "Фрукты и овощи",
        "slug": "fruits-vegetables",
        "description": "Свежие фрукты и овощи высокого качества",
        "image_url": "https://images.unsplash.com/photo-1610832958506-aa56368176cf?w=500",
    },
    {
        "name": "Молочные продукты",
        "slug": "dairy-products",
        "description": "Молоко, сыры, йогурты и другие молочные продукты",
        "image_url": "https://images.unsplash.com/photo-1563636619-e9143da7973b?w=500",
    },
    {
        "name": "Мясо и рыба",
        "slug": "meat-fish",
        "description": "Свежее мясо, птица и рыба",
        "image_url": "https://images.unsplash.com/photo-1529692236671-f1f6cf9683ba?w=500",
    },
    {
        "name": "Хлеб и выпечка",
        "slug": "bread-bakery",
        "description": "Свежий хлеб и кондитерские изделия",
        "image_url": "https://images.unsplash.com/photo-1509440159596-0249088772ff?w=500",
    },
]

# "category" is the slug of one of CATEGORIES
PRODUCTS = [
    {
        "category": "fruits-vegetables",
        "name": "Яблоки Гала",
        "slug": "apples-gala",
        "description": "Сочные и сладкие яблоки сорта Гала. Идеально подходят для употребления в свежем виде.",
        "short_description": "Сочные яблоки сорта Гала",
        "sku": "APPLE-GALA-001",
        "price": "3.50",
        "inventory": 100,
        "weight": "0.200",
        "images": ["https://images.unsplash.com/photo-1560806887-1e4cd0b6cbd6?w=500"],
        "tags": ["фрукты", "здоровое питание", "витамины"],
        "meta_title": "Яблоки Гала - свежие и сочные",
        "meta_description": "Купить свежие яблоки Гала в интернет-магазине BigShop",
        "is_featured": True,
    },
    {
        "category": "fruits-vegetables",
        "name": "Бананы",
        "slug": "bananas",
        "description": "Спелые бананы, богатые калием и витаминами. Отличный источник энергии.",
        "short_description": "Спелые бананы",
        "sku": "BANANA-001",
        "price": "2.80",
        "inventory": 150,
        "weight": "0.150",
        "images": ["https://images.unsplash.com/photo-1571771894821-ce9b6c11b08e?w=500"],
        "tags": ["фрукты", "калий", "энергия"],
        "meta_title": "Свежие бананы",
        "meta_description": "Спелые бананы с доставкой на дом",
    },
    {
        "category": "fruits-vegetables",
        "name": "Морковь",
        "slug": "carrots",
        "description": "Свежая морковь, богатая бета-каротином. Отлично подходит для салатов и готовки.",
        "short_description": "Свежая морковь",
        "sku": "CARROT-001",
        "price": "1.90",
        "inventory": 80,
        "weight": "1.000",
        "images": ["https://images.unsplash.com/photo-1445282768818-728615cc910a?w=500"],
        "tags": ["овощи", "бета-каротин", "здоровое питание"],
        "meta_title": "Свежая морковь",
        "meta_description": "Купить свежую морковь в BigShop",
    },
    {
        "category": "dairy-products",
        "name": "Молоко 3.2%",
        "slug": "milk-32-percent",
        "description": "Натуральное коровье молоко жирностью 3.2%. Богато кальцием и белком.",
        "short_description": "Молоко 3.2% жирности",
        "sku": "MILK-32-001",
        "price": "2.50",
        "inventory": 50,
        "weight": "1.000",
        "images": ["https://images.unsplash.com/photo-1550583724-b2692b85b150?w=500"],
        "tags": ["молочные продукты", "кальций", "белок"],
        "meta_title": "Молоко 3.2% - натуральное и свежее",
        "meta_description": "Купить свежее молоко 3.2% жирности",
        "is_featured": True,
    },
    {
        "category": "dairy-products",
        "name": "Сыр Гауда",
        "slug": "gouda-cheese",
        "description": "Классический голландский сыр Гауда с нежным вкусом и ароматом.",
        "short_description": "Сыр Гауда голландский",
        "sku": "CHEESE-GOUDA-001",
        "price": "12.90",
        "compare_price": "15.00",
        "inventory": 25,
        "weight": "0.300",
        "images": ["https://images.unsplash.com/photo-1486297678162-eb2a19b0a32d?w=500"],
        "tags": ["сыр", "голландский", "деликатес"],
        "meta_title": "Сыр Гауда голландский",
        "meta_description": "Натуральный голландский сыр Гауда",
        "is_featured": True,
    },
    {
        "category": "meat-fish",
        "name": "Куриное филе",
        "slug": "chicken-breast",
        "description": "Свежее куриное филе без кости и кожи. Диетический продукт с высоким содержанием белка.",
        "short_description": "Куриное филе без кости",
        "sku": "CHICKEN-BREAST-001",
        "price": "8.50",
        "inventory": 30,
        "weight": "0.500",
        "images": ["https://images.unsplash.com/photo-1604503468506-a8da13d82791?w=500"],
        "tags": ["мясо", "курица", "белок", "диетическое"],
        "meta_title": "Свежее куриное филе",
        "meta_description": "Куриное филе высокого качества",
    },
    {
        "category": "bread-bakery",
        "name": "Хлеб ржаной",
        "slug": "rye-bread",
        "description": "Традиционный ржаной хлеб, выпеченный по классическому рецепту.",
        "short_description": "Ржаной хлеб традиционный",
        "sku": "BREAD-RYE-001",
        "price": "2.20",
        "inventory": 40,
        "weight": "0.400",
        "images": ["https://images.unsplash.com/photo-1509440159596-0249088772ff?w=500"],
        "tags": ["хлеб", "ржаной", "традиционный"],
        "meta_title": "Ржаной хлеб",
        "meta_description": "Традиционный ржаной хлеб",
    },
]

ADMIN = {
    "id": "admin",
    "email": "admin@bigshop.com",
    "first_name": "Admin",
    "last_name": "User",
    "phone": "+1234567890",
}


def seed(db=None) -> bool:
    """Load the demo catalog. Does nothing when categories already exist."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(CategoryModel).first():
            logger.info("Catalog already present, skipping seed")
            return False

        by_slug = {}
        for data in CATEGORIES:
            category = CategoryModel(is_active=True, **data)
            db.add(category)
            by_slug[data["slug"]] = category
        db.flush()

        for data in PRODUCTS:
            fields = dict(data)
            category = by_slug[fields.pop("category")]
            for key in ("price", "compare_price", "weight"):
                if key in fields:
                    fields[key] = Decimal(fields[key])
            db.add(ProductModel(category_id=category.id, is_active=True, **fields))

        if db.get(UserModel, ADMIN["id"]) is None:
            db.add(UserModel(**ADMIN))

        db.commit()
        logger.info(f"Seeded {len(CATEGORIES)} categories and {len(PRODUCTS)} products")
        return True
    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed()
