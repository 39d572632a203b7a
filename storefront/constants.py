PRODUCTS = "products"
CATEGORIES = "categories"
CONFIG = "config"

RESOURCES = (PRODUCTS, CATEGORIES, CONFIG)

PLACEHOLDER_IMAGE = "https://via.placeholder.com/300?text=No+Image"
# la base no tiene imágenes de categoría
CATEGORY_IMAGE = (
    "https://images.unsplash.com/photo-1519389950473-47ba0277781c"
    "?w=500&auto=format&fit=crop&q=60"
)

DEFAULT_PRODUCT_NAME = "Sin Nombre"
DEFAULT_CATEGORY_NAME = "Sin nombre"

CART_STORAGE_KEY = "safari-cart-storage"
CART_STORAGE_VERSION = 0

# cross-sell: cámara sin memoria -> sugerir almacenamiento
CAMERA_KEYWORDS = ("camara",)
MEMORY_CARD_KEYWORDS = ("micro sd", "memoria sd")
STORAGE_CATEGORY_KEYWORDS = ("almacenamiento",)
STORAGE_PRODUCT_KEYWORDS = ("micro sd",)
MAX_SUGGESTIONS = 2

SORT_DEFAULT = "default"
SORT_PRICE_ASC = "price-asc"
SORT_PRICE_DESC = "price-desc"

WHATSAPP_SEND_URL = "https://api.whatsapp.com/send"
