"""
Category catalog for the two storefront sections.
Admin forms validate against these lists; the seed script reads the
sample products at the bottom.
"""

SECTIONS = ("electronics", "furniture")

# ======================================================
# 1. CATEGORIES (exact match with admin dropdowns)
# ======================================================

ELECTRONICS_CATEGORIES = [
    "Mobile Phones",
    "Laptops",
    "Televisions",
    "Air Conditioners",
    "Refrigerators",
    "Washing Machines",
    "Cameras",
    "Headphones",
]

FURNITURE_CATEGORIES = [
    "Sofas",
    "Beds",
    "Dining Tables",
    "Chairs",
    "Wardrobes",
    "Study Tables",
    "TV Units",
    "Cabinets",
]

SECTION_CATEGORIES = {
    "electronics": ELECTRONICS_CATEGORIES,
    "furniture": FURNITURE_CATEGORIES,
}

# ======================================================
# 2. SUB TYPES (category -> allowed sub_type values)
# ======================================================

SUB_TYPES = {
    # --- ELECTRONICS ---
    "Mobile Phones": ["Smartphone", "Feature Phone", "Foldable"],
    "Laptops": ["Ultrabook", "Gaming", "Business", "2-in-1"],
    "Televisions": ["LED", "OLED", "QLED", "Smart TV"],
    "Air Conditioners": ["Split", "Window", "Portable", "Inverter"],
    "Refrigerators": ["Single Door", "Double Door", "Side by Side", "Mini"],
    "Washing Machines": ["Front Load", "Top Load", "Semi Automatic"],
    "Cameras": ["DSLR", "Mirrorless", "Action", "Point and Shoot"],
    "Headphones": ["Over-Ear", "On-Ear", "In-Ear", "True Wireless"],

    # --- FURNITURE ---
    "Sofas": ["L-Shape", "3 Seater", "2 Seater", "Recliner", "Sofa Cum Bed"],
    "Beds": ["King", "Queen", "Single", "Bunk", "Storage Bed"],
    "Dining Tables": ["4 Seater", "6 Seater", "8 Seater", "Extendable"],
    "Chairs": ["Office", "Dining", "Accent", "Rocking"],
    "Wardrobes": ["2 Door", "3 Door", "Sliding", "Walk-in"],
    "Study Tables": ["Writing Desk", "Computer Table", "Foldable"],
    "TV Units": ["Wall Mounted", "Floor Standing"],
    "Cabinets": ["Shoe Rack", "Bookshelf", "Storage Cabinet", "Display Unit"],
}

# ======================================================
# 3. ELECTRONICS SPEC UNITS (suggested unit per category)
# ======================================================

SPEC_UNITS = {
    "Mobile Phones": "inches",
    "Laptops": "inches",
    "Televisions": "inches",
    "Air Conditioners": "ton",
    "Refrigerators": "litres",
    "Washing Machines": "kg",
    "Cameras": "MP",
    "Headphones": "hours",
}

# Electronics categories where the admin form offers a colour list
COLOR_CATEGORIES = ("Mobile Phones", "Refrigerators")

# ======================================================
# 4. SAMPLE PRODUCTS (seed data)
# ======================================================

PLACEHOLDER_IMAGE = "https://images.pexels.com/photos/{}/pexels-photo-{}.jpeg?auto=compress&cs=tinysrgb&w=800"


def _pexels(photo_id):
    return PLACEHOLDER_IMAGE.format(photo_id, photo_id)


ELECTRONICS_PRODUCTS = [
    {
        "title": "Galaxy A55 5G",
        "brand": "Samsung",
        "category": "Mobile Phones",
        "sub_type": "Smartphone",
        "model_no": "SM-A556E",
        "price": 38999,
        "spec_value": 6.6,
        "spec_unit": "inches",
        "color": "Awesome Navy, Awesome Iceblue",
        "images": [_pexels(404280)],
    },
    {
        "title": "IdeaPad Slim 3",
        "brand": "Lenovo",
        "category": "Laptops",
        "sub_type": "Business",
        "model_no": "82XQ00BHIN",
        "price": 52990,
        "spec_value": 15.6,
        "spec_unit": "inches",
        "images": [_pexels(18105)],
    },
    {
        "title": "Bravia 55 inch 4K Google TV",
        "brand": "Sony",
        "category": "Televisions",
        "sub_type": "Smart TV",
        "model_no": "KD-55X75L",
        "price": 69990,
        "spec_value": 55,
        "spec_unit": "inches",
        "images": [_pexels(5202957)],
    },
    {
        "title": "1.5 Ton 3 Star Inverter Split AC",
        "brand": "Voltas",
        "category": "Air Conditioners",
        "sub_type": "Split",
        "price": 33490,
        "spec_value": 1.5,
        "spec_unit": "ton",
        "images": [_pexels(3964341)],
    },
    {
        "title": "WH-1000XM5 Wireless Headphones",
        "brand": "Sony",
        "category": "Headphones",
        "sub_type": "Over-Ear",
        "model_no": "WH-1000XM5",
        "price": 26990,
        "spec_value": 30,
        "spec_unit": "hours",
        "images": [_pexels(3394650)],
    },
]

FURNITURE_PRODUCTS = [
    {
        "title": "Modern L-Shape Sofa",
        "brand": "Aruvi Home",
        "category": "Sofas",
        "sub_type": "L-Shape",
        "price": 45999,
        "material": "Fabric",
        "dimensions": "250 x 160 x 85 cm",
        "color": "Grey",
        "images": [_pexels(1866149)],
    },
    {
        "title": "Sheesham Wood Queen Bed",
        "brand": "Aruvi Home",
        "category": "Beds",
        "sub_type": "Queen",
        "price": 32500,
        "material": "Sheesham Wood",
        "dimensions": "210 x 165 x 95 cm",
        "color": "Walnut",
        "images": [_pexels(1743229)],
    },
    {
        "title": "6 Seater Dining Set",
        "category": "Dining Tables",
        "sub_type": "6 Seater",
        "price": 28750,
        "material": "Teak Wood",
        "dimensions": "180 x 90 x 76 cm",
        "images": [_pexels(1395967)],
    },
    {
        "title": "Ergonomic Mesh Office Chair",
        "brand": "Featherlite",
        "category": "Chairs",
        "sub_type": "Office",
        "price": 8999,
        "material": "Mesh",
        "color": "Black",
        "images": [_pexels(1957477)],
    },
]

# ======================================================
# 5. REGISTRIES
# ======================================================

SEED_CATALOGS = [
    {"section": "electronics", "products": ELECTRONICS_PRODUCTS},
    {"section": "furniture", "products": FURNITURE_PRODUCTS},
]


def categories_for(section):
    return SECTION_CATEGORIES.get(section, [])


def sub_types_for(category):
    return SUB_TYPES.get(category, [])
