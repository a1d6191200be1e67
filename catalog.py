"""
Default catalog

Written to products.json / banners.json the first time the server starts
against an empty data directory. The admin panel replaces both lists wholesale.
"""

DEFAULT_PRODUCTS = [
    {
        "id": 1,
        "name": "Cotton Kurta Set",
        "category": "clothing",
        "price": 899,
        "originalPrice": 1299,
        "image": "https://images.unsplash.com/photo-1583391733956-6c78276477e2?q=80&w=1200&auto=format&fit=crop",
        "description": "Breathable cotton kurta with matching pyjama.",
        "inStock": True,
    },
    {
        "id": 2,
        "name": "Wireless Earbuds",
        "category": "electronics",
        "price": 1499,
        "originalPrice": 2499,
        "image": "https://images.unsplash.com/photo-1590658268037-6bf12165a8df?q=80&w=1200&auto=format&fit=crop",
        "description": "Bluetooth 5.3, 24 hour battery with case.",
        "inStock": True,
    },
    {
        "id": 3,
        "name": "Steel Water Bottle",
        "category": "home",
        "price": 349,
        "originalPrice": 499,
        "image": "https://images.unsplash.com/photo-1602143407151-7111542de6e8?q=80&w=1200&auto=format&fit=crop",
        "description": "Insulated, keeps drinks cold for 12 hours.",
        "inStock": True,
    },
    {
        "id": 4,
        "name": "Running Shoes",
        "category": "footwear",
        "price": 1999,
        "originalPrice": 2999,
        "image": "https://images.unsplash.com/photo-1542291026-7eec264c27ff?q=80&w=1200&auto=format&fit=crop",
        "description": "Lightweight mesh upper with cushioned sole.",
        "inStock": True,
    },
]

DEFAULT_BANNERS = [
    {
        "id": 1,
        "title": "Festive Sale",
        "subtitle": "Up to 50% off on clothing",
        "image": "https://images.unsplash.com/photo-1607083206869-4c7672e72a8a?q=80&w=1600&auto=format&fit=crop",
        "active": True,
    },
    {
        "id": 2,
        "title": "Cash on Delivery",
        "subtitle": "Pay when your order arrives",
        "image": "https://images.unsplash.com/photo-1556742049-0cfed4f6a45d?q=80&w=1600&auto=format&fit=crop",
        "active": True,
    },
]
