"""
Static marketing copy for the public site.

The menu preview is a fixed list of signature dishes; the full menu is
managed from the admin dashboard.
"""

NAV_LINKS = [
    {"name": "Home", "href": "#hero"},
    {"name": "Menu", "href": "#menu"},
    {"name": "About", "href": "#about"},
    {"name": "Contact", "href": "#contact"},
]

HERO = {
    "badge": "Authentic Indian Cuisine Since 1995",
    "title": "A Taste of",
    "highlight": "Tradition",
    "subtitle": (
        "Experience the rich flavors of India with our authentic recipes "
        "passed down through generations"
    ),
    "stats": [
        {"value": "1000+", "label": "Happy Customers"},
        {"value": "4.8/5", "label": "Customer Rating"},
        {"value": "25+", "label": "Years Experience"},
    ],
}

ABOUT = {
    "title": "Our Story of",
    "highlight": "Authentic Flavors",
    "body": (
        "Welcome to Spice Heritage, where every meal tells a story of tradition, "
        "passion, and authentic Indian flavors. Since 1995, our family has been "
        "dedicated to bringing you the true taste of India with recipes passed "
        "down through generations."
    ),
    "features": [
        {"icon": "heart", "title": "Made with Love",
         "description": "Every dish is prepared with passion and traditional techniques"},
        {"icon": "award", "title": "Award Winning",
         "description": "Recognized for excellence in authentic Indian cuisine"},
        {"icon": "users", "title": "Family Owned",
         "description": "A family business serving the community for over 25 years"},
        {"icon": "utensils", "title": "Fresh Ingredients",
         "description": "Only the finest spices and freshest ingredients are used"},
    ],
}

SIGNATURE_DISHES = [
    {
        "name": "Royal Chicken Biryani",
        "description": "Aromatic basmati rice with tender chicken, saffron, and traditional spices",
        "price": 299,
        "rating": 4.8,
        "is_spicy": True,
        "is_popular": True,
        "category": "Biryani",
    },
    {
        "name": "Paneer Butter Masala",
        "description": "Creamy tomato-based curry with soft paneer cubes",
        "price": 249,
        "rating": 4.7,
        "is_spicy": False,
        "is_popular": True,
        "category": "Main Course",
    },
    {
        "name": "Lamb Rogan Josh",
        "description": "Slow-cooked lamb in aromatic spices and yogurt curry",
        "price": 399,
        "rating": 4.9,
        "is_spicy": True,
        "is_popular": False,
        "category": "Main Course",
    },
    {
        "name": "Dal Makhani",
        "description": "Rich and creamy black lentils simmered overnight",
        "price": 179,
        "rating": 4.6,
        "is_spicy": False,
        "is_popular": True,
        "category": "Main Course",
    },
    {
        "name": "Chicken Tikka",
        "description": "Grilled chicken marinated in yogurt and spices",
        "price": 229,
        "rating": 4.5,
        "is_spicy": True,
        "is_popular": False,
        "category": "Starters",
    },
    {
        "name": "Garlic Naan",
        "description": "Fresh baked bread topped with garlic and herbs",
        "price": 99,
        "rating": 4.4,
        "is_spicy": False,
        "is_popular": True,
        "category": "Breads",
    },
]

PREVIEW_CATEGORIES = ["Starters", "Main Course", "Biryani", "Breads", "Desserts"]

MENU_CATEGORIES = ["Starters", "Mains", "Biryani", "Breads", "Desserts", "Beverages"]

TIME_SLOTS = [
    "11:00 AM", "11:30 AM", "12:00 PM", "12:30 PM",
    "1:00 PM", "1:30 PM", "2:00 PM", "2:30 PM",
    "6:00 PM", "6:30 PM", "7:00 PM", "7:30 PM",
    "8:00 PM", "8:30 PM", "9:00 PM", "9:30 PM",
]

GUEST_OPTIONS = list(range(1, 11))

FOOTER_LINKS = [
    {"name": "Menu", "href": "#menu"},
    {"name": "About Us", "href": "#about"},
    {"name": "Contact", "href": "#contact"},
    {"name": "Reservations", "href": "#reserve"},
]

FOOTER_SERVICES = ["Dine In", "Takeaway", "Delivery", "Catering", "Private Events"]

SOCIAL_LINKS = [
    {"label": "Facebook", "href": "#"},
    {"label": "Instagram", "href": "#"},
    {"label": "Twitter", "href": "#"},
]


def contact_info(settings) -> list[dict]:
    """Contact cards built from the restaurant settings."""
    return [
        {"icon": "phone", "title": "Call Us", "info": settings.restaurant_phone,
         "subtitle": f"Mon-Sun: {settings.opening_hours}"},
        {"icon": "mail", "title": "Email Us", "info": settings.restaurant_email,
         "subtitle": "We reply within 24 hours"},
        {"icon": "map-pin", "title": "Visit Us", "info": settings.restaurant_address,
         "subtitle": settings.restaurant_region},
        {"icon": "clock", "title": "Opening Hours", "info": settings.opening_hours,
         "subtitle": "Open all days of the week"},
    ]
