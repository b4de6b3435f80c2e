# meal_recommender/utils/keyword_tables.py
"""
Centralized ingredient keyword tables.

Maps allergy, intolerance, dietary and cultural restriction categories to
the ingredient keywords that signal a conflict. Matching elsewhere is a
lower-cased substring search of each ingredient name against these lists.

Substring matching is deliberately simple and table-driven. It produces
known false positives ("eggplant" contains "egg", "coconut milk" contains
"milk") and false negatives (brand names, misspellings). Extend the tables
rather than adding fuzzy matching.
"""
from typing import Dict, Iterable, List, Tuple

from meal_recommender.models.profile import DietaryPattern


ALLERGY_KEYWORDS: Dict[str, List[str]] = {
    "peanut": ["peanut", "groundnut", "arachis"],
    "tree_nut": ["almond", "cashew", "walnut", "pecan", "pistachio", "hazelnut", "macadamia"],
    "shellfish": ["shrimp", "lobster", "crab", "prawn", "crayfish", "scallop", "oyster"],
    "egg": ["egg", "albumin", "mayonnaise"],
    "dairy": ["milk", "cheese", "butter", "cream", "yogurt", "whey", "casein", "lactose", "feta"],
    "sesame": ["sesame", "tahini", "hummus"],
    "soy": ["soy", "soya", "tofu", "tempeh", "edamame", "miso"],
    "gluten": ["wheat", "barley", "rye", "spelt", "kamut", "flour", "bread", "pasta"],
    "fish": ["salmon", "tuna", "cod", "halibut", "tilapia", "bass", "trout", "sardine"],
}

INTOLERANCE_KEYWORDS: Dict[str, List[str]] = {
    "lactose": ["milk", "cream", "cheese", "yogurt", "butter", "ice cream", "feta"],
    "fructose": ["honey", "agave", "high fructose corn syrup", "apple", "pear", "mango"],
    "histamine": ["aged cheese", "wine", "beer", "fermented", "smoked", "cured"],
    "fodmap": ["garlic", "onion", "beans", "lentils", "wheat", "apple", "milk"],
}

ANIMAL_PRODUCT_KEYWORDS: List[str] = [
    "meat", "chicken", "beef", "pork", "lamb", "turkey", "duck", "goose", "veal",
    "fish", "salmon", "tuna", "shrimp", "lobster", "crab", "oyster",
    "egg", "milk", "cheese", "butter", "cream", "yogurt", "whey", "casein",
    "honey", "gelatin", "lard", "tallow", "anchovy", "prawn", "squid",
]

MEAT_KEYWORDS: List[str] = [
    "meat", "chicken", "beef", "pork", "lamb", "turkey", "duck", "goose", "veal",
    "bacon", "ham", "sausage", "salami", "pepperoni", "prosciutto",
    "fish", "salmon", "tuna", "tilapia", "cod", "bass", "trout", "halibut",
    "shrimp", "prawn", "lobster", "crab", "scallop", "oyster", "mussel",
]

NON_FISH_MEAT_KEYWORDS: List[str] = [
    "meat", "chicken", "beef", "pork", "lamb", "turkey", "duck", "goose", "veal",
    "bacon", "ham", "sausage", "salami", "pepperoni", "prosciutto", "rabbit",
]

GLUTEN_KEYWORDS: List[str] = [
    "wheat", "flour", "bread", "pasta", "barley", "rye", "spelt",
    "couscous", "bulgur", "kamut", "triticale", "farro", "semolina",
    "malt", "cracker", "cereal", "cookie", "cake", "pastry", "bagel",
]

DAIRY_KEYWORDS: List[str] = [
    "milk", "cheese", "butter", "cream", "yogurt", "whey", "casein", "ghee",
    "ice cream", "sour cream", "cottage cheese", "ricotta", "mozzarella",
    "cheddar", "feta", "gouda", "brie", "mascarpone", "buttermilk", "kefir",
]

HARAM_KEYWORDS: List[str] = [
    "pork", "bacon", "ham", "prosciutto", "pancetta", "chorizo",
    "alcohol", "wine", "beer", "liquor", "vodka", "whiskey", "rum",
    "gelatin", "lard", "pepperoni",
]

NON_KOSHER_KEYWORDS: List[str] = [
    "pork", "bacon", "ham", "prosciutto", "pancetta",
    "shellfish", "shrimp", "lobster", "crab", "oyster", "mussel", "clam",
    "squid", "octopus", "calamari", "scallop", "eel", "catfish",
]

PORK_KEYWORDS: List[str] = [
    "pork", "bacon", "ham", "prosciutto", "pancetta", "chorizo",
    "lard", "pepperoni", "salami",
]

SHELLFISH_KEYWORDS: List[str] = [
    "shellfish", "shrimp", "prawn", "lobster", "crab", "crayfish",
    "scallop", "oyster", "mussel", "clam", "squid", "octopus", "calamari",
]

BEEF_KEYWORDS: List[str] = ["beef", "veal", "steak", "ribeye", "sirloin", "brisket"]

ALCOHOL_KEYWORDS: List[str] = [
    "alcohol", "wine", "beer", "liquor", "vodka", "whiskey", "rum", "sake", "mirin",
]

# Restrictions enforced purely by keyword lookup. Carb-limited patterns and
# kosher's dairy + meat rule live in the constraint filter.
PATTERN_KEYWORDS: Dict[DietaryPattern, List[str]] = {
    DietaryPattern.VEGAN: ANIMAL_PRODUCT_KEYWORDS,
    DietaryPattern.NO_ANIMAL_PRODUCTS: ANIMAL_PRODUCT_KEYWORDS,
    DietaryPattern.VEGETARIAN: MEAT_KEYWORDS,
    DietaryPattern.PESCATARIAN: NON_FISH_MEAT_KEYWORDS,
    DietaryPattern.GLUTEN_FREE: GLUTEN_KEYWORDS,
    DietaryPattern.DAIRY_FREE: DAIRY_KEYWORDS,
    DietaryPattern.HALAL: HARAM_KEYWORDS,
    DietaryPattern.KOSHER: NON_KOSHER_KEYWORDS,
    DietaryPattern.NO_PORK: PORK_KEYWORDS,
    DietaryPattern.NO_SHELLFISH: SHELLFISH_KEYWORDS,
    DietaryPattern.NO_BEEF: BEEF_KEYWORDS,
    DietaryPattern.NO_ALCOHOL: ALCOHOL_KEYWORDS,
}

# Ingredients treated as added salt for substitution suggestions
SALT_KEYWORDS: List[str] = ["salt"]


def get_allergy_keywords(allergy: str) -> List[str]:
    """
    Get keywords for an allergy category.

    Unknown categories fall back to the category name itself, so an
    allergy to "mustard" still matches an ingredient called "mustard".
    """
    key = allergy.strip().lower()
    return ALLERGY_KEYWORDS.get(key, [key])


def get_intolerance_keywords(intolerance: str) -> List[str]:
    """Get keywords for an intolerance (falls back to the name itself)."""
    key = intolerance.strip().lower()
    return INTOLERANCE_KEYWORDS.get(key, [key])


def find_keyword_match(ingredients: Iterable[str],
                       keywords: Iterable[str]) -> Tuple[str, str]:
    """
    Find the first ingredient containing any keyword.

    Args:
        ingredients: Ingredient names (any case)
        keywords: Lower-case keywords

    Returns:
        (ingredient, keyword) of the first match, or ("", "") if none
    """
    keywords = list(keywords)
    for ingredient in ingredients:
        lowered = ingredient.lower()
        for keyword in keywords:
            if keyword in lowered:
                return ingredient, keyword
    return "", ""


def contains_any(ingredients: Iterable[str], keywords: Iterable[str]) -> bool:
    """Check whether any ingredient contains any keyword."""
    ingredient, _ = find_keyword_match(ingredients, keywords)
    return bool(ingredient)
