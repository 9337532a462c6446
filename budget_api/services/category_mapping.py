from typing import Mapping, Optional

from budget_api.schemas.transaction import CategorySuggestion

# Plaid personal_finance_category (primary or detailed) -> app category name
PLAID_CATEGORY_MAP = {
    # Food & Drink
    "FOOD_AND_DRINK": "Dining Out",
    "FOOD_AND_DRINK_GROCERIES": "Groceries",
    "FOOD_AND_DRINK_RESTAURANTS": "Dining Out",
    "FOOD_AND_DRINK_COFFEE_SHOPS": "Dining Out",
    "FOOD_AND_DRINK_FAST_FOOD": "Dining Out",
    "FOOD_AND_DRINK_BARS": "Dining Out",
    "FOOD_AND_DRINK_FOOD_DELIVERY": "Dining Out",
    # Transportation
    "TRANSPORTATION": "Transportation",
    "TRANSPORTATION_PUBLIC_TRANSIT": "Transportation",
    "TRANSPORTATION_TAXI": "Transportation",
    "TRANSPORTATION_PARKING": "Transportation",
    "TRANSPORTATION_GAS": "Gas",
    "TRANSPORTATION_TOLLS": "Transportation",
    "TRANSPORTATION_RENTAL_CARS": "Transportation",
    "TRANSPORTATION_FLIGHTS": "Travel",
    "TRANSPORTATION_RIDESHARE": "Transportation",
    # Shopping
    "SHOPPING": "Shopping",
    "SHOPPING_CLOTHING": "Shopping",
    "SHOPPING_ELECTRONICS": "Shopping",
    "SHOPPING_SPORTING_GOODS": "Shopping",
    "SHOPPING_HOME_SUPPLIES": "Shopping",
    "SHOPPING_FURNITURE": "Shopping",
    # Entertainment
    "ENTERTAINMENT": "Entertainment",
    "ENTERTAINMENT_MOVIES": "Entertainment",
    "ENTERTAINMENT_MUSIC": "Entertainment",
    "ENTERTAINMENT_GAMES": "Entertainment",
    "ENTERTAINMENT_AMUSEMENT": "Entertainment",
    "ENTERTAINMENT_SPORTS": "Entertainment",
    "ENTERTAINMENT_GYMS": "Health & Fitness",
    # Personal care
    "PERSONAL_CARE": "Personal Care",
    "PERSONAL_CARE_SALON": "Personal Care",
    "PERSONAL_CARE_LAUNDRY": "Personal Care",
    # Medical
    "MEDICAL": "Health & Medical",
    "MEDICAL_DENTIST": "Health & Medical",
    "MEDICAL_OPTOMETRIST": "Health & Medical",
    "MEDICAL_PHARMACY": "Health & Medical",
    "MEDICAL_HOSPITALS": "Health & Medical",
    # Travel
    "TRAVEL": "Travel",
    "TRAVEL_ACCOMMODATIONS": "Travel",
    "TRAVEL_AIRLINES": "Travel",
    "TRAVEL_RENTAL_CARS": "Travel",
    "TRAVEL_TAXIS": "Travel",
    # Bills
    "BILLS_AND_UTILITIES": "Utilities",
    "BILLS_AND_UTILITIES_ELECTRICITY": "Utilities",
    "BILLS_AND_UTILITIES_GAS": "Utilities",
    "BILLS_AND_UTILITIES_WATER": "Utilities",
    "BILLS_AND_UTILITIES_PHONE": "Utilities",
    "BILLS_AND_UTILITIES_INTERNET": "Utilities",
    "BILLS_AND_UTILITIES_CABLE": "Utilities",
    # Financial services
    "FINANCIAL_SERVICES": "Financial Services",
    "FINANCIAL_SERVICES_BANKS": "Financial Services",
    "FINANCIAL_SERVICES_CREDIT_CARDS": "Financial Services",
    "GOVERNMENT_AND_TAXES": "Taxes",
    "GIFTS_AND_DONATIONS": "Gifts",
    # Rent
    "RENT_AND_UTILITIES": "Rent",
    "RENT_AND_UTILITIES_RENT": "Rent",
    "RENT_AND_UTILITIES_MORTGAGE": "Mortgage",
}

NEEDS_CATEGORIZED = "Needs Categorized"


def map_plaid_to_category_name(plaid_primary_category: Optional[str]) -> Optional[str]:
    if not plaid_primary_category:
        return None
    return PLAID_CATEGORY_MAP.get(plaid_primary_category)


def category_status(
        app_category_id: Optional[int],
        app_category_name: Optional[str],
        plaid_primary_category: Optional[str]
) -> str:
    """Display label for a transaction's categorization state."""
    if app_category_id and app_category_name:
        return app_category_name
    if plaid_primary_category:
        return f"Suggested: {plaid_primary_category}"
    return NEEDS_CATEGORIZED


def suggest_category(
        plaid_primary_category: Optional[str],
        category_ids_by_name: Mapping[str, int]
) -> CategorySuggestion:
    name = map_plaid_to_category_name(plaid_primary_category)
    category_id = category_ids_by_name.get(name) if name else None
    if category_id:
        return CategorySuggestion(category_id=category_id, source="plaid")
    return CategorySuggestion()
