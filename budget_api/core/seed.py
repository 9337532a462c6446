import logging
from datetime import date
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from budget_api.models.transaction import Account, Budget, Category, Transaction

logger = logging.getLogger(__name__)

DEMO_USER_ID = "user-demo"
DEMO_ACCOUNT_ID = "account-demo"
DEMO_ACCOUNT_BALANCE = 2500.0

DEFAULT_CATEGORIES = [
    "Groceries",
    "Dining Out",
    "Transportation",
    "Entertainment",
    "Utilities",
    "Shopping",
    "Healthcare",
    "Other",
]

# (category, month, year, amount)
DEMO_BUDGETS = [
    ("Groceries", 1, 2025, 300.0),
    ("Dining Out", 1, 2025, 200.0),
    ("Transportation", 1, 2025, 150.0),
    ("Entertainment", 1, 2025, 100.0),
    ("Utilities", 1, 2025, 120.0),
]

# (merchant, category, amount, day of January 2025)
DEMO_TRANSACTIONS = [
    ("Whole Foods", "Groceries", -150.0, 1),
    ("Trader Joe's", "Groceries", -85.0, 5),
    ("Olive Garden", "Dining Out", -45.0, 10),
    ("Uber", "Transportation", -25.0, 8),
    ("Movie Tickets", "Entertainment", -30.0, 12),
]


async def seed_data(db: AsyncSession):
    """Fill an empty database with the demo catalog, budgets and transactions."""
    count = await db.execute(select(func.count(Category.id)))
    if (count.scalar() or 0) > 0:
        logger.debug("Database already seeded, skipping")
        return

    categories = {name: Category(name=name) for name in DEFAULT_CATEGORIES}
    db.add_all(categories.values())
    db.add(Account(
        id=DEMO_ACCOUNT_ID, user_id=DEMO_USER_ID, name="Demo Checking", type="depository",
        institution="Demo Bank", current_balance=DEMO_ACCOUNT_BALANCE
    ))
    await db.flush()

    db.add_all([
        Budget(
            user_id=DEMO_USER_ID,
            category_id=categories[name].id,
            month=month,
            year=year,
            amount=amount
        )
        for name, month, year, amount in DEMO_BUDGETS
    ])

    db.add_all([
        Transaction(
            id=f"txn-demo-{index}",
            user_id=DEMO_USER_ID,
            account_id=DEMO_ACCOUNT_ID,
            category_id=categories[category].id,
            name=merchant,
            amount=amount,
            date=date(2025, 1, day),
        )
        for index, (merchant, category, amount, day) in enumerate(DEMO_TRANSACTIONS)
    ])

    await db.commit()
    logger.info(
        "Seeded %d categories, %d budgets, %d transactions",
        len(categories), len(DEMO_BUDGETS), len(DEMO_TRANSACTIONS)
    )
