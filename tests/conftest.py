from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from budget_api.core.database import get_db, init_db
from budget_api.core.seed import seed_data
from budget_api.main import app
from budget_api.models.transaction import Transaction
from budget_api.schemas.budget import BudgetAllocation


@pytest_asyncio.fixture
async def engine(tmp_path):
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_db(db):
    """Demo data plus an uncategorized transaction and one outside January."""
    await seed_data(db)
    db.add_all([
        Transaction(id="txn-uncategorized", user_id="user-demo", account_id="account-demo",
                    category_id=None, name="Corner Store", amount=-12.0, date=date(2025, 1, 20),
                    plaid_primary_category="FOOD_AND_DRINK_GROCERIES"),
        Transaction(id="txn-february", user_id="user-demo", account_id="account-demo",
                    category_id=1, name="Whole Foods", amount=-60.0, date=date(2025, 2, 1)),
    ])
    await db.commit()
    return db


@pytest_asyncio.fixture
async def client(session_factory, seeded_db):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def groceries_dining_entertainment():
    return [
        BudgetAllocation(category_id=1, category_name="Groceries", budgeted_amount=300),
        BudgetAllocation(category_id=2, category_name="Dining", budgeted_amount=150),
        BudgetAllocation(category_id=3, category_name="Entertainment", budgeted_amount=100),
    ]
