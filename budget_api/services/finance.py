import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, desc, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from budget_api.config import settings
from budget_api.core.errors import BudgetValidationError, ConflictError, InvalidPeriodError
from budget_api.models.transaction import Account, AssetLiability, Budget, Category, Transaction
from budget_api.schemas.budget import (
    BudgetAllocation, BudgetPageResponse, BudgetSetupRequest, BudgetSetupResponse
)
from budget_api.schemas.net_worth import (
    AssetLiabilityCreate, AssetLiabilityUpdate, NetWorthBreakdown, NetWorthResponse
)
from budget_api.schemas.spending import SpendingAggregationParams, SpendingAggregationResponse
from budget_api.schemas.transaction import (
    CategoryValidationResult, TransactionItem, TransactionPageResponse, TransactionQuery
)
from budget_api.services.budget_calculator import build_category_budget_items, compose_budget_page_response
from budget_api.services.category_mapping import category_status, suggest_category
from budget_api.services.spending_aggregation import aggregate_monthly_spending, month_date_range
from budget_api.services.transaction_category import validate_category_update

logger = logging.getLogger(__name__)


class FinanceService:
    @staticmethod
    def validate_period(month: int, year: int) -> None:
        if month < 1 or month > 12:
            raise InvalidPeriodError(f"Invalid month: {month}. Must be between 1 and 12.")
        if year < settings.MIN_YEAR or year > settings.MAX_YEAR:
            raise InvalidPeriodError(
                f"Invalid year: {year}. Must be between {settings.MIN_YEAR} and {settings.MAX_YEAR}."
            )

    # --- Categories ---

    @staticmethod
    async def get_all_categories(db: AsyncSession) -> list[Category]:
        res = await db.execute(select(Category).order_by(Category.name.asc()))
        return list(res.scalars().all())

    @staticmethod
    async def get_valid_category_ids(db: AsyncSession, user_id: str) -> list[int]:
        # Every user currently shares the system catalog
        res = await db.execute(select(Category.id).order_by(Category.id))
        return list(res.scalars().all())

    @staticmethod
    async def create_category(db: AsyncSession, name: str, description: Optional[str] = None) -> Category:
        name = (name or "").strip()
        if not name:
            raise BudgetValidationError("name is required")

        existing = await db.execute(select(Category.id).where(func.lower(Category.name) == name.lower()))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Category name already exists")

        category = Category(name=name, description=description)
        db.add(category)
        await db.commit()
        await db.refresh(category)
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    @staticmethod
    async def validate_category(db: AsyncSession, user_id: str, category_id) -> CategoryValidationResult:
        valid_ids = await FinanceService.get_valid_category_ids(db, user_id)
        return validate_category_update(category_id, valid_ids)

    # --- Spending & budgets ---

    @staticmethod
    async def get_transactions_in_range(db: AsyncSession, user_id: str, start: date, end: date):
        query = select(
            Transaction.user_id, Transaction.category_id, Transaction.amount, Transaction.date
        ).where(
            and_(
                Transaction.user_id == user_id,
                Transaction.date >= start,
                Transaction.date <= end
            )
        )
        res = await db.execute(query)
        return res.mappings().all()

    @staticmethod
    async def get_monthly_spending(db: AsyncSession, user_id: str, month: int, year: int) -> SpendingAggregationResponse:
        FinanceService.validate_period(month, year)
        start, end = month_date_range(month, year)
        rows = await FinanceService.get_transactions_in_range(db, user_id, start, end)
        logger.debug("Aggregating %d transactions for %s %02d/%d", len(rows), user_id, month, year)

        params = SpendingAggregationParams(user_id=user_id, month=month, year=year)
        return aggregate_monthly_spending(params, rows)

    @staticmethod
    async def get_budget_allocations(db: AsyncSession, user_id: str, month: int, year: int) -> list[BudgetAllocation]:
        query = select(
            Budget.category_id,
            Category.name.label('category_name'),
            Budget.amount.label('budgeted_amount')
        ).join(
            Category, Budget.category_id == Category.id
        ).where(
            and_(Budget.user_id == user_id, Budget.month == month, Budget.year == year)
        ).order_by(Category.name.asc())

        res = await db.execute(query)
        return [BudgetAllocation(**row) for row in res.mappings().all()]

    @staticmethod
    async def get_budget_page(db: AsyncSession, user_id: str, month: int, year: int) -> BudgetPageResponse:
        FinanceService.validate_period(month, year)

        budgets = await FinanceService.get_budget_allocations(db, user_id, month, year)
        spending = await FinanceService.get_monthly_spending(db, user_id, month, year)
        spending_map = {item.category_id: item for item in spending.spending_by_category}

        items = build_category_budget_items(budgets, spending_map)
        return compose_budget_page_response(month, year, items)

    @staticmethod
    async def setup_budgets(db: AsyncSession, request: BudgetSetupRequest) -> BudgetSetupResponse:
        category_ids = [item.category_id for item in request.budgets]

        known = await db.execute(select(Category.id).where(Category.id.in_(category_ids)))
        known_ids = set(known.scalars().all())
        for category_id in category_ids:
            if category_id not in known_ids:
                raise BudgetValidationError(f"Category ID {category_id} does not exist")

        query = select(Budget).where(
            and_(
                Budget.user_id == request.user_id,
                Budget.month == request.month,
                Budget.year == request.year,
                Budget.category_id.in_(category_ids)
            )
        )
        res = await db.execute(query)
        existing = {b.category_id: b for b in res.scalars().all()}

        created = updated = 0
        for item in request.budgets:
            budget = existing.get(item.category_id)
            if budget:
                budget.amount = item.planned_amount
                updated += 1
            else:
                db.add(Budget(
                    user_id=request.user_id,
                    category_id=item.category_id,
                    month=request.month,
                    year=request.year,
                    amount=item.planned_amount
                ))
                created += 1

        await db.commit()
        logger.info(
            "Budgets for %s %02d/%d: %d created, %d updated",
            request.user_id, request.month, request.year, created, updated
        )

        return BudgetSetupResponse(
            success=True,
            count=created + updated,
            created=created,
            updated=updated,
            month=request.month,
            year=request.year
        )

    # --- Transactions ---

    @staticmethod
    def _transaction_rows_query():
        return select(
            Transaction,
            Category.name.label('category_name'),
            Account.name.label('account_name')
        ).outerjoin(
            Category, Transaction.category_id == Category.id
        ).outerjoin(
            Account, Transaction.account_id == Account.id
        )

    @staticmethod
    def _to_item(trx: Transaction, category_name, account_name, category_ids_by_name: dict) -> TransactionItem:
        suggestion = None
        if trx.category_id is None:
            suggestion = suggest_category(trx.plaid_primary_category, category_ids_by_name).category_id

        return TransactionItem(
            transaction_id=trx.id,
            date=trx.date,
            merchant_name=trx.merchant_name or trx.name,
            amount=trx.amount,
            app_category_id=trx.category_id,
            app_category_name=category_name,
            plaid_category_primary=trx.plaid_primary_category,
            plaid_category_detailed=trx.plaid_category,
            account_name=account_name,
            category_status=category_status(trx.category_id, category_name, trx.plaid_primary_category),
            suggested_category_id=suggestion
        )

    @staticmethod
    async def _category_ids_by_name(db: AsyncSession) -> dict:
        res = await db.execute(select(Category.name, Category.id))
        return {name: category_id for name, category_id in res.all()}

    @staticmethod
    async def get_history(db: AsyncSession, query: TransactionQuery) -> TransactionPageResponse:
        page = max(1, query.page)
        page_size = min(settings.MAX_PAGE_SIZE, max(1, query.page_size or settings.DEFAULT_PAGE_SIZE))

        conditions = [Transaction.user_id == query.user_id]
        if query.start_date:
            conditions.append(Transaction.date >= query.start_date)
        if query.end_date:
            conditions.append(Transaction.date <= query.end_date)
        if query.category_id is not None:
            conditions.append(Transaction.category_id == query.category_id)
        if query.account_id:
            conditions.append(Transaction.account_id == query.account_id)
        if query.search:
            pattern = f"%{query.search.lower()}%"
            conditions.append(or_(
                func.lower(Transaction.merchant_name).like(pattern),
                func.lower(Transaction.name).like(pattern)
            ))

        count_res = await db.execute(select(func.count()).select_from(Transaction).where(*conditions))
        total_count = count_res.scalar() or 0

        rows_query = (
            FinanceService._transaction_rows_query()
            .where(*conditions)
            .order_by(desc(Transaction.date), desc(Transaction.created_at))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        res = await db.execute(rows_query)
        ids_by_name = await FinanceService._category_ids_by_name(db)

        return TransactionPageResponse(
            transactions=[FinanceService._to_item(trx, cat, acc, ids_by_name) for trx, cat, acc in res.all()],
            total_count=total_count,
            page=page,
            page_size=page_size
        )

    @staticmethod
    async def get_transaction(db: AsyncSession, transaction_id: str, user_id: str) -> Optional[TransactionItem]:
        query = FinanceService._transaction_rows_query().where(
            and_(Transaction.id == transaction_id, Transaction.user_id == user_id)
        )
        res = await db.execute(query)
        row = res.one_or_none()
        if row is None:
            return None

        trx, category_name, account_name = row
        ids_by_name = await FinanceService._category_ids_by_name(db)
        return FinanceService._to_item(trx, category_name, account_name, ids_by_name)

    @staticmethod
    async def correct_category(db: AsyncSession, transaction_id: str, user_id: str, category_id) -> Optional[TransactionItem]:
        validation = await FinanceService.validate_category(db, user_id, category_id)
        if not validation.valid:
            raise BudgetValidationError(validation.error)

        query = select(Transaction).where(
            and_(Transaction.id == transaction_id, Transaction.user_id == user_id)
        )
        result = await db.execute(query)
        transaction = result.scalar_one_or_none()
        if not transaction:
            return None

        previous = transaction.category_id
        # Only the app category changes; Plaid metadata is left untouched
        transaction.category_id = int(category_id)
        await db.commit()
        logger.info("Transaction %s recategorized: %s -> %s", transaction_id, previous, transaction.category_id)

        return await FinanceService.get_transaction(db, transaction_id, user_id)

    # --- Accounts & net worth ---

    @staticmethod
    async def get_accounts(db: AsyncSession, user_id: str) -> list[Account]:
        res = await db.execute(select(Account).where(Account.user_id == user_id).order_by(Account.name))
        return list(res.scalars().all())

    @staticmethod
    async def get_total_balance(db: AsyncSession, user_id: str) -> float:
        res = await db.execute(
            select(func.sum(Account.current_balance)).where(Account.user_id == user_id)
        )
        return float(res.scalar() or 0.0)

    @staticmethod
    async def get_asset_liabilities(db: AsyncSession, user_id: str) -> list[AssetLiability]:
        res = await db.execute(
            select(AssetLiability).where(AssetLiability.user_id == user_id).order_by(AssetLiability.name)
        )
        return list(res.scalars().all())

    @staticmethod
    async def _get_asset_liability(db: AsyncSession, user_id: str, item_id: int) -> Optional[AssetLiability]:
        res = await db.execute(
            select(AssetLiability).where(
                and_(AssetLiability.id == item_id, AssetLiability.user_id == user_id)
            )
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def create_asset_liability(db: AsyncSession, user_id: str, payload: AssetLiabilityCreate) -> AssetLiability:
        item = AssetLiability(user_id=user_id, name=payload.name, type=payload.type, value=payload.value)
        db.add(item)
        await db.commit()
        await db.refresh(item)
        logger.info("Created %s %s for %s", item.type, item.id, user_id)
        return item

    @staticmethod
    async def update_asset_liability(
            db: AsyncSession, user_id: str, item_id: int, payload: AssetLiabilityUpdate
    ) -> Optional[AssetLiability]:
        item = await FinanceService._get_asset_liability(db, user_id, item_id)
        if not item:
            return None

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(item, field, value)
        await db.commit()
        await db.refresh(item)
        logger.info("Updated %s %s for %s", item.type, item.id, user_id)
        return item

    @staticmethod
    async def delete_asset_liability(db: AsyncSession, user_id: str, item_id: int) -> bool:
        item = await FinanceService._get_asset_liability(db, user_id, item_id)
        if not item:
            return False

        await db.delete(item)
        await db.commit()
        logger.info("Deleted asset/liability %s for %s", item_id, user_id)
        return True

    @staticmethod
    async def get_net_worth(db: AsyncSession, user_id: str) -> NetWorthResponse:
        """Linked account balances plus manual assets minus manual liabilities."""
        account_balance = await FinanceService.get_total_balance(db, user_id)

        res = await db.execute(
            select(AssetLiability.type, func.sum(AssetLiability.value))
            .where(AssetLiability.user_id == user_id)
            .group_by(AssetLiability.type)
        )
        totals = {item_type: float(total or 0.0) for item_type, total in res.all()}

        breakdown = NetWorthBreakdown(
            account_balance=account_balance,
            manual_assets=totals.get("asset", 0.0),
            manual_liabilities=totals.get("liability", 0.0)
        )
        logger.debug("Net worth breakdown for %s: %s", user_id, breakdown)
        return NetWorthResponse(
            net_worth=breakdown.account_balance + breakdown.manual_assets - breakdown.manual_liabilities,
            breakdown=breakdown
        )
