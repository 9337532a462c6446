from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date

from budget_api.core.database import get_db
from budget_api.schemas.budget import BudgetPageResponse, BudgetSetupRequest, BudgetSetupResponse
from budget_api.schemas.category import CategoryCreate, CategoryListResponse, CategoryResponse
from budget_api.schemas.net_worth import (
    AccountListResponse, AccountResponse, AssetLiabilityCreate, AssetLiabilityListResponse,
    AssetLiabilityResponse, AssetLiabilityUpdate, NetWorthResponse
)
from budget_api.schemas.spending import SpendingAggregationResponse
from budget_api.schemas.transaction import (
    CategoryValidationResult, TransactionItem, TransactionPageResponse, TransactionQuery,
    TransactionUpdateCategory
)
from budget_api.services.finance import FinanceService

api_router = APIRouter()


@api_router.get("/budgets", response_model=BudgetPageResponse, tags=["Budgets"])
async def get_budget_page(
        user_id: str = Query(..., alias="userId", min_length=1),
        month: int = Query(...),
        year: int = Query(...),
        db: AsyncSession = Depends(get_db)
):
    return await FinanceService.get_budget_page(db, user_id, month, year)


@api_router.post("/budgets/setup", response_model=BudgetSetupResponse, tags=["Budgets"])
async def setup_budgets(req: BudgetSetupRequest, db: AsyncSession = Depends(get_db)):
    return await FinanceService.setup_budgets(db, req)


@api_router.get("/spending", response_model=SpendingAggregationResponse, tags=["Budgets"])
async def get_monthly_spending(
        user_id: str = Query(..., alias="userId", min_length=1),
        month: int = Query(...),
        year: int = Query(...),
        db: AsyncSession = Depends(get_db)
):
    return await FinanceService.get_monthly_spending(db, user_id, month, year)


@api_router.get("/categories", response_model=CategoryListResponse, tags=["Categories"])
async def get_categories(db: AsyncSession = Depends(get_db)):
    categories = await FinanceService.get_all_categories(db)
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories],
        count=len(categories)
    )


@api_router.post("/categories", response_model=CategoryResponse, status_code=201, tags=["Categories"])
async def create_category(payload: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await FinanceService.create_category(db, payload.name, payload.description)


@api_router.post("/categories/validate", response_model=CategoryValidationResult, tags=["Categories"])
async def validate_category(payload: TransactionUpdateCategory, db: AsyncSession = Depends(get_db)):
    return await FinanceService.validate_category(db, payload.user_id, payload.category_id)


@api_router.get("/transactions", response_model=TransactionPageResponse, tags=["Transactions"])
async def get_history(
        user_id: str = Query(..., alias="userId", min_length=1),
        page: int = 1,
        page_size: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[str] = None,
        search: Optional[str] = None,
        db: AsyncSession = Depends(get_db)
):
    query = TransactionQuery(
        user_id=user_id, page=page, page_size=page_size, start_date=start_date, end_date=end_date,
        category_id=category_id, account_id=account_id, search=search
    )
    return await FinanceService.get_history(db, query)


@api_router.put("/transactions/{transaction_id}/category", response_model=TransactionItem, tags=["Transactions"])
async def correct_category(transaction_id: str, correction: TransactionUpdateCategory,
                           db: AsyncSession = Depends(get_db)):
    result = await FinanceService.correct_category(db, transaction_id, correction.user_id, correction.category_id)
    if not result:
        raise HTTPException(status_code=404, detail="Transaction not found or does not belong to user")
    return result


@api_router.get("/user/{user_id}/accounts", response_model=AccountListResponse, tags=["Net worth"])
async def get_accounts(user_id: str, db: AsyncSession = Depends(get_db)):
    accounts = await FinanceService.get_accounts(db, user_id)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts],
        total_balance=sum(a.current_balance or 0.0 for a in accounts)
    )


@api_router.get("/user/{user_id}/net-worth", response_model=NetWorthResponse, tags=["Net worth"])
async def get_net_worth(user_id: str, db: AsyncSession = Depends(get_db)):
    return await FinanceService.get_net_worth(db, user_id)


@api_router.get("/user/{user_id}/assets-liabilities", response_model=AssetLiabilityListResponse,
                tags=["Net worth"])
async def get_asset_liabilities(user_id: str, db: AsyncSession = Depends(get_db)):
    items = await FinanceService.get_asset_liabilities(db, user_id)
    return AssetLiabilityListResponse(items=[AssetLiabilityResponse.model_validate(i) for i in items])


@api_router.post("/user/{user_id}/assets-liabilities", response_model=AssetLiabilityResponse,
                 status_code=201, tags=["Net worth"])
async def create_asset_liability(user_id: str, payload: AssetLiabilityCreate, db: AsyncSession = Depends(get_db)):
    return await FinanceService.create_asset_liability(db, user_id, payload)


@api_router.patch("/user/{user_id}/assets-liabilities/{item_id}", response_model=AssetLiabilityResponse,
                  tags=["Net worth"])
async def update_asset_liability(user_id: str, item_id: int, payload: AssetLiabilityUpdate,
                                 db: AsyncSession = Depends(get_db)):
    item = await FinanceService.update_asset_liability(db, user_id, item_id, payload)
    if not item:
        raise HTTPException(status_code=404, detail="Asset/Liability not found")
    return item


@api_router.delete("/user/{user_id}/assets-liabilities/{item_id}", tags=["Net worth"])
async def delete_asset_liability(user_id: str, item_id: int, db: AsyncSession = Depends(get_db)):
    if not await FinanceService.delete_asset_liability(db, user_id, item_id):
        raise HTTPException(status_code=404, detail="Asset/Liability not found")
    return {"success": True}
