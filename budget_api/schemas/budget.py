from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List

from budget_api.config import settings


class BudgetAllocation(BaseModel):
    category_id: int
    category_name: str
    budgeted_amount: float


class BudgetSetupItem(BaseModel):
    category_id: int = Field(..., ge=1)
    category_name: str = ""
    planned_amount: float = Field(..., ge=0)


class BudgetSetupRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    month: int = Field(..., ge=1, le=12)
    year: int
    budgets: List[BudgetSetupItem] = Field(..., min_length=1)

    @field_validator('year')
    @classmethod
    def year_in_range(cls, v: int) -> int:
        if v < settings.MIN_YEAR or v > settings.MAX_YEAR:
            raise ValueError(f'Year must be between {settings.MIN_YEAR} and {settings.MAX_YEAR}')
        return v

    @field_validator('budgets')
    @classmethod
    def unique_categories(cls, v: List[BudgetSetupItem]) -> List[BudgetSetupItem]:
        seen = set()
        for item in v:
            if item.category_id in seen:
                raise ValueError(f'Duplicate category_id {item.category_id} found in budgets')
            seen.add(item.category_id)
        return v


class BudgetSetupResponse(BaseModel):
    success: bool
    count: int
    created: int = 0
    updated: int = 0
    month: int
    year: int


class CategoryBudgetItem(BaseModel):
    category_id: int
    category_name: str
    budgeted_amount: float
    spent_amount: float
    remaining_amount: float
    percentage_used: float


class BudgetSummary(BaseModel):
    total_budgeted: float = 0.0
    total_spent: float = 0.0
    total_remaining: float = 0.0
    overall_percentage_used: float = 0.0


class BudgetPageResponse(BaseModel):
    month: int
    year: int
    category_budgets: List[CategoryBudgetItem] = Field(default_factory=list, alias="categoryBudgets")
    summary: BudgetSummary

    model_config = ConfigDict(populate_by_name=True, json_schema_extra={
        "example": {
            "month": 1,
            "year": 2025,
            "categoryBudgets": [
                {
                    "category_id": 1,
                    "category_name": "Groceries",
                    "budgeted_amount": 300,
                    "spent_amount": -150,
                    "remaining_amount": 450,
                    "percentage_used": 50
                }
            ],
            "summary": {
                "total_budgeted": 300,
                "total_spent": -150,
                "total_remaining": 450,
                "overall_percentage_used": 50
            }
        }
    })
