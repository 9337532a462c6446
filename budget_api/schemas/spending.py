from pydantic import BaseModel, Field
from typing import List


class SpendingAggregationParams(BaseModel):
    user_id: str
    month: int
    year: int


class CategorySpendingResult(BaseModel):
    category_id: int
    # Signed sum: expenses negative, refunds positive
    total_spent: float
    transaction_count: int = Field(..., ge=0)


class SpendingAggregationResponse(BaseModel):
    month: int
    year: int
    spending_by_category: List[CategorySpendingResult] = []
    total_spending: float = 0.0
    total_transaction_count: int = 0
