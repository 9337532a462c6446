from pydantic import BaseModel, Field, StrictFloat, StrictInt
from typing import List, Optional, Union, Literal
from datetime import date


class TransactionItem(BaseModel):
    transaction_id: str
    date: date
    merchant_name: str
    amount: float
    app_category_id: Optional[int] = None
    app_category_name: Optional[str] = None
    plaid_category_primary: Optional[str] = None
    plaid_category_detailed: Optional[str] = None
    account_name: Optional[str] = None
    category_status: str
    suggested_category_id: Optional[int] = None


class TransactionPageResponse(BaseModel):
    transactions: List[TransactionItem]
    total_count: int
    page: int
    page_size: int


class TransactionQuery(BaseModel):
    user_id: str
    page: int = 1
    page_size: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    account_id: Optional[str] = None
    search: Optional[str] = None


class TransactionUpdateCategory(BaseModel):
    user_id: str = Field(..., min_length=1)
    # Strict so true and "5" are not coerced; any number reaches the category rules
    category_id: Union[StrictInt, StrictFloat]


class CategoryValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class CategorySuggestion(BaseModel):
    category_id: Optional[int] = None
    source: Literal["plaid", "none"] = "none"
