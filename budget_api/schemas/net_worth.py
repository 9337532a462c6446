from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


class AccountResponse(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    institution: Optional[str] = None
    current_balance: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class AccountListResponse(BaseModel):
    accounts: List[AccountResponse]
    total_balance: float


class AssetLiabilityCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: Literal["asset", "liability"]
    value: float = Field(..., ge=0)


class AssetLiabilityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[Literal["asset", "liability"]] = None
    value: Optional[float] = Field(None, ge=0)


class AssetLiabilityResponse(BaseModel):
    id: int
    user_id: str
    name: str
    type: Literal["asset", "liability"]
    value: float
    is_manual: bool = True

    model_config = ConfigDict(from_attributes=True)


class AssetLiabilityListResponse(BaseModel):
    items: List[AssetLiabilityResponse]


class NetWorthBreakdown(BaseModel):
    account_balance: float = 0.0
    manual_assets: float = 0.0
    manual_liabilities: float = 0.0


class NetWorthResponse(BaseModel):
    net_worth: float
    breakdown: NetWorthBreakdown

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "net_worth": 27500.0,
            "breakdown": {
                "account_balance": 2500.0,
                "manual_assets": 40000.0,
                "manual_liabilities": 15000.0
            }
        }
    })
