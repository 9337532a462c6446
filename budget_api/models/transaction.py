import uuid
from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, Boolean, Text, ForeignKey, UniqueConstraint, Index,
    CheckConstraint, func
)
from budget_api.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=True)
    institution = Column(String, nullable=True)
    current_balance = Column(Float, nullable=False, default=0.0)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=True)

    # Authoritative app category; NULL means uncategorized
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    name = Column(String, nullable=False)
    merchant_name = Column(String, nullable=True)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    pending = Column(Boolean, default=False)

    # Plaid enrichment, kept verbatim as metadata
    plaid_category = Column(String, nullable=True)
    plaid_primary_category = Column(String, nullable=True)

    is_manual = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "date"),
    )


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "category_id", "month", "year", name="uq_budget_period"),
        Index("idx_budgets_user_month", "user_id", "month", "year"),
    )


class AssetLiability(Base):
    """Manually tracked holdings outside linked accounts: a house, a car loan."""
    __tablename__ = "assets_liabilities"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    # Liabilities are stored as positive values too
    value = Column(Float, nullable=False)
    is_manual = Column(Boolean, default=True)

    __table_args__ = (
        CheckConstraint("type IN ('asset', 'liability')", name="ck_asset_liability_type"),
    )
