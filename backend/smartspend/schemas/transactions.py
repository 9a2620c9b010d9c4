import math
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime, timezone


class TransactionCreate(BaseModel):
    type: Literal["income", "expense"]
    category: str
    description: Optional[str] = ""
    amount: float
    # Defaults to "now" in the store; set explicitly for imports/backfills
    transaction_date: Optional[datetime] = None

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('category is required')
        return v

    @field_validator('transaction_date')
    @classmethod
    def validate_transaction_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Stored columns are naive UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError('amount must be a finite number')
        if v < 0:
            raise ValueError('amount must be >= 0')
        return v


class TransactionOut(BaseModel):
    id: int
    type: str
    category: str
    description: Optional[str] = None
    amount: float
    date: datetime = Field(validation_alias=AliasChoices("date", "transaction_date"))

    model_config = ConfigDict(from_attributes=True)


class TransactionList(BaseModel):
    transactions: List[TransactionOut]
    balance: float
