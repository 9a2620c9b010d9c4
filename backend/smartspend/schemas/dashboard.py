from pydantic import BaseModel
from typing import List, Literal


class CategoryTotal(BaseModel):
    category: str
    total: float


class DashboardSummary(BaseModel):
    view: Literal["monthly", "yearly"]
    balance: float
    total_income: float
    total_expense: float
    category_breakdown: List[CategoryTotal]
    transaction_count: int
