from .auth import RegisterRequest, LoginRequest, UserOut, LoginResponse
from .dashboard import CategoryTotal, DashboardSummary
from .transactions import TransactionCreate, TransactionOut, TransactionList
from .insights import (
    TrendPrediction,
    Recommendation,
    InsightsOut
)
