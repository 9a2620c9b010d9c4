from .auth import (
    AuthError,
    register_user,
    login_user,
    logout_user,
    verify_session,
)
from .transactions import (
    list_recent_transactions,
    list_transactions,
    add_transaction,
    delete_transaction,
    get_dashboard_summary,
)
from .insights import (
    get_predictions,
    get_recommendations,
    get_insights,
)
