from .currency import format_currency, make_formatter
from .trends import (
    analyze,
    aggregate_category_months,
    filter_window,
    get_month_key,
    project_local_predictions,
    window_start,
)
from .recommendations import (
    day_of_week_recommendations,
    fallback_recommendations,
    generate_recommendations,
    trend_recommendations,
)
