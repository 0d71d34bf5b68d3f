from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from finsight.core.config import Settings, get_settings
from finsight.models.enums import RecurringFrequency


DEFAULT_INCOME_SEASONALITY: tuple[float, ...] = (
    0.95, 0.98, 1.02, 1.0, 1.0, 1.0, 0.98, 0.98, 1.0, 1.0, 1.05, 1.15,
)
DEFAULT_EXPENSE_SEASONALITY: tuple[float, ...] = (
    1.15, 0.9, 1.0, 1.05, 1.0, 1.1, 1.08, 1.05, 0.95, 1.0, 1.1, 1.2,
)

# (frequency, min avg interval days, max avg interval days), checked in order.
DEFAULT_FREQUENCY_BANDS: tuple[tuple[RecurringFrequency, float, float], ...] = (
    (RecurringFrequency.yearly, 350, 380),
    (RecurringFrequency.monthly, 25, 35),
    (RecurringFrequency.biweekly, 12, 16),
    (RecurringFrequency.weekly, 5, 9),
)


@dataclass(frozen=True)
class AnalyticsPolicy:
    """Tunable constants of the analytics engine.

    The defaults are product policy carried over unchanged; none of them is
    derived from data. Deployments override them through ``analytics_*``
    settings.
    """

    history_months: int = 12
    forecast_horizon: int = 6
    recent_window: int = 6
    income_seasonality: tuple[float, ...] = DEFAULT_INCOME_SEASONALITY
    expense_seasonality: tuple[float, ...] = DEFAULT_EXPENSE_SEASONALITY
    confidence_start: float = 0.9
    confidence_step: float = 0.1
    confidence_floor: float = 0.3

    trend_stable_pct: float = 5.0

    insight_window: int = 3
    low_savings_rate_pct: float = 10.0
    high_savings_rate_pct: float = 30.0
    target_savings_rate_pct: float = 20.0
    expense_drift_pct: float = 10.0
    category_share_pct: float = 25.0
    category_share_exclusions: frozenset[str] = field(default_factory=lambda: frozenset({"Housing", "Rent"}))

    recurring_min_occurrences: int = 3
    recurring_max_coefficient: float = 0.3
    recurring_frequency_bands: tuple[tuple[RecurringFrequency, float, float], ...] = DEFAULT_FREQUENCY_BANDS
    recurring_limit: int = 5

    budget_lookback_days: int = 90
    budget_slices: int = 3
    budget_materiality_floor: float = 50.0
    budget_buffer_pct: float = 10.0
    budget_high_band_coefficient: float = 0.2
    budget_medium_band_coefficient: float = 0.5
    budget_limit: int = 5

    currency_symbol: str = "£"

    def __post_init__(self) -> None:
        if len(self.income_seasonality) != 12:
            raise ValueError("income_seasonality must have 12 monthly factors.")
        if len(self.expense_seasonality) != 12:
            raise ValueError("expense_seasonality must have 12 monthly factors.")
        if any(factor < 0 for factor in (*self.income_seasonality, *self.expense_seasonality)):
            raise ValueError("Seasonal factors must be >= 0.")
        if self.history_months < 0 or self.forecast_horizon < 0:
            raise ValueError("history_months and forecast_horizon must be >= 0.")
        if self.recent_window < 1 or self.insight_window < 1:
            raise ValueError("recent_window and insight_window must be >= 1.")
        if not 0 <= self.confidence_floor <= self.confidence_start <= 1:
            raise ValueError("Confidence bounds must satisfy 0 <= floor <= start <= 1.")
        if self.budget_lookback_days < 1 or self.budget_slices < 1:
            raise ValueError("budget_lookback_days and budget_slices must be >= 1.")
        if self.recurring_max_coefficient < 0 or self.budget_materiality_floor < 0:
            raise ValueError("Thresholds must be >= 0.")

    def forecast_confidence(self, step: int) -> float:
        return max(self.confidence_floor, self.confidence_start - self.confidence_step * step)


def policy_from_settings(settings: Settings) -> AnalyticsPolicy:
    return AnalyticsPolicy(
        history_months=settings.analytics_history_months,
        forecast_horizon=settings.analytics_forecast_horizon,
        recent_window=settings.analytics_recent_window,
        income_seasonality=tuple(settings.analytics_income_seasonality),
        expense_seasonality=tuple(settings.analytics_expense_seasonality),
        confidence_start=settings.analytics_confidence_start,
        confidence_step=settings.analytics_confidence_step,
        confidence_floor=settings.analytics_confidence_floor,
        trend_stable_pct=settings.analytics_trend_stable_pct,
        low_savings_rate_pct=settings.analytics_low_savings_rate_pct,
        high_savings_rate_pct=settings.analytics_high_savings_rate_pct,
        target_savings_rate_pct=settings.analytics_target_savings_rate_pct,
        expense_drift_pct=settings.analytics_expense_drift_pct,
        category_share_pct=settings.analytics_category_share_pct,
        category_share_exclusions=frozenset(settings.analytics_category_share_exclusions),
        recurring_min_occurrences=settings.analytics_recurring_min_occurrences,
        recurring_max_coefficient=settings.analytics_recurring_max_coefficient,
        recurring_limit=settings.analytics_recurring_limit,
        budget_lookback_days=settings.analytics_budget_lookback_days,
        budget_materiality_floor=settings.analytics_budget_materiality_floor,
        budget_buffer_pct=settings.analytics_budget_buffer_pct,
        budget_high_band_coefficient=settings.analytics_budget_high_band_coefficient,
        budget_medium_band_coefficient=settings.analytics_budget_medium_band_coefficient,
        budget_limit=settings.analytics_budget_limit,
        currency_symbol=settings.analytics_currency_symbol,
    )


@lru_cache
def get_analytics_policy() -> AnalyticsPolicy:
    return policy_from_settings(get_settings())
