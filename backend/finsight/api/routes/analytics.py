from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finsight.api.deps import get_as_of, get_db, get_policy, get_tenant_id
from finsight.core.config import get_settings
from finsight.schemas.analytics import (
    BudgetSuggestionListOut,
    BudgetSuggestionOut,
    ForecastReportOut,
    InsightListOut,
    InsightOut,
    MonthlyBucketOut,
    RecurringPatternListOut,
    RecurringPatternOut,
    TrendOut,
    TrendSummaryOut,
)
from finsight.services.aggregation import aggregate_monthly
from finsight.services.analytics import build_forecast_report
from finsight.services.budgeting import recommend_budgets
from finsight.services.forecasting import forecast_buckets
from finsight.services.insights import generate_insights
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import Insight, MonthlyBucket, TrendResult, TrendSummary
from finsight.services.recurring import detect_recurring_patterns
from finsight.services.snapshot import TenantSnapshot, load_snapshot
from finsight.services.trends import classify_trends
from finsight.utils.decimal_math import money, pct


router = APIRouter(prefix="/analytics", tags=["analytics"])


def _snapshot(db: Session, tenant_id: int, now: datetime) -> TenantSnapshot:
    return load_snapshot(db, tenant_id, now=now, limit=get_settings().max_snapshot_transactions)


def _bucket_out(bucket: MonthlyBucket) -> MonthlyBucketOut:
    return MonthlyBucketOut(
        month=bucket.label,
        month_key=bucket.key,
        income=money(bucket.income),
        expense=money(bucket.expense),
        net=money(bucket.net),
        predicted=bucket.predicted,
        confidence=round(bucket.confidence, 4),
    )


def _trend_out(trend: TrendResult) -> TrendOut:
    return TrendOut(direction=trend.direction, percentage=pct(trend.percentage), description=trend.description)


def _trends_out(trends: TrendSummary) -> TrendSummaryOut:
    return TrendSummaryOut(
        income=_trend_out(trends.income),
        expense=_trend_out(trends.expense),
        savings=_trend_out(trends.savings),
    )


def _insight_out(insight: Insight) -> InsightOut:
    return InsightOut(
        kind=insight.kind,
        title=insight.title,
        description=insight.description,
        financial_impact=money(insight.financial_impact),
        category=insight.category,
    )


@router.get("/forecast", response_model=ForecastReportOut)
def get_forecast(
    horizon: int | None = Query(default=None, ge=1, le=24),
    window_months: int | None = Query(default=None, ge=1, le=36),
    now: datetime = Depends(get_as_of),
    tenant_id: int = Depends(get_tenant_id),
    policy: AnalyticsPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> ForecastReportOut:
    snapshot = _snapshot(db, tenant_id, now)
    report = build_forecast_report(
        snapshot.transactions,
        now=now,
        horizon=horizon,
        window_months=window_months,
        policy=policy,
    )
    return ForecastReportOut(
        as_of=now,
        horizon=len(report.predictions),
        predictions=[_bucket_out(bucket) for bucket in report.buckets],
        trends=_trends_out(report.trends),
        insights=[_insight_out(row) for row in report.insights],
        confidence=round(report.confidence, 4),
        snapshot_truncated=snapshot.truncated,
    )


@router.get("/trends", response_model=TrendSummaryOut)
def get_trends(
    now: datetime = Depends(get_as_of),
    tenant_id: int = Depends(get_tenant_id),
    policy: AnalyticsPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> TrendSummaryOut:
    snapshot = _snapshot(db, tenant_id, now)
    history = aggregate_monthly(snapshot.transactions, now=now, window_months=policy.history_months)
    return _trends_out(classify_trends(history, policy=policy))


@router.get("/insights", response_model=InsightListOut)
def get_insights(
    now: datetime = Depends(get_as_of),
    tenant_id: int = Depends(get_tenant_id),
    policy: AnalyticsPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> InsightListOut:
    snapshot = _snapshot(db, tenant_id, now)
    history = aggregate_monthly(snapshot.transactions, now=now, window_months=policy.history_months)
    predictions = forecast_buckets(history, now=now, policy=policy)[len(history) :]
    insights = generate_insights(history, predictions, snapshot.transactions, policy=policy)
    return InsightListOut(items=[_insight_out(row) for row in insights])


@router.get("/recurring", response_model=RecurringPatternListOut)
def get_recurring_patterns(
    now: datetime = Depends(get_as_of),
    tenant_id: int = Depends(get_tenant_id),
    policy: AnalyticsPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> RecurringPatternListOut:
    snapshot = _snapshot(db, tenant_id, now)
    patterns = detect_recurring_patterns(snapshot.transactions, policy=policy)
    return RecurringPatternListOut(
        items=[
            RecurringPatternOut(
                description_key=row.description_key,
                description=row.description,
                category_id=row.category_id,
                category_name=row.category_name,
                amount=money(row.amount),
                frequency=row.frequency,
                occurrence_count=row.occurrence_count,
                last_date=row.last_date,
                next_expected_date=row.next_expected_date,
                confidence=row.confidence,
            )
            for row in patterns
        ]
    )


@router.get("/budget-suggestions", response_model=BudgetSuggestionListOut)
def get_budget_suggestions(
    now: datetime = Depends(get_as_of),
    tenant_id: int = Depends(get_tenant_id),
    policy: AnalyticsPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> BudgetSuggestionListOut:
    snapshot = _snapshot(db, tenant_id, now)
    suggestions = recommend_budgets(
        snapshot.transactions,
        now=now,
        existing_budgets=snapshot.budgets,
        categories=snapshot.categories,
        policy=policy,
    )
    return BudgetSuggestionListOut(
        items=[
            BudgetSuggestionOut(
                category_id=row.category_id,
                category_name=row.category_name,
                suggested_amount=row.suggested_amount,
                current_average_spending=money(row.current_average_spending),
                confidence_band=row.confidence_band,
                reasoning=row.reasoning,
            )
            for row in suggestions
        ]
    )
