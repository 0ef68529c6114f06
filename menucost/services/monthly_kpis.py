"""
Monthly KPI Aggregator

Buckets historical sales into a fixed window of calendar months and computes
revenue, estimated cost, profit and margins per month.

KEY PRINCIPLES:
- Months are computed in UTC so the month boundary never drifts with the server timezone
- Every month of the window is present, zero-filled when it has no sales
- Units sold without a known unit cost are counted apart, never assumed free
- Manually entered revenue is reported next to sales revenue, never summed into it
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, TypeVar

import pandas as pd

from menucost.errors import DataSourceError, InvalidWindowError
from menucost.models.reports import KpiSummary, ManualRevenue, MonthlyKpi, Sale

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KpiDataSource(Protocol):
    """Read access to the datasets the KPI aggregation needs."""

    def fetch_sales(self, company_id: str, since: datetime) -> List[Sale]:
        ...

    def fetch_unit_costs(self, company_id: str) -> Mapping[str, Optional[float]]:
        ...

    def fetch_manual_revenue(self, company_id: str, since_year: int) -> List[ManualRevenue]:
        ...


class SnapshotDataSource:
    """KpiDataSource over an in-memory, single-company snapshot."""

    def __init__(
        self,
        sales: Iterable[Sale] = (),
        unit_costs: Optional[Mapping[str, Optional[float]]] = None,
        manual_revenue: Iterable[ManualRevenue] = (),
        company_id: Optional[str] = None,
    ):
        self.company_id = company_id
        self._sales = list(sales)
        self._unit_costs = dict(unit_costs or {})
        self._manual_revenue = list(manual_revenue)

    def _check_company(self, company_id: str) -> None:
        if self.company_id is not None and company_id != self.company_id:
            raise DataSourceError(
                f"Snapshot holds company {self.company_id}, not {company_id}",
                details={"company_id": company_id},
            )

    def fetch_sales(self, company_id: str, since: datetime) -> List[Sale]:
        self._check_company(company_id)
        return [
            sale for sale in self._sales
            if sale.sold_at is not None and to_utc(sale.sold_at) >= since
        ]

    def fetch_unit_costs(self, company_id: str) -> Mapping[str, Optional[float]]:
        self._check_company(company_id)
        return dict(self._unit_costs)

    def fetch_manual_revenue(self, company_id: str, since_year: int) -> List[ManualRevenue]:
        self._check_company(company_id)
        return [row for row in self._manual_revenue if row.year >= since_year]


def to_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_label(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_window(months_back: int, now: datetime) -> List[Tuple[int, int]]:
    """The `months_back` calendar months ending at now's month, oldest first."""
    months = []
    for offset in range(months_back - 1, -1, -1):
        index = now.year * 12 + (now.month - 1) - offset
        months.append((index // 12, index % 12 + 1))
    return months


def _fetch(name: str, fetch: Callable[[], T], empty: T) -> T:
    try:
        return fetch()
    except DataSourceError as exc:
        logger.error(f"Error fetching {name} for KPIs: {exc.message}")
        return empty


def build_monthly_kpis(
    company_id: str,
    months_back: int,
    data_source: KpiDataSource,
    now: Optional[datetime] = None,
) -> List[MonthlyKpi]:
    """
    Build the monthly KPI series of a company.

    Args:
        company_id: Company to report on
        months_back: Number of calendar months, ending with the current one
        data_source: Where sales, unit costs and manual revenue come from
        now: Reference instant (defaults to the current UTC time)

    Returns:
        Exactly `months_back` MonthlyKpi entries in chronological order

    Raises:
        InvalidWindowError: months_back < 1
    """
    if months_back < 1:
        raise InvalidWindowError(months_back)

    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    window = month_window(months_back, now)

    # 1. Zero-filled skeleton
    kpis: Dict[str, MonthlyKpi] = {}
    for year, month in window:
        label = month_label(year, month)
        kpis[label] = MonthlyKpi(year=year, month=month, label=label)

    start_year, start_month = window[0]
    since = datetime(start_year, start_month, 1, tzinfo=timezone.utc)

    # 2. Inputs
    sales = _fetch("sales", lambda: data_source.fetch_sales(company_id, since), [])
    unit_costs = _fetch("unit costs", lambda: data_source.fetch_unit_costs(company_id), {})
    manual_rows = _fetch(
        "manual revenue",
        lambda: data_source.fetch_manual_revenue(company_id, start_year),
        [],
    )

    # 3. Sales into month buckets
    dropped = 0
    for sale in sales:
        if sale.sold_at is None:
            continue

        sold_at = to_utc(sale.sold_at)
        kpi = kpis.get(month_label(sold_at.year, sold_at.month))
        if kpi is None:
            dropped += 1
            continue

        quantity = sale.quantity or 0.0
        revenue = quantity * (sale.price or 0.0)
        kpi.revenue_sales += revenue

        unit_cost = unit_costs.get(sale.product_id)
        if unit_cost is not None and unit_cost > 0:
            kpi.cost_estimated += quantity * unit_cost
        else:
            kpi.undefined_cost_qty += quantity
            kpi.undefined_cost_revenue += revenue

    # 4. Manual revenue, kept apart from sales revenue
    for row in manual_rows:
        kpi = kpis.get(month_label(row.year, row.month))
        if kpi is not None:
            kpi.revenue_manual = row.revenue or 0.0

    # 5. Profit and margins
    results = list(kpis.values())
    for kpi in results:
        kpi.profit_estimated = kpi.revenue_sales - kpi.cost_estimated
        if kpi.revenue_sales > 0:
            kpi.cmv_percent = kpi.cost_estimated / kpi.revenue_sales * 100
            kpi.margin_percent = kpi.profit_estimated / kpi.revenue_sales * 100

    logger.info(
        f"Built {len(results)} monthly KPIs for company {company_id} "
        f"from {len(sales)} sales ({dropped} outside the window)"
    )
    return results


def summarize_kpis(kpis: Iterable[MonthlyKpi]) -> KpiSummary:
    """Totals across a KPI window."""
    summary = KpiSummary()
    for kpi in kpis:
        summary.months += 1
        summary.revenue_sales += kpi.revenue_sales
        summary.revenue_manual += kpi.revenue_manual or 0.0
        summary.cost_estimated += kpi.cost_estimated
        summary.profit_estimated += kpi.profit_estimated
        summary.undefined_cost_qty += kpi.undefined_cost_qty
        summary.undefined_cost_revenue += kpi.undefined_cost_revenue

    if summary.revenue_sales > 0:
        summary.cmv_percent = summary.cost_estimated / summary.revenue_sales * 100
        summary.margin_percent = summary.profit_estimated / summary.revenue_sales * 100

    return summary


def kpis_to_dataframe(kpis: Iterable[MonthlyKpi]) -> pd.DataFrame:
    """KPI series as a DataFrame indexed by month label."""
    rows = [kpi.model_dump() for kpi in kpis]
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows).set_index("label")
