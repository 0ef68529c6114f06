"""Monthly KPI reporting endpoints."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel

from api.config import Settings, get_settings
from api.middleware.errors import ValidationError
from menucost.models.reports import KpiSummary, MonthlyKpi
from menucost.models.snapshot import KpiSnapshot
from menucost.services.catalog_pricing import product_unit_costs
from menucost.services.monthly_kpis import (
    SnapshotDataSource,
    build_monthly_kpis,
    kpis_to_dataframe,
    summarize_kpis,
)

router = APIRouter()


class MonthlyKpiResponse(BaseModel):
    company_id: str
    months_back: int
    kpis: List[MonthlyKpi]
    summary: KpiSummary


@router.post("/monthly-kpis", response_model=MonthlyKpiResponse)
async def monthly_kpis(
    snapshot: KpiSnapshot,
    months_back: Optional[int] = Query(default=None),
    format: str = Query(default="json", pattern="^(json|csv)$"),
    as_of: Optional[datetime] = Query(default=None, description="Reference instant, defaults to now"),
    settings: Settings = Depends(get_settings),
):
    """
    Monthly revenue, estimated cost, profit and margins for the last N months.

    Unit costs come from `product_unit_costs` when given, otherwise from the
    CMVs of the attached catalog.
    """
    if months_back is None:
        months_back = settings.default_months_back
    if months_back < 1 or months_back > settings.max_months_back:
        raise ValidationError(
            f"months_back must be between 1 and {settings.max_months_back}",
            details={"months_back": months_back},
        )

    unit_costs = snapshot.product_unit_costs
    if unit_costs is None:
        unit_costs = product_unit_costs(snapshot.catalog) if snapshot.catalog else {}

    source = SnapshotDataSource(
        sales=snapshot.sales,
        unit_costs=unit_costs,
        manual_revenue=snapshot.manual_revenue,
        company_id=snapshot.company_id,
    )
    kpis = build_monthly_kpis(snapshot.company_id, months_back, source, now=as_of)

    if format == "csv":
        csv_text = kpis_to_dataframe(kpis).to_csv()
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="kpis_{snapshot.company_id}.csv"'},
        )

    return MonthlyKpiResponse(
        company_id=snapshot.company_id,
        months_back=months_back,
        kpis=kpis,
        summary=summarize_kpis(kpis),
    )
