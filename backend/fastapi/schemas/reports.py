"""
Report Pydantic schemas.

Daily aggregates, reconstructed revenue summaries, washer payment
summaries and reconciliation results. Monetary values are rounded to
2 decimal places before they reach these models.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict

from backend.fastapi.schemas.branch import BranchBrief
from backend.fastapi.schemas.washer import WasherBrief


ZERO = Decimal("0.00")


class WasherDailySummaryRead(BaseModel):
    """Per-washer daily aggregate row."""

    id: UUID
    washer: WasherBrief
    branch_id: UUID
    date: date
    total_jobs: int = Field(..., description="Jobs the washer was credited on")
    total_items: int = Field(..., description="Line items credited to the washer")

    model_config = ConfigDict(from_attributes=True)


class WasherDailySummaryList(BaseModel):
    date: date
    summaries: List[WasherDailySummaryRead]
    count: int


class BranchDailySummaryRead(BaseModel):
    """Per-branch daily aggregate row (zeros when nothing was recorded)."""

    branch_id: UUID
    date: date
    total_jobs: int = 0
    total_items: int = 0

    model_config = ConfigDict(from_attributes=True)


class ItemBreakdown(BaseModel):
    """Revenue of one service item within a day."""

    service_item: str = Field(..., description="Service item name")
    quantity: int = Field(..., description="Number of lines")
    total_earnings: Decimal = Field(..., description="Sum of effective prices")
    company_share: Decimal
    washer_share: Decimal


class PaymentMethodTotals(BaseModel):
    """Job totals bucketed by payment method."""

    cash: Decimal = ZERO
    transfer: Decimal = ZERO


class SummaryTotals(BaseModel):
    total_sales: Decimal = Field(..., description="Sum of line item prices")
    company_earnings: Decimal
    washer_earnings: Decimal
    total_jobs: int
    total_items: int
    payment_methods: PaymentMethodTotals


class BranchSummary(SummaryTotals):
    """Revenue summary of one branch for one day, rebuilt from line items."""

    branch: BranchBrief
    date: date
    items_breakdown: List[ItemBreakdown]


class AllBranchesSummary(BaseModel):
    """Revenue summary of every active branch plus the overall totals."""

    date: date
    branches: List[BranchSummary]
    overall_totals: SummaryTotals


class WasherPaymentLine(BaseModel):
    """One line item credited to a washer."""

    line_item_id: UUID
    wash_job_id: UUID
    car_number: Optional[str] = None
    service_item: str
    price: Decimal
    company_share: Decimal
    washer_share: Decimal
    washed_at: datetime


class WasherPaymentSummary(BaseModel):
    """Earnings of one washer for one day."""

    washer: WasherBrief
    total_amount: Decimal = Field(..., description="Sum of prices of the washer's lines")
    washer_earnings: Decimal
    company_earnings: Decimal
    items_washed: int
    jobs_count: int = Field(..., description="Distinct jobs the washer was credited on")
    items: List[WasherPaymentLine]


class PaymentTotals(BaseModel):
    total_amount: Decimal
    washer_earnings: Decimal
    company_earnings: Decimal
    items_washed: int


class DailyPaymentSummary(BaseModel):
    """Per-washer earnings for a branch day, highest earner first."""

    date: date
    branch: BranchBrief
    washers: List[WasherPaymentSummary]
    totals: PaymentTotals


class CompanyPaymentSummary(BaseModel):
    """Company-side view of a branch day."""

    date: date
    branch: BranchBrief
    total_revenue: Decimal
    company_earnings: Decimal
    washer_earnings: Decimal
    total_jobs: int
    total_items: int
    payment_methods: PaymentMethodTotals


class SummaryMismatch(BaseModel):
    """An aggregate row that disagrees with the line items."""

    scope: str = Field(..., description="'washer' or 'branch'")
    washer: Optional[WasherBrief] = None
    stored_jobs: int
    stored_items: int
    expected_jobs: int
    expected_items: int


class ReconciliationReport(BaseModel):
    date: date
    branch_id: UUID
    is_consistent: bool
    mismatches: List[SummaryMismatch]


class RebuildResult(BaseModel):
    """Outcome of rewriting a day's aggregate rows."""

    date: date
    branch_id: UUID
    washer_rows: int = Field(..., description="Per-washer rows written")
    branch_rows: int = Field(..., description="Per-branch rows written")
