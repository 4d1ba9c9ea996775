from backend.fastapi.schemas.branch import (
    BranchBase,
    BranchCreate,
    BranchUpdate,
    BranchBrief,
    BranchRead,
    BranchWithStats,
    BranchListResponse
)
from backend.fastapi.schemas.user import (
    UserBase,
    UserCreate,
    UserLogin,
    PasswordChange,
    UserRead,
    UserTokenResponse
)
from backend.fastapi.schemas.washer import (
    WasherBase,
    WasherCreate,
    WasherUpdate,
    WasherBrief,
    WasherRead,
    WasherWithStats,
    WasherListResponse
)
from backend.fastapi.schemas.service_item import (
    ServiceItemBase,
    ServiceItemCreate,
    ServiceItemUpdate,
    ServiceItemBrief,
    ServiceItemRead,
    ServiceItemWithStats,
    ServiceItemListResponse
)
from backend.fastapi.schemas.wash_job import (
    LineItemRequest,
    WashJobCreate,
    LineItemRead,
    WashJobRead,
    WashJobCreated,
    WashJobListResponse
)
from backend.fastapi.schemas.reports import (
    WasherDailySummaryRead,
    WasherDailySummaryList,
    BranchDailySummaryRead,
    ItemBreakdown,
    PaymentMethodTotals,
    SummaryTotals,
    BranchSummary,
    AllBranchesSummary,
    WasherPaymentLine,
    WasherPaymentSummary,
    PaymentTotals,
    DailyPaymentSummary,
    CompanyPaymentSummary,
    SummaryMismatch,
    ReconciliationReport,
    RebuildResult
)
