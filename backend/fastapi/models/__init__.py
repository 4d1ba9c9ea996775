from backend.fastapi.models.branch import Branch
from backend.fastapi.models.user import User, UserRole
from backend.fastapi.models.washer import Washer
from backend.fastapi.models.service_item import ServiceItem
from backend.fastapi.models.wash_job import WashJob, LineItem, PaymentMethod, wash_job_washers
from backend.fastapi.models.daily_summary import WasherDailySummary, BranchDailySummary
