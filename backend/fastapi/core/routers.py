from fastapi import FastAPI
from backend.fastapi.api.v1.endpoints import base, auth, branch, washer, service_item, records, payments

def setup_routers(app: FastAPI):
    # Main routes
    app.include_router(base.router, prefix="", tags=["main"])

    # Authentication routes
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["authentication"])

    # Branch management routes (super admin)
    app.include_router(branch.router, prefix="/api/v1/branches", tags=["branch-management"])

    # Branch washers and the global service item catalogue
    app.include_router(washer.router, prefix="/api/v1/washers", tags=["washer-management"])
    app.include_router(service_item.router, prefix="/api/v1/service-items", tags=["service-items"])

    # Wash records, daily counters and revenue summaries
    app.include_router(records.router, prefix="/api/v1/records", tags=["records"])

    # Washer and company payments
    app.include_router(payments.router, prefix="/api/v1/payments", tags=["payments"])
