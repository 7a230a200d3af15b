from fastapi import APIRouter

from backoffice.api.routes import auth, bookings, dashboard, email, health, payments, reports

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # POST /login, /login-json, GET /me
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])  # CRUD + POST /payment-webhook
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])  # GET /
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])  # GET /summary
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])  # GET /{section}
api_router.include_router(email.router, prefix="/email", tags=["email"])  # POST /payment-link
