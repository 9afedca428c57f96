"""Household finance tracker - REST API"""
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from fintrack.auth import get_current_user_id
from fintrack.config import settings
from fintrack.database import SessionLocal, get_db, init_db
from fintrack.errors import AuthenticationError, RecordNotFoundError, ValidationError
from fintrack.logger import create_logger
from fintrack.schemas import (
    DashboardSummary,
    ExpenseCategoryCreate,
    ExpenseCategoryRead,
    ExpenseCreate,
    ExpenseRead,
    ExpenseSubcategoryCreate,
    ExpenseSubcategoryRead,
    FinancialYearReport,
    IncomeCategoryCreate,
    IncomeCategoryRead,
    IncomeCreate,
    IncomeRead,
    LoginRequest,
    MonthlyOverview,
    PaymentMethodCreate,
    PaymentMethodRead,
    RegisterRequest,
    TokenResponse,
    UserRead,
    UserSettingsRead,
    UserSettingsUpdate,
)
from fintrack.security import create_access_token
from fintrack.services import catalog, dashboard, records, users

load_dotenv()

# Create logger for main module
logger = create_logger("main")

# Validate production settings on startup
settings.validate_production_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    db = SessionLocal()
    try:
        catalog.seed_default_catalog(db)
    finally:
        db.close()
    logger.info("API ready", {"database": settings.database_url.split(":", 1)[0]})
    yield


app = FastAPI(title="fintrack", lifespan=lifespan)

# Add CORS middleware with configurable origins
_allowed_origins = [
    origin.strip()
    for origin in settings.allowed_origins.split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================================
# ERROR MAPPING
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse({"error": str(exc)}, status_code=404)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse({"error": str(exc)}, status_code=401)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", {
        "path": request.url.path,
        "method": request.method,
        "error": str(exc),
        "error_class": type(exc).__name__,
    })
    return JSONResponse({"error": str(exc)}, status_code=500)


# ============================================================================
# HEALTH / AUTH
# ============================================================================

@app.get("/health")
def health():
    return {"status": "healthy"}


@app.post("/api/auth/register", response_model=TokenResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a local account and return a bearer token"""
    user = users.register_user(db, payload)
    return TokenResponse(user=user, token=create_access_token(user.id, user.email))


@app.post("/api/auth/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = users.authenticate_user(db, payload.email, payload.password)
    return TokenResponse(user=user, token=create_access_token(user.id, user.email))


@app.get("/api/auth/user", response_model=UserRead)
def current_user(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return users.get_user(db, user_id)


# ============================================================================
# USER SETTINGS
# ============================================================================

@app.get("/api/user-settings", response_model=UserSettingsRead)
def read_user_settings(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Current settings; defaults are created on first read"""
    return users.get_or_create_user_settings(db, user_id)


@app.put("/api/user-settings", response_model=UserSettingsRead)
def write_user_settings(
    payload: UserSettingsUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return users.update_user_settings(db, user_id, payload)


# ============================================================================
# CATALOG
# ============================================================================

@app.get("/api/income-categories", response_model=List[IncomeCategoryRead])
def get_income_categories(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return catalog.list_income_categories(db)


@app.post("/api/income-categories", response_model=IncomeCategoryRead)
def post_income_category(
    payload: IncomeCategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return catalog.create_income_category(db, payload)


@app.get("/api/expense-categories", response_model=List[ExpenseCategoryRead])
def get_expense_categories(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return catalog.list_expense_categories(db)


@app.post("/api/expense-categories", response_model=ExpenseCategoryRead)
def post_expense_category(
    payload: ExpenseCategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return catalog.create_expense_category(db, payload)


@app.get("/api/expense-subcategories", response_model=List[ExpenseSubcategoryRead])
def get_expense_subcategories(
    category_id: Optional[int] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return catalog.list_expense_subcategories(db, category_id)


@app.post("/api/expense-subcategories", response_model=ExpenseSubcategoryRead)
def post_expense_subcategory(
    payload: ExpenseSubcategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return catalog.create_expense_subcategory(db, payload)


@app.get("/api/payment-methods", response_model=List[PaymentMethodRead])
def get_payment_methods(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return catalog.list_payment_methods(db)


@app.post("/api/payment-methods", response_model=PaymentMethodRead)
def post_payment_method(
    payload: PaymentMethodCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return catalog.create_payment_method(db, payload)


# ============================================================================
# INCOME / EXPENSES
# ============================================================================

@app.get("/api/income", response_model=List[IncomeRead])
def get_income(
    limit: Optional[int] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return records.list_income(db, user_id, limit)


@app.post("/api/income", response_model=IncomeRead)
def post_income(
    payload: IncomeCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record income; financial_year and month are derived from the date"""
    return records.create_income(db, user_id, payload)


@app.get("/api/expenses", response_model=List[ExpenseRead])
def get_expenses(
    limit: Optional[int] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return records.list_expenses(db, user_id, limit)


@app.post("/api/expenses", response_model=ExpenseRead)
def post_expense(
    payload: ExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record an expense; financial_year and month are derived from the date"""
    return records.create_expense(db, user_id, payload)


# ============================================================================
# DASHBOARD
# ============================================================================

@app.get("/api/dashboard/summary", response_model=DashboardSummary)
def get_dashboard_summary(
    month: Optional[str] = Query(default=None),
    year: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Totals and top categories; month/year default to the current financial period"""
    return dashboard.get_dashboard_summary(db, user_id, month=month, financial_year=year)


@app.get("/api/dashboard/monthly", response_model=MonthlyOverview)
def get_monthly_overview(
    year: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return dashboard.get_monthly_overview(db, user_id, financial_year=year)


# ============================================================================
# REPORTS
# ============================================================================

def _require_dates(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date is None or end_date is None:
        raise ValidationError("Start date and end date are required")


@app.get("/api/reports/income", response_model=List[IncomeRead])
def get_income_report(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    _require_dates(start_date, end_date)
    return records.income_by_date_range(db, user_id, start_date, end_date)


@app.get("/api/reports/expenses", response_model=List[ExpenseRead])
def get_expenses_report(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    _require_dates(start_date, end_date)
    return records.expenses_by_date_range(db, user_id, start_date, end_date)


@app.get("/api/reports/financial-year", response_model=FinancialYearReport)
def get_financial_year_report(
    year: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return dashboard.get_financial_year_report(db, user_id, financial_year=year)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
