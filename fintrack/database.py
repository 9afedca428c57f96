"""Database models and session management"""
from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy import (
    Column, String, Text, Numeric, Date, DateTime, ForeignKey, Index, Integer,
    create_engine,
)
from sqlalchemy.dialects.postgresql import UUID as PostgresUUID
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from sqlalchemy.pool import StaticPool
from fintrack.config import settings
from fintrack.logger import create_logger

logger = create_logger("database")

Base = declarative_base()

IS_SQLITE = settings.database_url.startswith("sqlite")


def _utc_now():
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


# Use String for SQLite, UUID for PostgreSQL
def UUIDColumn():
    """Return appropriate UUID primary key column type based on database"""
    if IS_SQLITE:
        return Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    else:
        return Column(PostgresUUID(as_uuid=True), primary_key=True, default=uuid4)


def UserForeignKey():
    """user_id column shared by every per-user table"""
    return Column(String(255), ForeignKey("users.id"), nullable=False, index=True)


class User(Base):
    """User model - local accounts or subjects from the identity provider"""
    __tablename__ = "users"

    # Identity-provider subjects are not UUIDs, so ids are plain strings
    id = Column(String(255), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(255), unique=True, nullable=True, index=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    profile_image_url = Column(String(500))
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    # Relationships
    settings = relationship("UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan")
    income = relationship("Income", back_populates="user", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")


class UserSettings(Base):
    """Per-user financial-year boundaries and display currency"""
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, unique=True, index=True)
    financial_year_start = Column(String(5), nullable=False, default="04-01")  # MM-DD
    financial_year_end = Column(String(5), nullable=False, default="03-31")  # MM-DD
    currency = Column(String(10), nullable=False, default="USD")
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    user = relationship("User", back_populates="settings")


class IncomeCategory(Base):
    """Income category (single level)"""
    __tablename__ = "income_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    income_earner_name = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    income = relationship("Income", back_populates="category")


class ExpenseCategory(Base):
    """Top-level expense category"""
    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    subcategories = relationship("ExpenseSubcategory", back_populates="category", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="category")


class ExpenseSubcategory(Base):
    """Second-level expense category, child of ExpenseCategory"""
    __tablename__ = "expense_subcategories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    category = relationship("ExpenseCategory", back_populates="subcategories")
    expenses = relationship("Expense", back_populates="subcategory")


class PaymentMethod(Base):
    """Tender type used for a transaction (cash, card, UPI, ...)"""
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)


class Income(Base):
    """Income record. financial_year/month are derived from date on write."""
    __tablename__ = "income"

    id = UUIDColumn()
    user_id = UserForeignKey()
    category_id = Column(Integer, ForeignKey("income_categories.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=False)
    financial_year = Column(String(10), nullable=False)
    month = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    # Relationships
    user = relationship("User", back_populates="income")
    category = relationship("IncomeCategory", back_populates="income")
    payment_method = relationship("PaymentMethod")

    __table_args__ = (
        Index("idx_income_user_period", "user_id", "financial_year", "month"),
        Index("idx_income_user_date", "user_id", "date"),
    )


class Expense(Base):
    """Expense record. financial_year/month are derived from date on write."""
    __tablename__ = "expenses"

    id = UUIDColumn()
    user_id = UserForeignKey()
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    subcategory_id = Column(Integer, ForeignKey("expense_subcategories.id"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=False)
    financial_year = Column(String(10), nullable=False)
    month = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    # Relationships
    user = relationship("User", back_populates="expenses")
    category = relationship("ExpenseCategory", back_populates="expenses")
    subcategory = relationship("ExpenseSubcategory", back_populates="expenses")
    payment_method = relationship("PaymentMethod")

    __table_args__ = (
        Index("idx_expenses_user_period", "user_id", "financial_year", "month"),
        Index("idx_expenses_user_date", "user_id", "date"),
        Index("idx_expenses_user_category", "user_id", "category_id"),
    )


# Database engine and session
connect_args = {}
engine_kwargs = {}
if IS_SQLITE:
    connect_args = {"check_same_thread": False}
    if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
        # In-memory databases live on a single connection
        engine_kwargs["poolclass"] = StaticPool
engine = create_engine(settings.database_url, echo=False, connect_args=connect_args, **engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready", {"sqlite": IS_SQLITE})
