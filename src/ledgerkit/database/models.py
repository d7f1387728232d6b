"""SQLAlchemy models for the ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Enum,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from ledgerkit.domain.entities import AccountType

Base = declarative_base()


class Tenant(Base):
    """Owning principal (agent) model."""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Currency(Base):
    """Currency model; amounts are stored in its minor unit."""

    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    code = Column(String, unique=True, nullable=False)
    symbol = Column(String, nullable=False)
    fractional_part_name = Column(String, nullable=False)
    part_fraction = Column(Integer, nullable=False, default=100)


class Account(Base):
    """Own or counterparty account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(Enum(AccountType), nullable=False)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    description = Column(String, nullable=True)

    currency = relationship("Currency")


class MeasureUnit(Base):
    """Measure unit model."""

    __tablename__ = "measure_units"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_tenant_unit_name"),)


class Category(Base):
    """Category model with hierarchical structure."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    products = relationship("Product", back_populates="category")


class Product(Base):
    """Product or service model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    unit_id = Column(Integer, ForeignKey("measure_units.id"), nullable=True)
    piece_size_unit_id = Column(Integer, ForeignKey("measure_units.id"), nullable=True)

    category = relationship("Category", back_populates="products")
    unit = relationship("MeasureUnit", foreign_keys=[unit_id])
    piece_size_unit = relationship("MeasureUnit", foreign_keys=[piece_size_unit_id])


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    amount = Column(Integer, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    counterparty_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)

    account = relationship("Account", foreign_keys=[account_id])
    counterparty = relationship("Account", foreign_keys=[counterparty_id])
    details = relationship(
        "TransactionDetail",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionDetail.id",
    )


class TransactionDetail(Base):
    """Transaction line item model."""

    __tablename__ = "transaction_details"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Numeric(14, 4), nullable=False)
    price_per_unit = Column(Numeric(14, 4), nullable=False)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)

    transaction = relationship("Transaction", back_populates="details")
    product = relationship("Product")


def _unicode_lower(value):
    return value.lower() if value is not None else None


def _register_sqlite_functions(dbapi_connection, connection_record):
    # Built-in lower() only folds ASCII letters
    dbapi_connection.create_function("lower", 1, _unicode_lower)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _register_sqlite_functions)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
