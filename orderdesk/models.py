from decimal import Decimal

from sqlalchemy import (
    Column, Integer, String, Numeric, Text, DateTime, ForeignKey, JSON,
    Index, UniqueConstraint, func,
)
from sqlalchemy.types import TypeDecorator
from .db import Base, engine

class ExactDecimal(TypeDecorator):
    """Decimal column that keeps every digit.

    SQLite has no decimal type and would round-trip through float, so the
    value is stored as its string form there; other backends use NUMERIC.
    """
    impl = String(64)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(64))
        return dialect.type_descriptor(Numeric())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = value if isinstance(value, Decimal) else Decimal(str(value))
        return str(value) if dialect.name == "sqlite" else value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value if isinstance(value, Decimal) else Decimal(str(value))

class ProductType(Base):
    __tablename__ = "product_types"
    id = Column(Integer, primary_key=True)
    name = Column(String(128), unique=True, nullable=False)

class SubCategory(Base):
    __tablename__ = "sub_categories"
    id = Column(Integer, primary_key=True)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    # unique per product type, not globally
    __table_args__ = (UniqueConstraint("product_type_id", "name", name="uq_sub_categories_type_name"),)

class ColorIncrement(Base):
    __tablename__ = "color_increments"
    id = Column(Integer, primary_key=True)
    color = Column(String(64), unique=True, nullable=False)
    percent_increment = Column(ExactDecimal, nullable=False)

class Customer(Base):
    __tablename__ = "customers"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(64))
    address = Column(Text)
    __table_args__ = (Index("uq_customers_name_ci", func.lower(name), unique=True),)

class PriceList(Base):
    __tablename__ = "price_lists"
    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=True, index=True)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"), nullable=True)
    price_per_sqm = Column(ExactDecimal, nullable=False)
    __table_args__ = (Index("ix_price_lists_type_sub", "product_type_id", "sub_category_id"),)

class Worker(Base):
    __tablename__ = "workers"
    id = Column(Integer, primary_key=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    # passlib hash; rows written before hashing was introduced may still hold the plain code
    access_code = Column(String(255), nullable=False)

class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_name = Column(String(255), nullable=False)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    dimensions = Column(String(64), nullable=False)
    color = Column(String(64), nullable=False)
    custom_notes = Column(Text)
    phone = Column(String(64))
    address = Column(Text)
    barcode = Column(String(32), unique=True, nullable=False)
    price_total = Column(ExactDecimal, nullable=False)
    manual_price = Column(ExactDecimal, nullable=True)
    status = Column(String(64), nullable=False, default="pending")
    assigned_worker_id = Column(Integer, ForeignKey("workers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

class WorkStatus(Base):
    __tablename__ = "work_statuses"
    id = Column(Integer, primary_key=True)
    product_type_id = Column(Integer, ForeignKey("product_types.id", ondelete="CASCADE"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id", ondelete="CASCADE"), nullable=True)
    status_list = Column(JSON, nullable=False, default=list)
    # one list per pair; rows without a sub-category are kept single by the upsert in routers/work_statuses.py
    __table_args__ = (UniqueConstraint("product_type_id", "sub_category_id", name="uq_work_statuses_type_sub"),)

# Make sure the tables exist at startup
def ensure_tables(_engine=engine):
    Base.metadata.create_all(bind=_engine)
