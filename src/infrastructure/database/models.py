# pylint: disable=too-few-public-methods
"""
SQLAlchemy database models for the Kingsman storefront

Translatable catalog fields are JSON columns holding either a legacy plain
string or a {"en", "ar", "he"} mapping.
"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

MONEY = Numeric(12, 2, asdecimal=True)


class Base(DeclarativeBase):
    """Declarative base for all storefront tables"""


class Customer(Base):
    """Customer model"""
    __tablename__ = "customers"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    orders: Mapped[List["Order"]] = relationship("Order", back_populates="customer")


class Product(Base):
    """Product model"""
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[Any] = mapped_column(JSON, nullable=False)
    description: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    price: Mapped[Any] = mapped_column(MONEY, nullable=False)
    sale: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sale_price: Mapped[Optional[Any]] = mapped_column(MONEY, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True
    )


class Coupon(Base):
    """Discount code model"""
    __tablename__ = "coupons"

    code: Mapped[str] = mapped_column(String(64), primary_key=True)
    discount_percentage: Mapped[Any] = mapped_column(MONEY, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    # -1 means unlimited
    uses_left: Mapped[int] = mapped_column(Integer, default=-1, nullable=False)

    usages: Mapped[List["CouponUsage"]] = relationship(
        "CouponUsage", back_populates="coupon", cascade="all, delete-orphan"
    )


class CouponUsage(Base):
    """One redemption of a coupon by a user"""
    __tablename__ = "coupon_usages"
    __table_args__ = (UniqueConstraint("code", "uid", name="uq_coupon_usage_code_uid"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), ForeignKey("coupons.code"), nullable=False)
    uid: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    used_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    coupon: Mapped["Coupon"] = relationship("Coupon", back_populates="usages")


class Order(Base):
    """Order model"""
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), ForeignKey("customers.uid"), nullable=False, index=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    subtotal_before_discount: Mapped[Any] = mapped_column(MONEY, nullable=False)
    discount_amount: Mapped[Any] = mapped_column(MONEY, default=0, nullable=False)
    discount_percentage: Mapped[Any] = mapped_column(MONEY, default=0, nullable=False)
    discount_type: Mapped[str] = mapped_column(String(20), default="none", nullable=False)
    subtotal: Mapped[Any] = mapped_column(MONEY, nullable=False)
    tax: Mapped[Any] = mapped_column(MONEY, nullable=False)
    delivery_cost: Mapped[Any] = mapped_column(MONEY, default=0, nullable=False)
    total: Mapped[Any] = mapped_column(MONEY, nullable=False)
    coupon_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    delivery_type: Mapped[str] = mapped_column(String(20), default="pickup", nullable=False)
    delivery_zone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    shipping_address: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    language: Mapped[str] = mapped_column(String(5), default="en", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    customer: Mapped["Customer"] = relationship("Customer", back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin"
    )


class OrderItem(Base):
    """Order item model"""
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Any] = mapped_column(MONEY, nullable=False)
    options: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="items")


class FailedOrder(Base):
    """Audit record of a payment/order flow that ended abnormally"""
    __tablename__ = "failed_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    transaction_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    order_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    error: Mapped[str] = mapped_column(Text, nullable=False)
    error_details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    amount: Mapped[Any] = mapped_column(MONEY, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False, index=True)
    comment: Mapped[str] = mapped_column(Text, default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
