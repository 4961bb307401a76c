"""
Transaction persistence (``salon_kernel.models.transaction``).

Transactions are append-only: rows are inserted at checkout and never
updated. Customer and therapist references are denormalised onto the row,
as recorded at the time of sale.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salon_kernel.db.base import TrackedBase


class TransactionModel(TrackedBase):
    """
    ORM model for ``TransactionRecord``.

    Guarantees:
        - ``items`` load in their original order (``position``).
        - Monetary columns are Decimal (Numeric(12, 2)).
        - Enum fields store the enum .value string.
    """

    __tablename__ = "transactions"

    occurred_at: Mapped[datetime] = mapped_column(nullable=False)

    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(200), nullable=True)

    therapist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    therapist_name: Mapped[str] = mapped_column(String(200), nullable=False)
    therapist_role: Mapped[str] = mapped_column(String(32), nullable=False, default="therapist")

    subtotal: Mapped[Decimal] = mapped_column(nullable=False)
    discount: Mapped[Decimal] = mapped_column(nullable=False)
    total: Mapped[Decimal] = mapped_column(nullable=False)
    payment_method: Mapped[str] = mapped_column(String(16), nullable=False)

    discount_type: Mapped[str] = mapped_column(String(16), nullable=False, default="none")
    discount_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    voucher_code: Mapped[str | None] = mapped_column(String(64), nullable=True)

    items: Mapped[list[TransactionItemModel]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItemModel.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_transactions_occurred_at", "occurred_at"),
        Index("idx_transactions_therapist", "therapist_id", "occurred_at"),
        Index("idx_transactions_customer", "customer_id", "occurred_at"),
    )

    def to_dto(self):
        from salon_kernel.domain.records import (
            CustomerRef,
            DiscountType,
            PaymentMethod,
            TherapistRef,
            TransactionRecord,
        )
        return TransactionRecord(
            id=self.id,
            date=self.occurred_at,
            customer=CustomerRef(
                id=self.customer_id,
                name=self.customer_name,
                phone=self.customer_phone,
                email=self.customer_email,
            ),
            therapist=TherapistRef(
                id=self.therapist_id,
                name=self.therapist_name,
                role=self.therapist_role,
            ),
            items=tuple(item.to_dto() for item in self.items),
            subtotal=self.subtotal,
            discount=self.discount,
            total=self.total,
            payment_method=PaymentMethod(self.payment_method),
            discount_type=DiscountType(self.discount_type),
            discount_percentage=self.discount_percentage,
            voucher_code=self.voucher_code,
        )

    @classmethod
    def from_dto(cls, dto) -> TransactionModel:
        model = cls(
            occurred_at=dto.date,
            customer_id=dto.customer.id,
            customer_name=dto.customer.name,
            customer_phone=dto.customer.phone,
            customer_email=dto.customer.email,
            therapist_id=dto.therapist.id,
            therapist_name=dto.therapist.name,
            therapist_role=dto.therapist.role,
            subtotal=dto.subtotal,
            discount=dto.discount,
            total=dto.total,
            payment_method=dto.payment_method.value,
            discount_type=dto.discount_type.value,
            discount_percentage=dto.discount_percentage,
            voucher_code=dto.voucher_code,
            items=[
                TransactionItemModel.from_dto(item, position)
                for position, item in enumerate(dto.items)
            ],
        )
        if dto.id is not None:
            model.id = dto.id
        return model


class TransactionItemModel(TrackedBase):
    """ORM model for ``LineItem``; ``position`` preserves cart order."""

    __tablename__ = "transaction_items"

    transaction_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("transactions.id"), nullable=False, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    line_discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    transaction: Mapped[TransactionModel] = relationship(back_populates="items")

    def to_dto(self):
        from salon_kernel.domain.records import LineItem
        return LineItem(
            name=self.name,
            category=self.category,
            unit_price=self.unit_price,
            quantity=self.quantity,
            line_discount=self.line_discount,
        )

    @classmethod
    def from_dto(cls, dto, position: int) -> TransactionItemModel:
        return cls(
            position=position,
            name=dto.name,
            category=dto.category,
            unit_price=dto.unit_price,
            quantity=dto.quantity,
            line_discount=dto.line_discount,
        )
