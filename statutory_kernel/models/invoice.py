"""
Invoices, invoice items and contacts, as read by the VAT module.

Invoice creation and editing live outside this engine; these mappings only
describe the columns the VAT return, the control report and the
cross-checks read.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from statutory_kernel.db.base import Base, SoftDeleteMixin, UUIDString


class Contact(SoftDeleteMixin, Base):
    """Business partner; ``ic_dph`` is the VAT id reported in KV DPH."""

    __tablename__ = "contacts"

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    ico: Mapped[str | None] = mapped_column(String(20), nullable=True)
    dic: Mapped[str | None] = mapped_column(String(20), nullable=True)
    ic_dph: Mapped[str | None] = mapped_column(String(20), nullable=True)


class Invoice(SoftDeleteMixin, Base):
    """
    Invoice header.

    ``invoice_type`` holds the Slovak document kind (``vydana``, ``prijata``,
    ``dobropis``, ``proforma``, ``zalohova``); ``status`` ``stornovana``
    marks a cancelled document.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        Index("idx_invoice_company_issue", "company_id", "issue_date"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    contact_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("contacts.id"),
        nullable=True,
    )

    number: Mapped[str] = mapped_column(String(50), nullable=False)
    invoice_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    issue_date: Mapped[date] = mapped_column(nullable=False)

    subtotal: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    vat_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    reverse_charge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    items: Mapped[list["InvoiceItem"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )
    contact: Mapped["Contact | None"] = relationship()


class InvoiceItem(Base):
    """Invoice line; one VAT rate per item."""

    __tablename__ = "invoice_items"

    invoice_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("invoices.id"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(nullable=False, default=0)
    vat_rate: Mapped[Decimal] = mapped_column(nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(nullable=False)
    vat_amount: Mapped[Decimal] = mapped_column(nullable=False)
    total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    invoice: Mapped["Invoice"] = relationship(back_populates="items")
