from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z, utcnow
from .common import decimal_str, new_id, uuid_str


class Return(db.Model):
    """
    Customer return (iade).

    May reference the original sale; per sale item the returned quantity
    never exceeds what was sold minus earlier returns.
    """
    __tablename__ = "returns"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    return_number = db.Column(db.String(50), nullable=False, unique=True, index=True)
    sale_id = db.Column(db.Uuid, db.ForeignKey("sales.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_id = db.Column(db.Uuid, db.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    warehouse_id = db.Column(db.Uuid, db.ForeignKey("warehouses.id", ondelete="SET NULL"), nullable=True, index=True)
    return_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    vat_total = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    reason = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=True, default="completed")
    created_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    customer = db.relationship("Customer", backref=db.backref("returns", lazy=True))
    sale = db.relationship("Sale", backref=db.backref("returns", lazy=True))
    items = db.relationship("ReturnItem", backref="return_doc", lazy=True, cascade="all, delete-orphan")

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": uuid_str(self.id),
            "return_number": self.return_number,
            "sale_id": uuid_str(self.sale_id),
            "invoice_number": self.sale.invoice_number if self.sale else None,
            "customer_id": uuid_str(self.customer_id),
            "customer_name": self.customer.name if self.customer else None,
            "warehouse_id": uuid_str(self.warehouse_id),
            "return_date": to_utc_z(self.return_date),
            "total_amount": decimal_str(self.total_amount),
            "vat_total": decimal_str(self.vat_total),
            "reason": self.reason,
            "status": self.status,
            "created_by": uuid_str(self.created_by),
            "created_at": to_utc_z(self.created_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class ReturnItem(db.Model):
    __tablename__ = "return_items"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    return_id = db.Column(db.Uuid, db.ForeignKey("returns.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Uuid, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    sale_item_id = db.Column(db.Uuid, db.ForeignKey("sale_items.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    vat_amount = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    line_total = db.Column(db.Numeric(12, 2), nullable=False)

    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "product_id": uuid_str(self.product_id),
            "product_name": self.product.name if self.product else None,
            "sale_item_id": uuid_str(self.sale_item_id),
            "quantity": self.quantity,
            "unit_price": decimal_str(self.unit_price),
            "vat_amount": decimal_str(self.vat_amount),
            "line_total": decimal_str(self.line_total),
        }


class Quote(db.Model):
    """
    Price quote (teklif).

    Lifecycle: draft -> sent -> accepted | rejected; draft, sent and
    accepted quotes can be converted into a sale exactly once.
    """
    __tablename__ = "quotes"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    quote_number = db.Column(db.String(50), nullable=False, unique=True, index=True)
    customer_id = db.Column(db.Uuid, db.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    quote_date = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)
    valid_until = db.Column(db.Date, nullable=False, index=True)
    subtotal = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    discount_amount = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    discount_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("0"))
    vat_total = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    grand_total = db.Column(db.Numeric(12, 2), nullable=False)
    include_vat = db.Column(db.Boolean, nullable=True, default=True)
    status = db.Column(db.String(20), nullable=True, default="draft", index=True)
    converted_sale_id = db.Column(db.Uuid, db.ForeignKey("sales.id", ondelete="SET NULL"), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    customer = db.relationship("Customer")
    items = db.relationship(
        "QuoteItem",
        backref="quote",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="QuoteItem.created_at",
    )

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": uuid_str(self.id),
            "quote_number": self.quote_number,
            "customer_id": uuid_str(self.customer_id),
            "customer_name": self.customer.name if self.customer else None,
            "quote_date": to_utc_z(self.quote_date),
            "valid_until": to_iso_date(self.valid_until),
            "subtotal": decimal_str(self.subtotal),
            "discount_amount": decimal_str(self.discount_amount),
            "discount_rate": decimal_str(self.discount_rate),
            "vat_total": decimal_str(self.vat_total),
            "grand_total": decimal_str(self.grand_total),
            "include_vat": self.include_vat,
            "status": self.status,
            "converted_sale_id": uuid_str(self.converted_sale_id),
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class QuoteItem(db.Model):
    __tablename__ = "quote_items"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    quote_id = db.Column(db.Uuid, db.ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Uuid, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    discount_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("0"))
    vat_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("0"))
    vat_amount = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    line_total = db.Column(db.Numeric(12, 2), nullable=False)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "product_id": uuid_str(self.product_id),
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": decimal_str(self.unit_price),
            "discount_rate": decimal_str(self.discount_rate),
            "vat_rate": decimal_str(self.vat_rate),
            "vat_amount": decimal_str(self.vat_amount),
            "line_total": decimal_str(self.line_total),
        }


class EDocument(db.Model):
    """
    Electronic tax document (e-Fatura, e-Arsiv, ...) prepared for the
    revenue administration (GIB).

    Lifecycle: draft -> pending (sent) -> approved | rejected; draft and
    pending documents can be cancelled.
    """
    __tablename__ = "e_documents"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    document_type = db.Column(db.String(30), nullable=False, index=True)
    document_number = db.Column(db.String(50), nullable=False, unique=True, index=True)
    gib_uuid = db.Column(db.String(50), nullable=True, index=True)
    reference_type = db.Column(db.String(20), nullable=False, index=True)
    reference_id = db.Column(db.Uuid, nullable=False, index=True)
    customer_id = db.Column(db.Uuid, db.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    issue_date = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    vat_amount = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(db.String(20), nullable=True, default="draft", index=True)
    gib_response_code = db.Column(db.String(10), nullable=True)
    gib_response_message = db.Column(db.Text, nullable=True)
    envelope_uuid = db.Column(db.String(50), nullable=True)
    xml_content = db.Column(db.Text, nullable=True)
    pdf_path = db.Column(db.String(255), nullable=True)
    sent_at = db.Column(db.DateTime, nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    customer = db.relationship("Customer")
    logs = db.relationship(
        "EDocumentLog",
        backref="document",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="EDocumentLog.created_at",
    )

    def to_dict(self, include_logs: bool = False, include_xml: bool = False) -> dict:
        data = {
            "id": uuid_str(self.id),
            "document_type": self.document_type,
            "document_number": self.document_number,
            "gib_uuid": self.gib_uuid,
            "reference_type": self.reference_type,
            "reference_id": uuid_str(self.reference_id),
            "customer_id": uuid_str(self.customer_id),
            "customer_name": self.customer.name if self.customer else None,
            "issue_date": to_utc_z(self.issue_date),
            "amount": decimal_str(self.amount),
            "vat_amount": decimal_str(self.vat_amount),
            "total_amount": decimal_str(self.total_amount),
            "status": self.status,
            "gib_response_code": self.gib_response_code,
            "gib_response_message": self.gib_response_message,
            "envelope_uuid": self.envelope_uuid,
            "pdf_path": self.pdf_path,
            "sent_at": to_utc_z(self.sent_at),
            "approved_at": to_utc_z(self.approved_at),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_xml:
            data["xml_content"] = self.xml_content
        if include_logs:
            data["logs"] = [log.to_dict() for log in self.logs]
        return data


class EDocumentLog(db.Model):
    __tablename__ = "e_document_logs"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    document_id = db.Column(db.Uuid, db.ForeignKey("e_documents.id", ondelete="CASCADE"), nullable=False, index=True)
    action = db.Column(db.String(30), nullable=False, index=True)
    status_before = db.Column(db.String(20), nullable=True)
    status_after = db.Column(db.String(20), nullable=True)
    message = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "action": self.action,
            "status_before": self.status_before,
            "status_after": self.status_after,
            "message": self.message,
            "created_at": to_utc_z(self.created_at),
        }
