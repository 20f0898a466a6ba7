# Overview: Service-layer operations for e-documents (e-fatura, e-arsiv, e-irsaliye ...) and their audit log.

"""
E-document lifecycle:

    draft --send--> pending --check-status--> approved
    draft | pending --cancel--> cancelled

Every transition appends an e_document_logs row (action, status before
and after, gateway message). Documents reference a sale or a return and
copy its amounts; at most one non-cancelled document of each type may
exist per reference.
"""

from __future__ import annotations

from ..extensions import db
from ..models import EDocument, EDocumentLog, Sale, Return
from ..constants import E_DOCUMENT_PREFIXES, INVOICE_DOCUMENT_TYPES
from ..errors import BusinessRuleError
from ..time_utils import utcnow
from . import gib_service
from .numbering import next_document_number
from .pagination import like_pattern, paginate
from .scope import get_scoped, scoped


NOT_FOUND = "e-Belge bulunamadi"
FALLBACK_PREFIX = "DOC"
DOCUMENT_NUMBER_WIDTH = 6
TERMINAL_STATUSES = ("approved", "rejected", "cancelled")

DOCUMENT_SORTABLE = {
    "created_at": EDocument.created_at,
    "issue_date": EDocument.issue_date,
    "total_amount": EDocument.total_amount,
    "document_number": EDocument.document_number,
}


def get_document(tenant_id, document_id) -> EDocument:
    return get_scoped(EDocument, tenant_id, document_id, NOT_FOUND)


def list_documents(tenant_id, params: dict) -> dict:
    query = scoped(EDocument, tenant_id)
    for key in ("document_type", "status", "reference_type"):
        if params.get(key):
            query = query.filter(getattr(EDocument, key) == params[key])
    if params.get("start_date"):
        query = query.filter(db.func.date(EDocument.issue_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(EDocument.issue_date) <= params["end_date"])
    if params.get("search"):
        query = query.filter(EDocument.document_number.ilike(like_pattern(params["search"]), escape="\\"))
    return paginate(query, params, DOCUMENT_SORTABLE)


def _log(document: EDocument, action: str, status_before: str | None, message: str) -> None:
    db.session.add(EDocumentLog(
        tenant_id=document.tenant_id,
        document_id=document.id,
        action=action,
        status_before=status_before,
        status_after=document.status,
        message=message,
    ))


def _reference(tenant_id, reference_type: str, reference_id):
    """
    Resolve the referenced sale or return.

    Returns (record, customer, (net, vat, total), lines) where lines are
    ready for the XML builders. Return lines carry no VAT rate of their own.
    """
    if reference_type == "sale":
        sale = get_scoped(Sale, tenant_id, reference_id, "Satis bulunamadi")
        lines = [_line(item, item.vat_rate) for item in sale.items]
        return sale, sale.customer, (sale.subtotal, sale.vat_total, sale.grand_total), lines
    if reference_type == "return":
        doc = get_scoped(Return, tenant_id, reference_id, "Iade bulunamadi")
        vat_total = doc.vat_total or 0
        lines = [_line(item, 0) for item in doc.items]
        return doc, doc.customer, (doc.total_amount - vat_total, vat_total, doc.total_amount), lines
    raise BusinessRuleError("Referans belge bulunamadi")


def _line(item, vat_rate) -> gib_service.DocumentLine:
    return gib_service.DocumentLine(
        name=item.product.name if item.product else None,
        quantity=item.quantity,
        unit_price=item.unit_price,
        vat_rate=vat_rate or 0,
    )


def create_document(tenant_id, data: dict) -> EDocument:
    document_type = data["document_type"]
    reference, customer, (net, vat, total), lines = _reference(
        tenant_id, data["reference_type"], data["reference_id"]
    )

    existing = (
        scoped(EDocument, tenant_id)
        .filter(
            EDocument.reference_type == data["reference_type"],
            EDocument.reference_id == reference.id,
            EDocument.document_type == document_type,
            EDocument.status != "cancelled",
        )
        .first()
    )
    if existing is not None:
        raise BusinessRuleError(f"Bu referans icin zaten bir {document_type} belgesi mevcut")

    prefix = E_DOCUMENT_PREFIXES.get(document_type, FALLBACK_PREFIX)
    number = next_document_number(EDocument.document_number, prefix, width=DOCUMENT_NUMBER_WIDTH)
    issue_date = utcnow()

    customer_name = customer.name if customer else None
    if document_type == "e_irsaliye":
        xml_content = gib_service.waybill_xml(
            number, issue_date, customer_name, customer.address if customer else None, lines,
        )
    else:
        xml_content = gib_service.invoice_xml(
            number, issue_date, customer_name, customer.tax_number if customer else None,
            lines, total, vat,
        )

    document = EDocument(
        tenant_id=tenant_id,
        document_type=document_type,
        document_number=number,
        reference_type=data["reference_type"],
        reference_id=reference.id,
        customer_id=customer.id if customer else None,
        issue_date=issue_date,
        amount=net,
        vat_amount=vat,
        total_amount=total,
        status="draft",
        xml_content=xml_content,
    )
    db.session.add(document)
    db.session.flush()
    _log(document, "created", None, "Belge olusturuldu")

    if data["reference_type"] == "sale" and document_type in INVOICE_DOCUMENT_TYPES:
        reference.invoice_issued = True

    db.session.commit()
    return document


def send_document(tenant_id, document_id) -> EDocument:
    document = get_document(tenant_id, document_id)
    if document.status != "draft":
        raise BusinessRuleError("Sadece taslak belgeler gonderilebilir")

    result = gib_service.send_document(document.document_type, document.xml_content or "")
    before = document.status
    document.status = "pending" if result.success else "draft"
    document.gib_uuid = result.gib_uuid
    document.envelope_uuid = result.envelope_uuid
    document.gib_response_code = result.response_code
    document.gib_response_message = result.response_message
    document.sent_at = utcnow() if result.success else None
    _log(document, "sent" if result.success else "send_failed", before, result.response_message)

    db.session.commit()
    return document


def check_document_status(tenant_id, document_id) -> EDocument:
    """Poll the gateway; documents in a terminal state come back unchanged."""
    document = get_document(tenant_id, document_id)
    if not document.gib_uuid:
        raise BusinessRuleError("Belge henuz gonderilmemis")
    if document.status in TERMINAL_STATUSES:
        return document

    result = gib_service.check_status(document.gib_uuid)
    before = document.status
    document.status = result.status
    document.gib_response_code = result.response_code
    document.gib_response_message = result.response_message
    document.approved_at = utcnow() if result.status == "approved" else None
    _log(document, "status_checked", before, result.response_message)

    db.session.commit()
    return document


def cancel_document(tenant_id, document_id) -> EDocument:
    document = get_document(tenant_id, document_id)
    if document.status not in ("draft", "pending"):
        raise BusinessRuleError("Sadece taslak veya bekleyen belgeler iptal edilebilir")

    before = document.status
    document.status = "cancelled"
    _log(document, "cancelled", before, "Belge iptal edildi")

    db.session.commit()
    return document


def summary(tenant_id) -> dict:
    def counts(column) -> dict:
        rows = scoped(EDocument, tenant_id).with_entities(column, db.func.count(EDocument.id)).group_by(column).all()
        return {key: int(n) for key, n in rows}

    return {
        "total": scoped(EDocument, tenant_id).count(),
        "by_type": counts(EDocument.document_type),
        "by_status": counts(EDocument.status),
    }
