# Overview: Mock Revenue Administration (GIB) gateway and UBL-TR XML builders for e-documents.

"""
GIB integration stand-in.

send_document() and check_status() answer the way the real gateway does
on success; no network call is made. The XML builders produce the UBL-TR
2.1 shape the gateway expects (Invoice for e-fatura / e-arsiv family,
DespatchAdvice for e-irsaliye).
"""

from __future__ import annotations

import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ..constants import DEFAULT_CURRENCY
from .pricing import money


INVOICE_NS = "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2"
DESPATCH_NS = "urn:oasis:names:specification:ubl:schema:xsd:DespatchAdvice-2"
CAC_NS = "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2"
CBC_NS = "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2"

ET.register_namespace("cac", CAC_NS)
ET.register_namespace("cbc", CBC_NS)

DEFAULT_CUSTOMER_NAME = "Genel Musteri"
DEFAULT_ITEM_NAME = "Urun"


@dataclass(frozen=True)
class GibSendResult:
    success: bool
    gib_uuid: str
    envelope_uuid: str
    response_code: str
    response_message: str


@dataclass(frozen=True)
class GibStatusResult:
    status: str
    response_code: str
    response_message: str


@dataclass(frozen=True)
class DocumentLine:
    name: str
    quantity: int
    unit_price: Decimal
    vat_rate: Decimal


def send_document(document_type: str, xml_content: str) -> GibSendResult:
    return GibSendResult(
        success=True,
        gib_uuid=str(uuid.uuid4()).upper(),
        envelope_uuid=str(uuid.uuid4()).upper(),
        response_code="1000",
        response_message="Belge basariyla gonderildi",
    )


def check_status(gib_uuid: str) -> GibStatusResult:
    return GibStatusResult(status="approved", response_code="1200", response_message="Belge onaylandi")


# =============================================================================
# XML
# =============================================================================

def _cbc(parent, tag: str, text) -> ET.Element:
    element = ET.SubElement(parent, f"{{{CBC_NS}}}{tag}")
    element.text = str(text)
    return element


def _cac(parent, tag: str) -> ET.Element:
    return ET.SubElement(parent, f"{{{CAC_NS}}}{tag}")


def _amount(value) -> str:
    return format(money(value), "f")


def _serialize(root: ET.Element, default_namespace: str) -> str:
    ET.indent(root)
    return ET.tostring(
        root,
        encoding="UTF-8",
        xml_declaration=True,
        default_namespace=default_namespace,
    ).decode("utf-8")


def _party(parent, tag: str, name: str | None, tax_number: str | None = None) -> None:
    party = _cac(_cac(parent, tag), "Party")
    _cbc(_cac(party, "PartyName"), "Name", name or DEFAULT_CUSTOMER_NAME)
    if tax_number:
        _cbc(_cac(party, "PartyTaxScheme"), "TaxTypeCode", tax_number)


def invoice_xml(document_number: str, issue_date: datetime, customer_name: str | None,
                customer_tax_number: str | None, lines: list[DocumentLine],
                total_amount, vat_amount) -> str:
    """UBL-TR invoice; totals are taken as given, lines are net of VAT."""
    root = ET.Element(f"{{{INVOICE_NS}}}Invoice")
    _cbc(root, "UBLVersionID", "2.1")
    _cbc(root, "CustomizationID", "TR1.2")
    _cbc(root, "ProfileID", "TICARIFATURA")
    _cbc(root, "ID", document_number)
    _cbc(root, "IssueDate", issue_date.strftime("%Y-%m-%d"))
    _cbc(root, "IssueTime", issue_date.strftime("%H:%M:%S"))
    _cbc(root, "InvoiceTypeCode", "SATIS")
    _cbc(root, "DocumentCurrencyCode", DEFAULT_CURRENCY)

    _party(root, "AccountingCustomerParty", customer_name, customer_tax_number)

    _cbc(_cac(root, "TaxTotal"), "TaxAmount", _amount(vat_amount))

    totals = _cac(root, "LegalMonetaryTotal")
    _cbc(totals, "TaxExclusiveAmount", _amount(Decimal(str(total_amount)) - Decimal(str(vat_amount))))
    _cbc(totals, "TaxInclusiveAmount", _amount(total_amount))
    _cbc(totals, "PayableAmount", _amount(total_amount))

    for index, line in enumerate(lines, start=1):
        invoice_line = _cac(root, "InvoiceLine")
        _cbc(invoice_line, "ID", index)
        _cbc(invoice_line, "InvoicedQuantity", line.quantity)
        _cbc(invoice_line, "LineExtensionAmount", _amount(Decimal(str(line.unit_price)) * line.quantity))
        _cbc(_cac(invoice_line, "Item"), "Name", line.name or DEFAULT_ITEM_NAME)
        _cbc(_cac(invoice_line, "Price"), "PriceAmount", _amount(line.unit_price))

    return _serialize(root, INVOICE_NS)


def waybill_xml(document_number: str, issue_date: datetime, customer_name: str | None,
                delivery_address: str | None, lines: list[DocumentLine]) -> str:
    """UBL-TR despatch advice (e-irsaliye); quantities only."""
    root = ET.Element(f"{{{DESPATCH_NS}}}DespatchAdvice")
    _cbc(root, "UBLVersionID", "2.1")
    _cbc(root, "CustomizationID", "TR1.2")
    _cbc(root, "ID", document_number)
    _cbc(root, "IssueDate", issue_date.strftime("%Y-%m-%d"))

    _party(root, "DeliveryCustomerParty", customer_name)

    address = _cac(_cac(_cac(root, "Shipment"), "Delivery"), "DeliveryAddress")
    _cbc(address, "StreetName", delivery_address or "")

    for index, line in enumerate(lines, start=1):
        despatch_line = _cac(root, "DespatchLine")
        _cbc(despatch_line, "ID", index)
        _cbc(despatch_line, "DeliveredQuantity", line.quantity)
        _cbc(_cac(despatch_line, "Item"), "Name", line.name or DEFAULT_ITEM_NAME)

    return _serialize(root, DESPATCH_NS)
