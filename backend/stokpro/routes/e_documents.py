# Overview: Flask API routes for e-document operations; parses input and returns JSON responses.

"""
E-Document API Routes

Documents are prepared from a sale or a return, sent to the revenue
administration gateway and polled for approval. Every step is logged
(see GET /<id>, which includes the log).
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import CreateEDocumentDto, EDocumentListDto
from ..services import document_service
from ..decorators import require_auth, require_permission
from .. import permissions


e_documents_bp = Blueprint("e_documents", __name__, url_prefix="/api/e-documents")


@e_documents_bp.get("")
@require_auth
@require_permission(permissions.EDOCUMENTS_VIEW)
def list_documents_route():
    params = EDocumentListDto.validate(request.args.to_dict())
    return jsonify(document_service.list_documents(g.tenant_id, params)), 200


@e_documents_bp.get("/summary")
@require_auth
@require_permission(permissions.EDOCUMENTS_VIEW)
def documents_summary_route():
    return jsonify({"summary": document_service.summary(g.tenant_id)}), 200


@e_documents_bp.get("/<uuid:document_id>")
@require_auth
@require_permission(permissions.EDOCUMENTS_VIEW)
def get_document_route(document_id):
    document = document_service.get_document(g.tenant_id, document_id)
    return jsonify({"document": document.to_dict(include_logs=True, include_xml=True)}), 200


@e_documents_bp.post("")
@require_auth
@require_permission(permissions.EDOCUMENTS_CREATE)
def create_document_route():
    """
    Returns:
        201: {"document": {... status draft}}
        400: reference type not supported, document already exists for the reference
        404: referenced sale or return not found
    """
    data = CreateEDocumentDto.validate(request.get_json(silent=True))
    document = document_service.create_document(g.tenant_id, data)
    return jsonify({"document": document.to_dict()}), 201


@e_documents_bp.post("/<uuid:document_id>/send")
@require_auth
@require_permission(permissions.EDOCUMENTS_UPDATE)
def send_document_route(document_id):
    document = document_service.send_document(g.tenant_id, document_id)
    return jsonify({"document": document.to_dict()}), 200


@e_documents_bp.post("/<uuid:document_id>/check-status")
@require_auth
@require_permission(permissions.EDOCUMENTS_UPDATE)
def check_status_route(document_id):
    document = document_service.check_document_status(g.tenant_id, document_id)
    return jsonify({"document": document.to_dict()}), 200


@e_documents_bp.post("/<uuid:document_id>/cancel")
@require_auth
@require_permission(permissions.EDOCUMENTS_UPDATE)
def cancel_document_route(document_id):
    document = document_service.cancel_document(g.tenant_id, document_id)
    return jsonify({"document": document.to_dict()}), 200
