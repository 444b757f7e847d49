from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from dispute_intake.cases import case_from_update
from dispute_intake.documents import document_metadata
from dispute_intake.routes._deps import services_from_request, trace_id_from_request
from dispute_intake.schemas import CreateCaseRequest, UpdateCaseRequest, success_envelope

router = APIRouter(prefix="/api/v6", tags=["cases"])


@router.post("/cases")
def create_case(payload: CreateCaseRequest, request: Request):
    case = services_from_request(request).cases.create_case(payload)
    return JSONResponse(status_code=201, content=success_envelope(case, trace_id_from_request(request)))


@router.get("/cases")
def list_cases(
    request: Request,
    page: int = Query(default=1),
    limit: int = Query(default=10),
    status: str = Query(default=""),
):
    result = services_from_request(request).cases.list_cases(page=page, limit=limit, status=status.strip())
    return success_envelope(result.to_dict(), trace_id_from_request(request))


@router.get("/cases/{case_id}")
def get_case(case_id: str, request: Request):
    services = services_from_request(request)
    documents = [document_metadata(x) for x in services.documents.list_by_case(case_id)]
    case = services.cases.get_case_with_documents(case_id, documents)
    return success_envelope(case, trace_id_from_request(request))


@router.put("/cases/{case_id}")
def update_case(case_id: str, payload: UpdateCaseRequest, request: Request):
    services = services_from_request(request)
    current = services.cases.get_case(case_id)
    updated = services.cases.update_case(case_from_update(case_id, payload, current=current))
    return success_envelope(updated, trace_id_from_request(request))


@router.delete("/cases/{case_id}")
def delete_case(case_id: str, request: Request):
    services_from_request(request).cases.delete_case(case_id)
    return success_envelope({"id": case_id, "deleted": True}, trace_id_from_request(request))


@router.get("/cases/{case_id}/documents")
def list_case_documents(case_id: str, request: Request):
    rows = services_from_request(request).documents.list_by_case(case_id)
    items = [document_metadata(x) for x in rows]
    return success_envelope({"documents": items, "total": len(items)}, trace_id_from_request(request))
