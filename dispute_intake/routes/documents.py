from __future__ import annotations

from fastapi import APIRouter, File, Form, Request, Response, UploadFile
from fastapi.responses import JSONResponse

from dispute_intake.documents import document_metadata, new_document
from dispute_intake.errors import ApiError
from dispute_intake.routes._deps import services_from_request, trace_id_from_request
from dispute_intake.schemas import success_envelope

router = APIRouter(prefix="/api/v6", tags=["documents"])


@router.post("/documents")
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    case_id: str = Form(default="", alias="caseId"),
    uploaded_by: str = Form(default="", alias="uploadedBy"),
    description: str = Form(default=""),
):
    if not case_id.strip():
        raise ApiError(
            code="CASE_ID_REQUIRED",
            message="caseId is required",
            error_class="validation",
            retryable=False,
            http_status=400,
        )
    content = await file.read()
    document = new_document(
        case_id=case_id.strip(),
        file_name=file.filename or "upload.bin",
        content=content,
        uploaded_by=uploaded_by,
        description=description,
        content_type=file.content_type,
    )
    stored = services_from_request(request).documents.upload_document(document)
    return JSONResponse(
        status_code=201,
        content=success_envelope(document_metadata(stored), trace_id_from_request(request)),
    )


@router.get("/documents/{document_id}")
def get_document(document_id: str, request: Request):
    document = services_from_request(request).documents.get_document(document_id)
    return success_envelope(document_metadata(document), trace_id_from_request(request))


@router.get("/documents/{document_id}/content")
def get_document_content(document_id: str, request: Request):
    document = services_from_request(request).documents.get_document(document_id)
    # Header values must stay latin-1; non-ascii names fall back to the id.
    safe_name = str(document["fileName"]).replace('"', "").encode("ascii", "ignore").decode("ascii")
    return Response(
        content=document["content"],
        media_type=document.get("contentType") or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{safe_name or document_id}"'},
    )


@router.delete("/documents/{document_id}")
def delete_document(document_id: str, request: Request):
    services_from_request(request).documents.delete_document(document_id)
    return success_envelope({"id": document_id, "deleted": True}, trace_id_from_request(request))
