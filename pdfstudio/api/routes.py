import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import PlainTextResponse

from pdfstudio.core.errors import UsageError
from pdfstudio.schemas.common import (
    ExportMindMapRequest,
    ExportOutlineRequest,
    ExportTextRequest,
    ExtractResponse,
    GenerateRequest,
)
from pdfstudio.services.export_service import (
    EXTRACTED_TEXT_FILENAME,
    MINDMAP_FILENAME,
    OUTLINE_FILENAME,
    format_mindmap,
    format_outline,
)
from pdfstudio.services.file_service import extract_text_from_file
from pdfstudio.services.generator import generate_artifact
from pdfstudio.services.llm_service import ModelInvoker, get_model_invoker
from pdfstudio.services.prompts import ArtifactKind

logger = logging.getLogger(__name__)

router = APIRouter()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 1. EXTRACTION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post("/extract-text", response_model=ExtractResponse, tags=["Extraction"])
async def extract_text(file: Optional[UploadFile] = File(None)):
    """Upload a PDF (multipart field `file`) and get its plain text + page count."""
    if file is None:
        raise UsageError("No file uploaded.")

    content = await file.read()
    result = await extract_text_from_file(content, file.filename or "", file.content_type)
    return ExtractResponse(text=result.text, pages=result.page_count)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 2. GENERATION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def _generate(kind: ArtifactKind, request: GenerateRequest, invoke: ModelInvoker) -> dict:
    artifact = await generate_artifact(kind, request.text, invoke)
    return artifact.model_dump(by_alias=True)


@router.post("/generate-quiz", tags=["Generation"])
async def generate_quiz(request: GenerateRequest, invoke: ModelInvoker = Depends(get_model_invoker)):
    """5 multiple-choice questions: `{questions: [...]}`."""
    return await _generate(ArtifactKind.quiz, request, invoke)


@router.post("/generate-outline", tags=["Generation"])
async def generate_outline(request: GenerateRequest, invoke: ModelInvoker = Depends(get_model_invoker)):
    """Hierarchical outline: `{outline: [...]}`."""
    return await _generate(ArtifactKind.outline, request, invoke)


@router.post("/generate-mindmap", tags=["Generation"])
async def generate_mindmap(request: GenerateRequest, invoke: ModelInvoker = Depends(get_model_invoker)):
    """Single-rooted mind map: `{mindMap: {...}}`."""
    return await _generate(ArtifactKind.mindmap, request, invoke)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 3. DOWNLOADS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _attachment(body: str, filename: str) -> PlainTextResponse:
    return PlainTextResponse(
        body,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/export/extracted-text", tags=["Downloads"])
async def export_extracted_text(request: ExportTextRequest):
    if request.text is None:
        raise UsageError("No text provided.")
    return _attachment(request.text, EXTRACTED_TEXT_FILENAME)


@router.post("/export/outline", tags=["Downloads"])
async def export_outline(request: ExportOutlineRequest):
    if not request.outline:
        raise UsageError("No outline provided.")
    return _attachment(format_outline(request.outline), OUTLINE_FILENAME)


@router.post("/export/mindmap", tags=["Downloads"])
async def export_mindmap(request: ExportMindMapRequest):
    if request.mind_map is None:
        raise UsageError("No mind map provided.")
    return _attachment(format_mindmap(request.mind_map), MINDMAP_FILENAME)
