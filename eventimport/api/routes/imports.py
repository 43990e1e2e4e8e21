"""Import routes - preview drafts and commit approved ones."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, RootModel

from eventimport.core.event_model import (
    BatchPreviewResult,
    CommitResult,
    EventDraft,
    ImportRequest,
)
from eventimport.core.pipeline import ImportPipeline
from eventimport.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

_pipeline: ImportPipeline | None = None


def get_pipeline() -> ImportPipeline:
    """Shared pipeline; overridden in tests."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ImportPipeline()
    return _pipeline


class PreviewRequest(RootModel[ImportRequest]):
    """{"kind": "url", "url": ...} or {"kind": "text", "text": ..., "source": ...}."""


class BatchPreviewRequest(BaseModel):
    """Several URLs to preview; blank entries are ignored."""

    urls: list[str] = Field(..., min_length=1)


class CommitRequest(BaseModel):
    """A draft the operator reviewed and approved."""

    model_config = ConfigDict(populate_by_name=True)

    approved_draft: EventDraft = Field(..., alias="approvedDraft")


@router.post("/preview", response_model=EventDraft)
async def preview_import(
    body: PreviewRequest,
    pipeline: ImportPipeline = Depends(get_pipeline),
) -> EventDraft:
    """Extract a draft from a URL or from pasted text. Nothing is stored."""
    return await pipeline.preview(body.root)


@router.post("/preview/batch", response_model=BatchPreviewResult)
async def preview_batch(
    body: BatchPreviewRequest,
    pipeline: ImportPipeline = Depends(get_pipeline),
) -> BatchPreviewResult:
    """Preview several URLs; failures are reported per URL."""
    return await pipeline.preview_urls(body.urls)


@router.post("/commit", response_model=CommitResult)
async def commit_import(
    body: CommitRequest,
    pipeline: ImportPipeline = Depends(get_pipeline),
) -> CommitResult:
    """Persist an approved draft. Answers 409 if it was already imported."""
    result = await pipeline.commit(body.approved_draft)
    logger.info("import_committed", event_id=result.event_id, warnings=len(result.warnings))
    return result
