import logging
from typing import List, Literal, Optional
from uuid import uuid4

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from PIL import UnidentifiedImageError

from ..core.errors import ImageDecodeError, InvalidDimensionError, StylizeError
from ..core.jobs import store as job_store
from ..core.legend import build_legend
from ..core.pipeline import quantize, render_preview
from ..cv.pixel_source import decode_image
from ..export.csv_exporter import export_csv, export_usage_csv
from ..export.json_exporter import export_json
from ..export.pdf_exporter import export_pdf
from ..export.png_exporter import export_png
from ..models.api_schemas import ExportRequest, JobStatus, LegendEntry
from ..models.pattern import BeadPattern
from ..settings import DEFAULT_GRID_SIZE, MAX_GRID_SIZE, MIN_GRID_SIZE
from ..storage import get_storage
from ..stylize.openai_client import stylize_image

logger = logging.getLogger(__name__)

router = APIRouter()

EXPORT_FILES = {
    "json": "bead_sheet.json",
    "csv": "bead_cells.csv",
    "usage_csv": "bead_usage.csv",
    "png": "bead_sheet.png",
    "pdf": "bead_sheet.pdf",
}


def _decode_and_quantize(content: bytes, grid_size: int) -> BeadPattern:
    return quantize(decode_image(content), grid_size)


def _store_artifacts(job_id: str, pattern: BeadPattern) -> None:
    """Pattern JSON is required; preview and PDF are best effort."""
    storage = get_storage()
    pattern_dict = pattern.to_dict()
    storage.save_json(job_id, "pattern.json", pattern_dict)

    preview_bytes = None
    try:
        preview_bytes = render_preview(pattern_dict)
        storage.save_bytes(job_id, "preview.png", preview_bytes)
    except (OSError, ValueError) as exc:
        logger.warning("Preview generation failed for job %s: %s", job_id, exc)

    try:
        storage.save_bytes(job_id, EXPORT_FILES["pdf"], export_pdf(pattern_dict, preview=preview_bytes))
    except (OSError, ValueError, UnidentifiedImageError) as exc:
        logger.warning("PDF export failed for job %s: %s", job_id, exc)


# =====================================================================
#   JOB CREATE
# =====================================================================


@router.post("/jobs")
async def create_job(
    file: UploadFile = File(...),
    grid_size: int = Query(DEFAULT_GRID_SIZE, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE),
    stylize: bool = False,
    prompt: Optional[str] = None,
    api_key: Optional[str] = Form(None),
):
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Unsupported file type, please upload an image")

    content = await file.read()
    job_id = str(uuid4())
    job_store.start(job_id, grid_size=grid_size, filename=file.filename, stylized=stylize)

    try:
        if stylize:
            content = await stylize_image(
                content,
                api_key=api_key,
                prompt=prompt,
                filename=file.filename or "image.png",
                content_type=content_type,
            )
        pattern = await run_in_threadpool(_decode_and_quantize, content, grid_size)
        pattern.meta["filename"] = file.filename
        await run_in_threadpool(_store_artifacts, job_id, pattern)
    except StylizeError as exc:
        job_store.fail(job_id, str(exc))
        raise HTTPException(status_code=502, detail=str(exc))
    except (ImageDecodeError, InvalidDimensionError) as exc:
        job_store.fail(job_id, str(exc))
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("Job %s failed", job_id)
        job_store.fail(job_id, f"Internal error: {exc}")
        raise HTTPException(status_code=500, detail="Could not build the bead pattern") from exc

    job_store.complete(job_id, pattern)
    return JSONResponse({"job_id": job_id, "status": "done"})


# =====================================================================
#   JOB GET / LIST
# =====================================================================


@router.get("/jobs", response_model=List[JobStatus])
async def list_jobs(status: Optional[str] = None, query: Optional[str] = None):
    return [job.to_status() for job in job_store.list(state=status, query=query)]


@router.get("/jobs/{job_id}", response_model=JobStatus)
async def get_job(job_id: str):
    job = job_store.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job.to_status()


def _ready_pattern(job_id: str) -> BeadPattern:
    job = job_store.get(job_id)
    if job is None or not job.ready:
        raise HTTPException(status_code=404, detail="Job not ready")
    return job.pattern


# =====================================================================
#   LEGEND
# =====================================================================


@router.get("/jobs/{job_id}/legend", response_model=list[LegendEntry])
async def get_legend(job_id: str):
    return build_legend(_ready_pattern(job_id))


# =====================================================================
#   PREVIEW
# =====================================================================


@router.get("/jobs/{job_id}/preview")
async def preview(job_id: str, zoom: Literal["0.5", "1", "2", "4"] = "1"):
    pattern = _ready_pattern(job_id)
    img_bytes = render_preview(pattern, zoom=float(zoom))
    return Response(content=img_bytes, media_type="image/png")


# =====================================================================
#   EXPORT
# =====================================================================


@router.post("/jobs/{job_id}/export")
async def export(job_id: str, request: ExportRequest):
    pattern = _ready_pattern(job_id)
    storage = get_storage()

    files = {}
    for fmt in request.formats:
        if fmt == "json":
            payload = export_json(pattern).encode("utf-8")
        elif fmt == "csv":
            payload = export_csv(pattern).encode("utf-8")
        elif fmt == "usage_csv":
            payload = export_usage_csv(pattern).encode("utf-8")
        elif fmt == "png":
            payload = export_png(pattern, zoom=request.zoom)
        else:
            payload = export_pdf(pattern, preview=render_preview(pattern, zoom=request.zoom))
        files[fmt] = storage.save_bytes(job_id, EXPORT_FILES[fmt], payload)

    return {"job_id": job_id, "files": files}
