import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from pydantic import ValidationError

from .config import get_settings
from .errors import InputDecodeError
from .models import BeautifyResponse, CleanOptions, HealthResponse, TextRequest
from .normalize import build_response, normalize_csv_bytes

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="csv-beautifier",
    description="Cleanup, dedupe and normalization for loosely formatted CSV",
    version="0.2.0",
)


def _parse_options(raw: Optional[str]) -> CleanOptions:
    if not raw:
        return CleanOptions()
    try:
        return CleanOptions.model_validate_json(raw)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/normalize", response_model=BeautifyResponse)
async def normalize_csv(
    file: UploadFile = File(...),
    options: Optional[str] = Form(default=None),
):
    name = (file.filename or "").lower()
    if not any(name.endswith(suffix) for suffix in settings.allowed_suffixes):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    clean_options = _parse_options(options)
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Upload exceeds the configured size limit")

    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Upload exceeds the configured size limit")

    try:
        return normalize_csv_bytes(raw, clean_options, settings.preview_rows)
    except InputDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Cleanup failed for %s", file.filename)
        raise HTTPException(status_code=500, detail="Unexpected error while running cleanup") from exc


@app.post("/normalize/text", response_model=BeautifyResponse)
def normalize_text(request: TextRequest):
    if len(request.text.encode("utf-8")) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Input exceeds the configured size limit")

    try:
        return build_response(request.text, request.options, preview_rows=settings.preview_rows)
    except Exception as exc:
        logger.exception("Cleanup failed for pasted text")
        raise HTTPException(status_code=500, detail="Unexpected error while running cleanup") from exc
