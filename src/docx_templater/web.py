from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates
from loguru import logger

from .assembler import ASSEMBLY_MODES, AssemblyMode, assemble
from .config import Settings
from .editor import SectionEditor
from .errors import AssemblyError, ClassificationError, ExtractionError
from .export import export_filename
from .extractor import extract_html
from .llm_classifier import SectionAnalyzer
from .sections import Section, parse_sections
from .styles import style_catalog

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(BASE_DIR / "templates"))

ALLOWED_SUFFIXES = (".docx", ".txt")

settings = Settings.from_env()

app = FastAPI(title="DOCX Templater")


def _content_disposition(filename: str) -> str:
    """Attachment header; names that are not plain ASCII use the RFC 5987 form."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _error(status_code: int, error: str, error_type: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error, "error_type": error_type}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def _read_upload(file: UploadFile):
    """Return (html, None) for a valid upload or (None, error response)."""
    content = await file.read()
    file_size = len(content)

    if file_size > settings.max_upload_bytes:
        return None, _error(
            400,
            f"File is too large ({file_size / 1024 / 1024:.1f}MB). "
            f"The limit is {settings.max_upload_mb}MB.",
            "file_too_large",
        )

    if not file.filename or not file.filename.lower().endswith(ALLOWED_SUFFIXES):
        return None, _error(400, "Only .docx and .txt files are supported.", "invalid_file_type")

    try:
        html = extract_html(file.filename, content)
    except ExtractionError as exc:
        logger.warning("Extraction failed for {}: {}", file.filename, exc)
        return None, _error(
            400,
            "Error processing file. Please ensure it's a valid .docx file.",
            "parse_error",
            str(exc),
        )
    return html, None


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return TEMPLATES.TemplateResponse(
        request,
        "index.html",
        {
            "modes": ASSEMBLY_MODES,
            "default_mode": AssemblyMode.COMPARISON.value,
        },
    )


@app.get("/api/styles")
async def api_styles():
    return {"styles": style_catalog()}


@app.post("/api/convert")
async def api_convert(
    file: UploadFile = File(...),
    mode: AssemblyMode = Form(AssemblyMode.COMPARISON),
    escape: bool = Form(True),
    keep_pros_cons: bool = Form(False),
):
    """Extract an upload, assemble it and return the page plus its sections."""
    html, error = await _read_upload(file)
    if error is not None:
        return error
    try:
        page = assemble(
            html,
            mode,
            escape=escape,
            stylesheet=settings.stylesheet,
            include_detected_pros_cons=keep_pros_cons,
        )
    except AssemblyError as exc:
        logger.exception("Assembly failed for {}", file.filename)
        return _error(500, "Error converting to HTML. Please check your content.", "assembly_error", str(exc))

    return JSONResponse(
        content={
            "success": True,
            "html": page,
            "extracted_html": html,
            "sections": [s.to_dict() for s in parse_sections(html)],
            "filename": export_filename(file.filename),
            "mode": mode.value,
        }
    )


@app.post("/convert")
async def convert_download(
    file: UploadFile = File(...),
    mode: AssemblyMode = Form(AssemblyMode.COMPARISON),
    escape: bool = Form(True),
    keep_pros_cons: bool = Form(False),
):
    """Form endpoint that returns the assembled page as a file download."""
    html, error = await _read_upload(file)
    if error is not None:
        return error
    try:
        page = assemble(
            html,
            mode,
            escape=escape,
            stylesheet=settings.stylesheet,
            include_detected_pros_cons=keep_pros_cons,
        )
    except AssemblyError as exc:
        logger.exception("Assembly failed for {}", file.filename)
        return _error(500, "Error converting to HTML. Please check your content.", "assembly_error", str(exc))

    filename = export_filename(file.filename)
    return Response(
        content=page,
        media_type="text/html; charset=utf-8",
        headers={"Content-Disposition": _content_disposition(filename)},
    )


@app.post("/api/analyze-content")
async def api_analyze_content(request: Request):
    """Ask the model to split HTML into sections with suggested styles."""
    try:
        payload = await request.json()
        html = payload.get("html") or ""
        style_nodes = payload.get("styleNodes") or style_catalog()
        analyzer = SectionAnalyzer(model=settings.model, api_key=settings.google_api_key)
        suggestions = analyzer.analyze(html, style_nodes)
    except ClassificationError as exc:
        logger.error("Section analysis failed: {}", exc)
        return _error(500, "Failed to analyze content", "llm_error", str(exc))
    except Exception as exc:
        logger.exception("Unexpected error while analyzing content")
        return _error(500, "Failed to analyze content", "unknown_error", str(exc))

    return {"sections": [s.to_dict() for s in suggestions]}


@app.post("/api/render")
async def api_render(request: Request):
    """Render client-held editor state into the final HTML document."""
    try:
        payload = await request.json()
        sections = [Section.from_dict(item) for item in payload.get("sections", [])]
        editor = SectionEditor(sections, stylesheet=settings.editor_stylesheet)
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        return _error(400, f"Invalid section list: {exc}", "invalid_sections")

    return {"html": editor.render()}
