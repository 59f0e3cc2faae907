"""
File Upload Utility - Extract resume text from uploaded files.

Supported formats:
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Plain Text (.txt)

Max file size: 5MB
"""

import io
import logging
import zipfile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from fastapi import HTTPException, UploadFile
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {".pdf", ".docx", ".txt"}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[1].lower()


async def extract_resume_text(file: UploadFile) -> str:
    """
    Read an uploaded resume and return its text.

    Raises:
        HTTPException: 400 for bad type or unreadable content, 413 when too large
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT"
        )

    content = await file.read()
    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )

    if ext == ".pdf":
        text = extract_from_pdf(content)
    elif ext == ".docx":
        text = extract_from_docx(content)
    else:
        text = extract_from_txt(content)

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from file. File may be empty or corrupted."
        )

    logger.info("Extracted %d characters from %s", len(text), file.filename)
    return text


def extract_from_pdf(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except PdfReadError as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {e}")


def extract_from_docx(content: bytes) -> str:
    """Paragraphs first, then table rows joined with ' | '."""
    try:
        doc = Document(io.BytesIO(content))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading DOCX: {e}")

    text_parts = [para.text for para in doc.paragraphs if para.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                text_parts.append(" | ".join(cells))
    return "\n".join(text_parts)


def extract_from_txt(content: bytes) -> str:
    for encoding in ("utf-8", "cp1252"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode("latin-1")
