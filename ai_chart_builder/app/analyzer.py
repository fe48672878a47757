"""
File classification and analysis dispatch.

Flow:
1. Pick a strategy from the lowercased extension of the original file name
2. The strategy builds a prompt from the stored file and makes one LLM call
3. The model's text is returned as-is; any failure becomes a fallback message

Spreadsheets and PDFs are read as UTF-8 text like any other file. No format
decoding happens here, so binary containers (.xlsx, .xls, most PDFs) reach the
model as replacement characters.
"""

import base64
import logging
import os
from typing import Dict

from .config import Settings
from .llm_client import LLMClient
from .utils import read_prompt

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp"}
SPREADSHEET_EXTENSIONS = {".xlsx", ".xls", ".csv"}
PDF_EXTENSIONS = {".pdf"}

IMAGE = "image"
SPREADSHEET = "spreadsheet"
PDF = "pdf"
TEXT = "text"

FALLBACK_MESSAGES: Dict[str, str] = {
    IMAGE: "이미지 분석 중 오류가 발생했습니다.",
    SPREADSHEET: "엑셀 파일 분석 중 오류가 발생했습니다.",
    PDF: "PDF 파일 분석 중 오류가 발생했습니다.",
    TEXT: "파일 분석 중 오류가 발생했습니다.",
}


def classify_file(file_name: str) -> str:
    """Return the analysis strategy name for a file, based only on its extension."""
    ext = os.path.splitext(file_name)[1].lower()
    if ext in IMAGE_EXTENSIONS:
        return IMAGE
    if ext in SPREADSHEET_EXTENSIONS:
        return SPREADSHEET
    if ext in PDF_EXTENSIONS:
        return PDF
    return TEXT


def _read_text(path: str, limit: int) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()[:limit]


async def analyze_image(file_path: str, llm: LLMClient, settings: Settings) -> str:
    try:
        with open(file_path, "rb") as f:
            base64_image = base64.b64encode(f.read()).decode("ascii")

        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": read_prompt("image_analysis.txt")},
                    # Always labelled as JPEG, whatever the actual format
                    {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{base64_image}"}},
                ],
            }
        ]
        return await llm.complete(messages, model=settings.vision_model_name)
    except Exception as e:
        logger.error(f"Image analysis failed: {e}")
        return FALLBACK_MESSAGES[IMAGE]


async def _analyze_text_content(
    file_path: str,
    prompt_name: str,
    strategy: str,
    llm: LLMClient,
    settings: Settings,
) -> str:
    try:
        content = _read_text(file_path, settings.content_limit)
        prompt = read_prompt(prompt_name).format(content=content)
        return await llm.complete([{"role": "user", "content": prompt}])
    except Exception as e:
        logger.error(f"{strategy} analysis failed: {e}")
        return FALLBACK_MESSAGES[strategy]


async def analyze_spreadsheet(file_path: str, llm: LLMClient, settings: Settings) -> str:
    return await _analyze_text_content(file_path, "file_analysis.txt", SPREADSHEET, llm, settings)


async def analyze_pdf(file_path: str, llm: LLMClient, settings: Settings) -> str:
    return await _analyze_text_content(file_path, "pdf_analysis.txt", PDF, llm, settings)


async def analyze_text(file_path: str, llm: LLMClient, settings: Settings) -> str:
    return await _analyze_text_content(file_path, "file_analysis.txt", TEXT, llm, settings)


STRATEGIES = {
    IMAGE: analyze_image,
    SPREADSHEET: analyze_spreadsheet,
    PDF: analyze_pdf,
    TEXT: analyze_text,
}


async def analyze_file(file_path: str, file_name: str, llm: LLMClient, settings: Settings) -> str:
    """
    Analyze a stored upload and return the model's description.

    Args:
        file_path: Where the upload was written
        file_name: Original client-side name (drives strategy selection)

    Returns:
        Model text, or a localized fallback message if the strategy failed
    """
    strategy = classify_file(file_name)
    logger.info(f"Analyzing {file_name} with {strategy} strategy")
    return await STRATEGIES[strategy](file_path, llm, settings)
