"""
Small utilities: prompt loading, upload persistence, chart file output.

Rationale:
- Keep all filesystem writes in one place so the analysis and rendering code stays I/O free.
- Generated names combine a millisecond timestamp with randomness; collisions are
  improbable, not prevented.
"""

import logging
import os
import random
import time
from typing import Dict, Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROMPTS_DIR = os.path.join(BASE_DIR, "prompts")

# Read uploads in 1 MiB chunks
CHUNK_SIZE = 1024 * 1024


def read_prompt(name: str) -> str:
    """Read a prompt text file from the prompts directory."""
    with open(os.path.join(PROMPTS_DIR, name), "r", encoding="utf-8") as f:
        return f.read().strip()


def epoch_ms(now: Optional[float] = None) -> int:
    """Milliseconds since the epoch for `now` (a time.time() value) or the current time."""
    if now is None:
        now = time.time()
    return int(now * 1000)


def upload_filename(field_name: str, original_name: str) -> str:
    """Build `<field>-<epoch-ms>-<random><ext>` for a stored upload."""
    ext = os.path.splitext(os.path.basename(original_name))[1]
    return f"{field_name}-{epoch_ms()}-{random.randint(0, 10**9)}{ext}"


async def save_upload(upload: UploadFile, upload_dir: str, field_name: str = "file") -> Dict:
    """
    Write an uploaded file into `upload_dir` under a generated name.
    The directory is created on first use.
    Returns {"name", "size", "path"} with the original name and bytes written.
    """
    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, upload_filename(field_name, upload.filename))

    size = 0
    with open(path, "wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            out.write(chunk)
            size += len(chunk)

    logger.info(f"Stored upload {upload.filename!r} at {path} ({size} bytes)")
    return {"name": upload.filename, "size": size, "path": path}


def chart_filename(stamp_ms: int) -> str:
    return f"chart-{stamp_ms}.html"


def write_chart(html: str, charts_dir: str, stamp_ms: int) -> str:
    """Write a rendered chart document and return its file name."""
    os.makedirs(charts_dir, exist_ok=True)
    filename = chart_filename(stamp_ms)
    with open(os.path.join(charts_dir, filename), "w", encoding="utf-8") as f:
        f.write(html)
    logger.info(f"Wrote chart {filename} to {charts_dir}")
    return filename
