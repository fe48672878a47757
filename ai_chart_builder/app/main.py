"""
FastAPI entrypoint.

Routes:
- POST /upload          store one file, ask the model to describe it
- POST /generate-chart  ask the model for chart data, render and store an HTML chart
- /charts/<file>        generated chart documents
- /                     front-end page

Settings and the model client are built once in create_app() and handed to
the routes through dependencies, so tests can swap both.
"""

import os
import logging
from datetime import datetime
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from typing import Optional

from .analyzer import analyze_file
from .chart_data import generate_chart_data
from .config import Settings
from .llm_client import LLMClient
from .renderer import render_chart_html
from .schemas import (
    ChartRequest,
    ChartResponse,
    ErrorResponse,
    UploadedFileInfo,
    UploadResponse,
)
from .utils import epoch_ms, save_upload, write_chart

UPLOAD_SUCCESS = "파일이 성공적으로 업로드되었습니다."
NO_FILE_ERROR = "파일이 업로드되지 않았습니다."
UPLOAD_ERROR = "파일 업로드 중 오류가 발생했습니다."
CHART_ERROR = "차트 생성 중 오류가 발생했습니다."

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_llm(request: Request) -> LLMClient:
    return request.app.state.llm


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_endpoint(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    llm: LLMClient = Depends(get_llm),
):
    if file is None or not file.filename:
        return _error(400, NO_FILE_ERROR)

    try:
        stored = await save_upload(file, settings.upload_dir)

        # Analysis failures come back as fallback text, not exceptions
        content = await analyze_file(stored["path"], stored["name"], llm, settings)

        return UploadResponse(
            message=UPLOAD_SUCCESS,
            file=UploadedFileInfo(content=content, **stored),
        )
    except Exception:
        logger.exception("File upload failed")
        return _error(500, UPLOAD_ERROR)


@router.post(
    "/generate-chart",
    response_model=ChartResponse,
    responses={500: {"model": ErrorResponse}},
)
async def generate_chart_endpoint(
    body: ChartRequest,
    settings: Settings = Depends(get_settings),
    llm: LLMClient = Depends(get_llm),
):
    try:
        chart_data = await generate_chart_data(
            body.chartType, body.style, body.dataAnalysis, body.feedback, llm
        )

        now = datetime.now()
        html = render_chart_html(body.chartType, body.style, chart_data, now)
        filename = write_chart(html, settings.charts_dir, epoch_ms(now.timestamp()))

        return ChartResponse(chartUrl=f"/charts/{filename}", chartData=chart_data)
    except Exception:
        logger.exception("Chart generation failed")
        return _error(500, CHART_ERROR)


def create_app(settings: Optional[Settings] = None, llm: Optional[LLMClient] = None) -> FastAPI:
    """Build the application. Missing arguments are created from the environment."""
    settings = settings or Settings.from_env()
    llm = llm or LLMClient.from_settings(settings)

    if not settings.api_key:
        logger.warning("No model API key configured; set GEMINI_API_KEY to enable analysis")

    app = FastAPI(title="AI Chart Builder")
    app.state.settings = settings
    app.state.llm = llm

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    # StaticFiles needs the directory to exist at mount time
    os.makedirs(settings.charts_dir, exist_ok=True)
    app.mount("/charts", StaticFiles(directory=settings.charts_dir), name="charts")
    # Mounted last so it does not shadow the API routes
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = app.state.settings.port
    logger.info(f"Server running at http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
