"""
Pydantic request/response models.

Rationale:
- Define simple, explicit input/output contracts for the API.
- Field names follow the camelCase JSON the front-end already sends and reads.
- chartData stays an open dict: the model decides its shape.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel


class UploadedFileInfo(BaseModel):
    name: str
    size: int
    path: str
    content: str


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    file: UploadedFileInfo


class ChartRequest(BaseModel):
    chartType: str = "bar"
    style: str = "color"
    dataAnalysis: str = ""
    feedback: Optional[str] = None


class ChartResponse(BaseModel):
    success: bool = True
    chartUrl: str
    chartData: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
