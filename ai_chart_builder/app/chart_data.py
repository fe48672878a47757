"""
Chart data synthesis.

The model is asked for sample chart data as JSON. Its reply is free text, so
the first brace-delimited block is pulled out and parsed. Two fallbacks keep
callers from ever seeing an error:
- reply without parseable JSON -> the raw reply wrapped as chart data
- failed model call            -> an error message wrapped as chart data
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from .llm_client import LLMClient
from .utils import read_prompt

logger = logging.getLogger(__name__)

# Greedy: first "{" through the last "}", across newlines
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")

NO_FEEDBACK = "없음"
GENERATION_ERROR = "데이터 생성 중 오류가 발생했습니다."


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Best-effort extraction of a JSON object from model text. None if nothing parses."""
    match = _JSON_BLOCK.search(text or "")
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        return None


def fallback_chart_data(chart_type: str, style: str, data: Any) -> Dict[str, Any]:
    return {"title": f"{chart_type} 차트", "data": data, "style": style}


def build_chart_prompt(chart_type: str, style: str, data_analysis: str, feedback: Optional[str]) -> str:
    return read_prompt("chart_data.txt").format(
        chart_type=chart_type,
        style=style,
        data_analysis=data_analysis,
        feedback=feedback or NO_FEEDBACK,
    )


async def generate_chart_data(
    chart_type: str,
    style: str,
    data_analysis: str,
    feedback: Optional[str],
    llm: LLMClient,
) -> Dict[str, Any]:
    """Ask the model for chart data. Always returns a dict with at least title, data and style."""
    try:
        prompt = build_chart_prompt(chart_type, style, data_analysis, feedback)
        content = await llm.complete([{"role": "user", "content": prompt}])
    except Exception as e:
        logger.error(f"Chart data generation failed: {e}")
        return fallback_chart_data(chart_type, style, GENERATION_ERROR)

    parsed = extract_json_object(content)
    if parsed is not None:
        # Keys the model left out are filled in; keys it supplied are kept
        result = fallback_chart_data(chart_type, style, None)
        result.update(parsed)
        return result

    logger.info("No JSON object in model reply, returning raw text")
    return fallback_chart_data(chart_type, style, content)
