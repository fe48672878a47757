"""
Minimal LLM client wrapper using Google Gemini.

Rationale:
- Use google-generativeai SDK for robust Gemini access.
- Callers speak chat-style messages ({"role", "content"}), where content is a
  string or a list of {"type": "text"} / {"type": "image_url"} parts.
  The client converts them into Gemini contents.
- Keep interface tiny: complete(messages) -> str (first candidate text).
- No retries / no fallback. A bounded timeout is passed to the SDK.
"""

import base64
import re
from typing import Any, Dict, List, Optional
import google.generativeai as genai

_DATA_URI = re.compile(r"^data:([^;,]+);base64,(.*)$", re.DOTALL)


def _image_part(url: str) -> Dict[str, Any]:
    """Turn a base64 data URI into an inline blob part."""
    match = _DATA_URI.match(url)
    if not match:
        raise ValueError("Only base64 data URIs are supported for images")
    return {"mime_type": match.group(1), "data": base64.b64decode(match.group(2))}


def to_gemini_contents(messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Convert chat-style messages into the Gemini `contents` structure.
    Assistant turns map to the "model" role; everything else is "user".
    """
    contents = []
    for message in messages:
        role = "model" if message.get("role") == "assistant" else "user"
        content = message.get("content", "")
        if isinstance(content, str):
            parts = [content]
        else:
            parts = []
            for part in content:
                if part.get("type") == "image_url":
                    parts.append(_image_part(part["image_url"]["url"]))
                else:
                    parts.append(part.get("text", ""))
        contents.append({"role": role, "parts": parts})
    return contents


def _response_text(response) -> str:
    """Pull the first candidate's text out of a Gemini response."""
    try:
        result = response.text
    except ValueError:
        # Handle cases where response.text is not available (e.g. safety block or other finish reasons)
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.finish_reason == 2:  # MAX_TOKENS
                # Try to retrieve partial text if available
                if candidate.content and candidate.content.parts:
                    result = candidate.content.parts[0].text
                else:
                    raise RuntimeError("Gemini response truncated with no content.")
            else:
                raise RuntimeError(f"Gemini blocked response. Finish reason: {candidate.finish_reason}")
        else:
            raise RuntimeError("Gemini returned no candidates.")

    if not result:
        raise RuntimeError("Gemini returned empty response")

    return result


class LLMClient:
    """Gemini-backed completion client shared by the analysis and chart components."""

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str,
        max_tokens: int = 1000,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "LLMClient":
        return cls(
            api_key=settings.api_key,
            model_name=settings.model_name,
            max_tokens=settings.max_tokens,
            timeout=settings.llm_timeout,
        )

    async def complete(self, messages: List[Dict[str, Any]], model: Optional[str] = None) -> str:
        """
        Send one chat-style request and return the first candidate's text.
        `model` overrides the default model name (used for image analysis).
        """
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY or LLM_API_KEY must be set in environment")

        try:
            genai.configure(api_key=self.api_key)
            generative_model = genai.GenerativeModel(model_name=model or self.model_name)
            config = genai.GenerationConfig(max_output_tokens=self.max_tokens)
            request_options = {"timeout": self.timeout} if self.timeout else None

            response = await generative_model.generate_content_async(
                to_gemini_contents(messages),
                generation_config=config,
                request_options=request_options,
            )
            return _response_text(response)

        except Exception as e:
            raise RuntimeError(f"Gemini API error: {str(e)}")
