"""Shared fixtures: temporary directory layout and a fake model client."""

import pytest
from fastapi.testclient import TestClient

from ai_chart_builder.app.config import Settings
from ai_chart_builder.app.main import create_app


class FakeLLM:
    """Stands in for LLMClient. Records every call; returns `reply` or raises `error`."""

    def __init__(self, reply="분석 결과입니다.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, messages, model=None):
        self.calls.append({"messages": messages, "model": model})
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def last_prompt(self):
        """Text of the first message of the most recent call."""
        content = self.calls[-1]["messages"][0]["content"]
        if isinstance(content, str):
            return content
        return content[0]["text"]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_key="test-key",
        model_name="text-model",
        vision_model_name="vision-model",
        upload_dir=str(tmp_path / "uploads"),
        charts_dir=str(tmp_path / "charts"),
    )


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(settings, fake_llm):
    return TestClient(create_app(settings=settings, llm=fake_llm))
