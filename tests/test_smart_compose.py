from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from leave_portal.ai.smart_compose import SmartComposeService


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def service_with(completions):
    service = SmartComposeService()
    service.use_ai = True
    service.model = "test-model"
    service.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return service


async def test_without_api_key_returns_empty():
    service = SmartComposeService()
    service.use_ai = False
    assert await service.suggest("I am feeling", "reason") == ""


async def test_returns_single_clean_word():
    completions = FakeCompletions(content="  unwell.\n")
    service = service_with(completions)

    assert await service.suggest("I am feeling", "reason") == "unwell"
    prompt = completions.calls[0]["messages"][0]["content"]
    assert "I am feeling" in prompt
    assert completions.calls[0]["model"] == "test-model"


async def test_project_prompt_used_for_projects():
    completions = FakeCompletions(content="migration")
    service = service_with(completions)

    assert await service.suggest("Database", "project") == "migration"
    assert "project description" in completions.calls[0]["messages"][0]["content"]


async def test_provider_error_returns_empty():
    error = APIConnectionError(request=httpx.Request("POST", "https://api.example.com"))
    service = service_with(FakeCompletions(error=error))

    assert await service.suggest("I need", "reason") == ""


async def test_blank_input_skips_provider():
    completions = FakeCompletions(content="word")
    service = service_with(completions)

    assert await service.suggest("   ", "reason") == ""
    assert completions.calls == []
