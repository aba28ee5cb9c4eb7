"""Tests for the LLM clients and the LLM gateway service."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai.errors import ClientError
from openai import OpenAIError

from src.core.config import Settings
from src.core.exceptions import UpstreamError, ValidationError
from src.llm import get_llm_client
from src.llm.gemini import GeminiClient
from src.llm.key_rotator import GeminiKeyRotator
from src.llm.openai import OpenAIClient
from src.services.llm_gateway.service import SYSTEM_INSTRUCTION, LLMGatewayService
from tests.fakes import FakeLLMClient


def openai_completion(content: str, model: str = "gpt-4o-mini-2024-07-18"):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        model=model,
        usage=SimpleNamespace(prompt_tokens=42, completion_tokens=7, total_tokens=49),
    )


class TestLLMGatewayService:
    @pytest.mark.asyncio
    async def test_builds_two_message_prompt(self):
        llm = FakeLLMClient("Paris.")
        service = LLMGatewayService(llm)

        response = await service.answer("What is the capital of France?", "France is in Europe.")

        prompt, system_instruction = llm.calls[0]
        assert system_instruction == SYSTEM_INSTRUCTION
        assert "Use the provided context to answer questions accurately." in system_instruction
        assert prompt == "Context: France is in Europe.\n\nQuestion: What is the capital of France?"
        assert response.response == "Paris."
        assert response.model == "fake-model"
        assert response.usage.total_tokens == 15

    @pytest.mark.asyncio
    async def test_missing_context_uses_placeholder(self):
        llm = FakeLLMClient("ok")

        await LLMGatewayService(llm).answer("hi")

        prompt, _ = llm.calls[0]
        assert prompt == "Context: No context provided.\n\nQuestion: hi"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [None, ""])
    async def test_missing_query_is_rejected(self, query):
        llm = FakeLLMClient("ok")

        with pytest.raises(ValidationError):
            await LLMGatewayService(llm).answer(query, "context")

        assert llm.calls == []


class TestOpenAIClient:
    @pytest.mark.asyncio
    async def test_complete_returns_text_model_and_usage(self):
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(return_value=openai_completion("Paris."))
        client = OpenAIClient(api_key="sk-test", model="gpt-4o-mini", client=sdk)

        completion = await client.complete("Question?", system_instruction="Be helpful.")

        assert completion.text == "Paris."
        assert completion.model == "gpt-4o-mini-2024-07-18"
        assert completion.usage.prompt_tokens == 42
        assert completion.usage.total_tokens == 49
        sdk.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini",
            messages=[
                {"role": "system", "content": "Be helpful."},
                {"role": "user", "content": "Question?"},
            ],
        )

    @pytest.mark.asyncio
    async def test_sdk_error_becomes_upstream_error(self):
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(side_effect=OpenAIError("Rate limit reached"))
        client = OpenAIClient(api_key="sk-test", client=sdk)

        with pytest.raises(UpstreamError, match="Rate limit reached"):
            await client.complete("Question?")

    @pytest.mark.asyncio
    async def test_missing_key_fails_on_first_use(self):
        client = OpenAIClient(api_key="")

        with pytest.raises(UpstreamError, match="OPENAI_API_KEY"):
            await client.complete("Question?")


def rate_limited() -> ClientError:
    return ClientError(
        429,
        {"error": {"code": 429, "message": "Resource exhausted (quota)", "status": "RESOURCE_EXHAUSTED"}},
    )


def gemini_sdk(**generate_content) -> MagicMock:
    sdk = MagicMock()
    sdk.aio.models.generate_content = AsyncMock(**generate_content)
    return sdk


class FakeRotator:
    """Hands out one SDK client per key and records rotations."""

    def __init__(self, clients: dict[str, MagicMock]):
        self.keys = list(clients)
        self.clients = clients
        self.index = 0
        self.used: list[str] = []

    def __len__(self) -> int:
        return len(self.keys)

    def rotate(self) -> str:
        self.index = (self.index + 1) % len(self.keys)
        return self.keys[self.index]

    def get_client(self) -> MagicMock:
        key = self.keys[self.index]
        self.used.append(key)
        return self.clients[key]


class TestGeminiClient:
    @pytest.mark.asyncio
    async def test_complete_maps_usage_metadata(self):
        response = SimpleNamespace(
            text="Paris.",
            model_version="gemini-2.0-flash-001",
            usage_metadata=SimpleNamespace(
                prompt_token_count=12, candidates_token_count=3, total_token_count=15
            ),
        )
        sdk = MagicMock()
        sdk.aio.models.generate_content = AsyncMock(return_value=response)
        rotator = MagicMock()
        rotator.__len__.return_value = 1
        rotator.get_client.return_value = sdk

        completion = await GeminiClient(rotator=rotator).complete("Question?", "Be helpful.")

        assert completion.text == "Paris."
        assert completion.model == "gemini-2.0-flash-001"
        assert completion.usage.completion_tokens == 3
        assert completion.usage.total_tokens == 15

    @pytest.mark.asyncio
    async def test_rate_limited_key_rotates_to_next(self):
        response = SimpleNamespace(text="Paris.", model_version=None, usage_metadata=None)
        rotator = FakeRotator(
            {
                "key-1": gemini_sdk(side_effect=rate_limited()),
                "key-2": gemini_sdk(return_value=response),
            }
        )

        completion = await GeminiClient(rotator=rotator, model="gemini-x").complete("Question?")

        assert completion.text == "Paris."
        assert completion.model == "gemini-x"
        assert rotator.used == ["key-1", "key-2"]
        rotator.clients["key-2"].aio.models.generate_content.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_all_keys_rate_limited_raises(self):
        rotator = FakeRotator(
            {
                "key-1": gemini_sdk(side_effect=rate_limited()),
                "key-2": gemini_sdk(side_effect=rate_limited()),
            }
        )

        with pytest.raises(UpstreamError, match="All Gemini API keys are rate limited"):
            await GeminiClient(rotator=rotator).complete("Question?")

        assert rotator.used == ["key-1", "key-2"]

    @pytest.mark.asyncio
    async def test_other_client_error_does_not_rotate(self):
        error = ClientError(400, {"error": {"code": 400, "message": "Bad request", "status": "INVALID_ARGUMENT"}})
        rotator = FakeRotator({"key-1": gemini_sdk(side_effect=error), "key-2": gemini_sdk()})

        with pytest.raises(UpstreamError, match="INVALID_ARGUMENT"):
            await GeminiClient(rotator=rotator).complete("Question?")

        assert rotator.used == ["key-1"]

    @pytest.mark.asyncio
    async def test_no_keys_fails_on_first_use(self):
        client = GeminiClient(rotator=GeminiKeyRotator([]))

        with pytest.raises(UpstreamError, match="GEMINI_API_KEY"):
            await client.complete("Question?")


class TestGetLLMClient:
    def test_openai_is_default(self):
        client = get_llm_client(Settings(_env_file=None, llm_provider="openai", openai_api_key="sk-test"))

        assert isinstance(client, OpenAIClient)
        assert client.api_key == "sk-test"

    def test_gemini_provider(self):
        client = get_llm_client(
            Settings(_env_file=None, llm_provider="gemini", gemini_api_key="k1, k2", gemini_model="gemini-x")
        )

        assert isinstance(client, GeminiClient)
        assert client.model == "gemini-x"
        assert len(client._rotator) == 2

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported LLM_PROVIDER"):
            get_llm_client(Settings(_env_file=None, llm_provider="llama"))
