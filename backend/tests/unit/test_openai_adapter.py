"""
Unit tests for the OpenAI generation client.

Tests cover:
- Chat completion requests via httpx
- Mock mode (no API key)
- Error results instead of raised exceptions
- Keyword splitting
- Model listing cache
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from adapters.ai.openai_adapter import OpenAIContentService, estimate_tokens
from core.domain.content import GenerationOptions

ADAPTER_HTTPX = "adapters.ai.openai_adapter.httpx.AsyncClient"


def _make_chat_response(content: str, total_tokens: int = 1200, model: str = "gpt-4-0125-preview"):
    """Build a mock httpx response matching the chat completions shape."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.raise_for_status = MagicMock()
    mock_response.json.return_value = {
        "model": model,
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 200, "total_tokens": total_tokens},
    }
    return mock_response


def _mock_client(mock_cls, **methods):
    mock_client = AsyncMock()
    for name, value in methods.items():
        setattr(mock_client, name, value)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_cls.return_value = mock_client
    return mock_client


def _status_error(status_code: int, text: str) -> httpx.HTTPStatusError:
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.text = text
    return httpx.HTTPStatusError("error", request=MagicMock(), response=mock_resp)


class TestGenerateArticle:
    """Tests for the primary article call."""

    @pytest.mark.asyncio
    async def test_generate_article_success(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(
                mock_cls,
                post=AsyncMock(return_value=_make_chat_response("# Title\n\nBody")),
            )

            service = OpenAIContentService(api_key="test-key", model="gpt-4-turbo-preview")
            result = await service.generate_article(
                "Benefits of Daily Exercise", GenerationOptions(temperature=0.5)
            )

        assert result.succeeded
        assert result.content == "# Title\n\nBody"
        assert result.tokens_used == 1200
        assert result.model == "gpt-4-0125-preview"

        mock_client.post.assert_called_once()
        url = mock_client.post.call_args.args[0]
        payload = mock_client.post.call_args.kwargs["json"]
        headers = mock_client.post.call_args.kwargs["headers"]
        assert url.endswith("/chat/completions")
        assert payload["model"] == "gpt-4-turbo-preview"
        assert payload["temperature"] == 0.5
        assert payload["top_p"] == 1
        assert payload["frequency_penalty"] == 0.1
        assert payload["presence_penalty"] == 0.1
        assert payload["messages"][0]["role"] == "system"
        assert "Benefits of Daily Exercise" in payload["messages"][1]["content"]
        assert headers["Authorization"] == "Bearer test-key"

    @pytest.mark.asyncio
    async def test_model_override_from_options(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(
                mock_cls, post=AsyncMock(return_value=_make_chat_response("Body text"))
            )

            service = OpenAIContentService(api_key="test-key", model="gpt-4-turbo-preview")
            await service.generate_article("Some topic", GenerationOptions(model="gpt-4"))

        assert mock_client.post.call_args.kwargs["json"]["model"] == "gpt-4"

    @pytest.mark.asyncio
    async def test_api_error_returned_not_raised(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            _mock_client(
                mock_cls,
                post=AsyncMock(side_effect=_status_error(429, "Rate limit exceeded")),
            )

            service = OpenAIContentService(api_key="test-key")
            result = await service.generate_article("Some topic")

        assert not result.succeeded
        assert result.content == ""
        assert "429" in result.error
        assert "Rate limit exceeded" in result.error

    @pytest.mark.asyncio
    async def test_empty_content_is_an_error(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            _mock_client(mock_cls, post=AsyncMock(return_value=_make_chat_response("   ")))

            service = OpenAIContentService(api_key="test-key")
            result = await service.generate_article("Some topic")

        assert not result.succeeded

    @pytest.mark.asyncio
    async def test_organization_header(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(
                mock_cls, post=AsyncMock(return_value=_make_chat_response("Body"))
            )

            service = OpenAIContentService(api_key="test-key", organization="org-123")
            await service.generate_article("Some topic")

        assert mock_client.post.call_args.kwargs["headers"]["OpenAI-Organization"] == "org-123"

    @pytest.mark.asyncio
    async def test_mock_mode_without_api_key(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            service = OpenAIContentService(api_key="")
            result = await service.generate_article("benefits of daily exercise")

        mock_cls.assert_not_called()
        assert result.succeeded
        assert result.content.startswith("# Benefits Of Daily Exercise")
        assert result.tokens_used > 0


class TestEnrichmentCalls:
    """Tests for meta description, keywords and quality analysis."""

    @pytest.mark.asyncio
    async def test_meta_description_uses_enrichment_model(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(
                mock_cls,
                post=AsyncMock(return_value=_make_chat_response("  A short summary.  ", 80)),
            )

            service = OpenAIContentService(api_key="test-key", enrichment_model="gpt-3.5-turbo")
            result = await service.generate_meta_description("Body", max_length=155)

        payload = mock_client.post.call_args.kwargs["json"]
        assert payload["model"] == "gpt-3.5-turbo"
        assert payload["max_tokens"] == 200
        assert payload["temperature"] == 0.7
        assert result.meta_description == "A short summary."
        assert result.length == len("A short summary.")
        assert result.tokens_used == 80

    @pytest.mark.asyncio
    async def test_keywords_split_and_trimmed(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(
                mock_cls,
                post=AsyncMock(
                    return_value=_make_chat_response("exercise,  health , , fitness tips")
                ),
            )

            service = OpenAIContentService(api_key="test-key")
            result = await service.extract_keywords("Body", count=5)

        assert result.keywords == ["exercise", "health", "fitness tips"]
        assert result.count == 3
        assert mock_client.post.call_args.kwargs["json"]["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_keywords_failure_returns_error(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            _mock_client(mock_cls, post=AsyncMock(side_effect=httpx.ConnectError("refused")))

            service = OpenAIContentService(api_key="test-key")
            result = await service.extract_keywords("Body")

        assert result.keywords == []
        assert result.error is not None

    @pytest.mark.asyncio
    async def test_quality_analysis_success(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            _mock_client(
                mock_cls,
                post=AsyncMock(return_value=_make_chat_response("Score: 8/10. Add examples.", 500)),
            )

            service = OpenAIContentService(api_key="test-key")
            result = await service.analyze_quality("Body")

        assert result.analysis == "Score: 8/10. Add examples."
        record = result.to_record()
        assert record["tokens_used"] == 500
        assert "analyzed_at" in record

    @pytest.mark.asyncio
    async def test_mock_enrichment(self):
        service = OpenAIContentService(api_key="")
        body = "# Running\n\nRunning improves endurance. Running builds stamina and endurance."

        meta = await service.generate_meta_description(body, max_length=40)
        keywords = await service.extract_keywords(body, count=2)

        assert meta.succeeded
        assert len(meta.meta_description) <= 40
        assert keywords.keywords[0] == "running"
        assert len(keywords.keywords) == 2


class TestAvailableModels:
    """Tests for the cached model listing."""

    @pytest.mark.asyncio
    async def test_filters_gpt_models_and_caches(self):
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock()
        mock_response.json.return_value = {
            "data": [
                {"id": "gpt-4", "created": 1, "owned_by": "openai"},
                {"id": "whisper-1", "created": 2, "owned_by": "openai"},
                {"id": "gpt-3.5-turbo", "created": 3, "owned_by": "openai"},
            ]
        }

        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(mock_cls, get=AsyncMock(return_value=mock_response))

            service = OpenAIContentService(api_key="test-key", models_cache_ttl=3600)
            first = await service.get_available_models()
            second = await service.get_available_models()

        assert [m["id"] for m in first.models] == ["gpt-4", "gpt-3.5-turbo"]
        assert first.count == 2
        assert second is first
        mock_client.get.assert_called_once()

    @pytest.mark.asyncio
    async def test_failure_not_cached(self):
        with patch(ADAPTER_HTTPX) as mock_cls:
            mock_client = _mock_client(
                mock_cls, get=AsyncMock(side_effect=_status_error(500, "upstream"))
            )

            service = OpenAIContentService(api_key="test-key")
            first = await service.get_available_models()
            second = await service.get_available_models()

        assert first.error is not None
        assert second.error is not None
        assert mock_client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_mock_models_from_price_table(self):
        service = OpenAIContentService(api_key="")
        result = await service.get_available_models()

        assert result.succeeded
        assert "gpt-4-turbo-preview" in [m["id"] for m in result.models]


def test_estimate_tokens_rounds_up():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2
