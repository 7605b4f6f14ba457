"""
OpenAI adapter for AI content generation.

Talks to the OpenAI REST API with httpx. Without an API key every call
returns deterministic mock output so the app runs locally.
"""

import asyncio
import logging
import math
import time
from datetime import UTC, datetime
from typing import Any, Optional

import httpx

from core.content_text import strip_markup
from core.domain.content import GenerationOptions
from core.interfaces.services import (
    ArticleResult,
    ContentGenerationClient,
    KeywordResult,
    MetaDescriptionResult,
    ModelsResult,
    QualityResult,
)
from core.prompts import (
    ARTICLE_SYSTEM_PROMPT,
    META_DESCRIPTION_SYSTEM_PROMPT,
    QUALITY_SYSTEM_PROMPT,
    build_blog_prompt,
    build_keywords_prompt,
    build_meta_description_prompt,
    build_quality_prompt,
)
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Enrichment and analysis call parameters
META_MAX_TOKENS = 200
META_TEMPERATURE = 0.7
KEYWORDS_MAX_TOKENS = 200
KEYWORDS_TEMPERATURE = 0.3
QUALITY_MAX_TOKENS = 800
QUALITY_TEMPERATURE = 0.3

# Fixed sampling parameters for article generation
ARTICLE_TOP_P = 1
ARTICLE_FREQUENCY_PENALTY = 0.1
ARTICLE_PRESENCE_PENALTY = 0.1


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


class OpenAIContentService(ContentGenerationClient):
    """AI content generation service using OpenAI chat completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        enrichment_model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        models_cache_ttl: Optional[int] = None,
        organization: Optional[str] = None,
    ):
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.organization = organization or settings.openai_organization
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model
        self.enrichment_model = enrichment_model or settings.openai_enrichment_model
        self.max_tokens = max_tokens or settings.openai_max_tokens
        self.temperature = settings.openai_temperature if temperature is None else temperature
        self.timeout = timeout or settings.openai_timeout
        self.models_cache_ttl = (
            settings.openai_models_cache_ttl if models_cache_ttl is None else models_cache_ttl
        )

        self._models_cache: Optional[ModelsResult] = None
        self._models_cache_expires_at = 0.0
        self._models_lock = asyncio.Lock()

        if not self.api_key:
            logger.warning(
                "OpenAI API key not provided. Using mock content generation for development."
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers

    async def _chat(
        self,
        messages: list[dict[str, str]],
        model: str,
        max_tokens: int,
        temperature: float,
        **params: Any,
    ) -> tuple[str, int, str]:
        """
        Run one chat completion.

        Returns:
            Tuple of (message text, total tokens, model reported by the API)
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json={
                    "model": model,
                    "messages": messages,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    **params,
                },
            )
            response.raise_for_status()
            data = response.json()

        choices = data.get("choices") or []
        if not choices:
            raise ValueError("OpenAI API returned no choices")
        text = (choices[0].get("message") or {}).get("content") or ""
        tokens = (data.get("usage") or {}).get("total_tokens", 0)
        return text, tokens, data.get("model", model)

    def _failure(self, operation: str, exc: Exception, **context: Any) -> str:
        """Log a failed call with its inputs and return the caller-facing message."""
        if isinstance(exc, httpx.HTTPStatusError):
            message = f"OpenAI API error {exc.response.status_code}: {exc.response.text[:500]}"
        elif isinstance(exc, httpx.TimeoutException):
            message = f"OpenAI API request timed out after {self.timeout}s"
        else:
            message = f"{type(exc).__name__}: {exc}"

        logger.error(
            "OpenAI %s failed (%s): %s",
            operation,
            ", ".join(f"{k}={v!r}" for k, v in context.items()),
            message,
            extra={"error": message, "model": context.get("model")},
        )
        return message

    async def generate_article(
        self, topic: str, options: Optional[GenerationOptions] = None
    ) -> ArticleResult:
        """
        Generate a full blog article.

        Args:
            topic: What the article is about
            options: Tone, audience, length, keywords and model overrides

        Returns:
            ArticleResult with content, tokens_used and model, or error set
        """
        options = options or GenerationOptions()
        model = options.model or self.model
        max_tokens = options.max_tokens or self.max_tokens
        temperature = self.temperature if options.temperature is None else options.temperature
        prompt = build_blog_prompt(topic, options)

        if not self.api_key:
            return self._mock_article(topic, prompt, model)

        try:
            content, tokens, used_model = await self._chat(
                [
                    {"role": "system", "content": ARTICLE_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                top_p=ARTICLE_TOP_P,
                frequency_penalty=ARTICLE_FREQUENCY_PENALTY,
                presence_penalty=ARTICLE_PRESENCE_PENALTY,
            )
            if not content.strip():
                raise ValueError("OpenAI API returned empty content")
        except Exception as e:
            return ArticleResult(
                error=self._failure(
                    "article generation",
                    e,
                    topic=topic,
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    options=options.snapshot(),
                )
            )

        logger.debug("Generated article for topic %r (%d tokens)", topic, tokens)
        return ArticleResult(content=content, tokens_used=tokens, model=used_model)

    async def generate_meta_description(
        self, content: str, max_length: int = 155
    ) -> MetaDescriptionResult:
        """Generate an SEO meta description with the cheaper enrichment model."""
        if not self.api_key:
            meta = strip_markup(content).strip().replace("\n", " ")[:max_length].strip()
            return MetaDescriptionResult(
                meta_description=meta,
                length=len(meta),
                tokens_used=estimate_tokens(content) + estimate_tokens(meta),
            )

        try:
            text, tokens, _ = await self._chat(
                [
                    {"role": "system", "content": META_DESCRIPTION_SYSTEM_PROMPT},
                    {"role": "user", "content": build_meta_description_prompt(content, max_length)},
                ],
                model=self.enrichment_model,
                max_tokens=META_MAX_TOKENS,
                temperature=META_TEMPERATURE,
            )
        except Exception as e:
            return MetaDescriptionResult(
                error=self._failure(
                    "meta description generation",
                    e,
                    model=self.enrichment_model,
                    max_length=max_length,
                    content_length=len(content),
                )
            )

        meta = text.strip()
        return MetaDescriptionResult(meta_description=meta, length=len(meta), tokens_used=tokens)

    async def extract_keywords(self, content: str, count: int = 10) -> KeywordResult:
        """Extract SEO keywords; the model's comma-separated answer is split client side."""
        if not self.api_key:
            keywords = self._mock_keywords(content, count)
            return KeywordResult(
                keywords=keywords,
                count=len(keywords),
                tokens_used=estimate_tokens(content),
            )

        try:
            text, tokens, _ = await self._chat(
                [{"role": "user", "content": build_keywords_prompt(content, count)}],
                model=self.enrichment_model,
                max_tokens=KEYWORDS_MAX_TOKENS,
                temperature=KEYWORDS_TEMPERATURE,
            )
        except Exception as e:
            return KeywordResult(
                error=self._failure(
                    "keyword extraction",
                    e,
                    model=self.enrichment_model,
                    count=count,
                    content_length=len(content),
                )
            )

        keywords = [keyword.strip() for keyword in text.split(",") if keyword.strip()]
        return KeywordResult(keywords=keywords, count=len(keywords), tokens_used=tokens)

    async def analyze_quality(self, content: str) -> QualityResult:
        """Ask for a 1-10 quality score and suggestions, returned as free text."""
        if not self.api_key:
            return QualityResult(
                analysis=(
                    "Quality score: 7/10\n\n"
                    "Suggestions:\n"
                    "1. Add concrete examples to support the main points.\n"
                    "2. Tighten the introduction.\n"
                    "3. End with a clearer call-to-action."
                ),
                tokens_used=estimate_tokens(content),
                analyzed_at=datetime.now(UTC),
            )

        try:
            text, tokens, _ = await self._chat(
                [
                    {"role": "system", "content": QUALITY_SYSTEM_PROMPT},
                    {"role": "user", "content": build_quality_prompt(content)},
                ],
                model=self.model,
                max_tokens=QUALITY_MAX_TOKENS,
                temperature=QUALITY_TEMPERATURE,
            )
        except Exception as e:
            return QualityResult(
                error=self._failure(
                    "quality analysis", e, model=self.model, content_length=len(content)
                )
            )

        return QualityResult(analysis=text, tokens_used=tokens, analyzed_at=datetime.now(UTC))

    async def get_available_models(self) -> ModelsResult:
        """
        List GPT models, cached in-process for `models_cache_ttl` seconds.

        Refresh happens under a lock so concurrent callers trigger a single
        request. Failures are returned but never cached.
        """
        async with self._models_lock:
            if self._models_cache and time.monotonic() < self._models_cache_expires_at:
                return self._models_cache

            if not self.api_key:
                models = [
                    {"id": model_id, "created": 0, "owned_by": "openai"}
                    for model_id in settings.openai_pricing
                ]
                result = ModelsResult(models=models, count=len(models))
            else:
                try:
                    async with httpx.AsyncClient(timeout=self.timeout) as client:
                        response = await client.get(
                            f"{self.base_url}/models", headers=self._headers()
                        )
                        response.raise_for_status()
                        data = response.json()
                except Exception as e:
                    return ModelsResult(error=self._failure("model listing", e))

                models = [
                    {
                        "id": item["id"],
                        "created": item.get("created"),
                        "owned_by": item.get("owned_by"),
                    }
                    for item in data.get("data", [])
                    if "gpt" in item.get("id", "")
                ]
                result = ModelsResult(models=models, count=len(models))

            self._models_cache = result
            self._models_cache_expires_at = time.monotonic() + self.models_cache_ttl
            return result

    def _mock_article(self, topic: str, prompt: str, model: str) -> ArticleResult:
        """Generate mock article for development."""
        title = topic.strip().rstrip(".").title()
        content = "\n".join([
            f"# {title}",
            "",
            f"{topic.strip()} matters more than most people realise. "
            "This guide walks through what it is, why it helps and how to get started.",
            "",
            f"## Why {title} Matters",
            "",
            "Small, consistent habits compound over time. Readers who understand the "
            "underlying reasons are far more likely to stick with a change.",
            "",
            "## Getting Started",
            "",
            "Begin with one achievable step, measure your progress every week and "
            "adjust the plan as you learn what works for you.",
            "",
            "## Conclusion",
            "",
            "Start today, keep it simple and share this guide with someone who needs it.",
        ])
        return ArticleResult(
            content=content,
            tokens_used=estimate_tokens(prompt) + estimate_tokens(content),
            model=model,
        )

    @staticmethod
    def _mock_keywords(content: str, count: int) -> list[str]:
        """Most frequent longer words, in order of first appearance on ties."""
        words = [w.strip(".,:;!?()[]\"'").lower() for w in strip_markup(content).split()]
        frequency: dict[str, int] = {}
        for word in words:
            if len(word) > 4 and word.isalpha():
                frequency[word] = frequency.get(word, 0) + 1
        ranked = sorted(frequency, key=lambda w: -frequency[w])
        return ranked[:count]


# Singleton instance
content_ai_service = OpenAIContentService()
