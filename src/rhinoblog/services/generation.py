"""Client for the external text-generation service.

This module provides the GenerationClient class that turns a post brief into
a ``GeneratedPost`` by calling an OpenAI-compatible ``chat/completions``
endpoint. It includes:

- Lazily created ``httpx.AsyncClient`` shared by all calls
- Prompt construction for personal stories, educational articles and
  custom requests
- Response parsing that yields ``None`` on any upstream or format failure
- Request metrics for the admin status endpoint
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from rhinoblog.core.settings import settings
from rhinoblog.services.errors import GenerationError

# Configure logger for this module
logger = logging.getLogger(__name__)

PERSONAL = "personal"
EDUCATIONAL = "educational"
CONTENT_TYPES = (PERSONAL, EDUCATIONAL)

MAX_TOKENS_PERSONAL = 1500
MAX_TOKENS_EDUCATIONAL = 2000
MAX_TOKENS_CUSTOM = 3000
MAX_TOKENS_CONNECTION_TEST = 60
# Custom articles ask for 1200 words; shorter replies below this are discarded.
CUSTOM_MIN_WORDS = 1000

CONNECTION_TEST_PROMPT = "Generate a one-sentence tagline for a rhinoplasty blog."


@dataclass(frozen=True)
class GeneratedPost:
    """Title, markdown body and normalized tags returned by the model."""

    title: str
    content: str
    tags: list[str]


@dataclass(frozen=True)
class GenerationConfig:
    """Immutable configuration for generation requests."""

    api_key: str | None
    base_url: str
    model: str
    temperature: float
    timeout_seconds: float


@dataclass
class GenerationMetrics:
    """Counters for generation requests."""

    request_count: int = 0
    success_count: int = 0
    error_count: int = 0
    total_response_time: float = 0.0
    last_error: str | None = None
    error_counts_by_type: dict[str, int] = field(default_factory=dict)

    def record(self, response_time: float, error_type: str | None = None) -> None:
        """Record one request outcome."""
        self.request_count += 1
        self.total_response_time += response_time
        if error_type is None:
            self.success_count += 1
        else:
            self.error_count += 1
            self.last_error = error_type
            self.error_counts_by_type[error_type] = self.error_counts_by_type.get(error_type, 0) + 1

    def get_average_response_time(self) -> float:
        """Get average response time."""
        return self.total_response_time / self.request_count if self.request_count > 0 else 0.0


def load_generation_config() -> GenerationConfig:
    """Build configuration object from global settings."""

    return GenerationConfig(
        api_key=settings.generation_api_key,
        base_url=settings.generation_base_url,
        model=settings.generation_model,
        temperature=settings.generation_temperature,
        timeout_seconds=float(settings.generation_timeout_seconds),
    )


def normalize_generated_tags(tags: Any) -> list[str]:
    """Lower-case tags and strip ``#``; non-string entries are dropped."""
    if not isinstance(tags, list):
        return []
    normalized: list[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        cleaned = tag.replace("#", "").strip().lower()
        if cleaned and cleaned not in normalized:
            normalized.append(cleaned)
    return normalized


def mask_api_key(api_key: str | None) -> str | None:
    """Return a display-safe version of the key, e.g. ``sk-a...wxyz``."""
    if not api_key:
        return None
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"


def build_personal_prompt(age: str, gender: str, procedure: str, reason: str) -> str:
    return (
        "Write a personal rhinoplasty story in the style of a Reddit post. "
        f"The narrator is a {age}-year-old {gender} who got {procedure} rhinoplasty "
        f"due to {reason}. They describe the whole journey: research, consult, "
        "surgery day, recovery, and how they feel now. Write in an honest, relatable "
        "tone like someone posting on r/PlasticSurgery. Add a mini FAQ, bolded section "
        "headers, and tag suggestions.\n\n"
        "Format the response as a JSON object with the following structure:\n"
        "{\n"
        '  "title": "A catchy, Reddit-style title - make it emotional and clickbaity",\n'
        '  "content": "The full post content with markdown formatting, including section '
        'headers, mini FAQ, and conclusion with 3 takeaways",\n'
        '  "tags": ["tag1", "tag2", "tag3"] - array of 3-5 relevant hashtags based on the content\n'
        "}"
    )


def build_educational_prompt(topic: str) -> str:
    return (
        f'Write an expert, educational article about rhinoplasty on the topic: "{topic}".\n\n'
        "This should be written from a medical expert's perspective (plastic surgeon or "
        "medical professional), not as a personal story. Include factual information, "
        "medical terminology where appropriate, and evidence-based explanations. The tone "
        "should be professional, authoritative, and informative.\n\n"
        "Include the following sections:\n"
        "- Introduction explaining the topic's importance\n"
        "- Detailed medical information with proper terminology\n"
        "- Evidence-based explanations and statistics where relevant\n"
        "- Professional recommendations and considerations\n"
        "- Structured with clear headings and subheadings\n"
        "- Conclusion with key takeaways\n\n"
        "Format the response as a JSON object with the following structure:\n"
        "{\n"
        '  "title": "A professional, informative title for this educational article",\n'
        '  "content": "The full article content with markdown formatting, including proper '
        'section headers, medical terminology, and educational content",\n'
        '  "tags": ["tag1", "tag2", "tag3"] - array of 3-5 relevant medical/educational tags '
        "based on the content\n"
        "}"
    )


def build_custom_prompt(custom_prompt: str, content_type: str) -> str:
    tone = (
        "professional, expert tone"
        if content_type == EDUCATIONAL
        else "personal, conversational Reddit-style tone"
    )
    return (
        "Create a comprehensive, well-structured article about rhinoplasty based on the "
        f"following request:\n\n{custom_prompt}\n\n"
        "Important requirements:\n"
        "1. The article must be AT LEAST 1200 words in length\n"
        f"2. Write it in a {tone}\n"
        "3. Include proper markdown formatting with headings (##), subheadings (###), and lists\n"
        "4. Include at least 5-7 distinct sections with headings\n"
        "5. For educational content: include medical terminology, evidence-based "
        "explanations, and professional recommendations\n"
        "6. For personal stories: include emotional journey, specific timeline details, "
        "and personal reflections\n"
        "7. End with a conclusion summarizing key points\n\n"
        "Format the response as a JSON object with the following structure:\n"
        "{\n"
        '  "title": "A descriptive, engaging title for this article",\n'
        '  "content": "The full article content with markdown formatting (at least 1200 words)",\n'
        '  "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"] - array of 5 relevant tags based '
        "on the content\n"
        "}"
    )


def parse_generated_post(raw: str | None, *, min_words: int = 0) -> GeneratedPost | None:
    """Turn the model's JSON message into a ``GeneratedPost``.

    Returns None for empty, malformed or too-short output.
    """
    if not raw:
        logger.error("Empty response from generation service")
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse generation response: %s", exc)
        return None

    if not isinstance(payload, dict):
        logger.error("Generation response is not a JSON object")
        return None
    title = payload.get("title")
    content = payload.get("content")
    if not isinstance(title, str) or not isinstance(content, str) or not title or not content:
        logger.error("Generation response is missing title or content")
        return None

    if min_words:
        word_count = len(content.split())
        if word_count < min_words:
            logger.error("Generated content too short: %d words", word_count)
            return None

    return GeneratedPost(
        title=title,
        content=content,
        tags=normalize_generated_tags(payload.get("tags")),
    )


class GenerationClient:
    """HTTP client wrapper for the text-generation service."""

    def __init__(self, config: GenerationConfig | None = None) -> None:
        self.config = config or load_generation_config()
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()
        self._metrics = GenerationMetrics()

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise GenerationError("Generation service API key is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    headers={"Authorization": f"Bearer {self.config.api_key}"},
                )

        return self._client

    async def _complete(
        self, prompt: str, max_tokens: int, *, json_response: bool = True
    ) -> str | None:
        """Send one chat completion request and return the message text.

        Upstream failures are logged and reported as None.
        """
        client = await self._ensure_client()
        body: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
            "max_tokens": max_tokens,
        }
        if json_response:
            body["response_format"] = {"type": "json_object"}

        start_time = time.time()
        error_type: str | None = None
        try:
            response = await client.post("/chat/completions", json=body)
            response.raise_for_status()
            payload = response.json()
            return payload["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as exc:
            error_type = f"http_{exc.response.status_code}"
            logger.error("Generation service responded with %s", exc.response.status_code)
            return None
        except httpx.HTTPError as exc:
            error_type = "network_error"
            logger.error("Generation request failed: %s", exc)
            return None
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            error_type = "malformed_response"
            logger.error("Unexpected generation response shape: %s", exc)
            return None
        finally:
            self._metrics.record(time.time() - start_time, error_type)

    async def generate(
        self,
        age: str,
        gender: str,
        procedure: str,
        reason: str,
        content_type: str = PERSONAL,
        topic: str | None = None,
    ) -> GeneratedPost | None:
        """Generate a personal story or, for ``educational``, an expert article on ``topic``.

        Raises:
            GenerationError: If no API key is configured.
        """
        if content_type == EDUCATIONAL:
            prompt = build_educational_prompt(topic or procedure)
            max_tokens = MAX_TOKENS_EDUCATIONAL
            logger.info("Requesting educational article on %r", topic)
        else:
            prompt = build_personal_prompt(age, gender, procedure, reason)
            max_tokens = MAX_TOKENS_PERSONAL
            logger.info("Requesting personal story (%s, %s, %s)", age, gender, procedure)

        return parse_generated_post(await self._complete(prompt, max_tokens))

    async def generate_custom(
        self,
        prompt: str,
        content_type: str = EDUCATIONAL,
    ) -> GeneratedPost | None:
        """Generate a long-form article from an admin-written brief."""
        logger.info("Requesting custom %s article", content_type)
        raw = await self._complete(build_custom_prompt(prompt, content_type), MAX_TOKENS_CUSTOM)
        return parse_generated_post(raw, min_words=CUSTOM_MIN_WORDS)

    async def test_connection(self) -> dict[str, Any]:
        """Send a short completion to check the configured key and endpoint.

        Failures are reported in the result rather than raised.
        """
        try:
            tagline = await self._complete(
                CONNECTION_TEST_PROMPT, MAX_TOKENS_CONNECTION_TEST, json_response=False
            )
        except GenerationError as exc:
            return {"success": False, "message": f"Connection failed: {exc}", "tagline": None}
        if tagline is None:
            return {
                "success": False,
                "message": f"Connection failed: {self._metrics.last_error}",
                "tagline": None,
            }
        return {"success": True, "message": "Connection successful", "tagline": tagline.strip()}

    def status(self) -> dict[str, Any]:
        """Report configuration and request metrics without exposing the key."""
        return {
            "configured": self.configured,
            "masked_key": mask_api_key(self.config.api_key),
            "model": self.config.model,
            "base_url": self.config.base_url,
            "request_count": self._metrics.request_count,
            "success_count": self._metrics.success_count,
            "error_count": self._metrics.error_count,
            "average_response_time": self._metrics.get_average_response_time(),
            "last_error": self._metrics.last_error,
        }

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _GenerationClientSingleton:
    """Singleton wrapper for GenerationClient."""

    _instance: GenerationClient | None = None

    @classmethod
    def get_instance(cls) -> GenerationClient:
        """Get or create the singleton GenerationClient instance."""
        if cls._instance is None:
            cls._instance = GenerationClient()
        return cls._instance


def get_generation_client() -> GenerationClient:
    """Return a singleton generation client instance."""
    return _GenerationClientSingleton.get_instance()
