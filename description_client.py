"""LLM-backed one-line descriptions for links (Gemini or any OpenAI-compatible API)."""

from __future__ import annotations

import logging
import os
from typing import Any

import requests
from openai import OpenAI, OpenAIError

from models import (
    PROVIDER_GEMINI,
    PROVIDER_OPENAI_COMPATIBLE,
    ProviderConfig,
    ProviderConfigError,
)

DEFAULT_GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0
DESCRIPTION_TEMPERATURE = 0.3
MAX_DESCRIPTION_LEN = 200

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = """You write descriptions for a personal bookmarks page.
Given a website title and URL, reply with ONE short sentence (at most 20 words)
saying what the site offers. Reply in the language of the title.
No quotes, no markdown, no preamble."""


class ProviderError(RuntimeError):
    """Raised when a description could not be generated for a link."""


def load_provider_config() -> ProviderConfig:
    """Build provider settings from AI_* environment variables."""
    provider = os.getenv("AI_PROVIDER", PROVIDER_GEMINI).strip().lower()
    if provider == "openai":
        provider = PROVIDER_OPENAI_COMPATIBLE
    base_url = os.getenv("AI_BASE_URL") or None
    if provider == PROVIDER_OPENAI_COMPATIBLE and base_url is None:
        base_url = DEFAULT_OPENAI_BASE_URL
    return ProviderConfig(
        provider=provider,
        api_key=os.getenv("AI_API_KEY", ""),
        model=os.getenv("AI_MODEL", ""),
        base_url=base_url,
    )


def generate_description(title: str, url: str, config: ProviderConfig) -> str:
    """Generate a short description for one link; raises ProviderError on any failure."""
    try:
        config.validate()
    except ProviderConfigError as exc:
        raise ProviderError(str(exc)) from exc

    LOGGER.debug("Requesting description via %s model=%s: %s", config.provider, config.resolved_model, url)
    user_prompt = f"Title: {title}\nURL: {url}\n"

    if config.provider == PROVIDER_GEMINI:
        content = _call_gemini(config=config, user_prompt=user_prompt)
    else:
        content = _call_openai_compatible(config=config, user_prompt=user_prompt)

    description = _clean_description(content)
    if not description:
        raise ProviderError(f"{config.provider} returned an empty description for {url}")
    return description


def _call_gemini(config: ProviderConfig, user_prompt: str) -> str:
    base = os.getenv("GEMINI_API_BASE_URL", DEFAULT_GEMINI_API_BASE_URL)
    endpoint = f"{base}/v1beta/models/{config.resolved_model}:generateContent"
    payload = {
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
        "generationConfig": {"temperature": DESCRIPTION_TEMPERATURE},
    }
    headers = {
        "x-goog-api-key": config.api_key,
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(endpoint, headers=headers, json=payload, timeout=_request_timeout())
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise ProviderError(f"Gemini request failed: {exc}") from exc

    return _gemini_text(body)


def _gemini_text(body: Any) -> str:
    try:
        parts = body["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    except (KeyError, IndexError, TypeError) as exc:
        raise ProviderError(f"Unexpected Gemini response shape: {body}") from exc


def _call_openai_compatible(config: ProviderConfig, user_prompt: str) -> str:
    client = OpenAI(api_key=config.api_key, base_url=config.base_url, timeout=_request_timeout())
    try:
        response = client.chat.completions.create(
            model=config.resolved_model,
            temperature=DESCRIPTION_TEMPERATURE,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
        )
        return response.choices[0].message.content or ""
    except OpenAIError as exc:
        raise ProviderError(f"OpenAI-compatible request failed: {exc}") from exc
    except (IndexError, AttributeError) as exc:
        raise ProviderError("Unexpected OpenAI-compatible response shape") from exc


def _clean_description(content: str | None) -> str:
    """Collapse model output to a single stripped line, truncated to MAX_DESCRIPTION_LEN chars."""
    text = " ".join((content or "").split()).strip().strip('"“”')
    if len(text) > MAX_DESCRIPTION_LEN:
        return text[: MAX_DESCRIPTION_LEN - 1] + "…"
    return text


def _request_timeout() -> float:
    raw = os.getenv("DESCRIPTION_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        LOGGER.warning("Ignoring invalid DESCRIPTION_TIMEOUT_SECONDS=%r", raw)
        return DEFAULT_TIMEOUT_SECONDS
