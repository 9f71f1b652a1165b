"""Single-turn text generation over the provider SDKs (openai, anthropic, google-genai).

Public API:
    generate_text(provider, model, system_prompt, user_prompt, api_key) -> str

Each call returns the first text content block of the first generation,
or an empty string when the response holds no text block.
"""

from __future__ import annotations

import asyncio
from typing import Any, Literal

from ..core.config import settings

Provider = Literal["openai", "anthropic", "gemini"]


# ---------------------------------------------------------------------------
# Lazy client singletons (one per provider + credential)
# ---------------------------------------------------------------------------

_clients: dict[tuple[str, str], Any] = {}


def _get_openai_client(api_key: str) -> Any:
    key = ("openai", api_key)
    if key not in _clients:
        from openai import AsyncOpenAI

        _clients[key] = AsyncOpenAI(api_key=api_key, timeout=settings.llm_timeout)
    return _clients[key]


def _get_anthropic_client(api_key: str) -> Any:
    key = ("anthropic", api_key)
    if key not in _clients:
        from anthropic import AsyncAnthropic

        _clients[key] = AsyncAnthropic(api_key=api_key, timeout=settings.llm_timeout)
    return _clients[key]


def _get_gemini_client(api_key: str) -> Any:
    key = ("gemini", api_key)
    if key not in _clients:
        from google import genai

        _clients[key] = genai.Client(api_key=api_key)
    return _clients[key]


def reset_clients() -> None:
    """Drop cached SDK clients (credential rotation, tests)."""
    _clients.clear()


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


async def _call_openai(model: str, system_prompt: str, user_prompt: str, api_key: str) -> str:
    client = _get_openai_client(api_key)
    completion = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    )

    choice = completion.choices[0] if completion.choices else None
    if not choice:
        return ""
    return choice.message.content or ""


async def _call_anthropic(model: str, system_prompt: str, user_prompt: str, api_key: str) -> str:
    client = _get_anthropic_client(api_key)
    response = await client.messages.create(
        model=model,
        max_tokens=4096,
        system=system_prompt,
        messages=[{"role": "user", "content": user_prompt}],
    )

    for block in response.content:
        if block.type == "text":
            return block.text
    return ""


async def _call_gemini(model: str, system_prompt: str, user_prompt: str, api_key: str) -> str:
    from google.genai.types import GenerateContentConfig

    client = _get_gemini_client(api_key)
    config = GenerateContentConfig(system_instruction=system_prompt)

    def do_sync_call():
        return client.models.generate_content(
            model=model, contents=user_prompt, config=config,
        )

    response = await asyncio.wait_for(
        asyncio.to_thread(do_sync_call), timeout=settings.llm_timeout,
    )
    return _first_gemini_text(response)


def _first_gemini_text(response: Any) -> str:
    if not response.candidates:
        return ""

    candidate = response.candidates[0]
    parts = candidate.content.parts if candidate.content and candidate.content.parts else []
    for part in parts:
        text = getattr(part, "text", None)
        if text:
            return text
    return ""


_BACKENDS = {
    "openai": _call_openai,
    "anthropic": _call_anthropic,
    "gemini": _call_gemini,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def generate_text(
    provider: Provider,
    model: str,
    system_prompt: str,
    user_prompt: str,
    api_key: str,
) -> str:
    """Generate a single completion and return its text.

    Args:
        provider: One of "openai", "anthropic", "gemini".
        model: Provider model identifier.
        system_prompt: System instruction.
        user_prompt: User message.
        api_key: Provider credential.

    Returns:
        The first text block of the response, or "" if there is none.
    """
    backend = _BACKENDS.get(provider)
    if backend is None:
        raise ValueError(f"Unsupported LLM provider: {provider}")
    return await backend(model, system_prompt, user_prompt, api_key)
