"""
PDF Studio — Model Invocation
==============================
Prompt string in, completion text out. Providers: Groq and Gemini.

  - One attempt per configured provider, no automatic retry
  - `hybrid` mode falls through to the second provider when the first fails
  - Every failure surfaces as ProviderError
"""

import logging
import asyncio
from typing import Awaitable, Callable, Optional

import google.generativeai as genai
from groq import AsyncGroq

from pdfstudio.core.config import settings
from pdfstudio.core.errors import ProviderError

logger = logging.getLogger(__name__)

ModelInvoker = Callable[[str], Awaitable[str]]

SYSTEM_PROMPT = "You are a precise study assistant. You always answer with a single valid JSON document."

# ── Clients Initialization ────────────────────────────────────────────────────
logger.info(f"[AI-ENGINE] Provider mode: {settings.AI_PROVIDER}")

groq_client: Optional[AsyncGroq] = None
if settings.GROQ_API_KEY:
    groq_client = AsyncGroq(api_key=settings.GROQ_API_KEY)
    logger.info("[AI-ENGINE] ✓ Groq client ready")
else:
    logger.warning("[AI-ENGINE] ✗ Groq API key missing")

if settings.GOOGLE_API_KEY:
    genai.configure(api_key=settings.GOOGLE_API_KEY, transport="rest")
    logger.info("[AI-ENGINE] ✓ Gemini client ready")
else:
    logger.warning("[AI-ENGINE] ✗ Google API key missing")


# ── Core: Call Groq ───────────────────────────────────────────────────────────

async def _call_groq(prompt: str) -> str:
    """Call Groq with JSON mode and temperature=0."""
    if not groq_client:
        raise ProviderError("Groq API Key missing")

    logger.info(f"[AI-ENGINE] Calling Groq ({settings.GROQ_MODEL})...")
    completion = await groq_client.chat.completions.create(
        model=settings.GROQ_MODEL,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        response_format={"type": "json_object"},
        temperature=0,
        max_tokens=settings.MAX_COMPLETION_TOKENS,
    )
    result = completion.choices[0].message.content
    logger.info("[AI-ENGINE] ✓ Groq call succeeded")
    return result


# ── Core: Call Gemini ─────────────────────────────────────────────────────────

async def _call_gemini(prompt: str) -> str:
    """Call Gemini with JSON mime type and temperature=0."""
    if not settings.GOOGLE_API_KEY:
        raise ProviderError("Google API Key missing")

    logger.info(f"[AI-ENGINE] Calling Gemini ({settings.GEMINI_MODEL})...")
    model = genai.GenerativeModel(
        model_name=settings.GEMINI_MODEL,
        system_instruction=SYSTEM_PROMPT,
        generation_config={
            "response_mime_type": "application/json",
            "temperature": 0,
            "max_output_tokens": settings.MAX_COMPLETION_TOKENS,
        },
    )
    response = await asyncio.to_thread(model.generate_content, prompt)
    logger.info("[AI-ENGINE] ✓ Gemini call succeeded")
    return response.text


# ── Provider order ────────────────────────────────────────────────────────────

def _callers():
    provider = settings.AI_PROVIDER
    if provider == "groq":
        return [("Groq", _call_groq)]
    if provider == "gemini":
        return [("Gemini", _call_gemini)]
    return [("Groq", _call_groq), ("Gemini", _call_gemini)]


async def complete(prompt: str) -> str:
    """
    Send one prompt, return the raw completion text.
    In 'hybrid' mode the second provider is tried once if the first fails.
    """
    last_error: Optional[Exception] = None
    for name, caller in _callers():
        try:
            result = await caller(prompt)
        except Exception as e:
            last_error = e
            logger.warning(f"[AI-ENGINE] ✗ {name} failed: {str(e)[:200]}")
            continue

        if not result or not result.strip():
            last_error = ProviderError(f"{name} returned an empty completion")
            logger.warning(f"[AI-ENGINE] ✗ {name} returned an empty completion")
            continue
        return result

    raise ProviderError(f"All AI providers failed. Last error: {last_error}")


def get_model_invoker() -> ModelInvoker:
    """FastAPI dependency: the coroutine used to talk to the model."""
    return complete
