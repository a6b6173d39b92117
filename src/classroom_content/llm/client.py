"""
Gemini Client

Thin asynchronous client for the Gemini `generateContent` REST endpoint.

The model is treated as a text-completion oracle: callers send one prompt
and receive the generated text. `generate_json` additionally strips the
markdown code fences the model tends to wrap JSON in and decodes it.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

import httpx

from ..config import settings

logger = logging.getLogger("content.llm")


_FENCE_RE = re.compile(r"```(?:json)?\n?")


class LLMError(RuntimeError):
    """Raised when the LLM request fails or returns an unusable payload."""


class LLMResponseError(LLMError):
    """Raised when the generated text is not the JSON the caller asked for."""


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` fences anywhere in `text` and trim whitespace."""
    return _FENCE_RE.sub("", text).strip()


class LLMClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key or settings.gemini_api_key.get_secret_value()
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.llm_timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str, temperature: float = 0.4) -> str:
        """
        Send a single-turn prompt and return the generated text.

        Raises
        ------
        LLMError
            On transport/HTTP failure or when the response has no text.
        """
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self.api_key},
                )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Gemini request failed (%s): model=%s, error=%s",
                type(exc).__name__,
                self.model,
                str(exc),
            )
            raise LLMError(f"LLM request failed: {type(exc).__name__}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            logger.error("Gemini returned a non-JSON body: model=%s", self.model)
            raise LLMError("LLM response body was not JSON") from exc

        return self._extract_text(data)

    async def generate_json(self, prompt: str, temperature: float = 0.4) -> Any:
        """
        Generate text and decode it as JSON after stripping code fences.

        Raises
        ------
        LLMResponseError
            If the cleaned text is not valid JSON.
        """
        text = strip_code_fences(await self.generate(prompt, temperature=temperature))

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Gemini returned non-JSON output (%d chars)", len(text))
            raise LLMResponseError("LLM response was not valid JSON") from exc

    @staticmethod
    def _extract_text(data: Any) -> str:
        """
        Join the text parts of the first candidate.

        Gemini returns:
            {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
        """
        if not isinstance(data, dict):
            raise LLMError("LLM response is not a JSON object.")

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise LLMError("LLM response has no candidates.")

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise LLMError("LLM response candidate has no content parts.")

        text = "".join(
            p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
        )
        if not text:
            raise LLMError("LLM response contained no text.")
        return text
