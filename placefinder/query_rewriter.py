"""LLM query rewriter with a safe no-op fallback.

Rewriting is best effort: a missing API key yields a no-op rewriter, and any
failure during a call falls back to the caller's original text.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, Mapping, Optional

import requests

from . import config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert query optimizer for Google Maps Places API searches. Your job is to transform user queries into the most effective search terms for finding places.

Guidelines:
1. Focus on the core intent - what type of place/business they want
2. Include location if mentioned, otherwise keep it general
3. Use common business/place terminology that Google Maps recognizes
4. Remove unnecessary words and conversational elements
5. Make it concise but specific
6. If they mention a specific location, include it
7. Transform informal descriptions into proper business categories

Examples:
"I'm looking for a good pizza place in Manhattan" → "pizza restaurant Manhattan"
"Where can I get my car fixed near me?" → "car repair shop"
"best coffee in Seattle" → "coffee shop Seattle"
"I need to find a pharmacy that's open late" → "24 hour pharmacy"
"good sushi restaurant recommendations in Tokyo" → "sushi restaurant Tokyo"

Return only the optimized search query, nothing else."""


class RewriteError(RuntimeError):
    pass


class BaseQueryRewriter:
    def rewrite(self, query: str) -> str:
        raise NotImplementedError


class NoopQueryRewriter(BaseQueryRewriter):
    def __init__(self, reason: str = "skipped_no_api_key") -> None:
        self.reason = reason

    def rewrite(self, query: str) -> str:
        return query


class QueryRewriter(BaseQueryRewriter):
    def __init__(
        self,
        api_key: str,
        model: str = config.DEFAULT_DEEPSEEK_MODEL,
        timeout_seconds: float = config.REWRITE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        url: str = config.DEEPSEEK_CHAT_URL,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.url = url

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> BaseQueryRewriter:
        env = os.environ if environ is None else environ
        api_key = (env.get("DEEPSEEK_API_KEY") or "").strip()
        if not api_key:
            return NoopQueryRewriter("skipped_no_api_key")
        model = (env.get("DEEPSEEK_MODEL") or "").strip() or config.DEFAULT_DEEPSEEK_MODEL
        return cls(api_key=api_key, model=model)

    def _redact(self, text: str) -> str:
        if not text:
            return text
        redacted = text.replace(self.api_key, "[REDACTED]") if self.api_key else text
        redacted = re.sub(r"(Bearer\s+)\S+", r"\1[REDACTED]", redacted)
        return redacted

    def _build_payload(self, query: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "stream": False,
        }

    def _call_api(self, query: str) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            resp = self.session.post(
                self.url, json=self._build_payload(query), headers=headers, timeout=self.timeout_seconds
            )
        except requests.RequestException as exc:
            raise RewriteError(f"request_error: {exc}") from exc
        if resp.status_code >= 400:
            raise RewriteError(f"http_error: {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise RewriteError(f"non_json_response: {exc}") from exc
        return extract_completion_text(data)

    def rewrite(self, query: str) -> str:
        try:
            return self._call_api(query)
        except Exception as exc:
            logger.warning("Query rewrite failed, using original query: %s", self._redact(str(exc)))
            return query


def extract_completion_text(data: Any) -> str:
    if not isinstance(data, dict):
        raise RewriteError("invalid_json: response is not an object")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise RewriteError("invalid_json: no_choices")
    message = choices[0].get("message") or {}
    text = message.get("content") if isinstance(message, dict) else None
    if not isinstance(text, str):
        raise RewriteError("invalid_json: missing_content")
    text = text.strip()
    if not text:
        raise RewriteError("invalid_json: empty_content")
    return text
