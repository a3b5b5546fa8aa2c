"""Similarity oracle backed by the Gemini generateContent API."""

import asyncio
import logging
import random
from typing import Optional

import requests

import config
from data.word_categories import (
    build_random_word_prompt,
    build_similarity_prompt,
    get_random_category,
)
from game.errors import OracleError
from utils.text_parsing import clean_oracle_word, parse_similarity

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
MAX_OUTPUT_TOKENS = 1024


class GeminiOracle:
    """Random starting words and word-pair similarity scores from Gemini."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None
    ):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model = model or config.GEMINI_MODEL
        self.timeout = timeout or config.GEMINI_TIMEOUT
        self.session = session or requests.Session()
        self.rng = rng

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _generate_sync(self, prompt: str) -> str:
        """Send a prompt and return the reply text (blocking)."""
        if not self.is_configured:
            raise OracleError("The Gemini API key is not configured.")

        url = GEMINI_URL.format(model=self.model)
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.7,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
                # Thinking tokens count against maxOutputTokens on 2.5 models
                "thinkingConfig": {"thinkingBudget": 0},
            },
        }

        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.error("Gemini request failed: %s", exc)
            raise OracleError(f"Could not reach the similarity service. ({exc})") from exc

        if response.status_code != 200:
            detail = response.text
            try:
                detail = response.json().get("error", {}).get("message") or detail
            except ValueError:
                pass
            logger.error("Gemini API error %s: %s", response.status_code, detail)
            raise OracleError(f"The similarity service returned an error. ({detail})")

        try:
            result = response.json()
        except ValueError as exc:
            raise OracleError("The similarity service returned malformed JSON.") from exc

        feedback = result.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise OracleError(f"The similarity service refused the request: {feedback['blockReason']}")

        for candidate in result.get("candidates", []):
            content = candidate.get("content") or {}
            text = "".join(part["text"] for part in content.get("parts", []) if "text" in part)
            if text.strip():
                return text.strip()

        logger.error("Empty response from Gemini: %s", result)
        raise OracleError("The similarity service returned an empty response.")

    async def _generate(self, prompt: str) -> str:
        # Run the blocking HTTP call in executor to keep the event loop free
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._generate_sync, prompt)

    async def random_word(self) -> str:
        """Fetch a single starting word from a random category."""
        category = get_random_category(self.rng)
        text = await self._generate(build_random_word_prompt(category))

        word = clean_oracle_word(text)
        if not word:
            raise OracleError("The similarity service did not return a starting word.")
        return word

    async def similarity(self, first: str, second: str) -> float:
        """Score how related two words are, in [-1, 1]."""
        text = await self._generate(build_similarity_prompt(first, second))

        similarity = parse_similarity(text)
        if similarity is None:
            logger.error("Could not parse similarity for %r/%r from %r", first, second, text)
            raise OracleError("Could not read a similarity score from the model's reply.")
        return similarity
