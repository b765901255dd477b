"""
HTTP Scorer Client

Scores answers through an OpenAI-compatible chat completion endpoint with
async HTTP requests, bounded timeouts and retry logic.
"""

import json
import os
import time
from typing import Dict, Any, Optional
import aiohttp

from .base import ExternalScorer, ScorerResponse
from .response_parser import EvaluationResponseParser
from ..core.config import AppConfig, ScorerConfig, get_config
from ..core.exceptions import ScorerError, RateLimitError, ConfigurationError
from ..utils.async_helpers import retry_with_backoff
from ..utils.logging import get_logger

logger = get_logger(__name__)


class HTTPScorer(ExternalScorer):
    """Chat-completion API client that grades answers with a language model."""

    name = "http"

    def __init__(self, api_key: Optional[str] = None, config: Optional[ScorerConfig] = None):
        """
        Initialize the HTTP scorer.

        Args:
            api_key: API key (read from the configured environment variable if not provided)
            config: Scorer configuration
        """
        super().__init__()
        self.config = config or get_config().scorer
        self.api_key = api_key or os.getenv(self.config.api_key_env)
        if not self.api_key:
            raise ConfigurationError(
                f"Scorer API key not provided. Set {self.config.api_key_env} environment variable."
            )

        self.base_url = self.config.base_url.rstrip('/')
        self.retries = self.config.max_retries
        self.session: Optional[aiohttp.ClientSession] = None
        self.response_parser = EvaluationResponseParser()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
        return self.session

    async def score(self, question: str, reference: str, student_answer: str) -> ScorerResponse:
        """
        Ask the model to grade an answer.

        Raises:
            ScorerError: If the request fails or the reply has no usable score
            RateLimitError: If rate limits are exceeded
        """
        prompt = self.format_evaluation_prompt(question, reference, student_answer)
        payload = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        start_time = time.time()
        try:
            session = await self._ensure_session()
            response_data = await self._make_request_with_retry(session, headers, payload)

            if 'choices' not in response_data or not response_data['choices']:
                raise ScorerError(
                    "Invalid response format: no choices in response",
                    scorer_name=self.config.model,
                    response_body=str(response_data)
                )

            response_text = response_data['choices'][0]['message']['content']
            score, feedback = self.response_parser.parse(response_text)
        except Exception:
            self.record_request(success=False)
            raise

        self.record_request(success=True)
        latency_ms = (time.time() - start_time) * 1000
        logger.debug(f"Scorer {self.config.model} answered in {latency_ms:.0f}ms with score {score}")

        return ScorerResponse(
            score=score,
            feedback=feedback,
            scorer_name=self.config.model,
            raw_text=response_text,
            latency_ms=latency_ms,
            metadata={
                'usage': response_data.get('usage', {}),
                'finish_reason': response_data['choices'][0].get('finish_reason'),
            }
        )

    @retry_with_backoff(max_retries=2, base_delay=1.0)
    async def _make_request_with_retry(self, session: aiohttp.ClientSession,
                                       headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make HTTP request with retry logic."""
        try:
            async with session.post(f"{self.base_url}/chat/completions",
                                    headers=headers, json=payload) as response:
                response_text = await response.text()

                if response.status == 429:
                    retry_after = response.headers.get('Retry-After')
                    retry_after_seconds = int(retry_after) if retry_after and retry_after.isdigit() else 5

                    raise RateLimitError(
                        f"Rate limit exceeded, retry after {retry_after_seconds} seconds",
                        retry_after=retry_after_seconds,
                        scorer_name=self.config.model,
                        status_code=response.status
                    )

                elif response.status != 200:
                    raise ScorerError(
                        f"Scorer request failed with status {response.status}",
                        scorer_name=self.config.model,
                        status_code=response.status,
                        response_body=response_text
                    )

                try:
                    return json.loads(response_text)
                except json.JSONDecodeError as e:
                    raise ScorerError(
                        f"Invalid JSON response: {str(e)}",
                        scorer_name=self.config.model,
                        response_body=response_text
                    ) from e

        except aiohttp.ClientError as e:
            raise ScorerError(
                f"HTTP client error: {str(e)}",
                scorer_name=self.config.model
            ) from e

    def is_available(self) -> bool:
        """Check if the scorer has what it needs to make requests."""
        return bool(self.api_key and self.base_url)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None


def create_scorer(config: Optional[AppConfig] = None) -> Optional[ExternalScorer]:
    """
    Build the configured external scorer.

    Returns:
        An HTTPScorer, or None when the scorer is disabled or has no API key
    """
    config = config or get_config()
    if not config.scorer.enabled:
        return None

    api_key = config.get_scorer_api_key()
    if not api_key:
        logger.warning(f"External scorer enabled but {config.scorer.api_key_env} is not set; using heuristic grading")
        return None

    return HTTPScorer(api_key=api_key, config=config.scorer)
