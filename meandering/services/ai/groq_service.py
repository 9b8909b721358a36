"""Groq API integration for text generation."""

import logging
import time
from datetime import datetime, timedelta
from typing import List, Optional

from groq import Groq

from meandering.utils.exceptions import GenerationServiceError

logger = logging.getLogger(__name__)


class RateLimitTracker:
    """Track rate limit usage for Groq API."""

    def __init__(self, requests_per_minute: int = 30):
        """
        Initialize rate limit tracker.

        Args:
            requests_per_minute: Maximum requests allowed per minute
        """
        self.requests_per_minute = requests_per_minute
        self.request_times: List[datetime] = []

    def _prune(self) -> None:
        now = datetime.now()
        self.request_times = [
            t for t in self.request_times
            if now - t < timedelta(minutes=1)
        ]

    def record_request(self) -> None:
        """Record a request timestamp."""
        self.request_times.append(datetime.now())

    def get_wait_time(self) -> float:
        """
        Get seconds to wait before next request.

        Returns:
            Seconds to wait, or 0 if no wait needed
        """
        self._prune()

        if len(self.request_times) < self.requests_per_minute:
            return 0.0

        oldest_request = self.request_times[0]
        wait_time = (oldest_request + timedelta(minutes=1) - datetime.now()).total_seconds()
        return max(0.0, wait_time)


class GroqService:
    """Service for text generation using Groq API."""

    QUALITY_MODEL = "llama-3.3-70b-versatile"

    DEFAULT_MAX_TOKENS = 1024
    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_TIMEOUT = 120  # seconds; long lecture chunks take a while
    DEFAULT_RETRIES = 3

    def __init__(
        self,
        api_key: str,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_RETRIES,
        default_model: str = QUALITY_MODEL,
    ):
        """
        Initialize Groq service.

        Args:
            api_key: Groq API key
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per call
            default_model: Model used when a call does not name one

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("API key cannot be empty")

        self.client = Groq(api_key=api_key)
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.default_model = default_model
        self.rate_limiter = RateLimitTracker()

        logger.info("GroqService initialized with model=%s, timeout=%s, max_retries=%s",
                    default_model, timeout, self.max_retries)

    def generate_text(
        self,
        prompt: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        """
        Generate text using Groq API with retry logic and rate limiting.

        Args:
            prompt: The user prompt to generate text from
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (0.0-2.0)
            model: Model to use, defaults to the service's default model
            system_prompt: Optional system message sent before the prompt

        Returns:
            Generated text

        Raises:
            ValueError: If prompt, temperature or max_tokens are invalid
            GenerationServiceError: If generation fails after retries
        """
        if not prompt:
            raise ValueError("Prompt cannot be empty")

        if not 0.0 <= temperature <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")

        if max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")

        model = model or self.default_model

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        wait_time = self.rate_limiter.get_wait_time()
        if wait_time > 0:
            logger.warning("Rate limit reached, waiting %.2f seconds", wait_time)
            time.sleep(wait_time)

        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                logger.debug(
                    "Generating text (attempt %d/%d) with model=%s, "
                    "max_tokens=%d, temperature=%.2f",
                    attempt + 1, self.max_retries, model, max_tokens, temperature
                )

                response = self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    timeout=self.timeout,
                )

                self.rate_limiter.record_request()

                content = response.choices[0].message.content if response.choices else None
                if not content or not content.strip():
                    raise GenerationServiceError(
                        "Malformed response from generation service",
                        details="Response contained no text",
                    )

                usage = getattr(response, "usage", None)
                logger.info(
                    "Text generated successfully with model=%s, tokens_used=%s",
                    model, getattr(usage, "total_tokens", "unknown")
                )

                return content.strip()

            except Exception as e:
                last_error = e
                logger.warning(
                    "Generation attempt %d/%d failed: %s",
                    attempt + 1, self.max_retries, str(e)
                )

                # Exponential backoff: wait 1s, 2s, 4s between retries
                if attempt < self.max_retries - 1:
                    wait_seconds = 2 ** attempt
                    logger.debug("Retrying after %d seconds", wait_seconds)
                    time.sleep(wait_seconds)

        error_message = (
            f"Text generation failed after {self.max_retries} attempts. "
            f"Last error: {last_error}"
        )
        logger.error(error_message)
        raise GenerationServiceError(details=error_message) from last_error

