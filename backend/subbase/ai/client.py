import asyncio
import logging
import json
import litellm
from typing import Optional, Dict, Any, Callable, Awaitable

from subbase.config import Settings, settings
from subbase.errors import AIServiceUnavailableError, AIResponseFormatError

logger = logging.getLogger(__name__)

litellm.drop_params = True

OPENROUTER_API_BASE = "https://openrouter.ai/api/v1"


class AIClient:
    """
    Chat-completion client with a bounded retry policy.

    - 429: wait for Retry-After (or attempt * base delay), then retry
    - 5xx: wait attempt * base delay, then retry
    - timeout: retry immediately
    - anything else, or retries exhausted: AIServiceUnavailableError

    ``completion`` and ``sleep`` are injectable so the policy can be
    exercised without a network or a wall clock.
    """

    def __init__(
        self,
        config: Settings = settings,
        completion: Optional[Callable[..., Awaitable[Any]]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.provider = config.ai_provider
        self.model = self._get_model_string()
        self._completion = completion or litellm.acompletion
        self._sleep = sleep

    def _get_model_string(self) -> str:
        model = self.config.ai_model

        if self.provider == "openrouter":
            if not model.startswith("openrouter/"):
                return f"openrouter/{model}"
            return model
        elif self.provider == "ollama":
            if not model.startswith("ollama/"):
                return f"ollama/{model}"
            return model
        else:
            return model

    def _credentials(self) -> Dict[str, Any]:
        """Per-request api_key/api_base, read from configuration at call time."""
        if self.provider == "openrouter":
            return {
                "api_key": self.config.openrouter_api_key,
                "api_base": self.config.ai_base_url or OPENROUTER_API_BASE,
            }
        elif self.provider == "ollama":
            return {"api_base": self.config.ai_base_url or "http://localhost:11434"}
        elif self.provider == "anthropic":
            return {"api_key": self.config.anthropic_api_key}
        elif self.provider == "openai":
            return {"api_key": self.config.openai_api_key}
        return {}

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> str:
        """Return the content of a normally finished completion."""
        credentials = self._credentials()
        if "api_key" in credentials and not credentials["api_key"]:
            logger.error(f"API key for AI provider '{self.provider}' is not configured")
            raise AIServiceUnavailableError()

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            "temperature": self.config.ai_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.config.ai_max_tokens,
            "timeout": self.config.ai_timeout_seconds,
            **credentials,
        }

        if response_format:
            kwargs["response_format"] = response_format

        response = await self._request_with_retries(kwargs)

        choices = getattr(response, "choices", None) or []
        if not choices:
            logger.error("AI response contained no choices")
            raise AIResponseFormatError("Empty response from AI service")

        choice = choices[0]
        self._check_finish_reason(choice.finish_reason)

        content = choice.message.content if choice.message else None
        if not content:
            logger.error("AI response contained no content")
            raise AIResponseFormatError("Empty content from AI service")

        usage = getattr(response, "usage", None)
        logger.info(
            "AI completion finished: model=%s tokens_used=%s",
            getattr(response, "model", self.model),
            getattr(usage, "total_tokens", None),
        )
        return content

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Any:
        response = await self.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format=response_format or {"type": "json_object"}
        )

        cleaned = response.strip()
        if cleaned.startswith("```json"):
            cleaned = cleaned[7:]
        if cleaned.startswith("```"):
            cleaned = cleaned[3:]
        if cleaned.endswith("```"):
            cleaned = cleaned[:-3]

        try:
            return json.loads(cleaned.strip())
        except ValueError as e:
            logger.error(f"AI response is not valid JSON: {e}")
            raise AIResponseFormatError() from e

    async def _request_with_retries(self, kwargs: Dict[str, Any]) -> Any:
        max_attempts = max(1, self.config.ai_max_attempts)
        base_delay = self.config.ai_retry_base_delay
        attempt = 1

        while True:
            try:
                return await asyncio.wait_for(
                    self._completion(**kwargs),
                    timeout=self.config.ai_timeout_seconds
                )
            except (asyncio.TimeoutError, litellm.Timeout) as e:
                logger.error(f"AI request timed out (attempt {attempt}/{max_attempts})")
                if attempt >= max_attempts:
                    raise AIServiceUnavailableError() from e
                delay = 0.0
            except litellm.RateLimitError as e:
                if attempt >= max_attempts:
                    logger.error(f"AI rate limit persisted after {attempt} attempts")
                    raise AIServiceUnavailableError() from e
                delay = self._retry_after_seconds(e)
                if delay is None:
                    delay = base_delay * attempt
                logger.warning(f"AI rate limited, retrying after {delay}s (attempt {attempt}/{max_attempts})")
            except (litellm.InternalServerError, litellm.ServiceUnavailableError, litellm.APIError) as e:
                status_code = getattr(e, "status_code", None) or 500
                if status_code < 500 or attempt >= max_attempts:
                    logger.error(f"AI API error: status={status_code} error={e}")
                    raise AIServiceUnavailableError() from e
                delay = base_delay * attempt
                logger.warning(f"AI server error {status_code}, retrying after {delay}s (attempt {attempt}/{max_attempts})")
            except Exception as e:
                logger.error(f"AI completion error: {e}")
                raise AIServiceUnavailableError() from e

            if delay:
                await self._sleep(delay)
            attempt += 1

    @staticmethod
    def _retry_after_seconds(error: Exception) -> Optional[float]:
        headers = getattr(error, "litellm_response_headers", None)
        if not headers:
            response = getattr(error, "response", None)
            headers = getattr(response, "headers", None)
        if not headers:
            return None

        value = headers.get("retry-after") or headers.get("Retry-After")
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _check_finish_reason(finish_reason: Optional[str]) -> None:
        if finish_reason == "stop":
            return
        if finish_reason == "length":
            logger.warning("AI response truncated due to token limit")
        elif finish_reason == "content_filter":
            logger.error("AI response blocked by content filter")
        else:
            logger.error(f"Unexpected finish_reason: {finish_reason}")
        raise AIServiceUnavailableError()


_ai_client: Optional[AIClient] = None

def get_ai_client() -> AIClient:
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
