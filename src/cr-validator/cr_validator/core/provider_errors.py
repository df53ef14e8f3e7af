"""Classification of LLM/embedding provider exceptions raised through LiteLLM.

LiteLLM re-raises provider failures as subclasses of the OpenAI SDK exception
types, so classification is done against those bases.
"""

import openai


def is_timeout(exc: BaseException) -> bool:
    return isinstance(exc, (openai.APITimeoutError, TimeoutError))


def is_retriable(exc: BaseException) -> bool:
    """True for transient failures: timeouts, connection errors, rate limits, 5xx."""
    if is_timeout(exc):
        return True
    if isinstance(
        exc,
        (openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError),
    ):
        return True
    return isinstance(exc, openai.APIStatusError) and exc.status_code >= 500
