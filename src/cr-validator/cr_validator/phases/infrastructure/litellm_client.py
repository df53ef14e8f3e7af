"""LiteLLMClient: LLMClient implementation using LiteLLM."""

import time

import litellm

from cr_validator.config.domain.llm import LLMConfig
from cr_validator.core.provider_errors import is_retriable, is_timeout
from cr_validator.phases.domain.observer import PhaseObserver
from cr_validator.phases.infrastructure.errors import LLMProviderError, LLMTimeout
from cr_validator.prompts.domain.prompt import Prompt


class LiteLLMClient:
    """Sends phase prompts to any LiteLLM-supported chat model in JSON mode."""

    def __init__(self, config: LLMConfig, observer: PhaseObserver) -> None:
        litellm.suppress_debug_info = True
        self._config = config
        self._observer = observer

    async def complete(self, prompt: Prompt) -> str:
        """Return the raw completion text for prompt.

        Raises:
            LLMTimeout: if the provider exceeds the phase's timeout budget.
            LLMProviderError: on any other provider failure or an empty answer.
        """
        phase = prompt.phase.value
        timeout = self._config.timeout_for(prompt.phase)
        self._observer.phase_call_started(
            phase=phase,
            model=self._config.model,
            template_version=prompt.template_version,
        )

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                timeout=timeout,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
            )
        except Exception as exc:
            if is_timeout(exc):
                self._observer.phase_call_failed(phase=phase, reason="timeout")
                raise LLMTimeout(phase=phase, timeout_seconds=timeout) from exc
            reason = str(exc)
            self._observer.phase_call_failed(phase=phase, reason=reason)
            raise LLMProviderError(
                phase=phase, reason=reason, retriable=is_retriable(exc)
            ) from exc

        content: str | None = response.choices[0].message.content
        if not content:
            self._observer.phase_call_failed(phase=phase, reason="empty completion")
            raise LLMProviderError(
                phase=phase, reason="empty completion", retriable=True
            )

        self._observer.phase_call_completed(
            phase=phase, duration_ms=int((time.monotonic() - start) * 1000)
        )
        return content
