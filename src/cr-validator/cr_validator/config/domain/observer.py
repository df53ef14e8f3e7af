"""Events emitted while a validator config is read."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(
        self, name: str, version: str, llm_model: str, embedding_model: str
    ) -> None: ...

    def config_llm_temperature_warning(self, temperature: float) -> None: ...

    def config_relevance_threshold_warning(self, threshold: float) -> None: ...
