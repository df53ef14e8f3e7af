"""structlog adapter for config events."""

import structlog


class StructlogConfigObserver:
    def __init__(self) -> None:
        self._log = structlog.get_logger().bind(context="config")

    def config_loaded(
        self, name: str, version: str, llm_model: str, embedding_model: str
    ) -> None:
        self._log.info(
            "config.loaded",
            name=name,
            version=version,
            llm_model=llm_model,
            embedding_model=embedding_model,
        )

    def config_llm_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.llm.temperature_nonzero",
            temperature=temperature,
            detail="repeat runs of the same story may disagree",
        )

    def config_relevance_threshold_warning(self, threshold: float) -> None:
        self._log.warning(
            "config.retrieval.threshold_disabled",
            threshold=threshold,
            detail="every retrieved chunk will be treated as relevant",
        )
