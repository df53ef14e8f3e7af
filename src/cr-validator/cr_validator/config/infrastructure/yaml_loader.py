"""Reads a ValidatorConfig from YAML with ${ENV_VAR} interpolation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cr_validator.config.domain.config import ValidatorConfig
from cr_validator.config.domain.observer import ConfigObserver
from cr_validator.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from cr_validator.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> ValidatorConfig:
        """Parse path, resolve env vars and storage locations, then validate.

        Relative storage paths are taken relative to the directory that holds
        the config file, so a config can be used from any working directory.

        Raises:
            ConfigLoadError: the file is missing or is not valid YAML.
            MissingEnvVarsError: listing every unset ${ENV_VAR} at once.
            ConfigValidationError: the document does not fit the schema.
        """
        document = _read_document(path)
        missing = collect_missing_vars(document)
        if missing:
            raise MissingEnvVarsError(missing)

        try:
            cfg = ValidatorConfig.model_validate(interpolate(document))
        except ValidationError as exc:
            raise ConfigValidationError.from_pydantic(exc) from exc
        cfg = cfg.model_copy(
            update={"storage": cfg.storage.relative_to(path.parent)}
        )

        if cfg.llm.temperature > 0.0:
            self._observer.config_llm_temperature_warning(cfg.llm.temperature)
        if cfg.retrieval.relevance_threshold == 0.0:
            self._observer.config_relevance_threshold_warning(
                cfg.retrieval.relevance_threshold
            )
        self._observer.config_loaded(
            name=cfg.name,
            version=cfg.version,
            llm_model=cfg.llm.model,
            embedding_model=cfg.embedding.model,
        )
        return cfg


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc
