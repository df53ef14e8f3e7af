"""Tests for YAML config loading infrastructure."""

from pathlib import Path

import pytest

from cr_validator.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from cr_validator.config.infrastructure.yaml_loader import YamlConfigLoader
from cr_validator.prompts.domain.phase import Phase
from cr_validator.retrieval.domain.chunk import SourceType
from tests.config.fake_observer import FakeConfigObserver

# __file__ is tests/config/infrastructure/test_yaml_loader.py
FIXTURES = Path(__file__).parent.parent.parent / "fixtures"


def _fixture(name: str) -> Path:
    return FIXTURES / name


class TestValidConfigLoading:
    """A valid YAML config loads correctly with all fields populated."""

    @pytest.fixture(autouse=True)
    def _model_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VALIDATOR_LLM_MODEL", "gpt-4o")

    def test_loads_name_and_version(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert cfg.name == "payments-validator"
        assert cfg.version == "1"

    def test_interpolates_llm_model(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert cfg.llm.model == "gpt-4o"
        assert cfg.llm.temperature == 0.0

    def test_loads_phase_timeouts(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert cfg.llm.timeout_for(Phase.RISK_CLASSIFICATION) == 90
        assert cfg.llm.timeout_for(Phase.NFR_VALIDATION) == 60

    def test_loads_retrieval(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert cfg.retrieval.top_k == 10
        assert cfg.retrieval.relevance_threshold == 0.75
        assert cfg.retrieval.expansion_source_types == (
            SourceType.TECH_DOC,
            SourceType.NFR,
        )

    def test_loads_execution(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert cfg.execution.retry.max_attempts == 3
        assert cfg.execution.retry.initial_backoff_seconds == 1
        assert cfg.execution.retry.backoff_multiplier == 2

    def test_loads_storage_paths(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert cfg.storage.stories_path == FIXTURES / "stories.jsonl"
        assert cfg.storage.reports_dir == FIXTURES / "reports"

    def test_emits_config_loaded_event(self) -> None:
        observer = FakeConfigObserver()
        YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        event = observer.loaded[0]
        assert (event.name, event.llm_model) == ("payments-validator", "gpt-4o")
        assert event.embedding_model == "text-embedding-3-small"
        assert observer.temperature_warnings == []
        assert observer.threshold_warnings == []


class TestTemperatureWarning:
    def test_warm_llm_emits_warning_but_loads(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("warm_config.yaml"))

        assert cfg.llm.temperature == 0.7
        assert observer.temperature_warnings == [0.7]
        assert len(observer.loaded) == 1

    def test_zero_threshold_emits_warning(self, tmp_path: Path) -> None:
        text = _fixture("warm_config.yaml").read_text(encoding="utf-8")
        config_path = tmp_path / "open.yaml"
        config_path.write_text(
            text.replace("retrieval: {}", "retrieval: {relevance_threshold: 0.0}"),
            encoding="utf-8",
        )
        observer = FakeConfigObserver()

        YamlConfigLoader(observer).load(config_path)

        assert observer.threshold_warnings == [0.0]

    def test_retrieval_defaults_apply_to_empty_section(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer).load(_fixture("warm_config.yaml"))

        assert cfg.retrieval.top_k == 10
        assert cfg.retrieval.expansion_top_k == 5


class TestConfigErrors:
    def test_missing_env_var_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("VALIDATOR_LLM_MODEL", raising=False)
        observer = FakeConfigObserver()

        with pytest.raises(MissingEnvVarsError) as exc_info:
            YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert exc_info.value.missing_vars == ["VALIDATOR_LLM_MODEL"]
        assert observer.loaded == []

    def test_schema_violation_raises_validation_error(self) -> None:
        with pytest.raises(ConfigValidationError, match="embedding.dimensions"):
            YamlConfigLoader(FakeConfigObserver()).load(_fixture("invalid_config.yaml"))

    def test_malformed_yaml_raises_load_error(self) -> None:
        with pytest.raises(ConfigLoadError, match="invalid YAML"):
            YamlConfigLoader(FakeConfigObserver()).load(_fixture("malformed.yaml"))

    def test_missing_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="file not found"):
            YamlConfigLoader(FakeConfigObserver()).load(tmp_path / "absent.yaml")


class TestStoragePathResolution:
    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        text = _fixture("warm_config.yaml").read_text(encoding="utf-8")
        absolute = tmp_path / "elsewhere" / "results"
        config_path = tmp_path / "abs.yaml"
        config_path.write_text(
            text.replace("./results", str(absolute)), encoding="utf-8"
        )

        cfg = YamlConfigLoader(FakeConfigObserver()).load(config_path)

        assert cfg.storage.results_dir == absolute
        assert cfg.storage.reports_dir == tmp_path / "reports"
