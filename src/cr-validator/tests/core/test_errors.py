"""Tests verifying the ValidatorError type hierarchy and retry classification."""

from pathlib import Path

import pytest

from cr_validator.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from cr_validator.core.errors import (
    ConfigurationError,
    InputError,
    PersistenceError,
    UpstreamError,
    ValidatorError,
)
from cr_validator.embedding.infrastructure.errors import EmbeddingFailure
from cr_validator.ingestion.infrastructure.errors import DocumentLoadError
from cr_validator.phases.infrastructure.errors import (
    LLMProviderError,
    LLMResponseParseError,
    LLMTimeout,
)
from cr_validator.prompts.application.errors import TemplateError
from cr_validator.retrieval.infrastructure.errors import VectorStoreError
from cr_validator.storage.infrastructure.errors import (
    ReportPersistError,
    ResultStoreError,
)
from cr_validator.story.infrastructure.errors import StoryNotFound, UpstreamUnavailable
from cr_validator.validation.application.errors import (
    StageTimeoutError,
    StorySelectionError,
)

ALL_ERRORS: list[ValidatorError] = [
    MissingEnvVarsError(missing_vars=["MY_VAR"]),
    ConfigValidationError(reason="bad value"),
    ConfigLoadError(path=Path("/some/config.yaml")),
    StoryNotFound(story_id="PAY-1"),
    UpstreamUnavailable(reason="connection refused"),
    EmbeddingFailure(reason="quota"),
    VectorStoreError(reason="index file not found"),
    TemplateError(phase="functional_alignment", reason="story is required"),
    LLMProviderError(phase="nfr_validation", reason="bad request"),
    LLMTimeout(phase="nfr_validation", timeout_seconds=60),
    LLMResponseParseError(phase="nfr_validation", reason="1 validation error(s)"),
    StorySelectionError(reason="story id is blank"),
    StageTimeoutError(operation="embed", timeout_seconds=10),
    ReportPersistError(reason="disk full"),
    ResultStoreError(reason="disk full"),
    DocumentLoadError(path="docs.jsonl", reason="file not found"),
]


class TestValidatorErrorHierarchy:
    """All cr-validator-specific exceptions inherit from ValidatorError."""

    @pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
    def test_is_validator_error(self, error: ValidatorError) -> None:
        assert isinstance(error, ValidatorError)

    @pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
    def test_message_starts_with_failed(self, error: ValidatorError) -> None:
        assert str(error).startswith("Failed to ")

    def test_validator_error_is_exception(self) -> None:
        assert isinstance(ValidatorError("test"), Exception)

    def test_default_is_not_retriable(self) -> None:
        assert ValidatorError("test").retriable is False


class TestErrorCategories:
    """Each concrete error belongs to the category the orchestrator acts on."""

    @pytest.mark.parametrize(
        "error",
        [
            StoryNotFound(story_id="PAY-1"),
            StorySelectionError(reason="duplicate CR id"),
            DocumentLoadError(path="docs.jsonl", reason="empty"),
        ],
        ids=lambda e: type(e).__name__,
    )
    def test_input_errors_are_never_retriable(self, error: ValidatorError) -> None:
        assert isinstance(error, InputError)
        assert error.retriable is False

    @pytest.mark.parametrize(
        "error",
        [
            MissingEnvVarsError(missing_vars=["X"]),
            TemplateError(phase="risk_classification", reason="missing prior"),
        ],
        ids=lambda e: type(e).__name__,
    )
    def test_configuration_errors_are_never_retriable(
        self, error: ValidatorError
    ) -> None:
        assert isinstance(error, ConfigurationError)
        assert error.retriable is False

    @pytest.mark.parametrize(
        "error",
        [
            UpstreamUnavailable(reason="timeout"),
            LLMTimeout(phase="nfr_validation", timeout_seconds=5),
            LLMResponseParseError(phase="nfr_validation", reason="not json"),
            StageTimeoutError(operation="retrieve", timeout_seconds=10),
        ],
        ids=lambda e: type(e).__name__,
    )
    def test_transient_upstream_errors_are_retriable(
        self, error: ValidatorError
    ) -> None:
        assert isinstance(error, UpstreamError)
        assert error.retriable is True

    def test_provider_error_retriable_flag_is_caller_controlled(self) -> None:
        assert LLMProviderError(phase="p", reason="r").retriable is False
        assert LLMProviderError(phase="p", reason="r", retriable=True).retriable

    def test_persistence_errors(self) -> None:
        assert isinstance(ReportPersistError(reason="x"), PersistenceError)
        assert isinstance(ResultStoreError(reason="x"), PersistenceError)

    def test_llm_timeout_is_provider_error(self) -> None:
        error = LLMTimeout(phase="ac_gap_detection", timeout_seconds=30)
        assert isinstance(error, LLMProviderError)
        assert "ac_gap_detection" in str(error)
        assert "30" in str(error)

    def test_missing_env_vars_are_listed_sorted(self) -> None:
        error = MissingEnvVarsError(missing_vars=["ZED", "ALPHA"])
        assert "ALPHA, ZED" in str(error)
        assert error.missing_vars == ["ZED", "ALPHA"]
