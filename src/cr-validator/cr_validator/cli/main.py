"""CLI entrypoint for cr-validator: typer app with validate, show, comment and ingest."""

import asyncio
import sys
from pathlib import Path

import structlog
import typer

from cr_validator.config.domain.config import ValidatorConfig
from cr_validator.config.infrastructure.observer import StructlogConfigObserver
from cr_validator.config.infrastructure.yaml_loader import YamlConfigLoader
from cr_validator.core.errors import ValidatorError
from cr_validator.embedding.application.memoizing import MemoizingEmbedder
from cr_validator.embedding.infrastructure.litellm import LiteLLMEmbedder
from cr_validator.embedding.infrastructure.observer import StructlogEmbeddingObserver
from cr_validator.ingestion.application.ingestor import DocumentIngestor
from cr_validator.ingestion.infrastructure.jsonl_loader import load_documents
from cr_validator.ingestion.infrastructure.observer import StructlogIngestionObserver
from cr_validator.phases.application.evidence import EvidenceEnforcer
from cr_validator.phases.application.validators import create_phase_validators
from cr_validator.phases.infrastructure.litellm_client import LiteLLMClient
from cr_validator.phases.infrastructure.observer import StructlogPhaseObserver
from cr_validator.prompts.application.builder import PromptBuilder
from cr_validator.report.application.renderer import ReportRenderer
from cr_validator.retrieval.application.retriever import ContextRetriever
from cr_validator.retrieval.infrastructure.memory_store import InMemoryVectorStore
from cr_validator.retrieval.infrastructure.observer import StructlogRetrievalObserver
from cr_validator.scoring.application.engine import ScoringEngine
from cr_validator.storage.infrastructure.filesystem import (
    FileReportSink,
    FileResultStore,
)
from cr_validator.story.infrastructure.jsonl_source import JsonlStorySource
from cr_validator.validation.application.orchestrator import ValidationOrchestrator
from cr_validator.validation.domain.observer import ValidationObserver
from cr_validator.validation.domain.result import FailureReport, ValidationResult
from cr_validator.validation.infrastructure.composite_observer import (
    CompositeValidationObserver,
)
from cr_validator.validation.infrastructure.observer import StructlogValidationObserver
from cr_validator.validation.infrastructure.progress_observer import (
    ProgressValidationObserver,
)

app = typer.Typer(add_completion=False)

_CONFIG_ARG = typer.Argument(..., help="Path to validator config YAML")
_LOG_FORMAT_OPT = typer.Option(
    "console", "--log-format", help="Log format: 'console' or 'json'"
)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_config(config_path: Path, log_format: str) -> ValidatorConfig:
    _configure_structlog(log_format=log_format)
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _build_orchestrator(
    config: ValidatorConfig, observer: ValidationObserver
) -> ValidationOrchestrator:
    embedding_observer = StructlogEmbeddingObserver()
    vector_store = InMemoryVectorStore.load(config.storage.vector_store_path)
    return ValidationOrchestrator(
        config=config,
        story_source=JsonlStorySource(path=config.storage.stories_path),
        embedder=LiteLLMEmbedder(config=config.embedding, observer=embedding_observer),
        retriever=ContextRetriever(
            vector_store=vector_store,
            config=config.retrieval,
            observer=StructlogRetrievalObserver(),
        ),
        prompt_builder=PromptBuilder(),
        validators=create_phase_validators(
            llm=LiteLLMClient(config=config.llm, observer=StructlogPhaseObserver())
        ),
        evidence_enforcer=EvidenceEnforcer(),
        scoring_engine=ScoringEngine(),
        report_renderer=ReportRenderer(),
        report_sink=FileReportSink(reports_dir=config.storage.reports_dir),
        result_store=FileResultStore(root=config.storage.results_dir),
        observer=observer,
        embedding_observer=embedding_observer,
    )


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_WHITE = "\033[97m"

_BAND_COLORS = {"LOW": _GREEN, "MEDIUM": _YELLOW, "HIGH": _RED}


def _score_color(score: float) -> str:
    if score >= 80.0:
        return _GREEN
    if score >= 60.0:
        return _YELLOW
    return _RED


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _print_result(result: ValidationResult) -> None:
    """Print a colorized summary of a completed validation to stdout."""
    band_color = _BAND_COLORS[result.risk_band.value]

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  cr-validator  ·  Validation Complete{_RESET}")
    _rule(color=_CYAN)
    typer.echo("")

    meta_rows: list[tuple[str, str]] = [
        ("Validation ID", result.validation_id),
        ("Story", result.story_id),
        ("CRs", ", ".join(result.cr_ids) or "(none)"),
        ("Report", result.report_path or "(not written)"),
        ("Citation violations", str(len(result.citation_violations))),
    ]
    label_w = max(len(label) for label, _ in meta_rows)
    for label, value in meta_rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    typer.echo("")
    typer.echo(
        f"  {_DIM}{'Dimension':<22}{'Raw':>6}"
        f"  {'Effective':>9}  {'Weight':>6}  Bar{_RESET}"
    )
    typer.echo(f"  {'─' * 22}{'─' * 6}  {'─' * 9}  {'─' * 6}  {'─' * 10}")
    for component in result.readiness.breakdown:
        color = _score_color(score=component.effective)
        filled = round(component.effective / 10)
        bar = f"{color}{'█' * filled}{_DIM}{'░' * (10 - filled)}{_RESET}"
        typer.echo(
            f"  {_WHITE}{component.dimension.value:<22}{_RESET}"
            f"{component.raw:>6.1f}"
            f"  {color}{component.effective:>9.1f}{_RESET}"
            f"  {_DIM}{component.weight:>6.2f}{_RESET}"
            f"  {bar}"
        )

    typer.echo("")
    overall_color = _score_color(score=result.readiness.overall)
    typer.echo(
        f"  {_BOLD}Readiness{_RESET}  {overall_color}{result.readiness.overall:.2f}"
        f"{_RESET}  {band_color}{_BOLD}{result.risk_band.value} risk{_RESET}"
    )
    typer.echo(f"  {_DIM}{result.readiness.rationale}{_RESET}")

    for error in result.persistence_errors:
        typer.echo(f"  {_YELLOW}{error}{_RESET}")

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


def _print_failure(report: FailureReport) -> None:
    typer.echo(
        f"{_RED}{_BOLD}Validation {report.validation_id} failed at stage "
        f"'{report.stage.value}'{_RESET} ({report.error_type}): {report.cause}"
    )


@app.command()
def validate(
    config_path: Path = _CONFIG_ARG,
    story_id: str = typer.Argument(..., help="Id of the story to validate"),
    cr_ids: list[str] | None = typer.Option(
        None, "--cr", help="CR document id to validate against (repeatable)"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the result as JSON instead of a summary"
    ),
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Validate a story against the selected CR documents."""
    try:
        config = _load_config(config_path=config_path, log_format=log_format)

        observers: list[ValidationObserver] = [StructlogValidationObserver()]
        if log_format != "json" and not as_json:
            observers.append(ProgressValidationObserver())
        orchestrator = _build_orchestrator(
            config=config, observer=CompositeValidationObserver(observers=observers)
        )

        outcome = asyncio.run(
            orchestrator.validate_story_by_id(story_id=story_id, cr_ids=cr_ids or [])
        )
        if as_json:
            typer.echo(outcome.model_dump_json(indent=2))
        elif isinstance(outcome, ValidationResult):
            _print_result(outcome)
        else:
            _print_failure(outcome)
        if isinstance(outcome, FailureReport):
            sys.exit(1)

    except KeyboardInterrupt:
        typer.echo("Validation interrupted.")
        sys.exit(1)
    except ValidatorError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def show(
    config_path: Path = _CONFIG_ARG,
    validation_id: str = typer.Argument(..., help="Validation id to look up"),
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Print a stored validation result with its comments as JSON."""
    try:
        config = _load_config(config_path=config_path, log_format=log_format)
        store = FileResultStore(root=config.storage.results_dir)

        async def _lookup() -> tuple[ValidationResult | None, list[str]]:
            result = await store.find_by_id(validation_id)
            comments = await store.comments_for(validation_id)
            return result, [c.model_dump_json() for c in comments]

        result, comments = asyncio.run(_lookup())
        if result is None:
            typer.echo(f"No validation result with id '{validation_id}'.")
            sys.exit(1)
        typer.echo(result.model_dump_json(indent=2))
        for comment in comments:
            typer.echo(comment)

    except ValidatorError as exc:
        typer.echo(str(exc))
        sys.exit(1)


@app.command()
def comment(
    config_path: Path = _CONFIG_ARG,
    validation_id: str = typer.Argument(..., help="Validation id to comment on"),
    text: str = typer.Argument(..., help="Comment text"),
    author: str = typer.Option(..., "--author", help="Who is commenting"),
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Append a reviewer comment to a stored validation result."""
    try:
        config = _load_config(config_path=config_path, log_format=log_format)
        store = FileResultStore(root=config.storage.results_dir)

        async def _append() -> None:
            await store.add_comment(validation_id, author=author, text=text)
            await store.log(
                event_type="comment_added",
                validation_id=validation_id,
                actor=author,
                metadata={},
            )

        asyncio.run(_append())
        typer.echo(f"Comment added to {validation_id}.")

    except ValidatorError as exc:
        typer.echo(str(exc))
        sys.exit(1)


@app.command()
def ingest(
    config_path: Path = _CONFIG_ARG,
    documents_path: Path = typer.Argument(..., help="JSONL file of source documents"),
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Embed and index source documents into the local vector store."""
    try:
        config = _load_config(config_path=config_path, log_format=log_format)
        documents = load_documents(documents_path)

        index_path = config.storage.vector_store_path
        store = (
            InMemoryVectorStore.load(index_path)
            if index_path.exists()
            else InMemoryVectorStore()
        )
        embedding_observer = StructlogEmbeddingObserver()
        embedder = MemoizingEmbedder(
            LiteLLMEmbedder(config=config.embedding, observer=embedding_observer),
            observer=embedding_observer,
        )
        ingestor = DocumentIngestor(
            embedder=embedder,
            vector_store=store,
            observer=StructlogIngestionObserver(),
        )

        summary = asyncio.run(ingestor.ingest(documents))
        store.dump(index_path)
        typer.echo(
            f"Indexed {summary.chunks} chunk(s) from {summary.documents} "
            f"document(s) into {index_path}."
        )

    except KeyboardInterrupt:
        typer.echo("Ingestion interrupted.")
        sys.exit(1)
    except ValidatorError as exc:
        typer.echo(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    app()
