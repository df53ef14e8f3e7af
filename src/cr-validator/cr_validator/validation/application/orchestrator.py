"""ValidationOrchestrator: drives one validation run through its stages."""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from cr_validator.config.domain.config import ValidatorConfig
from cr_validator.core.errors import PersistenceError, ValidatorError
from cr_validator.embedding.application.memoizing import MemoizingEmbedder
from cr_validator.embedding.domain.embedder import Embedder
from cr_validator.embedding.domain.observer import EmbeddingObserver
from cr_validator.phases.application.evidence import (
    EvidenceEnforcer,
    downgrade_violations,
)
from cr_validator.phases.application.guards import (
    apply_context_guards,
    clamp_dimension_scores,
)
from cr_validator.phases.domain.results import (
    EvidenceEnforcementResult,
    PhaseResult,
    PhaseResults,
)
from cr_validator.phases.domain.validator import PhaseValidator
from cr_validator.prompts.application.builder import PromptBuilder
from cr_validator.prompts.application.errors import TemplateError
from cr_validator.prompts.domain.phase import (
    GENERATIVE_PHASES,
    INDEPENDENT_PHASES,
    Phase,
)
from cr_validator.report.application.renderer import ReportRenderer
from cr_validator.retrieval.application.retriever import ContextRetriever
from cr_validator.retrieval.domain.chunk import ExpandedContext, cr_versions
from cr_validator.scoring.application.engine import ScoringEngine
from cr_validator.storage.domain.report_sink import ReportSink
from cr_validator.storage.domain.result_store import ResultStore
from cr_validator.story.domain.source import StorySource
from cr_validator.story.domain.story import Story
from cr_validator.validation.application.errors import StorySelectionError
from cr_validator.validation.application.retry import RetryPolicy
from cr_validator.validation.domain.observer import ValidationObserver
from cr_validator.validation.domain.result import FailureReport, ValidationResult
from cr_validator.validation.domain.stage import Stage, next_stage

AUDIT_ACTOR = "cr-validator"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_validation_id() -> str:
    return str(uuid.uuid4())


@dataclass
class _RunState:
    """Mutable bookkeeping for one run; never escapes the orchestrator."""

    validation_id: str
    story_id: str
    created_at: datetime
    retry: RetryPolicy
    target: Stage = Stage.STORY_FETCHED
    stage_started: float = 0.0


class ValidationOrchestrator:
    """Runs the validation state machine for one story and one CR selection.

    StoryFetched -> Embedded -> Retrieved -> ContextExpanded -> PhasesExecuted
    -> Scored -> ReportReferenced -> Complete. Transitions are forward-only; a
    failure at any stage returns a FailureReport naming that stage and nothing
    is stored as complete.

    Every collaborator is injected. No state survives between invocations:
    the memoizing embedder and the retry policy are created per run.
    """

    def __init__(
        self,
        config: ValidatorConfig,
        story_source: StorySource,
        embedder: Embedder,
        retriever: ContextRetriever,
        prompt_builder: PromptBuilder,
        validators: Mapping[Phase, PhaseValidator],
        evidence_enforcer: EvidenceEnforcer,
        scoring_engine: ScoringEngine,
        report_renderer: ReportRenderer,
        report_sink: ReportSink,
        result_store: ResultStore,
        observer: ValidationObserver,
        embedding_observer: EmbeddingObserver,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_validation_id,
    ) -> None:
        missing = [p.value for p in GENERATIVE_PHASES if p not in validators]
        if missing:
            raise TemplateError(
                phase=missing[0],
                reason=f"no validator registered for: {', '.join(missing)}",
            )
        self._config = config
        self._story_source = story_source
        self._embedder = embedder
        self._retriever = retriever
        self._prompt_builder = prompt_builder
        self._validators = validators
        self._enforcer = evidence_enforcer
        self._scoring = scoring_engine
        self._renderer = report_renderer
        self._report_sink = report_sink
        self._result_store = result_store
        self._observer = observer
        self._embedding_observer = embedding_observer
        self._clock = clock
        self._id_factory = id_factory

    async def validate_story(
        self, story: Story, cr_ids: Sequence[str]
    ) -> ValidationResult | FailureReport:
        """Validate an already-fetched story against the selected CRs."""

        async def provided(_state: _RunState) -> Story:
            return story

        return await self._execute(story.story_id, cr_ids, provided)

    async def validate_story_by_id(
        self, story_id: str, cr_ids: Sequence[str]
    ) -> ValidationResult | FailureReport:
        """Fetch the story from the story source, then validate it."""

        async def fetch(state: _RunState) -> Story:
            if not story_id.strip():
                raise StorySelectionError("story id is blank")
            return await state.retry.call(
                "fetch_story",
                lambda: self._story_source.get_story_by_id(story_id),
                timeout_seconds=self._config.execution.fetch_timeout_seconds,
            )

        return await self._execute(story_id, cr_ids, fetch)

    async def _execute(
        self,
        story_id: str,
        cr_ids: Sequence[str],
        load_story: Callable[[_RunState], Awaitable[Story]],
    ) -> ValidationResult | FailureReport:
        validation_id = self._id_factory()
        state = _RunState(
            validation_id=validation_id,
            story_id=story_id,
            created_at=self._clock(),
            retry=RetryPolicy(
                config=self._config.execution.retry,
                validation_id=validation_id,
                observer=self._observer,
            ),
            stage_started=time.monotonic(),
        )
        self._observer.validation_started(
            validation_id=validation_id, story_id=story_id, cr_ids=list(cr_ids)
        )
        started_at = time.monotonic()

        try:
            result = await self._run(state, cr_ids, load_story)
        except ValidatorError as exc:
            return await self._fail(state, exc)

        self._observer.validation_completed(
            validation_id=validation_id,
            overall=result.readiness.overall,
            risk_band=result.risk_band.value,
            elapsed_seconds=time.monotonic() - started_at,
        )
        return result

    async def _run(
        self,
        state: _RunState,
        cr_ids: Sequence[str],
        load_story: Callable[[_RunState], Awaitable[Story]],
    ) -> ValidationResult:
        selected = _validate_cr_ids(cr_ids)
        story = await load_story(state)
        _validate_story(story)
        state.story_id = story.story_id
        self._advance(state)

        retrieval = self._config.retrieval
        embedder = MemoizingEmbedder(self._embedder, self._embedding_observer)
        query_vector = await state.retry.call(
            "embed",
            lambda: embedder.embed(story.embedding_text()),
            timeout_seconds=self._config.embedding.timeout_seconds,
        )
        self._advance(state)

        candidates = await state.retry.call(
            "retrieve",
            lambda: self._retriever.retrieve(
                query_vector, allowed_doc_ids=selected, top_k=retrieval.top_k
            ),
            timeout_seconds=retrieval.timeout_seconds,
        )
        relevant = self._retriever.filter_by_relevance(
            candidates, threshold=retrieval.relevance_threshold
        )
        self._advance(state)

        context = await state.retry.call(
            "expand_context",
            lambda: self._retriever.expand_context(
                relevant, query_vector, allowed_doc_ids=selected
            ),
            timeout_seconds=retrieval.timeout_seconds,
        )
        self._advance(state)

        results = await self._execute_phases(state, story, context)
        self._advance(state)

        readiness_result = results.readiness_scoring
        scores = clamp_dimension_scores(
            readiness_result.dimension_scores, story, context
        )
        readiness = self._scoring.calculate_readiness_score(scores)
        draft = ValidationResult(
            validation_id=state.validation_id,
            story_id=story.story_id,
            cr_ids=tuple(cr_ids),
            # Unfiltered candidates keep versions of CRs below the threshold.
            cr_versions=cr_versions((*candidates, *context.chunks)),
            phase_results=results,
            dimension_scores=scores,
            readiness=readiness,
            risk_band=self._scoring.classify_risk(readiness.overall),
            prompt_versions={
                phase: self._prompt_builder.template_version(phase)
                for phase in GENERATIVE_PHASES
            },
            citation_violations=results.evidence_enforcement.violations,
            created_at=state.created_at,
        )
        self._advance(state)

        report_path, errors = await self._persist_report(state, draft)
        result = draft.model_copy(
            update={"report_path": report_path, "persistence_errors": errors}
        )
        self._advance(state)

        save_errors = await self._save(state, result)
        if save_errors:
            result = result.model_copy(
                update={"persistence_errors": (*errors, *save_errors)}
            )
        await self._audit(
            state,
            "validation_completed",
            {
                "overall": f"{result.readiness.overall:g}",
                "risk_band": result.risk_band.value,
                "citation_violations": str(len(result.citation_violations)),
            },
        )
        self._advance(state)
        return result

    async def _execute_phases(
        self, state: _RunState, story: Story, context: ExpandedContext
    ) -> PhaseResults:
        """Phases 1-5 concurrently, then Risk, then Readiness, then enforcement.

        The first irrecoverable failure among phases 1-5 cancels the rest.
        """
        results: dict[Phase, PhaseResult] = {}
        try:
            async with asyncio.TaskGroup() as tg:
                for phase in INDEPENDENT_PHASES:
                    tg.create_task(
                        self._run_phase(state, phase, story, context, results)
                    )
        except* ValidatorError as eg:
            raise eg.exceptions[0]

        await self._run_phase(state, Phase.RISK_CLASSIFICATION, story, context, results)
        await self._run_phase(state, Phase.READINESS_SCORING, story, context, results)

        enforcement: EvidenceEnforcementResult = self._enforcer.enforce(
            results, context
        )
        for violation in enforcement.violations:
            self._observer.validation_citation_violation(
                validation_id=state.validation_id,
                phase=violation.phase.value,
                field=violation.field,
                index=violation.index,
                reason=violation.reason,
            )
            await self._audit(
                state,
                "citation_violation",
                {
                    "phase": violation.phase.value,
                    "field": violation.field,
                    "index": str(violation.index),
                    "reason": violation.reason,
                },
            )
        self._observer.validation_phase_completed(
            validation_id=state.validation_id,
            phase=Phase.EVIDENCE_ENFORCEMENT.value,
            findings=len(enforcement.violations),
        )

        downgraded = downgrade_violations(results, enforcement.violations)
        downgraded[Phase.EVIDENCE_ENFORCEMENT] = enforcement
        return PhaseResults.from_mapping(downgraded)

    async def _run_phase(
        self,
        state: _RunState,
        phase: Phase,
        story: Story,
        context: ExpandedContext,
        results: dict[Phase, PhaseResult],
    ) -> None:
        prompt = self._prompt_builder.build(phase, story, context, results)
        validator = self._validators[phase]
        result = await state.retry.call(
            f"phase.{phase.value}",
            lambda: validator.validate(prompt),
            timeout_seconds=self._config.llm.timeout_for(phase),
        )
        if result.phase != phase:
            raise TemplateError(
                phase=phase, reason=f"validator returned a '{result.phase}' result"
            )
        result = apply_context_guards(result, story, context)
        results[phase] = result
        self._observer.validation_phase_completed(
            validation_id=state.validation_id,
            phase=phase.value,
            findings=len(result.findings()),
        )

    async def _persist_report(
        self, state: _RunState, draft: ValidationResult
    ) -> tuple[str | None, tuple[str, ...]]:
        html = self._renderer.render(draft)
        try:
            path = await state.retry.call(
                "persist_report",
                lambda: self._report_sink.persist(
                    html,
                    story_id=draft.story_id,
                    validation_id=draft.validation_id,
                    created_at=draft.created_at,
                ),
                timeout_seconds=self._config.execution.persist_timeout_seconds,
            )
        except ValidatorError as exc:
            self._observer.validation_persistence_failed(
                validation_id=state.validation_id, target="report", reason=str(exc)
            )
            return None, (str(exc),)
        return str(path), ()

    async def _save(
        self, state: _RunState, result: ValidationResult
    ) -> tuple[str, ...]:
        try:
            await state.retry.call(
                "save_result",
                lambda: self._result_store.save(result),
                timeout_seconds=self._config.execution.persist_timeout_seconds,
            )
        except ValidatorError as exc:
            self._observer.validation_persistence_failed(
                validation_id=state.validation_id, target="result", reason=str(exc)
            )
            return (str(exc),)
        return ()

    async def _audit(
        self, state: _RunState, event_type: str, metadata: Mapping[str, str]
    ) -> None:
        """Append to the audit trail; a failure is reported but never fatal."""
        try:
            await self._result_store.log(
                event_type=event_type,
                validation_id=state.validation_id,
                actor=AUDIT_ACTOR,
                metadata={"story_id": state.story_id, **metadata},
            )
        except PersistenceError as exc:
            self._observer.validation_persistence_failed(
                validation_id=state.validation_id, target="audit", reason=str(exc)
            )

    async def _fail(self, state: _RunState, exc: ValidatorError) -> FailureReport:
        error_type = type(exc).__name__
        self._observer.validation_failed(
            validation_id=state.validation_id,
            stage=state.target.value,
            error_type=error_type,
            reason=str(exc),
        )
        await self._audit(
            state,
            "validation_failed",
            {
                "stage": state.target.value,
                "error_type": error_type,
                "cause": str(exc),
            },
        )
        return FailureReport(
            validation_id=state.validation_id,
            story_id=state.story_id,
            stage=state.target,
            error_type=error_type,
            cause=str(exc),
            retriable=exc.retriable,
            created_at=state.created_at,
        )

    def _advance(self, state: _RunState) -> None:
        now = time.monotonic()
        self._observer.validation_stage_completed(
            validation_id=state.validation_id,
            stage=state.target.value,
            duration_ms=int((now - state.stage_started) * 1000),
        )
        if state.target != Stage.COMPLETE:
            state.target = next_stage(state.target)
        state.stage_started = now


def _validate_cr_ids(cr_ids: Sequence[str]) -> frozenset[str]:
    """Raise StorySelectionError for blank or duplicate CR ids."""
    if isinstance(cr_ids, str):
        raise StorySelectionError("cr_ids must be a sequence of ids, not a string")
    blank = [i for i, cr_id in enumerate(cr_ids) if not cr_id.strip()]
    if blank:
        raise StorySelectionError(f"blank CR id at position(s) {blank}")
    duplicated = sorted({cr_id for cr_id in cr_ids if cr_ids.count(cr_id) > 1})
    if duplicated:
        raise StorySelectionError(f"duplicate CR id(s): {', '.join(duplicated)}")
    return frozenset(cr_ids)


def _validate_story(story: Story) -> None:
    if not story.story_id.strip():
        raise StorySelectionError("story id is blank")
    if not story.title.strip():
        raise StorySelectionError(f"story '{story.story_id}' has a blank title")
