"""PromptBuilder: renders one prompt per phase from story, context and prior results."""

import json
from collections.abc import Mapping

from cr_validator.phases.domain.results import RESULT_TYPES, PhaseResult
from cr_validator.prompts.application.errors import TemplateError
from cr_validator.prompts.domain.phase import PHASE_DEPENDENCIES, Phase
from cr_validator.prompts.domain.prompt import Prompt, PromptTemplate
from cr_validator.prompts.domain.templates import TEMPLATES
from cr_validator.retrieval.domain.chunk import ExpandedContext
from cr_validator.story.domain.story import Story

_NO_CONTEXT = (
    "(No applicable CR context was found for this story. Treat every CR-derived "
    "requirement as unverifiable.)"
)


class PromptBuilder:
    """Pure prompt construction; the same inputs always render the same prompt."""

    def __init__(self, templates: Mapping[Phase, PromptTemplate] = TEMPLATES) -> None:
        self._templates = templates

    def template_version(self, phase: Phase) -> str:
        return self._template(phase).version

    def build(
        self,
        phase: Phase,
        story: Story | None,
        context: ExpandedContext | None,
        prior_results: Mapping[Phase, PhaseResult],
    ) -> Prompt:
        """Render the prompt for phase.

        Raises:
            TemplateError: if story or context is None, if a phase this one
                depends on has no result yet, or if the phase has no template.
        """
        template = self._template(phase)
        if story is None:
            raise TemplateError(phase=phase, reason="story is required")
        if context is None:
            raise TemplateError(phase=phase, reason="context is required")

        dependencies = PHASE_DEPENDENCIES[phase]
        missing = [dep.value for dep in dependencies if dep not in prior_results]
        if missing:
            raise TemplateError(
                phase=phase,
                reason=f"missing prior results for: {', '.join(missing)}",
            )

        schema = json.dumps(RESULT_TYPES[phase].model_json_schema(), indent=2)
        user = template.user.format(
            story=render_story(story),
            context=render_context(context),
            prior_results=render_prior_results(
                {dep: prior_results[dep] for dep in dependencies}
            ),
        )
        return Prompt(
            phase=phase,
            template_version=template.version,
            system=f"{template.system}\n## Output JSON Schema\n{schema}\n",
            user=user,
        )

    def _template(self, phase: Phase) -> PromptTemplate:
        template = self._templates.get(phase)
        if template is None:
            raise TemplateError(phase=phase, reason="no template registered")
        return template


def render_story(story: Story) -> str:
    lines = [f"ID: {story.story_id}", f"Title: {story.title}", ""]
    lines.append(story.description or "(no description)")
    lines.append("")
    lines.append("Acceptance criteria:")
    if story.acceptance_criteria:
        lines.extend(
            f"AC{index}: {criterion}"
            for index, criterion in enumerate(story.acceptance_criteria, start=1)
        )
    else:
        lines.append("(none)")
    return "\n".join(lines)


def render_context(context: ExpandedContext) -> str:
    if context.is_empty:
        return _NO_CONTEXT
    blocks = []
    for chunk in context.chunks:
        header = (
            f"[{chunk.chunk_id}] {chunk.source_type.value} {chunk.doc_id}"
            f" v{chunk.version} section {chunk.section_id}"
        )
        blocks.append(f"{header}\n{chunk.text.strip()}")
    return "\n\n".join(blocks)


def render_prior_results(results: Mapping[Phase, PhaseResult]) -> str:
    if not results:
        return "(none)"
    return "\n\n".join(
        f"### {phase.value}\n{result.model_dump_json(indent=2)}"
        for phase, result in results.items()
    )
