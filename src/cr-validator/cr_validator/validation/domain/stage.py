"""Stage: the forward-only states of one validation run."""

from enum import StrEnum


class Stage(StrEnum):
    STORY_FETCHED = "story_fetched"
    EMBEDDED = "embedded"
    RETRIEVED = "retrieved"
    CONTEXT_EXPANDED = "context_expanded"
    PHASES_EXECUTED = "phases_executed"
    SCORED = "scored"
    REPORT_REFERENCED = "report_referenced"
    COMPLETE = "complete"


STAGE_ORDER: tuple[Stage, ...] = tuple(Stage)


def next_stage(stage: Stage) -> Stage:
    """Return the stage that follows stage.

    Raises:
        ValueError: if stage is COMPLETE, which is terminal.
    """
    index = STAGE_ORDER.index(stage)
    if index == len(STAGE_ORDER) - 1:
        raise ValueError(f"'{stage}' is terminal")
    return STAGE_ORDER[index + 1]
