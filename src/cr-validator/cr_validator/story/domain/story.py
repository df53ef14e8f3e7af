"""Story: the user story under validation."""

from pydantic import BaseModel, Field

type StoryId = str


class Story(BaseModel, frozen=True):
    """Immutable user story, fixed for the duration of one validation run."""

    story_id: StoryId = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    acceptance_criteria: tuple[str, ...] = ()

    def embedding_text(self) -> str:
        """Text used to build the retrieval query vector."""
        parts = [self.title, self.description, *self.acceptance_criteria]
        return "\n".join(part for part in parts if part.strip())
