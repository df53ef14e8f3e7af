"""StorySource Protocol: structural interface for fetching stories."""

from typing import Protocol

from cr_validator.story.domain.story import Story


class StorySource(Protocol):
    """Looks up a story by id.

    Raises StoryNotFound when the id is unknown and UpstreamUnavailable when the
    backing service cannot be reached.
    """

    async def get_story_by_id(self, story_id: str) -> Story: ...
