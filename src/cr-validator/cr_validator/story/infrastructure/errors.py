"""Error types raised by story sources."""

from cr_validator.core.errors import InputError, UpstreamError


class StoryNotFound(InputError):
    """Raised when the requested story id does not exist."""

    def __init__(self, story_id: str) -> None:
        self.story_id = story_id
        super().__init__(f"Failed to fetch story: story '{story_id}' not found")


class UpstreamUnavailable(UpstreamError):
    """Raised when the story source cannot be reached or read."""

    def __init__(self, reason: str, retriable: bool = True) -> None:
        super().__init__(f"Failed to reach story source: {reason}", retriable=retriable)
