"""JSONL story source: reads stories from a local file, one JSON object per line."""

import asyncio
import json
from pathlib import Path

from pydantic import ValidationError

from cr_validator.story.domain.story import Story
from cr_validator.story.infrastructure.errors import StoryNotFound, UpstreamUnavailable


class JsonlStorySource:
    """Satisfies the StorySource protocol over a JSONL export of the story tracker.

    The file is re-read on every lookup so that no state survives between
    validation runs.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    async def get_story_by_id(self, story_id: str) -> Story:
        """Return the story with the given id.

        Raises:
            StoryNotFound: if no line carries the requested story_id.
            UpstreamUnavailable: if the file is missing, unreadable or malformed.
                Other OS read errors are retriable.
        """
        lines = await asyncio.to_thread(self._read_lines)
        for index, line in enumerate(lines):
            try:
                data: dict[str, object] = json.loads(line)
            except json.JSONDecodeError as exc:
                raise UpstreamUnavailable(
                    reason=f"line {index}: invalid JSON: {exc}", retriable=False
                ) from exc
            if data.get("story_id") != story_id:
                continue
            try:
                return Story.model_validate(data)
            except ValidationError as exc:
                raise UpstreamUnavailable(
                    reason=f"line {index}: invalid story: {exc}", retriable=False
                ) from exc
        raise StoryNotFound(story_id=story_id)

    def _read_lines(self) -> list[str]:
        try:
            with open(self._path, encoding="utf-8") as fh:
                return [line for line in fh if line.strip()]
        except FileNotFoundError as exc:
            raise UpstreamUnavailable(
                reason=f"file not found: {self._path}", retriable=False
            ) from exc
        except UnicodeDecodeError as exc:
            raise UpstreamUnavailable(
                reason=f"{self._path} is not valid UTF-8: {exc}", retriable=False
            ) from exc
        except OSError as exc:
            raise UpstreamUnavailable(
                reason=f"cannot read {self._path}: {exc}"
            ) from exc
