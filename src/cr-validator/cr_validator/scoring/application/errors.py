"""Error types raised by the scoring engine."""

from collections.abc import Iterable

from cr_validator.core.errors import ConfigurationError


class IncompleteScoreSet(ConfigurationError):
    """Raised when a dimension is missing from, or repeated in, the score set."""

    def __init__(
        self, missing: Iterable[str] = (), duplicated: Iterable[str] = ()
    ) -> None:
        self.missing = tuple(sorted(missing))
        self.duplicated = tuple(sorted(duplicated))
        problems = []
        if self.missing:
            problems.append(f"missing {', '.join(self.missing)}")
        if self.duplicated:
            problems.append(f"duplicated {', '.join(self.duplicated)}")
        super().__init__(f"Failed to score readiness: {'; '.join(problems)}")


class ScoringConfigError(ConfigurationError):
    """Raised when the weight table does not cover every dimension or sum to 1.0."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to configure scoring engine: {reason}")
