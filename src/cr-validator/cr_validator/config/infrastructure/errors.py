"""Errors raised while reading a config file."""

from pathlib import Path

from pydantic import ValidationError

from cr_validator.core.errors import ConfigurationError


class ConfigLoadError(ConfigurationError):
    """The file is absent or is not YAML."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load config: {reason}: {path}")


class MissingEnvVarsError(ConfigurationError):
    """Every ${VAR} the file references but the environment lacks, sorted."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        names = ", ".join(sorted(missing_vars))
        super().__init__(
            f"Failed to load config: unset environment variables: {names}"
        )


class ConfigValidationError(ConfigurationError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate config: {reason}")

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "ConfigValidationError":
        """Condense pydantic's report to one 'a.b.c: message' entry per problem."""
        problems = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        return cls("; ".join(problems))
