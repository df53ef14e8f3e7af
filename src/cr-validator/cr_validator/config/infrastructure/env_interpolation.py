"""${ENV_VAR} and ${ENV_VAR:-default} interpolation for raw YAML config data."""

import os
import re
from collections.abc import Callable

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def _walk(data: RawValue, on_string: Callable[[str], str]) -> RawValue:
    if isinstance(data, str):
        return on_string(data)
    if isinstance(data, list):
        return [_walk(item, on_string) for item in data]
    if isinstance(data, dict):
        return {key: _walk(value, on_string) for key, value in data.items()}
    return data


def collect_missing_vars(data: RawValue) -> list[str]:
    """Return every referenced env var that is unset and has no default.

    Names are returned in first-seen order.
    """
    missing: list[str] = []

    def _record(text: str) -> str:
        for match in _ENV_VAR_PATTERN.finditer(text):
            name, default = match.group(1), match.group(2)
            if default is None and name not in os.environ and name not in missing:
                missing.append(name)
        return text

    _walk(data, _record)
    return missing


def _resolve(match: re.Match[str]) -> str:
    name, default = match.group(1), match.group(2)
    if default is None:
        return os.environ[name]
    return os.environ.get(name, default)


def interpolate(data: RawValue) -> RawValue:
    """Substitute every reference with its value or its default.

    Call `collect_missing_vars` first; an unset variable without a default
    raises KeyError here.
    """
    return _walk(data, lambda text: _ENV_VAR_PATTERN.sub(_resolve, text))
