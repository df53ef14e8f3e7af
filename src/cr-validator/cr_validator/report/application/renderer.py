"""Render a ValidationResult into the single-file HTML report.

The report is a thin fill of a packaged template: the result is serialised to
JSON and inlined in place of a JavaScript placeholder, and the page renders it
client-side.
"""

import html
import importlib.resources

from cr_validator.validation.domain.result import ValidationResult

_DATA_PLACEHOLDER = "window.__CR_REPORT__ = null;"
_TITLE_PLACEHOLDER = "{{title}}"


def _load_template() -> str:
    """Return the report HTML template as a string."""
    pkg_files = importlib.resources.files("cr_validator.report.templates")
    return pkg_files.joinpath("report.html").read_text(encoding="utf-8")


class ReportRenderer:
    """Pure renderer; the same result always yields the same HTML."""

    def __init__(self) -> None:
        self._template = _load_template()

    def render(self, result: ValidationResult) -> str:
        # "</" would close the inline <script> element early.
        data_json = result.model_dump_json().replace("</", "<\\/")
        title = html.escape(
            f"{result.story_id} readiness {result.readiness.overall:g} "
            f"({result.risk_band.value})"
        )
        return self._template.replace(_TITLE_PLACEHOLDER, title, 1).replace(
            _DATA_PLACEHOLDER, f"window.__CR_REPORT__ = {data_json};", 1
        )
