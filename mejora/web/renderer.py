"""HTML rendering for the server-side pages."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from mejora.web.extraction import (
    DisplayToneResult,
    capitalize_label,
    format_flags,
    format_meta_value,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"
NO_TONE_RESULTS = "No tone results returned."


def build_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Create the Jinja environment with the display filters registered."""
    environment = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters["flags"] = format_flags
    environment.filters["meta"] = format_meta_value
    environment.filters["label"] = capitalize_label
    return environment


class ResultRenderer:
    """Turns extracted results into HTML fragments and pages.

    The environment is injected so tests can render against their own
    templates.
    """

    def __init__(self, environment: Environment) -> None:
        self._environment = environment

    def render_tone_results(self, results: Sequence[DisplayToneResult]) -> str:
        """Render one card per tone, or the empty-state message."""
        if not results:
            return self._environment.get_template("_empty.html").render(message=NO_TONE_RESULTS)
        return self._environment.get_template("_tone_results.html").render(results=results)

    def render_page(self, template_name: str, **context: Any) -> str:
        return self._environment.get_template(template_name).render(**context)
