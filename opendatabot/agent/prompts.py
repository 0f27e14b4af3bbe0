"""
Prompt templates for the bot: loaded from text files, rendered with string.Template.

Templates use $name placeholders. sql_gen.txt takes $date, $command and $schema;
chart_select.txt takes $title and $data.
"""

import logging
from datetime import date
from pathlib import Path
from string import Template

from opendatabot.core.errors import PromptTemplateError

logger = logging.getLogger(__name__)


class PromptTemplate:
    """A parsed prompt file. Parsing fails early on malformed placeholders."""

    def __init__(self, name: str, text: str) -> None:
        self.name = name
        self._template = Template(text)
        if not self._template.is_valid():
            raise PromptTemplateError(f"parsing {name}: invalid placeholder")
        self.identifiers = frozenset(self._template.get_identifiers())

    def render(self, **values: str) -> str:
        try:
            return self._template.substitute(values)
        except (KeyError, ValueError) as e:
            raise PromptTemplateError(f"executing template {self.name}: missing value {e}") from e


def load_template(name: str, prompts_dir: Path | str) -> PromptTemplate:
    """Read and parse one prompt file from prompts_dir."""
    path = Path(prompts_dir) / name
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PromptTemplateError(f"parsing {name}: {e}") from e
    template = PromptTemplate(name, text)
    logger.info("[prompts:load_template] name=%s identifiers=%s", name, sorted(template.identifiers))
    return template


def format_prompt_date(d: date) -> str:
    """Long-form date used in prompts, e.g. 'January 2, 2006'."""
    return f"{d:%B} {d.day}, {d.year}"
