# ragdepot/prompts/templates.py
"""
Named prompt templates stored as {workspace}/templates/<name>.txt.

"default" is built in and never read from disk.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from ragdepot.core.exceptions import ConfigurationError
from ragdepot.core.paths import RagPaths
from ragdepot.prompts.builder import DEFAULT_TEMPLATE, validate_template

DEFAULT_TEMPLATE_NAME = "default"
TEMPLATE_SUFFIX = ".txt"

_TEMPLATE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


class TemplateLoader:
    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else RagPaths.templates_dir()

    def list_templates(self) -> List[str]:
        names = {DEFAULT_TEMPLATE_NAME}
        if self.templates_dir.is_dir():
            names.update(p.stem for p in self.templates_dir.glob(f"*{TEMPLATE_SUFFIX}"))
        return sorted(names)

    def load(self, name: str) -> str:
        """
        Raises:
            ConfigurationError: Unknown name, unreadable file, or missing placeholders.
        """
        if name == DEFAULT_TEMPLATE_NAME:
            return DEFAULT_TEMPLATE
        if not _TEMPLATE_NAME.match(name):
            raise ConfigurationError(f"Invalid template name '{name}'")

        path = self.templates_dir / f"{name}{TEMPLATE_SUFFIX}"
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigurationError(f"Prompt template '{name}' not found at {path}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read prompt template '{name}': {e}") from e
        return validate_template(text)


__all__ = ["TemplateLoader", "DEFAULT_TEMPLATE_NAME"]
