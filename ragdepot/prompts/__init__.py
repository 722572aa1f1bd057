# ragdepot/prompts/__init__.py
from ragdepot.prompts.builder import DEFAULT_TEMPLATE, PromptBuilder, format_contexts
from ragdepot.prompts.templates import DEFAULT_TEMPLATE_NAME, TemplateLoader

__all__ = [
    "PromptBuilder",
    "TemplateLoader",
    "DEFAULT_TEMPLATE",
    "DEFAULT_TEMPLATE_NAME",
    "format_contexts",
]
