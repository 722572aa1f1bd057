# ragdepot/prompts/builder.py
"""
Prompt assembly.

Contexts are injected in rank order, each labelled [1], [2], ... so the
model can cite its sources. Templates use two placeholders:

    {context}   - the numbered context block
    {question}  - the user's question

Placeholders are substituted literally (no str.format), so braces in
documents or questions are left untouched.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ragdepot.core.exceptions import ConfigurationError

CONTEXT_PLACEHOLDER = "{context}"
QUESTION_PLACEHOLDER = "{question}"
NO_CONTEXT = "No context available."

_PLACEHOLDER = re.compile(r"\{context\}|\{question\}")

DEFAULT_TEMPLATE = """You are a helpful assistant. Answer the user's question based on the provided context.

Context:
{context}

Instructions:
- Answer the question using only information from the context above
- If the context contains relevant information, cite the source number (e.g., [1], [2])
- If the context does not contain sufficient information to answer the question, clearly state that you don't have enough information
- Be concise and direct in your response

Question: {question}

Answer:"""


def format_contexts(contexts: Sequence[str]) -> str:
    if not contexts:
        return NO_CONTEXT
    return "\n\n".join(f"[{i}] {text}" for i, text in enumerate(contexts, start=1))


def validate_template(template: str) -> str:
    if CONTEXT_PLACEHOLDER not in template or QUESTION_PLACEHOLDER not in template:
        raise ConfigurationError(
            f"Prompt template must contain both {CONTEXT_PLACEHOLDER} and {QUESTION_PLACEHOLDER}"
        )
    return template


class PromptBuilder:
    """
    Usage:
        builder = PromptBuilder()
        prompt = builder.build("What is RAG?", ["RAG is ...", "It retrieves ..."])
    """

    def __init__(self, template: Optional[str] = None):
        self.template = validate_template(template) if template else DEFAULT_TEMPLATE

    def build(self, question: str, contexts: Sequence[str]) -> str:
        return self.build_with_template(question, contexts, self.template)

    def build_with_template(self, question: str, contexts: Sequence[str], template: str) -> str:
        values = {CONTEXT_PLACEHOLDER: format_contexts(contexts), QUESTION_PLACEHOLDER: question}
        # Single pass: substituted text is never re-scanned for placeholders
        return _PLACEHOLDER.sub(lambda m: values[m.group(0)], template)


__all__ = [
    "PromptBuilder",
    "DEFAULT_TEMPLATE",
    "format_contexts",
    "validate_template",
    "NO_CONTEXT",
]
