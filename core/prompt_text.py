"""Instruction template and result cleanup for the rewrite step."""

from __future__ import annotations

QUOTE_CHARS = ("\"", "'")

DEFAULT_INSTRUCTION_TEMPLATE = """\
You are a programming expert and an AI assistant for developers. You will receive instructions \
in Spanish on what I want my AI code editor to do. Your task is to convert those instructions into \
a clear, concise, and effective prompt in English, optimized for a code-generation model. Think \
about how you would give an instruction to an AI to generate or modify code.
Example:
Instrucción en español: "Crea una función en Python para sumar dos números."
Prompt en inglés (tú lo generarías): "Create a Python function to sum two numbers."
Another example:
Instrucción en español: "Refactoriza esta sección del código para mejorar la legibilidad y usar buenas prácticas."
Prompt en inglés (tú lo generarías): "Refactor this code section to improve readability and apply best practices."
"""


def resolve_instruction_template(override: str | None) -> str:
    if override and override.strip():
        return override
    return DEFAULT_INSTRUCTION_TEMPLATE


def strip_enclosing_quotes(text: str) -> str:
    """Remove one matching quote pair wrapping the whole (trimmed) text.

    Interior quotes and unbalanced quotes are left alone.
    """
    value = (text or "").strip()
    if len(value) >= 2 and value[0] in QUOTE_CHARS and value[-1] == value[0]:
        return value[1:-1]
    return value
