"""Prompts - Catalog of server-side prompts."""

from .registry import (
    PromptArgument,
    PromptDefinition,
    PromptMessage,
    PromptRegistry,
    PromptResult,
    TextContent,
)

__all__ = [
    "PromptArgument",
    "PromptDefinition",
    "PromptMessage",
    "PromptRegistry",
    "PromptResult",
    "TextContent",
]
