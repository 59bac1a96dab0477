"""
Prompt System for AlgoSensei Chat

Provides the Socratic tutoring system prompt template.
"""

from algosensei.prompts.base import PromptBuilder

__all__ = ["PromptBuilder"]
