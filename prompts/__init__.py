"""
Prompt templates for the feedback workflow.
"""

from prompts.prompt_classify import CLASSIFIER_SYSTEM_PROMPT

__all__ = [
    "CLASSIFIER_SYSTEM_PROMPT",
]
