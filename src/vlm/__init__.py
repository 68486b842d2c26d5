"""Vision Language Models package."""

from .gpt4o import GPT4oClient

__all__ = ['GPT4oClient']
