"""
Summarization Layer.

This package talks to a locally hosted language model to summarize transcripts.
"""

from .ollama import OllamaClient, Summarizer, build_prompt

__all__ = ["OllamaClient", "Summarizer", "build_prompt"]
