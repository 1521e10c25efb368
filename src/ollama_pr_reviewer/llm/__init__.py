"""
LLM Review Engine

This module provides review prompt construction, the Ollama inference
client and the failure-absorbing review engine.
"""

from .prompts import PromptBuilder
from .client import OllamaClient
from .engine import ReviewEngine

__all__ = ['PromptBuilder', 'OllamaClient', 'ReviewEngine']
