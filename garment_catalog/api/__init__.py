"""Clients for the external model providers."""

from .gemini_client import GeminiClient, GenerationResult
from .vertex_client import VertexTryOnClient

__all__ = ["GeminiClient", "GenerationResult", "VertexTryOnClient"]
