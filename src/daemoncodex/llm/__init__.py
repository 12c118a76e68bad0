"""Inference clients and HTTP transport used by providers."""

from .client import InferenceClient
from .llamacpp import LlamaCppEngine
from .openai_client import OpenAIEngine
from .transport import Transport, TransportResult, httpx_transport

__all__ = [
    "InferenceClient",
    "LlamaCppEngine",
    "OpenAIEngine",
    "Transport",
    "TransportResult",
    "httpx_transport",
]
