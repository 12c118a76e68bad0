"""On-device inference using llama-cpp-python."""

import logging
from pathlib import Path
from typing import Any

from daemoncodex.llm.prompts import CATEGORIZATION_SYSTEM_PROMPT, build_categorization_prompt

logger = logging.getLogger(__name__)


class LlamaCppEngine:
    """Inference client backed by a GGUF model loaded in-process.

    The model is loaded on first use, so constructing the engine is cheap.
    """

    def __init__(self, model_path: str | Path, context_length: int = 4096):
        """Initialize llama.cpp engine.

        Args:
            model_path: Path to a GGUF model file
            context_length: Context window size passed to llama.cpp
        """
        self.model_path = str(model_path)
        self.context_length = context_length
        self._llm: Any = None

    def _load_model(self) -> None:
        """Lazy load the GGUF model."""
        if self._llm is not None:
            return

        try:
            from llama_cpp import Llama  # type: ignore[import-not-found]
        except ImportError as e:
            msg = (
                "llama-cpp-python not installed. "
                "Install with: pip install 'daemon-codex[local]'"
            )
            raise ImportError(msg) from e

        logger.info("Loading local model: %s (n_ctx=%d)", self.model_path, self.context_length)
        self._llm = Llama(model_path=self.model_path, n_ctx=self.context_length, verbose=False)

    def complete_prompt(self, text: str, max_tokens: int, temperature: float = 0.2) -> str:
        """Complete a prompt with the local model.

        Args:
            text: Prompt text
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        self._load_model()
        result = self._llm.create_completion(
            prompt=text,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return result["choices"][0]["text"].strip()

    def categorize_item(
        self,
        name: str,
        path: str,
        kind: str,
        consistency_context: str,
        temperature: float = 0.2,
    ) -> str:
        prompt = (
            f"{CATEGORIZATION_SYSTEM_PROMPT}\n\n"
            f"{build_categorization_prompt(name, path, kind, consistency_context)}\n"
        )
        return self.complete_prompt(prompt, max_tokens=64, temperature=temperature)
