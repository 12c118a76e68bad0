"""Inference client protocol.

Local and commercial providers delegate the actual model call to an
inference client. Clients raise on failure; providers convert those
exceptions into failed responses.
"""

from typing import Protocol


class InferenceClient(Protocol):
    """Protocol for blocking inference clients."""

    def complete_prompt(self, text: str, max_tokens: int, temperature: float = 0.2) -> str:
        """Complete a flattened prompt.

        Args:
            text: Prompt text
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        ...

    def categorize_item(
        self,
        name: str,
        path: str,
        kind: str,
        consistency_context: str,
        temperature: float = 0.2,
    ) -> str:
        """Categorize a named file or directory.

        Args:
            name: File or directory name
            path: Full path, or an empty string when it must be withheld
            kind: "file" or "directory"
            consistency_context: Earlier categorizations to stay consistent with
            temperature: Sampling temperature

        Returns:
            Raw model output, expected as "Category : Subcategory"
        """
        ...
