"""OpenAI inference client using the OpenAI SDK."""

from typing import Any

from openai import OpenAI

from daemoncodex.llm.prompts import CATEGORIZATION_SYSTEM_PROMPT, build_categorization_prompt


class OpenAIEngine:
    """Blocking inference client for the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 60,
        base_url: str | None = None,
    ):
        """Initialize OpenAI engine.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o-mini")
            timeout: Request timeout in seconds
            base_url: Override for the API endpoint
        """
        self.model = model
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def _create(self, messages: list[dict[str, Any]], max_tokens: int, temperature: float) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return (response.choices[0].message.content or "").strip()

    def complete_prompt(self, text: str, max_tokens: int, temperature: float = 0.2) -> str:
        """Complete a flattened prompt.

        Args:
            text: Prompt text
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        return self._create([{"role": "user", "content": text}], max_tokens, temperature)

    def categorize_item(
        self,
        name: str,
        path: str,
        kind: str,
        consistency_context: str,
        temperature: float = 0.2,
    ) -> str:
        """Categorize a file or directory.

        Args:
            name: File or directory name
            path: Full path, or empty when withheld
            kind: "file" or "directory"
            consistency_context: Earlier categorizations
            temperature: Sampling temperature

        Returns:
            Model output as "Category : Subcategory"
        """
        messages = [
            {"role": "system", "content": CATEGORIZATION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": build_categorization_prompt(name, path, kind, consistency_context),
            },
        ]
        return self._create(messages, max_tokens=64, temperature=temperature)
