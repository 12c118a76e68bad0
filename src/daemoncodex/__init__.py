"""Daemon Codex - privacy-first inference routing for file organization.

Chat and file-categorization requests are routed to an on-device model, the
OpenAI API, or a self-hosted Ollama server. Nothing leaves the device unless
remote inference has been explicitly enabled and the request permits it.

Key modules:

- :mod:`daemoncodex.providers` - Provider contract, variants, factory and the ProviderManager
- :mod:`daemoncodex.llm` - Inference clients (llama.cpp, OpenAI) and HTTP transport
- :mod:`daemoncodex.config` - YAML configuration schema and loader
- :mod:`daemoncodex.cli` - Command-line diagnostics and categorization
"""

__version__ = "0.1.0"
