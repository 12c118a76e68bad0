"""Audit logging for provider routing decisions.

Decisions made at the :class:`~daemoncodex.providers.manager.ProviderManager`
are handed to an optional telemetry sink. The sink is fire-and-forget: a
failing sink never affects the request.
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    """Destination for audit events."""

    def record(self, action: str, metadata: dict[str, Any]) -> None: ...


class ProviderAuditLogger:
    """Logs provider routing decisions to an audit sink."""

    def __init__(self, sink: AuditSink | None = None) -> None:
        """Initialize provider audit logger.

        Args:
            sink: Audit sink (decisions go to the debug log if None)
        """
        self._sink = sink

    def _emit(self, action: str, metadata: dict[str, Any]) -> None:
        if self._sink is None:
            logger.debug("Provider audit: action=%s %s", action, metadata)
            return

        try:
            self._sink.record(action, metadata)
        except Exception as e:
            logger.warning("Audit sink failed for %s: %s", action, e)

    def log_dispatch(self, operation: str, provider_id: str, remote: bool, privacy_level: str) -> None:
        """Log a request forwarded to a provider.

        Args:
            operation: "chat" or "categorize"
            provider_id: Provider receiving the request
            remote: Whether the provider requires network
            privacy_level: Privacy level declared by the request
        """
        self._emit(
            "dispatch",
            {
                "operation": operation,
                "provider_id": provider_id,
                "remote": remote,
                "privacy_level": privacy_level,
            },
        )

    def log_blocked(self, operation: str, provider_id: str, reason: str) -> None:
        """Log a request refused before reaching a provider."""
        self._emit(
            "blocked",
            {
                "operation": operation,
                "provider_id": provider_id,
                "reason": reason,
            },
        )

    def log_privacy_mode(self, old_mode: str, new_mode: str, deactivated: str | None) -> None:
        """Log a privacy mode change."""
        self._emit(
            "privacy_mode",
            {
                "old_mode": old_mode,
                "new_mode": new_mode,
                "deactivated_provider": deactivated,
            },
        )
