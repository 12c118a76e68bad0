"""Provider manager: registry, privacy mode, and the single request choke point.

Every chat and categorize call goes through :class:`ProviderManager`, which
checks the process-wide privacy mode and the request's own privacy level
before forwarding anything to a provider. Providers repeat the per-request
checks themselves, so calling one directly is still safe.

Configuration changes (register, activate, privacy mode) are expected from
a single thread. Readers may see a provider disappear between lookup and
use; a missing active provider is reported as an error response.
"""

import logging

from .audit import ProviderAuditLogger
from .base import Provider
from .models import ErrorCode, LLMRequest, LLMResponse, PrivacyLevel, PrivacyMode

logger = logging.getLogger(__name__)

NO_PROVIDER_MESSAGE = "No active provider configured"


class ProviderManager:
    """Manages providers and enforces privacy controls.

    Remote providers can only be activated once remote mode has been
    enabled with explicit confirmation.
    """

    def __init__(self, audit_logger: ProviderAuditLogger | None = None):
        """Initialize provider manager.

        Args:
            audit_logger: Audit logger for routing decisions (creates default if None)
        """
        self._providers: dict[str, Provider] = {}
        self._active_id: str | None = None
        self._privacy_mode = PrivacyMode.LOCAL_ONLY
        self.audit_logger = audit_logger or ProviderAuditLogger()

    # -- Registry ----------------------------------------------------------

    def register(self, provider: Provider | None) -> None:
        """Register a provider, replacing any provider with the same id."""
        if provider is None:
            return

        self._providers[provider.id] = provider
        logger.info("Registered provider: %s", provider.id)

    def unregister(self, provider_id: str) -> None:
        """Remove a provider, clearing it if it was active."""
        if self._providers.pop(provider_id, None) is None:
            return

        if self._active_id == provider_id:
            self._active_id = None
        logger.info("Unregistered provider: %s", provider_id)

    def get_provider(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    def all_providers(self) -> list[Provider]:
        return list(self._providers.values())

    def is_provider_allowed(self, provider: Provider) -> bool:
        """Local providers are always allowed; remote ones only in remote mode."""
        if not provider.requires_network:
            return True
        return self._privacy_mode == PrivacyMode.REMOTE_ALLOWED

    def allowed_providers(self) -> list[Provider]:
        """Providers usable under the current privacy mode."""
        return [p for p in self._providers.values() if self.is_provider_allowed(p)]

    # -- Activation --------------------------------------------------------

    def set_active(self, provider_id: str) -> bool:
        """Activate a registered provider.

        Args:
            provider_id: Provider to activate

        Returns:
            True if activated, False if unknown or blocked by privacy mode
        """
        provider = self.get_provider(provider_id)
        if provider is None:
            logger.warning("Cannot set active provider: %s not found", provider_id)
            return False

        if not self.is_provider_allowed(provider):
            logger.warning(
                "Cannot set active provider: %s is remote and privacy mode is %s",
                provider_id,
                self._privacy_mode.value,
            )
            return False

        self._active_id = provider_id
        logger.info(
            "Set active provider: %s (remote: %s)",
            provider_id,
            "yes" if provider.requires_network else "no",
        )
        return True

    def active_provider(self) -> Provider | None:
        if self._active_id is None:
            return None
        return self._providers.get(self._active_id)

    # -- Privacy mode ------------------------------------------------------

    @property
    def privacy_mode(self) -> PrivacyMode:
        return self._privacy_mode

    @property
    def remote_allowed(self) -> bool:
        return self._privacy_mode == PrivacyMode.REMOTE_ALLOWED

    def set_privacy_mode(self, mode: PrivacyMode, confirmed: bool = False) -> bool:
        """Change the process-wide privacy mode.

        Enabling remote mode allows data to leave the device and requires
        ``confirmed=True``. Switching back to local-only always succeeds and
        deactivates a remote active provider.

        Args:
            mode: New privacy mode
            confirmed: Whether the user explicitly confirmed remote mode

        Returns:
            True if the mode was set
        """
        if mode == PrivacyMode.REMOTE_ALLOWED and not confirmed:
            logger.warning("Cannot enable remote-allowed mode without user confirmation")
            return False

        old_mode = self._privacy_mode
        self._privacy_mode = mode

        deactivated = None
        if mode == PrivacyMode.LOCAL_ONLY:
            active = self.active_provider()
            if active is not None and active.requires_network:
                logger.info(
                    "Privacy mode changed to local-only, deactivating remote provider: %s",
                    active.id,
                )
                deactivated = active.id
                self._active_id = None

        logger.info("Privacy mode changed: %s -> %s", old_mode.value, mode.value)
        self.audit_logger.log_privacy_mode(old_mode.value, mode.value, deactivated)
        return True

    # -- Requests ----------------------------------------------------------

    def validate_request(self, request: LLMRequest) -> str | None:
        """Check whether a request would be allowed, without side effects.

        Args:
            request: Request to check

        Returns:
            Reason the request would be blocked, or None if allowed
        """
        provider = self.active_provider()
        if provider is None:
            return NO_PROVIDER_MESSAGE

        if provider.requires_network:
            if self._privacy_mode == PrivacyMode.LOCAL_ONLY:
                return "Active provider requires network but privacy mode is local-only"
            if request.privacy_level == PrivacyLevel.LOCAL_ONLY:
                return "Request is marked LocalOnly but active provider requires network"

        return None

    def _guard(self, operation: str, request: LLMRequest) -> tuple[Provider | None, LLMResponse | None]:
        """Run the choke-point checks.

        Returns:
            (provider, None) when the request may proceed, otherwise
            (None, failure response)
        """
        provider = self.active_provider()
        if provider is None:
            self.audit_logger.log_blocked(operation, "", NO_PROVIDER_MESSAGE)
            return None, LLMResponse.failure(
                ErrorCode.CONFIG_MISSING,
                NO_PROVIDER_MESSAGE,
                privacy_level=request.privacy_level,
            )

        if not self.is_provider_allowed(provider):
            message = (
                f"Request blocked: provider '{provider.id}' requires network but privacy "
                "mode is local-only. Enable remote providers in settings if you want to "
                "use this provider."
            )
            logger.warning("Blocked %s request to %s: privacy mode is local-only", operation, provider.id)
            self.audit_logger.log_blocked(operation, provider.id, "privacy_mode_local_only")
            return None, LLMResponse.failure(
                ErrorCode.PRIVACY_BLOCKED,
                message,
                provider_id=provider.id,
                privacy_level=request.privacy_level,
            )

        if provider.requires_network and request.privacy_level == PrivacyLevel.LOCAL_ONLY:
            label = "Categorization request" if operation == "categorize" else "Request"
            logger.warning("Blocked %s request to %s: request is LocalOnly", operation, provider.id)
            self.audit_logger.log_blocked(operation, provider.id, "request_local_only")
            return None, LLMResponse.failure(
                ErrorCode.PRIVACY_BLOCKED,
                f"{label} marked as LocalOnly cannot be sent to remote provider",
                provider_id=provider.id,
                privacy_level=request.privacy_level,
            )

        self.audit_logger.log_dispatch(
            operation, provider.id, provider.requires_network, request.privacy_level.name
        )
        return provider, None

    def chat(self, request: LLMRequest) -> LLMResponse:
        """Execute a chat request through the active provider.

        Args:
            request: The chat request

        Returns:
            Provider response, or an error response if blocked
        """
        provider, failure = self._guard("chat", request)
        if provider is None:
            return failure  # type: ignore[return-value]

        logger.debug("Dispatching chat request to provider: %s", provider.id)
        return provider.chat(request)

    def categorize(
        self,
        name: str,
        path: str,
        is_directory: bool,
        consistency_context: str,
        base_request: LLMRequest,
    ) -> LLMResponse:
        """Execute a categorization request through the active provider.

        Args:
            name: File or directory name
            path: Full path to the item
            is_directory: Whether the item is a directory
            consistency_context: Earlier categorizations to stay consistent with
            base_request: Request parameters (privacy level, limits, retries)

        Returns:
            Provider response, or an error response if blocked
        """
        provider, failure = self._guard("categorize", base_request)
        if provider is None:
            return failure  # type: ignore[return-value]

        logger.debug("Dispatching categorize request to provider: %s (item: %s)", provider.id, name)
        return provider.categorize(name, path, is_directory, consistency_context, base_request)
