"""Base sensor classes for operator monitoring.

This module defines the base OperatorSensor class that provides lifecycle hooks
for monitoring operator events. All hooks are no-ops by default, allowing
subclasses to override only the events they care about.

The hook pattern:
- Hooks come in pairs: on_X_start() and on_X_complete()
- Start hooks return an optional state dict for tracking multi-phase operations
- Complete hooks receive the state dict from their corresponding start hook
- All hooks are optional - sensors only implement what they need
"""

from typing import Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)


class OperatorSensor:
    """Base sensor class for secretsync operator monitoring.

    This class defines lifecycle hooks for three main categories:
    1. Notifications (events received from the watch cache)
    2. Reconciliation passes (full desired-state computation + convergence)
    3. Replica writes (a single secret in a single target namespace)

    All methods are no-ops by default. Subclasses override only the hooks
    they need to monitor.

    Example:
        class LoggingSensor(OperatorSensor):
            def on_pass_start(self, trigger: str) -> Dict:
                return {'start_time': time.time()}

            def on_pass_complete(self, trigger, state, summary, error=None) -> None:
                duration = time.time() - state['start_time']
                logger.info(f"Pass {trigger} took {duration}s")
    """

    # =============================================================================
    # Notification Hooks
    # =============================================================================

    def on_event_received(self, kind: str, action: str) -> None:
        """Called for every notification handed to the router.

        Args:
            kind: Object kind (Secret, Namespace)
            action: added, updated or deleted
        """
        pass

    def on_event_skipped(self, kind: str, reason: str) -> None:
        """Called when a notification is dropped.

        Args:
            kind: Object kind (Secret, Namespace)
            reason: Why it was dropped (unsynced, malformed)
        """
        pass

    def on_cache_synced(self, wait_time: float) -> None:
        """Called once when the watch cache completed its initial listing.

        Args:
            wait_time: Seconds spent waiting for the listing
        """
        pass

    # =============================================================================
    # Reconciliation Pass Hooks
    # =============================================================================

    def on_pass_requested(self, trigger: str, coalesced: bool) -> None:
        """Called when a pass is requested.

        Args:
            trigger: What requested the pass (bootstrap, resync, secret_added, ...)
            coalesced: True if folded into an already pending request
        """
        pass

    def on_pass_start(self, trigger: str) -> Optional[Dict[str, Any]]:
        """Called when a reconciliation pass begins.

        Args:
            trigger: What requested the pass

        Returns:
            Optional state dict passed to on_pass_complete
        """
        pass

    def on_pass_complete(
        self,
        trigger: str,
        state: Optional[Dict[str, Any]],
        summary: Optional[Dict[str, int]],
        error: Optional[Exception] = None,
    ) -> None:
        """Called when a reconciliation pass completes.

        Args:
            trigger: What requested the pass
            state: State dict returned from on_pass_start
            summary: Replica counts per outcome, None if the pass raised
            error: Exception if the pass failed as a whole
        """
        pass

    # =============================================================================
    # Replica Hooks
    # =============================================================================

    def on_replica_sync_start(
        self, namespace: str, name: str
    ) -> Optional[Dict[str, Any]]:
        """Called before a replica is created or updated.

        Args:
            namespace: Target namespace
            name: Secret name

        Returns:
            Optional state dict passed to on_replica_sync_complete
        """
        pass

    def on_replica_sync_complete(
        self,
        namespace: str,
        name: str,
        state: Optional[Dict[str, Any]],
        outcome: str,
        error_kind: Optional[str] = None,
    ) -> None:
        """Called after a replica was converged.

        Args:
            namespace: Target namespace
            name: Secret name
            state: State dict returned from on_replica_sync_start
            outcome: created, updated, unchanged or failed
            error_kind: transient, permanent, conflict or gone when failed
        """
        pass
