"""Outbox handler turning probe status changes into notifications."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

from notifications.application.observability import DefaultDispatchProbe, DispatchProbe
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.domain.value_objects import NotificationEvent, NotificationLevel
from notifications.ports.repositories import INotificationStore
from shared_kernel.exceptions import InvariantViolationError, ResourceNotFoundError


class ProbeAlertHandler:
    """Dispatches a ProbeStatusChanged event to every config of the server's groups.

    Deliveries to different configs are independent and run concurrently
    with no ordering between them. A config that cannot be dispatched is
    logged and skipped: the event is handled once, so the outbox never
    redelivers it to the configs that did succeed.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        store: INotificationStore,
        probe: DispatchProbe | None = None,
    ):
        self._dispatcher = dispatcher
        self._store = store
        self._probe = probe or DefaultDispatchProbe()

    def supported_event_types(self) -> frozenset[str]:
        return frozenset({"ProbeStatusChanged"})

    async def handle(self, event_type: str, payload: dict[str, Any]) -> None:
        group_ids = frozenset(payload.get("server_group_ids", []))
        config_ids = (
            await self._store.config_ids_for_groups(group_ids) if group_ids else []
        )

        event = NotificationEvent(
            level=NotificationLevel(payload["new_status"]),
            title=(
                f"Probe {payload['probe_name']} on {payload['server_name']} "
                f"is {payload['new_status']}"
            ),
            message=payload["message"],
            server_id=payload["server_id"],
            server_name=payload["server_name"],
            probe_id=payload["probe_id"],
            probe_name=payload["probe_name"],
            timestamp=datetime.fromisoformat(payload["occurred_at"]),
            details={
                "old_status": payload["old_status"],
                "new_status": payload["new_status"],
            },
        )

        await asyncio.gather(
            *(self._dispatch(config_id, event) for config_id in config_ids)
        )
        self._probe.alert_fanned_out(
            payload["probe_id"], payload["new_status"], len(config_ids)
        )

    async def _dispatch(self, config_id: str, event: NotificationEvent) -> None:
        try:
            await self._dispatcher.send(config_id, event)
        except ResourceNotFoundError:
            self._probe.config_vanished(config_id)
        except InvariantViolationError:
            # Already reported by the dispatcher.
            pass
        except Exception as e:
            self._probe.dispatch_aborted(config_id, str(e))
