"""Domain probe for notification configuration management."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class NotificationConfigServiceProbe(Protocol):
    def config_created(self, config_id: str, group_id: str, channel: str) -> None:
        ...

    def config_updated(self, config_id: str, type_switched: bool) -> None:
        ...

    def config_deleted(self, config_id: str) -> None:
        ...

    def send_requested(self, config_id: str, server_id: str, actor_id: str) -> None:
        ...

    def with_context(
        self, context: ObservationContext
    ) -> NotificationConfigServiceProbe:
        ...


class DefaultNotificationConfigServiceProbe(StructlogProbe):
    def config_created(self, config_id: str, group_id: str, channel: str) -> None:
        self._log.info(
            "notification_config_created",
            config_id=config_id,
            group_id=group_id,
            channel=channel,
        )

    def config_updated(self, config_id: str, type_switched: bool) -> None:
        self._log.info(
            "notification_config_updated",
            config_id=config_id,
            type_switched=type_switched,
        )

    def config_deleted(self, config_id: str) -> None:
        self._log.info(
            "notification_config_deleted",
            config_id=config_id,
        )

    def send_requested(self, config_id: str, server_id: str, actor_id: str) -> None:
        self._log.info(
            "notification_send_requested",
            config_id=config_id,
            server_id=server_id,
            actor_id=actor_id,
        )
