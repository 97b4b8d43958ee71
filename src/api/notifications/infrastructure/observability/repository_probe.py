"""Domain probe for notification persistence and channel adapters."""

from __future__ import annotations

from typing import Protocol

from shared_kernel.observability_context import ObservationContext, StructlogProbe


class NotificationsInfrastructureProbe(Protocol):
    def config_saved(self, config_id: str, channel: str) -> None:
        ...

    def channel_switched(self, config_id: str, old_type: str, new_type: str) -> None:
        ...

    def config_deleted(self, config_id: str) -> None:
        ...

    def email_delivered(self, recipient_count: int, refused: list[str]) -> None:
        ...

    def webhook_delivered(self, url: str, status_code: int) -> None:
        ...

    def delivery_error(self, channel: str, error: str) -> None:
        ...

    def with_context(
        self, context: ObservationContext
    ) -> NotificationsInfrastructureProbe:
        ...


class DefaultNotificationsInfrastructureProbe(StructlogProbe):
    def config_saved(self, config_id: str, channel: str) -> None:
        self._log.debug(
            "notification_config_saved",
            config_id=config_id,
            channel=channel,
        )

    def channel_switched(self, config_id: str, old_type: str, new_type: str) -> None:
        self._log.info(
            "notification_channel_switched",
            config_id=config_id,
            old_type=old_type,
            new_type=new_type,
        )

    def config_deleted(self, config_id: str) -> None:
        self._log.debug(
            "notification_config_row_deleted",
            config_id=config_id,
        )

    def email_delivered(self, recipient_count: int, refused: list[str]) -> None:
        self._log.debug(
            "email_delivered",
            recipient_count=recipient_count,
            refused=refused,
        )

    def webhook_delivered(self, url: str, status_code: int) -> None:
        self._log.debug(
            "webhook_delivered",
            url=url,
            status_code=status_code,
        )

    def delivery_error(self, channel: str, error: str) -> None:
        self._log.debug(
            "channel_delivery_error",
            channel=channel,
            error=error,
        )
