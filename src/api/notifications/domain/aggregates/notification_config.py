"""NotificationConfig aggregate: where a group's alerts are delivered."""

from __future__ import annotations

from dataclasses import dataclass

from notifications.domain.value_objects import (
    Channel,
    ChannelType,
    NotificationConfigId,
)


@dataclass
class NotificationConfig:
    """A named delivery channel owned by one group.

    Business rules:
    - Exactly one channel variant (EMAIL or WEBHOOK); the type follows it
    - Switching type replaces the channel entirely, so settings of the
      previous type are never carried over
    """

    id: NotificationConfigId
    name: str
    group_id: str
    channel: Channel

    @classmethod
    def create(cls, name: str, group_id: str, channel: Channel) -> NotificationConfig:
        _validate_name(name)
        return cls(
            id=NotificationConfigId.generate(),
            name=name,
            group_id=group_id,
            channel=channel,
        )

    @property
    def type(self) -> ChannelType:
        return self.channel.channel_type

    def update(
        self,
        name: str | None = None,
        group_id: str | None = None,
        channel: Channel | None = None,
    ) -> None:
        if name is not None:
            _validate_name(name)
            self.name = name
        if group_id is not None:
            self.group_id = group_id
        if channel is not None:
            self.channel = channel


def _validate_name(name: str) -> None:
    if not name or not name.strip() or len(name) > 255:
        raise ValueError("Notification name must be between 1 and 255 characters")
