"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from iam.domain.events import UserDeleted, UserRegistered, UserRoleChanged
from iam.domain.value_objects import GlobalRole, UserId

if TYPE_CHECKING:
    from iam.domain.events import DomainEvent


@dataclass
class User:
    """A person known to the system, with a system-wide role.

    Credentials are managed by the external identity provider; only the
    profile and the global role live here. Equality is identity-based.
    """

    id: UserId
    name: str
    email: str
    role: GlobalRole = GlobalRole.USER
    last_login_at: datetime | None = None
    _pending_events: list[DomainEvent] = field(
        default_factory=list, repr=False, compare=False
    )

    @classmethod
    def register(
        cls,
        name: str,
        email: str,
        role: GlobalRole = GlobalRole.USER,
        user_id: UserId | None = None,
    ) -> User:
        """Create a new user.

        Args:
            name: Display name
            email: Unique email address
            role: Initial global role
            user_id: Identity provider subject; a ULID is generated if omitted
        """
        user = cls(
            id=user_id or UserId.generate(),
            name=name,
            email=email.strip().lower(),
            role=role,
        )
        user._pending_events.append(
            UserRegistered(
                user_id=user.id.value,
                email=user.email,
                role=role.value,
                occurred_at=datetime.now(UTC),
            )
        )
        return user

    @property
    def is_super_admin(self) -> bool:
        return self.role == GlobalRole.SUPER_ADMIN

    def update_profile(self, name: str | None = None, email: str | None = None) -> None:
        if name is not None:
            self.name = name
        if email is not None:
            self.email = email.strip().lower()

    def record_login(self) -> None:
        self.last_login_at = datetime.now(UTC)

    def change_role(self, new_role: GlobalRole) -> None:
        if new_role == self.role:
            return
        old_role = self.role
        self.role = new_role
        self._pending_events.append(
            UserRoleChanged(
                user_id=self.id.value,
                old_role=old_role.value,
                new_role=new_role.value,
                occurred_at=datetime.now(UTC),
            )
        )

    def mark_for_deletion(self) -> None:
        self._pending_events.append(
            UserDeleted(user_id=self.id.value, occurred_at=datetime.now(UTC))
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events

    def __str__(self) -> str:
        return f"User({self.email})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
