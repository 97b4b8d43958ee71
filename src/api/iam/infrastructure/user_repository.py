"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.infrastructure.outbox import IAMEventSerializer
from iam.ports.repositories import IUserRepository
from shared_kernel.outbox.ports import IOutboxRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Never commits: the calling service owns the transaction. Domain events
    are appended to the outbox in the same transaction as the row change.
    """

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        probe: UserRepositoryProbe | None = None,
        serializer: IAMEventSerializer | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            outbox: Outbox repository sharing the same session
            probe: Optional domain probe for observability
            serializer: Optional serializer for IAM events
        """
        self._session = session
        self._outbox = outbox
        self._probe = probe or DefaultUserRepositoryProbe()
        self._serializer = serializer or IAMEventSerializer()

    async def save(self, user: User) -> None:
        """Persist a user aggregate, creating or updating its row."""
        model = await self._session.get(UserModel, user.id.value)

        if model is None:
            model = UserModel(id=user.id.value)
            self._session.add(model)
        model.name = user.name
        model.email = user.email
        model.role = user.role
        model.last_login_at = user.last_login_at

        await self._session.flush()
        await self._append_events(user)
        self._probe.user_saved(user.id.value, user.email)

    async def get_by_id(self, user_id: UserId) -> User | None:
        model = await self._session.get(UserModel, user_id.value)
        return self._to_domain(model) if model is not None else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def get_many(self, user_ids: list[UserId]) -> dict[str, User]:
        if not user_ids:
            return {}
        stmt = select(UserModel).where(
            UserModel.id.in_({user_id.value for user_id in user_ids})
        )
        result = await self._session.execute(stmt)
        return {model.id: self._to_domain(model) for model in result.scalars().all()}

    async def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.name, UserModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(UserModel.id)))
        return result.scalar_one()

    async def delete(self, user: User) -> bool:
        """Delete the user row; memberships must already be removed."""
        model = await self._session.get(UserModel, user.id.value)
        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()
        await self._append_events(user)
        self._probe.user_deleted(user.id.value)
        return True

    async def _append_events(self, user: User) -> None:
        for event in user.collect_events():
            await self._outbox.append(
                event_type=type(event).__name__,
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type="user",
                aggregate_id=user.id.value,
            )

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            name=model.name,
            email=model.email,
            role=model.role,
            last_login_at=model.last_login_at,
        )
