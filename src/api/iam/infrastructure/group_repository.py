"""PostgreSQL implementation of IGroupRepository.

Group metadata and membership rows live side by side in PostgreSQL.
Membership changes are recorded as domain events on the aggregate and
applied to the group_memberships table on save; every event is also
appended to the outbox in the same transaction.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Group
from iam.domain.events import DomainEvent, MemberAdded, MemberRemoved, MemberRoleChanged
from iam.domain.value_objects import GroupId, GroupMember, GroupRole, UserId
from iam.infrastructure.models import GroupMembershipModel, GroupModel
from iam.infrastructure.observability import (
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)
from iam.infrastructure.outbox import IAMEventSerializer
from iam.ports.repositories import IGroupRepository
from shared_kernel.outbox.ports import IOutboxRepository


class GroupRepository(IGroupRepository):
    """Repository for Group aggregates and the membership directory.

    Never commits: the calling service owns the transaction boundary.
    Deletion is explicit and ordered (memberships, then the group) since
    foreign keys use RESTRICT.
    """

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        probe: GroupRepositoryProbe | None = None,
        serializer: IAMEventSerializer | None = None,
    ) -> None:
        """Initialize repository with database session and outbox.

        Args:
            session: AsyncSession from FastAPI dependency injection
            outbox: Outbox repository sharing the same session
            probe: Optional domain probe for observability
            serializer: Optional serializer for IAM events
        """
        self._session = session
        self._outbox = outbox
        self._probe = probe or DefaultGroupRepositoryProbe()
        self._serializer = serializer or IAMEventSerializer()

    async def save(self, group: Group) -> None:
        """Persist group metadata and apply pending membership events."""
        model = await self._session.get(GroupModel, group.id.value)
        if model is None:
            model = GroupModel(id=group.id.value)
            self._session.add(model)
        model.name = group.name
        model.description = group.description

        # Membership rows reference the group row.
        await self._session.flush()

        events = group.collect_events()
        for event in events:
            await self._apply_membership_event(event)
        await self._session.flush()

        await self._append_events(events, group.id.value)
        self._probe.group_saved(group.id.value, len(events))

    async def _apply_membership_event(self, event: DomainEvent) -> None:
        match event:
            case MemberAdded():
                self._session.add(
                    GroupMembershipModel(
                        group_id=event.group_id,
                        user_id=event.user_id,
                        role=GroupRole(event.role),
                    )
                )
            case MemberRemoved():
                await self._session.execute(
                    delete(GroupMembershipModel).where(
                        GroupMembershipModel.group_id == event.group_id,
                        GroupMembershipModel.user_id == event.user_id,
                    )
                )
            case MemberRoleChanged():
                await self._session.execute(
                    update(GroupMembershipModel)
                    .where(
                        GroupMembershipModel.group_id == event.group_id,
                        GroupMembershipModel.user_id == event.user_id,
                    )
                    .values(role=GroupRole(event.new_role))
                )

    async def get_by_id(self, group_id: GroupId) -> Group | None:
        model = await self._session.get(GroupModel, group_id.value)
        if model is None:
            return None

        members = await self._load_members([model.id])
        group = self._to_domain(model, members.get(model.id, []))
        self._probe.group_retrieved(group.id.value, len(group.members))
        return group

    async def list_all(self) -> list[Group]:
        stmt = select(GroupModel).order_by(GroupModel.name, GroupModel.id)
        return await self._hydrate(stmt)

    async def list_by_ids(self, group_ids: frozenset[str]) -> list[Group]:
        if not group_ids:
            return []
        stmt = (
            select(GroupModel)
            .where(GroupModel.id.in_(group_ids))
            .order_by(GroupModel.name, GroupModel.id)
        )
        return await self._hydrate(stmt)

    async def delete(self, group: Group) -> bool:
        model = await self._session.get(GroupModel, group.id.value)
        if model is None:
            return False

        result = await self._session.execute(
            delete(GroupMembershipModel).where(
                GroupMembershipModel.group_id == group.id.value
            )
        )
        await self._session.delete(model)
        await self._session.flush()

        await self._append_events(group.collect_events(), group.id.value)
        self._probe.group_deleted(group.id.value, result.rowcount or 0)
        return True

    async def lock(self, group_id: GroupId) -> bool:
        stmt = (
            select(GroupModel.id)
            .where(GroupModel.id == group_id.value)
            .with_for_update()
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count_admins(self, group_id: GroupId) -> int:
        stmt = select(func.count()).where(
            GroupMembershipModel.group_id == group_id.value,
            GroupMembershipModel.role == GroupRole.ADMIN,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def get_member_role(
        self, group_id: GroupId, user_id: UserId
    ) -> GroupRole | None:
        stmt = select(GroupMembershipModel.role).where(
            GroupMembershipModel.group_id == group_id.value,
            GroupMembershipModel.user_id == user_id.value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def memberships_of(self, user_id: UserId) -> dict[str, GroupRole]:
        stmt = select(GroupMembershipModel.group_id, GroupMembershipModel.role).where(
            GroupMembershipModel.user_id == user_id.value
        )
        result = await self._session.execute(stmt)
        return {group_id: role for group_id, role in result.all()}

    async def remove_all_memberships(self, user_id: UserId) -> list[str]:
        stmt = (
            delete(GroupMembershipModel)
            .where(GroupMembershipModel.user_id == user_id.value)
            .returning(GroupMembershipModel.group_id, GroupMembershipModel.role)
        )
        result = await self._session.execute(stmt)
        removed = sorted(result.all())

        now = datetime.now(UTC)
        for group_id, role in removed:
            await self._append_events(
                [
                    MemberRemoved(
                        group_id=group_id,
                        user_id=user_id.value,
                        role=role.value,
                        occurred_at=now,
                    )
                ],
                group_id,
            )

        group_ids = [group_id for group_id, _ in removed]
        self._probe.memberships_removed(user_id.value, group_ids)
        return group_ids

    async def _hydrate(self, stmt) -> list[Group]:
        result = await self._session.execute(stmt)
        models = list(result.scalars().all())
        members = await self._load_members([model.id for model in models])
        return [self._to_domain(model, members.get(model.id, [])) for model in models]

    async def _load_members(
        self, group_ids: list[str]
    ) -> dict[str, list[GroupMember]]:
        members: dict[str, list[GroupMember]] = defaultdict(list)
        if not group_ids:
            return members

        stmt = (
            select(GroupMembershipModel)
            .where(GroupMembershipModel.group_id.in_(group_ids))
            .order_by(GroupMembershipModel.created_at)
        )
        result = await self._session.execute(stmt)
        for row in result.scalars().all():
            members[row.group_id].append(
                GroupMember(user_id=UserId(value=row.user_id), role=row.role)
            )
        return members

    async def _append_events(self, events: list[DomainEvent], group_id: str) -> None:
        for event in events:
            await self._outbox.append(
                event_type=type(event).__name__,
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type="group",
                aggregate_id=group_id,
            )

    @staticmethod
    def _to_domain(model: GroupModel, members: list[GroupMember]) -> Group:
        return Group(
            id=GroupId(value=model.id),
            name=model.name,
            description=model.description,
            members=members,
        )
