"""SQLAlchemy ORM models for groups and their memberships.

Membership rows are the source of truth for authorization: the
authorization engine reads them inside the caller's transaction.
"""

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from shared_kernel.authorization.types import GroupRole


class GroupModel(Base, TimestampMixin):
    """ORM model for groups table.

    Group names are not unique. Memberships reference the group with a
    RESTRICT foreign key, so the repository deletes them explicitly
    before deleting the group.
    """

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<GroupModel(id={self.id}, name={self.name})>"


class GroupMembershipModel(Base, TimestampMixin):
    """ORM model for group_memberships table.

    The composite primary key makes a user a member of a group at most once.
    """

    __tablename__ = "group_memberships"

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        primary_key=True,
    )
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )
    role: Mapped[GroupRole] = mapped_column(
        Enum(GroupRole, name="group_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupMembershipModel(group_id={self.group_id}, "
            f"user_id={self.user_id}, role={self.role})>"
        )
