"""SQLAlchemy ORM model for the users table.

Credentials live with the identity provider; this table stores the
profile and the system-wide role.
"""

from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from shared_kernel.authorization.types import GlobalRole


class UserModel(Base, TimestampMixin):
    """ORM model for users table.

    Note: id is VARCHAR(255) to accommodate identity provider subjects
    (UUIDs, Auth0 ids, ...) as well as generated ULIDs.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    role: Mapped[GlobalRole] = mapped_column(
        Enum(GlobalRole, name="global_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, email={self.email})>"
