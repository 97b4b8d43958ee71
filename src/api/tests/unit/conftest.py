"""Unit test fixtures with mocked dependencies."""

import re
from collections import defaultdict
from typing import Any
from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy import Delete, inspect

from infrastructure.database.models import Base
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import Actor, GlobalRole


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def mock_authz():
    """Create mock authorization provider that allows everything."""
    return create_autospec(AuthorizationProvider, instance=True)


@pytest.fixture
def super_admin() -> Actor:
    return Actor(user_id="super-1", role=GlobalRole.SUPER_ADMIN)


@pytest.fixture
def user_actor() -> Actor:
    return Actor(user_id="user-1", role=GlobalRole.USER)


class InMemoryRows:
    """AsyncSession stand-in that keeps ORM rows by model and primary key.

    Supports ``get``, ``add``, ``add_all``, ``delete``, ``flush`` and
    ``DELETE ... WHERE column = value`` statements. Any other statement
    returns a bare mock result.
    """

    def __init__(self) -> None:
        self.rows: dict[type, dict[tuple, Any]] = defaultdict(dict)
        self.session = AsyncMock()
        self.session.get.side_effect = self._get
        self.session.add = MagicMock(side_effect=self._add)
        self.session.add_all = MagicMock(
            side_effect=lambda rows: [self._add(row) for row in rows]
        )
        self.session.delete.side_effect = self._delete
        self.session.execute.side_effect = self._execute

    def of(self, model: type) -> list[Any]:
        return list(self.rows[model].values())

    def _get(self, model: type, key: Any) -> Any:
        return self.rows[model].get(key if isinstance(key, tuple) else (key,))

    def _add(self, row: Any) -> None:
        key = tuple(inspect(type(row)).primary_key_from_instance(row))
        self.rows[type(row)][key] = row

    def _delete(self, row: Any) -> None:
        self.rows[type(row)] = {
            key: kept for key, kept in self.rows[type(row)].items() if kept is not row
        }

    def _execute(self, statement: Any) -> Any:
        result = MagicMock()
        if not isinstance(statement, Delete):
            return result

        model = next(
            mapper.class_
            for mapper in Base.registry.mappers
            if mapper.local_table.name == statement.table.name
        )
        criteria = {
            re.sub(r"_\d+$", "", name): value
            for name, value in statement.compile().params.items()
        }
        doomed = [
            key
            for key, row in self.rows[model].items()
            if all(getattr(row, column) == value for column, value in criteria.items())
        ]
        for key in doomed:
            del self.rows[model][key]
        result.rowcount = len(doomed)
        return result


@pytest.fixture
def row_session() -> InMemoryRows:
    """Session whose rows survive between repository calls."""
    return InMemoryRows()
