"""
Jotter Backend: Credential Store Tests
=======================================

What:  Runs CredentialStore against a real SQLite database (tmp_path).

What we test:
    ✅ create() returns an id and the row is findable by username
    ✅ Usernames are case-sensitive
    ✅ Duplicate username → DuplicateUsernameError, exactly one row remains
    ✅ Two concurrent creates of one name: one id, one DuplicateUsernameError
    ✅ Driver failures surface as StorageError
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from jotter.exceptions import DuplicateUsernameError, StorageError
from jotter.models.user import User
from jotter.services.credential_store import CredentialStore


class TestCredentialStore:

    def setup_method(self):
        self.store = CredentialStore()

    @pytest.mark.asyncio
    async def test_create_and_find(self, db_session):
        user_id = await self.store.create(db_session, "carol", "$2b$04$fakehash")

        found = await self.store.find_by_username(db_session, "carol")

        assert found is not None
        assert found.id == user_id
        assert found.password_hash == "$2b$04$fakehash"

    @pytest.mark.asyncio
    async def test_find_unknown_returns_none(self, db_session):
        assert await self.store.find_by_username(db_session, "nobody") is None

    @pytest.mark.asyncio
    async def test_usernames_are_case_sensitive(self, db_session):
        first = await self.store.create(db_session, "Dave", "h1")
        second = await self.store.create(db_session, "dave", "h2")

        assert first != second
        assert (await self.store.find_by_username(db_session, "DAVE")) is None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, db_session):
        await self.store.create(db_session, "erin", "h1")

        with pytest.raises(DuplicateUsernameError):
            await self.store.create(db_session, "erin", "h2")

        count = await db_session.scalar(
            select(func.count(User.id)).where(User.username == "erin")
        )
        assert count == 1
        # The session is usable again after the rollback
        assert (await self.store.find_by_username(db_session, "erin")).password_hash == "h1"

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_registration(self, app):
        """Two sessions race to insert the same username; the constraint picks one."""
        factory = app.state.session_factory

        async def attempt():
            async with factory() as session:
                try:
                    return await self.store.create(session, "frank", "hash")
                except DuplicateUsernameError as e:
                    return e

        results = await asyncio.gather(attempt(), attempt())

        ids = [r for r in results if isinstance(r, int)]
        errors = [r for r in results if isinstance(r, DuplicateUsernameError)]
        assert len(ids) == 1
        assert len(errors) == 1

        async with factory() as session:
            count = await session.scalar(
                select(func.count(User.id)).where(User.username == "frank")
            )
        assert count == 1

    @pytest.mark.asyncio
    async def test_lookup_failure_raises_storage_error(self):
        session = AsyncMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))

        with pytest.raises(StorageError):
            await self.store.find_by_username(session, "anyone")

    @pytest.mark.asyncio
    async def test_insert_failure_raises_storage_error(self):
        session = AsyncMock()
        session.add = MagicMock()
        session.flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))

        with pytest.raises(StorageError):
            await self.store.create(session, "grace", "hash")
        session.rollback.assert_awaited_once()
