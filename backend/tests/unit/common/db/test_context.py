import pytest
import asyncio

from common.db.context import (
    get_current_session,
    in_transaction,
    is_readonly_forced,
    readonly,
    reset_current_session,
    set_current_session,
    transactional,
)


class TestContextVariables:
    def test_defaults(self):
        assert is_readonly_forced() is False
        assert in_transaction(readonly=False) is False
        assert in_transaction(readonly=True) is False

    async def test_write_and_read_sessions_tracked_separately(self, test_db):
        token = set_current_session(test_db, readonly=True)
        try:
            assert get_current_session(readonly=True) is test_db
            assert get_current_session(readonly=False) is None
        finally:
            reset_current_session(token, readonly=True)

    async def test_concurrent_tasks_do_not_share_sessions(self, test_db):
        seen = {}

        async def holder():
            token = set_current_session(test_db)
            await asyncio.sleep(0.01)
            seen["holder"] = get_current_session()
            reset_current_session(token)

        async def bystander():
            await asyncio.sleep(0.005)
            seen["bystander"] = get_current_session()

        await asyncio.gather(holder(), bystander())

        assert seen == {"holder": test_db, "bystander": None}


class TestReadonlyDecorator:
    async def test_forces_readonly_for_the_call(self):
        @readonly
        async def read_something(a, b=0):
            return a + b, is_readonly_forced()

        assert await read_something(1, b=2) == (3, True)
        assert is_readonly_forced() is False

    async def test_resets_on_exception(self):
        @readonly
        async def failing():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await failing()

        assert is_readonly_forced() is False

    async def test_readonly_lookup_uses_read_session(self, test_db):
        @readonly
        async def current():
            return get_current_session()

        token = set_current_session(test_db, readonly=True)
        try:
            assert await current() is test_db
        finally:
            reset_current_session(token, readonly=True)


class TestTransactionalDecorator:
    async def test_runs_inside_one_transaction(self):
        @transactional
        async def unit_of_work():
            return in_transaction()

        assert await unit_of_work() is True
        assert in_transaction() is False
