from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from account_server.infrastructure.database.models import AccountRecord
from account_server.infrastructure.database.repositories.account_repository import SqlAccountRepository
from account_server.modules.accounts import (
    AccountAlreadyExistsError,
    AccountCriteria,
    AccountNotFoundError,
    AccountRegisterInput,
    AccountRole,
    AccountService,
    AccountStatus,
)


async def _create(repo: SqlAccountRepository, username: str, email: str, phone: str | None = None):
    return await repo.create_account(
        username=username,
        email=email,
        password_hash="hash",
        phone=phone,
        real_name=None,
        nickname=None,
        status=AccountStatus.NORMAL,
        role=AccountRole.USER,
    )


@pytest.mark.asyncio
async def test_create_and_lookup(test_session):
    repo = SqlAccountRepository(test_session)
    created = await _create(repo, "alice1", "a@x.com", "13900000000")

    assert created.status == AccountStatus.NORMAL
    assert created.created_at is not None
    assert created.created_at.tzinfo is not None
    assert (await repo.get_by_id(created.id)).username == "alice1"
    assert (await repo.get_by_username("alice1")).id == created.id
    assert (await repo.get_by_email("a@x.com")).id == created.id
    assert (await repo.get_by_phone("13900000000")).id == created.id
    assert await repo.get_by_username("ALICE1") is None


@pytest.mark.asyncio
async def test_unique_index_rejects_concurrent_duplicate(test_session):
    repo = SqlAccountRepository(test_session)
    await _create(repo, "alice1", "a@x.com")
    await test_session.commit()

    with pytest.raises(AccountAlreadyExistsError) as excinfo:
        await _create(repo, "alice1", "other@x.com")
    await test_session.rollback()

    assert excinfo.value.field == "username"
    assert (await repo.get_by_username("alice1")).email == "a@x.com"


@pytest.mark.asyncio
async def test_unique_index_ignores_deleted_rows(test_session):
    repo = SqlAccountRepository(test_session)
    first = await _create(repo, "alice1", "a@x.com", "13900000000")
    await repo.update_account(first.id, is_deleted=True)

    second = await _create(repo, "alice1", "a@x.com", "13900000000")
    await test_session.commit()

    rows = (await test_session.execute(select(AccountRecord).where(AccountRecord.username == "alice1"))).scalars().all()
    assert len(rows) == 2
    assert (await repo.get_by_username("alice1")).id == second.id
    assert await repo.get_by_id(first.id) is None


@pytest.mark.asyncio
async def test_update_rejects_phone_conflict_and_unknown_fields(test_session):
    repo = SqlAccountRepository(test_session)
    await _create(repo, "alice1", "a@x.com", "13900000000")
    bob = await _create(repo, "bob_1", "b@x.com")
    await test_session.commit()

    with pytest.raises(AccountAlreadyExistsError) as excinfo:
        await repo.update_account(bob.id, phone="13900000000")
    await test_session.rollback()
    assert excinfo.value.field == "phone"

    with pytest.raises(ValueError):
        await repo.update_account(bob.id, username="renamed")

    with pytest.raises(AccountNotFoundError):
        await repo.update_account("missing", nickname="x")


@pytest.mark.asyncio
async def test_record_login_increments_in_place(test_session):
    repo = SqlAccountRepository(test_session)
    account = await _create(repo, "alice1", "a@x.com")
    stamp = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)

    await repo.record_login(account.id, timestamp=stamp, ip="10.0.0.1")
    updated = await repo.record_login(account.id, timestamp=stamp, ip="10.0.0.2")

    assert updated.login_count == 2
    assert updated.last_login_ip == "10.0.0.2"
    assert updated.last_login_at == stamp
    assert await repo.record_login("missing", timestamp=stamp, ip="10.0.0.1") is None


@pytest.mark.asyncio
async def test_keyword_filter_treats_wildcards_literally(test_session):
    repo = SqlAccountRepository(test_session)
    await _create(repo, "a_b", "ab@x.com")
    await _create(repo, "axb", "axb@x.com")

    matches = await repo.list_accounts(AccountCriteria(keyword="_"))

    assert [a.username for a in matches] == ["a_b"]
    assert await repo.count_accounts(AccountCriteria(keyword="AXB")) == 1


@pytest.mark.asyncio
async def test_criteria_filters_and_ordering(test_session):
    repo = SqlAccountRepository(test_session)
    old = await _create(repo, "old_one", "old@x.com")
    await test_session.execute(
        AccountRecord.__table__.update()
        .where(AccountRecord.id == old.id)
        .values(created_at=datetime.now(timezone.utc) - timedelta(days=3))
    )
    locked = await _create(repo, "locked_1", "l@x.com")
    await repo.update_account(locked.id, status=AccountStatus.LOCKED)
    newest = await _create(repo, "newest_1", "n@x.com")

    everyone = await repo.list_accounts(AccountCriteria())
    assert [a.username for a in everyone][-1] == "old_one"
    assert await repo.count_accounts(AccountCriteria(status=AccountStatus.NORMAL)) == 2
    assert await repo.count_accounts(AccountCriteria(status=AccountStatus.LOCKED)) == 1

    since = datetime.now(timezone.utc) - timedelta(days=1)
    recent = await repo.list_accounts(AccountCriteria(created_from=since))
    assert {a.id for a in recent} == {locked.id, newest.id}

    await repo.update_account(newest.id, is_deleted=True)
    assert await repo.count_accounts(AccountCriteria()) == 2


@pytest.mark.asyncio
async def test_service_statistics_against_sql_store(test_session):
    service = AccountService.with_session(test_session)
    ids = []
    for index in range(3):
        account = await service.register(
            AccountRegisterInput(username=f"user_{index}", password="abc123", email=f"u{index}@x.com")
        )
        ids.append(account.id)
    await service.set_status(ids[0], AccountStatus.DISABLED)

    stats = await service.statistics()

    assert (stats.total_users, stats.active_users, stats.today_registrations) == (3, 2, 3)


@pytest.mark.asyncio
async def test_keyword_filter_matches_non_ascii_names(test_session):
    repo = SqlAccountRepository(test_session)
    alice = await _create(repo, "alice1", "a@x.com")
    await repo.update_account(alice.id, real_name="王小明")
    await _create(repo, "bob_1", "b@x.com")

    matches = await repo.list_accounts(AccountCriteria(keyword="小明"))

    assert [a.username for a in matches] == ["alice1"]
