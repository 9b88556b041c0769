"""파라미터 검증 및 데이터 접근 오류 테스트.

Parameter validation and data access error tests.
Invalid parameters must be rejected before any statement is executed;
driver failures must surface as DataAccessError chained to the cause.
"""

import asyncio
from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from employee_queries.repositories.user_repository import UserRepository
from employee_queries.utils.exceptions import DataAccessError, QueryError, ValidationError
from tests.conftest import BrokenSession, UnreachableSession


class TestValidation:
    """쿼리 실행 전 파라미터 검증 테스트."""

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    async def test_invalid_first_name(self, repo: UserRepository, value):
        session = UnreachableSession()
        with pytest.raises(ValidationError):
            await repo.find_all_by_first_name(session, value)
        assert session.executed == []

    async def test_invalid_last_name(self, repo: UserRepository):
        with pytest.raises(ValidationError):
            await repo.find_all_by_last_name(UnreachableSession(), "")

    async def test_invalid_company_name(self, repo: UserRepository):
        with pytest.raises(ValidationError):
            await repo.find_all_by_company_name(UnreachableSession(), "")
        with pytest.raises(ValidationError):
            await repo.find_all_payments_by_company_name(UnreachableSession(), None)

    async def test_average_requires_both_names(self, repo: UserRepository):
        session = UnreachableSession()
        with pytest.raises(ValidationError):
            await repo.find_average_payment_amount_by_first_and_last_names(session, "Ann", "")
        with pytest.raises(ValidationError):
            await repo.find_average_payment_amount_by_first_and_last_names(session, "", "Lee")
        assert session.executed == []

    @pytest.mark.parametrize("limit", [0, -1, True, 2.5, "3", None])
    async def test_invalid_limit(self, repo: UserRepository, limit):
        with pytest.raises(ValidationError, match="limit"):
            await repo.find_limited_users_ordered_by_birthday(UnreachableSession(), limit)

    @pytest.mark.parametrize("value", [None, "1990-01-01", datetime(1990, 1, 1, 12, 0)])
    async def test_invalid_birth_date(self, repo: UserRepository, value):
        with pytest.raises(ValidationError):
            await repo.find_all_by_birth_date(UnreachableSession(), value)

    @pytest.mark.parametrize("character", ["", "ab", " ", None])
    async def test_invalid_character(self, repo: UserRepository, character):
        with pytest.raises(ValidationError):
            await repo.find_all_with_first_char_last_name_and_company(UnreachableSession(), character)

    def test_default_detail(self):
        err = ValidationError()
        assert err.detail == "Invalid query parameter"
        assert isinstance(err, QueryError)


class TestDataAccess:
    """세션/연결 실패 전파 테스트."""

    async def test_connection_failure_wrapped(self, repo: UserRepository):
        with pytest.raises(DataAccessError) as exc_info:
            await repo.find_all(BrokenSession())
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert "OperationalError" in exc_info.value.detail

    @pytest.mark.parametrize(
        "call",
        [
            lambda repo, db: repo.find_all_by_company_name(db, "Acme"),
            lambda repo, db: repo.find_average_payment_amount_by_first_and_last_names(db, "Ann", "Lee"),
            lambda repo, db: repo.find_users_above_average_payment(db),
            lambda repo, db: repo.find_all_companies_with_avg_salary(db),
            lambda repo, db: repo.get_by_id(db, 1),
            lambda repo, db: repo.count(db),
        ],
    )
    async def test_every_query_wraps_failures(self, repo: UserRepository, call):
        with pytest.raises(DataAccessError) as exc_info:
            await call(repo, BrokenSession())
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)

    async def test_valid_parameters_reach_session(self, repo: UserRepository):
        """유효한 파라미터는 검증을 통과하고 세션까지 도달."""
        with pytest.raises(DataAccessError):
            await repo.find_all_by_birth_date(BrokenSession(), date(1990, 1, 1))


class RaisingSession:
    """래핑되지 않은 드라이버 예외를 올리는 세션 (Raises an unwrapped driver exception)."""

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc

    async def execute(self, statement, *args, **kwargs):
        raise self.exc


class TestUnwrappedDriverFailures:
    """SQLAlchemy가 래핑하지 않는 연결 실패 테스트."""

    @pytest.mark.parametrize(
        "exc",
        [
            ConnectionRefusedError(111, "Connect call failed"),
            OSError("network unreachable"),
            asyncio.TimeoutError(),
        ],
    )
    async def test_raw_driver_errors_wrapped(self, repo: UserRepository, exc):
        with pytest.raises(DataAccessError) as exc_info:
            await repo.find_all(RaisingSession(exc))
        assert exc_info.value.__cause__ is exc

    async def test_unreachable_postgres_server(self, repo: UserRepository):
        """연결을 거부하는 서버 — asyncpg 연결 실패가 DataAccessError로 전달."""
        engine = create_async_engine("postgresql+asyncpg://u:p@127.0.0.1:1/nodb")
        try:
            async with AsyncSession(engine) as db:
                with pytest.raises(DataAccessError) as exc_info:
                    await repo.find_all(db)
            assert isinstance(exc_info.value.__cause__, (OSError, asyncio.TimeoutError, SQLAlchemyError))
        finally:
            await engine.dispose()
