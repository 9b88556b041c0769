"""테스트 인프라 — 테스트 DB 엔진, 세션, 샘플 데이터 픽스처.

Test infrastructure — Test database engine, session, and sample data fixtures.
Uses an in-memory SQLite database (aiosqlite) unless TEST_DATABASE_URL
points at another database such as PostgreSQL.
The schema is created fresh for every test and dropped afterwards.
"""

import os
from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from employee_queries.database import Base
from employee_queries.models import Birthday, Company, Payment, PersonalInfo, User
from employee_queries.repositories.user_repository import UserRepository
from employee_queries.seed import seed_sample_data

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _create_engine() -> AsyncEngine:
    if TEST_DATABASE_URL.startswith("sqlite"):
        # 단일 연결 공유 — in-memory DB는 연결마다 별도이므로 StaticPool 사용
        return create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 레포지토리
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 매 테스트마다 스키마를 새로 생성합니다."""
    eng = _create_engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repo() -> UserRepository:
    return UserRepository()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def add_user(
    db: AsyncSession,
    firstname: str,
    lastname: str,
    company: Company | None,
    amounts: list[int],
    birth_date: date = date(1990, 1, 1),
) -> User:
    """직원과 급여 내역을 추가합니다 (Add a user with their payments)."""
    user = User(
        personal_info=PersonalInfo(firstname, lastname, Birthday(birth_date)),
        company_id=company.id if company is not None else None,
    )
    db.add(user)
    await db.flush()
    for amount in amounts:
        db.add(Payment(amount=Decimal(amount), receiver_id=user.id))
    await db.flush()
    return user


async def add_company(db: AsyncSession, name: str) -> Company:
    company = Company(name=name)
    db.add(company)
    await db.flush()
    return company


async def persist(db: AsyncSession) -> None:
    """커밋 후 식별자 맵을 비워 이후 조회가 DB에서 새로 로드되게 합니다."""
    await db.commit()
    db.expunge_all()


@pytest_asyncio.fixture
async def sample(db: AsyncSession) -> dict[str, Company]:
    """seed 모듈의 샘플 데이터(3개 회사, 5명 직원)를 생성합니다."""
    companies = await seed_sample_data(db)
    await persist(db)
    return companies


# ---------------------------------------------------------------------------
# 가짜 세션: 실행 여부 확인 및 연결 실패 재현
# ---------------------------------------------------------------------------
class UnreachableSession:
    """실행되면 안 되는 세션 — Fails the test if any statement is executed."""

    def __init__(self) -> None:
        self.executed: list[Any] = []

    async def execute(self, statement: Any, *args: Any, **kwargs: Any) -> Any:
        self.executed.append(statement)
        raise AssertionError("statement reached the database")


class BrokenSession:
    """연결이 끊긴 세션 — Every execute raises a driver-level OperationalError."""

    async def execute(self, statement: Any, *args: Any, **kwargs: Any) -> Any:
        raise OperationalError("SELECT 1", {}, ConnectionResetError("connection lost"))
