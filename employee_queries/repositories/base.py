"""기본 조회 레포지토리 — 모든 레포지토리의 부모 클래스.

Base read-only repository — Parent class for all domain repositories.
Provides the id lookup and row count used by every repository, and the
single statement execution point that turns driver, network and timeout
failures into DataAccessError.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self) -> None:
            super().__init__(User)
"""

import asyncio
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Result
from sqlalchemy.sql import Executable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_queries.database import Base
from employee_queries.utils.exceptions import DataAccessError

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 조회 레포지토리.

    Generic read-only repository. Holds no session and no mutable state;
    every method runs on the session passed by the caller.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class.

        Args:
            model: 이 레포지토리가 조회할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository reads)
        """
        self.model: type[ModelType] = model

    async def _execute(self, db: AsyncSession, query: Executable) -> Result[Any]:
        """쿼리를 실행하고 드라이버 오류를 DataAccessError로 변환합니다.

        Execute a statement on the caller's session.

        Raises:
            DataAccessError: 세션/연결 실패 시 (On any SQLAlchemy, driver, network or timeout failure)
        """
        try:
            return await db.execute(query)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            # asyncpg는 연결 거부/시간 초과를 래핑하지 않고 그대로 올림
            # asyncpg raises refused connections and connect timeouts unwrapped
            raise DataAccessError(f"{type(exc).__name__}: {exc}") from exc

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: int,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its primary key.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 ID (ID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        result = await self._execute(db, query)
        return result.scalar_one_or_none()

    async def count(self, db: AsyncSession) -> int:
        """테이블 전체 레코드 수 — Total number of rows in the model's table."""
        query: Select = select(func.count()).select_from(self.model)
        return (await self._execute(db, query)).scalar() or 0
