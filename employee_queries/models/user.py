"""사용자 및 개인정보 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition with its embedded personal information.
The personal columns live on the users table and are grouped into a
PersonalInfo composite; the birth date is materialized as a Birthday value.

Tables:
    - users: 직원 계정 (Employees with company scoping)
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import Date, ForeignKey, Integer, String, TypeDecorator
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, composite, mapped_column, relationship

from employee_queries.database import Base


@dataclass(frozen=True, order=True)
class Birthday:
    """생년월일 값 객체 — 날짜 동등성 비교를 지원.

    Birthday value object wrapping a calendar date.
    Two birthdays are equal when their dates are equal.
    """

    birth_date: date

    def age(self, today: date | None = None) -> int:
        """만 나이를 계산합니다 — Completed years as of `today` (default: now)."""
        today = today or date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years


class BirthdayType(TypeDecorator):
    """DATE 컬럼과 Birthday 값 객체 사이의 변환 타입.

    Column type storing a Birthday as DATE.
    Accepts either a Birthday or a plain date on bind.
    """

    impl = Date
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> date | None:
        if isinstance(value, Birthday):
            return value.birth_date
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> Birthday | None:
        if value is None:
            return None
        return Birthday(value)


@dataclass
class PersonalInfo:
    """사용자 개인정보 — users 테이블에 내장된 값 (Embedded personal information)."""

    firstname: str
    lastname: str
    birth_date: Birthday | None


class User(Base):
    """사용자 모델 — 회사에 소속된 직원.

    User model — Employee belonging to exactly one company.
    Owns exactly one PersonalInfo and zero or more payments.

    Attributes:
        id: 고유 식별자 (Unique identifier)
        firstname: 이름 (First name)
        lastname: 성 (Last name)
        birth_date: 생년월일 (Birthday value object)
        company_id: 소속 회사 FK (Employer foreign key)
        personal_info: 위 세 컬럼의 복합 값 (Composite of the three personal columns)

    Relationships:
        company: 소속 회사 (Employer)
        payments: 받은 급여 목록 (Payments received)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (auto-increment)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 이름 — First name
    firstname: Mapped[str] = mapped_column(String(128), nullable=False)
    # 성 — Last name
    lastname: Mapped[str] = mapped_column(String(128), nullable=False)
    # 생년월일 — Birth date stored as DATE, loaded as Birthday
    birth_date: Mapped[Birthday | None] = mapped_column(BirthdayType, nullable=True)
    # 소속 회사 FK — Employer (쿼리는 NOT NULL을 가정, queries assume a company)
    company_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("companies.id"), nullable=True)

    personal_info: Mapped[PersonalInfo] = composite(PersonalInfo, "firstname", "lastname", "birth_date")

    # 관계 — Relationships
    company = relationship("Company", back_populates="users")
    payments = relationship("Payment", back_populates="receiver")

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, firstname={self.firstname!r}, lastname={self.lastname!r})"
