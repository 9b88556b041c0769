"""사용자 레포지토리 — 직원 조회 및 급여 집계 쿼리.

User Repository — Employee lookup and payment aggregation queries.
Extends BaseRepository with the fixed catalog of read queries over the
users, companies and payments tables. Every query is a single statement
executed on the caller's session; nothing is written.

Usage:
    user_repository = UserRepository()  # 애플리케이션 구성 시 한 번 생성 (built once at wiring time)
    async with async_session() as db:
        users = await user_repository.find_all_by_company_name(db, "Google")
"""

from datetime import date, datetime

from sqlalchemy import Float, Select, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, contains_eager, selectinload

from employee_queries.models.company import Company
from employee_queries.models.payment import Payment
from employee_queries.models.user import Birthday, User
from employee_queries.repositories.base import BaseRepository
from employee_queries.schemas.report import (
    CompanyAveragePayment,
    EmployeeAverageSalary,
    UserAveragePayment,
    UserCompany,
)
from employee_queries.utils.exceptions import ValidationError


def _require_text(value: object, name: str) -> str:
    """비어 있지 않은 문자열 파라미터 검증 — Reject None, non-str and blank values."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string")
    return value


def _avg_amount():
    """평균 급여 식 — AVG(payments.amount) as a float."""
    return cast(func.avg(Payment.amount), Float)


class UserRepository(BaseRepository[User]):
    """직원 조회 쿼리를 담당하는 레포지토리.

    Repository exposing the read queries over users and their payments.
    Result ordering is always total (primary key as last sort key), so
    repeated calls over unchanged data return identical sequences.

    Empty aggregates: scalar averages over no rows return None; grouped
    averages simply omit groups without payments.
    """

    def __init__(self) -> None:
        """UserRepository를 초기화합니다.

        Initialize the UserRepository with the User model.
        """
        super().__init__(User)

    # ── 사용자 조회 (User lookup) ─────────────────────────

    async def find_all(self, db: AsyncSession) -> list[User]:
        """모든 직원을 조회합니다 — All users, ordered by id."""
        query: Select = select(User).options(selectinload(User.company)).order_by(User.id)
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_all_by_first_name(self, db: AsyncSession, first_name: str) -> list[User]:
        """이름이 정확히 일치하는 직원을 조회합니다.

        Retrieve users whose first name equals `first_name` exactly.
        Case sensitivity follows the database collation.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            first_name: 이름 (First name to match)

        Returns:
            list[User]: 일치하는 사용자 목록 (Matching users)

        Raises:
            ValidationError: 빈 문자열인 경우 (If first_name is empty)
        """
        first_name = _require_text(first_name, "first_name")
        query: Select = (
            select(User)
            .options(selectinload(User.company))
            .where(User.firstname == first_name)
            .order_by(User.id)
        )
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_all_by_last_name(self, db: AsyncSession, last_name: str) -> list[User]:
        """성이 정확히 일치하는 직원을 조회합니다 — Users with the given last name."""
        last_name = _require_text(last_name, "last_name")
        query: Select = (
            select(User)
            .options(selectinload(User.company))
            .where(User.lastname == last_name)
            .order_by(User.id)
        )
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_all_by_birth_date(self, db: AsyncSession, date_of_birth: date) -> list[User]:
        """생년월일이 일치하는 직원을 조회합니다.

        Retrieve users whose Birthday equals the given calendar date.

        Raises:
            ValidationError: date가 아니거나 datetime인 경우 (If not a plain date)
        """
        if not isinstance(date_of_birth, date) or isinstance(date_of_birth, datetime):
            raise ValidationError("date_of_birth must be a date")
        query: Select = (
            select(User)
            .options(selectinload(User.company))
            .where(User.birth_date == Birthday(date_of_birth))
            .order_by(User.id)
        )
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_limited_users_ordered_by_birthday(self, db: AsyncSession, limit: int) -> list[User]:
        """생년월일 오름차순으로 처음 `limit`명의 직원을 조회합니다.

        Retrieve at most `limit` users ordered by birth date ascending.
        Returns fewer rows, not an error, when the table is smaller.
        Users without a birth date sort last.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            limit: 최대 행 수, 양의 정수 (Maximum number of rows, positive)

        Raises:
            ValidationError: limit이 양의 정수가 아닌 경우 (If limit is not a positive integer)
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError("limit must be a positive integer")
        query: Select = (
            select(User)
            .options(selectinload(User.company))
            .order_by(User.birth_date.asc().nulls_last(), User.id)
            .limit(limit)
        )
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_all_by_company_name(self, db: AsyncSession, company_name: str) -> list[User]:
        """회사 이름으로 소속 직원을 조회합니다.

        Retrieve users employed by the company with the given name.
        Inner join: users without a company never match. An unknown
        company name yields an empty list.
        """
        company_name = _require_text(company_name, "company_name")
        query: Select = (
            select(User)
            .join(User.company)
            .options(contains_eager(User.company))
            .where(Company.name == company_name)
            .order_by(User.id)
        )
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_all_with_first_char_last_name_and_company(
        self,
        db: AsyncSession,
        character: str,
    ) -> list[UserCompany]:
        """성과 회사 이름이 모두 같은 글자로 시작하는 직원을 조회합니다.

        Retrieve (user, company name) pairs where BOTH the user's last name
        and the company name start with `character`. LIKE wildcards in the
        input are escaped.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            character: 한 글자 접두사 (Single-character prefix)

        Raises:
            ValidationError: 정확히 한 글자가 아닌 경우 (If not exactly one character)
        """
        if not isinstance(character, str) or len(character) != 1 or not character.strip():
            raise ValidationError("character must be a single non-blank character")
        query: Select = (
            select(User, Company.name)
            .join(User.company)
            .options(contains_eager(User.company))
            .where(
                User.lastname.startswith(character, autoescape=True),
                Company.name.startswith(character, autoescape=True),
            )
            .order_by(User.id)
        )
        result = await self._execute(db, query)
        return [UserCompany(user=user, company_name=name) for user, name in result.all()]

    # ── 급여 조회 및 집계 (Payments and aggregates) ─────────

    async def find_all_payments_by_company_name(self, db: AsyncSession, company_name: str) -> list[Payment]:
        """회사 직원들이 받은 모든 급여를 조회합니다.

        Retrieve every payment received by users of the named company,
        ordered by receiver name (first, then last) and then by amount.
        The receiver and its company are loaded with the payment.
        """
        company_name = _require_text(company_name, "company_name")
        query: Select = (
            select(Payment)
            .join(Payment.receiver)
            .join(User.company)
            .options(contains_eager(Payment.receiver).contains_eager(User.company))
            .where(Company.name == company_name)
            .order_by(User.firstname, User.lastname, Payment.amount, Payment.id)
        )
        result = await self._execute(db, query)
        return list(result.scalars().all())

    async def find_average_payment_amount_by_first_and_last_names(
        self,
        db: AsyncSession,
        first_name: str,
        last_name: str,
    ) -> float | None:
        """이름과 성으로 직원의 평균 급여를 계산합니다.

        Compute the mean payment amount over all payments received by users
        with the given first and last name.

        Returns:
            float | None: 평균 급여, 일치하는 급여가 없으면 None
                          (Average amount, or None when no payment matches)
        """
        first_name = _require_text(first_name, "first_name")
        last_name = _require_text(last_name, "last_name")
        query: Select = (
            select(_avg_amount())
            .select_from(Payment)
            .join(Payment.receiver)
            .where(User.firstname == first_name, User.lastname == last_name)
        )
        value = (await self._execute(db, query)).scalar_one_or_none()
        return float(value) if value is not None else None

    async def find_company_names_with_avg_user_payments_ordered_by_company_name(
        self,
        db: AsyncSession,
    ) -> list[CompanyAveragePayment]:
        """회사별 이름과 소속 직원 평균 급여 — 회사 이름 오름차순.

        For each company with at least one paid user: its name and the
        average payment amount of its users, ordered by company name.
        """
        avg_amount = _avg_amount().label("avg_amount")
        query: Select = (
            select(Company.name, avg_amount)
            .select_from(Company)
            .join(Company.users)
            .join(User.payments)
            .group_by(Company.name)
            .order_by(Company.name)
        )
        result = await self._execute(db, query)
        return [CompanyAveragePayment(company_name=name, avg_amount=avg) for name, avg in result.all()]

    async def find_users_above_average_payment(self, db: AsyncSession) -> list[UserAveragePayment]:
        """평균 급여가 전체 평균보다 높은 직원과 그 평균 급여.

        Retrieve users whose own average payment exceeds the average of all
        payments, with that average, ordered by first name.

        The global average is a scalar subquery in the HAVING clause of the
        same statement, so both levels read one snapshot.
        """
        all_users = aliased(User)
        all_payments = aliased(Payment)
        global_avg = (
            select(func.avg(all_payments.amount))
            .select_from(all_users)
            .join(all_payments, all_payments.receiver_id == all_users.id)
            .scalar_subquery()
        )

        query: Select = (
            select(User, _avg_amount().label("avg_amount"))
            .join(User.payments)
            .options(selectinload(User.company))
            .group_by(User.id)
            .having(func.avg(Payment.amount) > global_avg)
            .order_by(User.firstname, User.id)
        )
        result = await self._execute(db, query)
        return [UserAveragePayment(user=user, avg_amount=avg) for user, avg in result.all()]

    async def find_all_with_names_company_and_avg_salary(
        self,
        db: AsyncSession,
    ) -> list[EmployeeAverageSalary]:
        """직원별 성, 이름, 회사, 평균 급여 — 평균 급여 내림차순.

        Per user and company: last name, first name, company name, average
        payment amount and user id, ordered by the average descending.
        """
        avg_amount = _avg_amount().label("avg_amount")
        query: Select = (
            select(User.lastname, User.firstname, Company.name, avg_amount, User.id)
            .select_from(User)
            .join(User.company)
            .join(User.payments)
            .group_by(User.id, Company.name)
            .order_by(avg_amount.desc(), User.id)
        )
        result = await self._execute(db, query)
        return [
            EmployeeAverageSalary(
                lastname=lastname,
                firstname=firstname,
                company_name=company_name,
                avg_amount=avg,
                user_id=user_id,
            )
            for lastname, firstname, company_name, avg, user_id in result.all()
        ]

    async def find_all_companies_with_avg_salary(self, db: AsyncSession) -> list[CompanyAveragePayment]:
        """회사별 평균 급여 — 평균 급여 내림차순 (Per-company average, highest first)."""
        avg_amount = _avg_amount().label("avg_amount")
        query: Select = (
            select(Company.name, avg_amount)
            .select_from(User)
            .join(User.company)
            .join(User.payments)
            .group_by(Company.name)
            .order_by(avg_amount.desc(), Company.name)
        )
        result = await self._execute(db, query)
        return [CompanyAveragePayment(company_name=name, avg_amount=avg) for name, avg in result.all()]
