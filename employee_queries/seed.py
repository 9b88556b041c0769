"""샘플 데이터 시드 스크립트 — 회사, 직원, 급여 생성.

Seed script — Creates sample companies, employees and payments.
Run this script once against a development database to have data for
the query layer to read.

Usage:
    python -m employee_queries.seed

Creates:
    - 3개 회사: Google, Microsoft, Apple (3 companies)
    - 5명 직원: 회사별 직원 및 개인정보 (5 users with personal info)
    - 직원별 급여 내역 (Payments for every user)
"""

import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_queries.database import Base, async_session, engine
from employee_queries.models import Birthday, Company, Payment, PersonalInfo, User

# (이름, 성, 생년월일, 회사, 급여 목록) — (first name, last name, birth date, company, payments)
SAMPLE_USERS: list[tuple[str, str, date, str, list[int]]] = [
    ("Bill", "Gates", date(1955, 10, 28), "Microsoft", [100, 300, 500]),
    ("Steve", "Jobs", date(1955, 2, 24), "Apple", [250, 500, 600]),
    ("Sergey", "Brin", date(1973, 8, 21), "Google", [500, 500, 500]),
    ("Tim", "Cook", date(1960, 11, 1), "Apple", [400, 300, 300]),
    ("Diane", "Greene", date(1955, 1, 1), "Google", [300, 300, 300]),
]


async def seed_sample_data(db: AsyncSession) -> dict[str, Company]:
    """세션에 샘플 데이터를 추가합니다 (커밋하지 않음).

    Add the sample companies, users and payments to the session and flush.
    The caller owns the transaction.

    Returns:
        dict[str, Company]: 이름별 생성된 회사 (Created companies by name)
    """
    companies: dict[str, Company] = {}
    for _, _, _, company_name, _ in SAMPLE_USERS:
        if company_name not in companies:
            company = Company(name=company_name)
            db.add(company)
            companies[company_name] = company
    await db.flush()  # flush로 company.id 생성 (Flush to generate company ids)

    for firstname, lastname, birth_date, company_name, amounts in SAMPLE_USERS:
        user = User(
            personal_info=PersonalInfo(firstname, lastname, Birthday(birth_date)),
            company_id=companies[company_name].id,
        )
        db.add(user)
        await db.flush()  # flush로 user.id 생성 (Flush to generate user.id)
        for amount in amounts:
            db.add(Payment(amount=Decimal(amount), receiver_id=user.id))

    await db.flush()
    return companies


async def seed() -> None:
    """데이터베이스를 샘플 데이터로 시드합니다.

    Create tables if they don't exist, then insert the sample data.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        # 회사가 하나라도 있으면 건너뜀 — Skip if any company already exists
        result = await db.execute(select(Company).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        companies = await seed_sample_data(db)
        await db.commit()
        print(f"Seeded: companies={sorted(companies)}, users={len(SAMPLE_USERS)}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
