"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for relationship resolution.

Modules:
    company: 회사 (Company)
    user: 사용자, 개인정보, 생년월일 (User, PersonalInfo, Birthday)
    payment: 급여 지급 (Payment)
"""

from employee_queries.models.company import Company
from employee_queries.models.user import Birthday, PersonalInfo, User
from employee_queries.models.payment import Payment

__all__ = [
    "Company",
    "Birthday", "PersonalInfo", "User",
    "Payment",
]
