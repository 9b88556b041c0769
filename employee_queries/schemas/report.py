"""집계 쿼리 결과 Pydantic 스키마 정의.

Pydantic row schemas for aggregate query results.
Each schema gives a named, typed shape to one tuple-valued query.
"""

from pydantic import BaseModel, ConfigDict

from employee_queries.models.user import User


class CompanyAveragePayment(BaseModel):
    """회사별 평균 급여 행.

    Attributes:
        company_name: 회사 이름 (Company name)
        avg_amount: 소속 직원 급여 평균 (Average payment amount of the company's users)
    """

    model_config = ConfigDict(frozen=True)

    company_name: str
    avg_amount: float


class UserAveragePayment(BaseModel):
    """사용자와 그 평균 급여 (User with their average payment amount)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user: User
    avg_amount: float


class EmployeeAverageSalary(BaseModel):
    """직원 이름, 회사, 평균 급여 행.

    Attributes:
        lastname: 성 (Last name)
        firstname: 이름 (First name)
        company_name: 회사 이름 (Company name)
        avg_amount: 평균 급여 (Average payment amount)
        user_id: 사용자 ID (User identifier, usable for re-fetching)
    """

    model_config = ConfigDict(frozen=True)

    lastname: str
    firstname: str
    company_name: str
    avg_amount: float
    user_id: int


class UserCompany(BaseModel):
    """직원과 소속 회사 이름 행.

    Attributes:
        user: 직원 (User, company relationship loaded)
        company_name: 회사 이름 (Company name)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user: User
    company_name: str
