"""회사 SQLAlchemy ORM 모델 정의.

Company SQLAlchemy ORM model definition.

Tables:
    - companies: 직원이 소속된 회사 (Companies employing users)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_queries.database import Base


class Company(Base):
    """회사 모델 — 사용자들이 소속된 회사.

    Company model — Employer of users.
    The name is used as a natural lookup key by the query layer;
    uniqueness is assumed by the domain but not constrained here.

    Attributes:
        id: 고유 식별자 (Unique identifier)
        name: 회사 이름 (Company name)

    Relationships:
        users: 소속 사용자 목록 (Users employed by this company)
    """

    __tablename__ = "companies"

    # 회사 고유 식별자 — Company unique identifier (auto-increment)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 회사 이름 — Company display name (lookup key)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 관계 — Relationships
    users = relationship("User", back_populates="company")

    def __repr__(self) -> str:
        return f"Company(id={self.id!r}, name={self.name!r})"
