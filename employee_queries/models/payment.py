"""급여 지급 SQLAlchemy ORM 모델 정의.

Payment SQLAlchemy ORM model definition.

Tables:
    - payments: 사용자에게 지급된 금액 (Amounts paid to users)
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_queries.database import Base


class Payment(Base):
    """급여 지급 모델 — 한 명의 수령인에게 지급된 금액.

    Payment model — An amount paid to exactly one receiving user.

    Attributes:
        id: 고유 식별자 (Unique identifier)
        amount: 지급 금액 (Paid amount)
        receiver_id: 수령인 FK (Receiving user foreign key)

    Relationships:
        receiver: 수령인 (Receiving user, inverse of User.payments)
    """

    __tablename__ = "payments"

    # 지급 고유 식별자 — Payment unique identifier (auto-increment)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 지급 금액 — Paid amount
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # 수령인 FK — Receiving user
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # 관계 — Relationships
    receiver = relationship("User", back_populates="payments")

    def __repr__(self) -> str:
        return f"Payment(id={self.id!r}, amount={self.amount!r}, receiver_id={self.receiver_id!r})"
