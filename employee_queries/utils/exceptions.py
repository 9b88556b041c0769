"""쿼리 계층 예외 클래스 모듈.

Query-layer exception classes module.
Provides pre-configured exception types for the two failure modes of a
read query: a caller-supplied parameter that violates a precondition, and
a failure of the underlying database session or connection.

Usage:
    from employee_queries.utils.exceptions import ValidationError, DataAccessError
    raise ValidationError("limit must be a positive integer")
    raise DataAccessError("Query execution failed") from exc
"""


class QueryError(Exception):
    """쿼리 계층 예외의 공통 부모 클래스.

    Base class for all query-layer errors.

    Args:
        detail: 오류 메시지 (Error message)
    """

    default_detail: str = "Query failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail: str = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(QueryError):
    """잘못된 파라미터 예외 — 쿼리 실행 전에 발생.

    Raised when a caller-supplied parameter violates a precondition
    (e.g. empty name filter, non-positive limit). Raised before any
    statement reaches the database.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid query parameter")
    """

    default_detail = "Invalid query parameter"


class DataAccessError(QueryError):
    """데이터 접근 예외 — 세션/연결 실패 시 사용.

    Raised when the underlying session or connection fails while executing
    a statement (network, timeout, store-side error). The original driver
    exception is chained as __cause__. No retry is attempted.

    Args:
        detail: 오류 메시지 (Error message, default: "Database access failed")
    """

    default_detail = "Database access failed"
