"""Axiom 쿼리 로깅 훅.

Axiom query logging hooks.
Listens to SQLAlchemy engine cursor events and sends one structured log
event per executed statement to Axiom.
Logs: SQL statement, bound parameters, row count, duration, error reason.
Sensitive parameter names (password, token, secret) are automatically masked.
"""

import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from sqlalchemy import event
from sqlalchemy.engine import Connection, ExceptionContext
from sqlalchemy.ext.asyncio import AsyncEngine

from employee_queries.config import settings

# 마스킹 대상 파라미터 패턴 — Parameter names to mask in logged bindings
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 실행 시작 시각 스택 키 — Connection.info key for statement start times
_START_TIMES_KEY = "axiom_query_start_times"


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive keys in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return _truncate(data, 200) if isinstance(data, str) else data


def _truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


def _jsonable(value: Any) -> Any:
    """Axiom 전송 가능한 값으로 변환 — Coerce non-JSON scalars to strings."""
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class AxiomQueryLogger:
    """모든 SQL 실행을 Axiom에 로깅하는 엔진 이벤트 리스너.

    Engine event listener that logs every executed SQL statement to Axiom.
    Captures: statement, parameters, row count, duration, error detail.
    """

    def __init__(
        self,
        client: AxiomClient,
        dataset: str,
        max_statement_length: int = 2000,
    ) -> None:
        self._client = client
        self._dataset: str = dataset
        self._max_statement_length: int = max_statement_length

    def attach(self, engine: AsyncEngine) -> None:
        """엔진의 동기 코어에 커서 이벤트를 등록합니다.

        Register cursor events on the engine's underlying sync engine.
        """
        sync_engine = engine.sync_engine
        event.listen(sync_engine, "before_cursor_execute", self.before_cursor_execute)
        event.listen(sync_engine, "after_cursor_execute", self.after_cursor_execute)
        event.listen(sync_engine, "handle_error", self.handle_error)

    def detach(self, engine: AsyncEngine) -> None:
        sync_engine = engine.sync_engine
        event.remove(sync_engine, "before_cursor_execute", self.before_cursor_execute)
        event.remove(sync_engine, "after_cursor_execute", self.after_cursor_execute)
        event.remove(sync_engine, "handle_error", self.handle_error)

    def before_cursor_execute(
        self,
        conn: Connection,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        conn.info.setdefault(_START_TIMES_KEY, []).append(time.perf_counter())

    def after_cursor_execute(
        self,
        conn: Connection,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        log_event = self._build_event(conn, statement, parameters)
        rowcount = getattr(cursor, "rowcount", None)
        if isinstance(rowcount, int) and rowcount >= 0:
            log_event["rowcount"] = rowcount
        self._send(log_event)

    def handle_error(self, context: ExceptionContext) -> None:
        exc = context.original_exception
        log_event = self._build_event(context.connection, context.statement, context.parameters)
        log_event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
        self._send(log_event)

    def _build_event(
        self,
        conn: Connection | None,
        statement: str | None,
        parameters: Any,
    ) -> dict[str, Any]:
        """Axiom 로그 이벤트 구성 — Build an Axiom log event for one statement."""
        log_event: dict[str, Any] = {
            "statement": _truncate(statement or "", self._max_statement_length),
        }

        # 시작 시각이 있으면 소요 시간 계산 — Compute duration when a start time was recorded
        start_times: list[float] = conn.info.get(_START_TIMES_KEY, []) if conn is not None else []
        if start_times:
            log_event["duration_ms"] = round((time.perf_counter() - start_times.pop()) * 1000, 2)

        if parameters:
            log_event["parameters"] = _jsonable(_mask_dict(parameters))
        return log_event

    def _send(self, log_event: dict[str, Any]) -> None:
        try:
            self._client.ingest_events(self._dataset, [log_event])
        except Exception:
            pass  # 로깅 실패가 쿼리 실행에 영향주지 않도록 — Never break a query on log failure


def install_query_logging(
    engine: AsyncEngine,
    client: AxiomClient | None = None,
    dataset: str | None = None,
) -> AxiomQueryLogger | None:
    """설정된 경우 엔진에 Axiom 쿼리 로거를 연결합니다.

    Attach an AxiomQueryLogger to the engine when Axiom is configured.
    An explicit client/dataset pair overrides the settings.

    Returns:
        AxiomQueryLogger | None: 연결된 로거, 미설정 시 None (Attached logger, or None when not configured)
    """
    dataset = dataset or settings.AXIOM_DATASET
    if client is None:
        # Axiom 미설정시 패스스루 — Pass through if Axiom not configured
        if not (settings.AXIOM_API_TOKEN and dataset):
            return None
        client = AxiomClient(token=settings.AXIOM_API_TOKEN)
    if not dataset:
        return None

    logger = AxiomQueryLogger(
        client,
        dataset,
        max_statement_length=settings.QUERY_LOG_MAX_STATEMENT_LENGTH,
    )
    logger.attach(engine)
    return logger
