from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from sqlalchemy import Boolean, Date, DateTime, Integer, func, inspect, select, update
from sqlalchemy.exc import IntegrityError

from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .connection import ConnectionManager
from .errors import TransactionError


def _coerce(column, value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(column.type, DateTime) and isinstance(value, str):
        return datetime.fromisoformat(value)
    if isinstance(column.type, Date) and isinstance(value, str):
        return date.fromisoformat(value[:10])
    if isinstance(column.type, Integer) and isinstance(value, str):
        return int(value)
    if isinstance(column.type, Boolean) and isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return value


class SqlAlchemyRepository:
    """CRUD over one mapped model, every call in its own transaction.

    Rows come back as plain dicts (``Model.to_dict()``) so nothing ORM-bound
    leaves the transaction.
    """

    def __init__(self, db: ConnectionManager, model, *, name: Optional[str] = None):
        self._db = db
        self._model = model
        self._name = name or model.__name__
        # API field name (column name or attribute key) -> (attribute key, column)
        self._fields: dict[str, tuple[str, Any]] = {}
        for attr in inspect(model).column_attrs:
            column = attr.columns[0]
            self._fields[column.name] = (attr.key, column)
            self._fields[attr.key] = (attr.key, column)

    @property
    def name(self) -> str:
        return self._name

    def _values(self, data: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for key, value in data.items():
            field = self._fields.get(key)
            if field is None or key == "id":
                continue
            attr_key, column = field
            try:
                values[attr_key] = _coerce(column, value)
            except ValueError:
                raise ValidationError(f"{key} has an invalid value", key)
        return values

    def _run(self, work):
        try:
            return self._db.transaction(work)
        except TransactionError as e:
            if isinstance(e.original_error, IntegrityError):
                raise ConflictError("Record already exists") from e
            raise

    def _where(self, stmt, filters: Mapping[str, Any]):
        for key, value in filters.items():
            field = self._fields.get(key)
            if field is None:
                raise ValidationError(f"Unknown filter: {key}", key)
            try:
                value = _coerce(field[1], value)
            except ValueError:
                raise ValidationError(f"{key} has an invalid value", key)
            stmt = stmt.where(getattr(self._model, field[0]) == value)
        return stmt

    def get_by_id(self, record_id: Any) -> Optional[dict]:
        def work(session):
            obj = session.get(self._model, record_id)
            return obj.to_dict() if obj else None

        return self._run(work)

    def require(self, record_id: Any) -> dict:
        row = self.get_by_id(record_id)
        if row is None:
            raise NotFoundError(f"{self._name} with ID {record_id}")
        return row

    def find_one(self, **filters: Any) -> Optional[dict]:
        stmt = self._where(select(self._model), filters).limit(1)

        def work(session):
            obj = session.scalars(stmt).first()
            return obj.to_dict() if obj else None

        return self._run(work)

    def list(
        self,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        order_by: str = "id",
    ) -> list[dict]:
        limit = max(1, min(int(limit), MAX_PAGE_LIMIT))
        offset = max(0, int(offset))
        field = self._fields.get(order_by)
        if field is None:
            raise ValidationError(f"Unknown sort column: {order_by}", "order_by")
        stmt = self._where(select(self._model), filters or {}).order_by(field[1]).limit(limit).offset(offset)

        def work(session):
            return [obj.to_dict() for obj in session.scalars(stmt)]

        return self._run(work)

    def count(self, **filters: Any) -> int:
        stmt = self._where(select(func.count()).select_from(self._model), filters)

        def work(session):
            return int(session.scalar(stmt) or 0)

        return self._run(work)

    def create(self, data: Mapping[str, Any]) -> dict:
        values = self._values(data)

        def work(session):
            obj = self._model(**values)
            session.add(obj)
            session.flush()
            session.refresh(obj)
            return obj.to_dict()

        return self._run(work)

    def update(self, record_id: Any, data: Mapping[str, Any]) -> dict:
        values = self._values(data)

        def work(session):
            obj = session.get(self._model, record_id)
            if obj is None:
                return None
            for key, value in values.items():
                setattr(obj, key, value)
            session.flush()
            session.refresh(obj)
            return obj.to_dict()

        row = self._run(work)
        if row is None:
            raise NotFoundError(f"{self._name} with ID {record_id}")
        return row

    def update_if(self, record_id: Any, conditions: Mapping[str, Any], data: Mapping[str, Any]) -> Optional[dict]:
        """Write ``data`` only while the row still matches ``conditions``.

        Check and write are one ``UPDATE ... WHERE`` statement, so concurrent
        callers cannot both win. Returns the updated row, or None when nothing matched.
        """
        values = self._values(data)
        pk = inspect(self._model).primary_key[0]
        stmt = (
            self._where(update(self._model).where(pk == record_id), conditions)
            .values({getattr(self._model, key): value for key, value in values.items()})
            .execution_options(synchronize_session=False)
        )

        def work(session):
            if session.execute(stmt).rowcount == 0:
                return None
            return session.get(self._model, record_id).to_dict()

        return self._run(work)

    def delete(self, record_id: Any) -> None:
        def work(session):
            obj = session.get(self._model, record_id)
            if obj is None:
                return False
            session.delete(obj)
            return True

        if not self._run(work):
            raise NotFoundError(f"{self._name} with ID {record_id}")
