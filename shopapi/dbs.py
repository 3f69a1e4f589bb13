"""A thin data-access layer over SQLAlchemy with composable find options."""

from __future__ import annotations

import itertools
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

from sqlalchemy import create_engine, func, select, text
from sqlalchemy import delete as sa_delete
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, selectinload, sessionmaker

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 1000
DEFAULT_ORDER = "id"
MAX_IDLE_CONNECTIONS = 20
MAX_OPEN_CONNECTIONS = 200

_param_ids = itertools.count()


class NotFoundError(LookupError):
    """No record matched the lookup."""


class MissingWhereClauseError(ValueError):
    """A delete was attempted without any condition."""


class Query:
    """A SQL condition with ``?`` placeholders and the values bound to them."""

    __slots__ = ("sql", "args")

    def __init__(self, sql: str, *args: Any) -> None:
        placeholders = sql.count("?")
        if placeholders != len(args):
            raise ValueError(
                f"query {sql!r} has {placeholders} placeholders but {len(args)} arguments"
            )
        self.sql = sql
        self.args = args

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return (self.sql, self.args) == (other.sql, other.args)

    def __hash__(self) -> int:
        return hash((self.sql, self.args))

    def __repr__(self) -> str:
        return f"Query({self.sql!r}, *{self.args!r})"

    def clause(self):
        """Return the condition as a SQLAlchemy text clause with bound parameters."""
        head, *rest = self.sql.split("?")
        parts = [head]
        params = {}
        for piece, value in zip(rest, self.args):
            name = f"q{next(_param_ids)}"
            params[name] = value
            parts.append(f":{name}{piece}")
        return text("".join(parts)).bindparams(**params)


@dataclass
class FindOptions:
    """Filters, ordering, paging and eager loads for a lookup."""

    queries: list[Query] = field(default_factory=list)
    order: Any = DEFAULT_ORDER
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    preloads: list[str] = field(default_factory=list)


FindOption = Callable[[FindOptions], None]


def with_query(*queries: Query) -> FindOption:
    def apply(options: FindOptions) -> None:
        options.queries = list(queries)

    return apply


def with_offset(offset: int) -> FindOption:
    def apply(options: FindOptions) -> None:
        options.offset = offset

    return apply


def with_limit(limit: int) -> FindOption:
    def apply(options: FindOptions) -> None:
        options.limit = limit

    return apply


def with_order(order: Any) -> FindOption:
    def apply(options: FindOptions) -> None:
        options.order = order

    return apply


def with_preload(preloads: Iterable[str]) -> FindOption:
    def apply(options: FindOptions) -> None:
        options.preloads = list(preloads)

    return apply


def get_options(*options: FindOption) -> FindOptions:
    """Apply the given options, in order, to the defaults."""
    result = FindOptions()
    for option in options:
        option(result)
    return result


def _chunks(items: list, size: int) -> Iterator[list]:
    iterator = iter(items)
    while batch := list(itertools.islice(iterator, size)):
        yield batch


class Database:
    """Database access; every call runs in its own transaction unless inside ``transaction()``."""

    def __init__(self, uri: str) -> None:
        url = make_url(uri)
        engine_kwargs: dict[str, Any] = {}
        if url.get_backend_name() != "sqlite":
            engine_kwargs = {
                "pool_size": MAX_IDLE_CONNECTIONS,
                "max_overflow": MAX_OPEN_CONNECTIONS - MAX_IDLE_CONNECTIONS,
            }
        self.engine = create_engine(url, **engine_kwargs)
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)
        self._current: ContextVar[Session | None] = ContextVar(
            f"shopapi_db_session_{id(self)}", default=None
        )

    def auto_migrate(self, *models: type) -> None:
        """Create the tables of the given models if they do not exist."""
        for model in models:
            model.metadata.create_all(self.engine, tables=[model.__table__])

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run the enclosed calls in one transaction, rolled back if the block raises."""
        current = self._current.get()
        if current is not None:
            yield current
            return
        with self._sessions.begin() as session:
            token = self._current.set(session)
            try:
                yield session
            finally:
                self._current.reset(token)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        current = self._current.get()
        if current is not None:
            yield current
            return
        with self._sessions.begin() as session:
            yield session

    def _select(self, model: type, options: FindOptions):
        stmt = select(model)
        for name in options.preloads:
            stmt = stmt.options(selectinload(getattr(model, name)))
        conditions = [query.clause() for query in options.queries]
        if conditions:
            stmt = stmt.where(*conditions)
        if options.order is not None and options.order != "":
            order = text(options.order) if isinstance(options.order, str) else options.order
            stmt = stmt.order_by(order)
        if options.offset:
            stmt = stmt.offset(options.offset)
        if options.limit:
            stmt = stmt.limit(options.limit)
        return stmt

    def create(self, doc: Any) -> None:
        with self._session() as session:
            session.add(doc)
            session.flush()

    def create_in_batches(self, docs: Iterable[Any], batch_size: int) -> None:
        items = list(docs)
        size = batch_size if batch_size > 0 else max(len(items), 1)
        with self._session() as session:
            for batch in _chunks(items, size):
                session.add_all(batch)
                session.flush()

    def update(self, doc: Any) -> None:
        """Save every field of ``doc``, inserting it if it does not exist yet."""
        with self._session() as session:
            session.merge(doc)
            session.flush()

    def delete(self, model: Any, *options: FindOption) -> int:
        """Delete rows of a model class, or one instance, matching the options.

        Returns the number of rows deleted. Raises MissingWhereClauseError when
        there is no condition at all.
        """
        conditions = [query.clause() for query in get_options(*options).queries]
        if isinstance(model, type):
            model_type = model
        else:
            model_type = type(model)
            mapper = sa_inspect(model_type)
            for column in mapper.primary_key:
                value = getattr(model, mapper.get_property_by_column(column).key)
                if value is not None:
                    conditions.append(column == value)
        if not conditions:
            raise MissingWhereClauseError("refusing to delete without conditions")
        stmt = (
            sa_delete(model_type)
            .where(*conditions)
            .execution_options(synchronize_session=False)
        )
        with self._session() as session:
            return session.execute(stmt).rowcount

    def find_by_id(self, model: type, id: Any) -> Any:
        stmt = select(model).where(Query("id = ?", id).clause()).limit(1)
        with self._session() as session:
            result = session.scalars(stmt).first()
        if result is None:
            raise NotFoundError(f"{model.__name__} {id!r} not found")
        return result

    def find_one(self, model: type, *options: FindOption) -> Any:
        stmt = self._select(model, get_options(*options)).limit(1)
        with self._session() as session:
            result = session.scalars(stmt).first()
        if result is None:
            raise NotFoundError(f"no {model.__name__} matched")
        return result

    def find(self, model: type, *options: FindOption) -> list[Any]:
        stmt = self._select(model, get_options(*options))
        with self._session() as session:
            return list(session.scalars(stmt).all())

    def count(self, model: type, *options: FindOption) -> int:
        stmt = select(func.count()).select_from(model)
        conditions = [query.clause() for query in get_options(*options).queries]
        if conditions:
            stmt = stmt.where(*conditions)
        with self._session() as session:
            return int(session.scalar(stmt) or 0)