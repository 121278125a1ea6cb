"""SQLAlchemy-backed units of work for shipping profiles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal, Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shipping_profiles.adapters.sqlalchemy.mappings import create_all_tables
from shipping_profiles.adapters.sqlalchemy.repositories import (
    SqlAlchemyShippingProfileRepository,
    storage_errors,
)
from shipping_profiles.config.storage import get_database_config
from shipping_profiles.domain.ports.unit_of_work import (
    RepositoryCollection,
    ShippingProfileRepositories,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncEngine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @engine.setter
    def engine(self, value: AsyncEngine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call shipping_profiles.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the async engine, create tables and prepare the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = get_database_config()
        engine = create_async_engine(database_uri or config.uri, echo=config.echo)
    await create_all_tables(engine)

    _STATE.engine = engine
    log.info("SQLAlchemy adapter started on %s", engine.url.render_as_string(hide_password=True))


def configured_engine() -> AsyncEngine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


async def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
        log.info("SQLAlchemy adapter stopped")
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self.session_factory = session_factory or _STATE.session_factory
        self._session: AsyncSession | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: AsyncSession) -> TRepositories: ...

    async def __aenter__(self) -> Self:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            await self.session.close()
            self.session = None
            self._repositories = None
        return False  # don't swallow exceptions

    async def commit(self) -> None:
        with storage_errors("commit"):
            await self.session.commit()

    async def rollback(self) -> None:
        with storage_errors("roll back"):
            await self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: AsyncSession | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyShippingProfileUnitOfWork(BaseSqlAlchemyUnitOfWork[ShippingProfileRepositories]):
    """Unit of work managing SQLAlchemy sessions for shipping profiles."""

    def _build_repositories(self, session: AsyncSession) -> ShippingProfileRepositories:
        return ShippingProfileRepositories(profiles=SqlAlchemyShippingProfileRepository(session))


if TYPE_CHECKING:
    from shipping_profiles.domain.ports.unit_of_work import ShippingProfileUnitOfWork

    _uow_check: ShippingProfileUnitOfWork = SqlAlchemyShippingProfileUnitOfWork()
