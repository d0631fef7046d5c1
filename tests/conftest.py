from __future__ import annotations

import os

os.environ.setdefault("TASKLIST_ENVIRONMENT", "test")
os.environ.setdefault("TASKLIST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass
from datetime import datetime
from itertools import count

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist.core.config import Settings, get_settings
from tasklist.core.security import revoked_tokens
from tasklist.db.session import build_engine, init_db
from tasklist.deps import get_db_session
from tasklist.main import create_app
from tasklist.models import Task, TaskStatus, User
from tasklist.services import UserService

DEFAULT_PASSWORD = "StrongPass123!"


@dataclass(slots=True)
class AuthenticatedUser:
    user: User
    email: str
    password: str
    token: str | None

    @property
    def id(self) -> int:
        if self.user.id is None:  # pragma: no cover
            raise RuntimeError("Persisted user is missing an id.")
        return self.user.id

    @property
    def headers(self) -> dict[str, str]:
        if not self.token:
            raise RuntimeError("User has not been authenticated.")
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def _reset_revoked_tokens() -> Iterator[None]:
    revoked_tokens.clear()
    yield
    revoked_tokens.clear()


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = build_engine(
        Settings(environment="test", database_url="sqlite+aiosqlite:///:memory:"),
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest_asyncio.fixture
async def app(session: AsyncSession) -> AsyncIterator[FastAPI]:
    get_settings.cache_clear()
    application = create_app()

    async def _override_db_session() -> AsyncIterator[AsyncSession]:
        yield session

    application.dependency_overrides[get_db_session] = _override_db_session
    try:
        yield application
    finally:
        application.dependency_overrides.clear()
        get_settings.cache_clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def owner_factory(session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Insert bare users without going through password hashing."""

    counter = count()

    async def _factory(*, name: str = "Owner", email: str | None = None) -> User:
        user = User(
            name=name,
            email=email or f"owner-{next(counter)}@example.com",
            hashed_password="not-a-real-hash",
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _factory


@pytest_asyncio.fixture
async def task_factory(session: AsyncSession) -> Callable[..., Awaitable[Task]]:
    async def _factory(
        owner_id: int,
        *,
        title: str = "Sample task",
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
        created_at: datetime | None = None,
    ) -> Task:
        task = Task(owner_id=owner_id, title=title, description=description, status=status)
        if created_at is not None:
            task.created_at = created_at
            task.updated_at = created_at
        session.add(task)
        await session.commit()
        await session.refresh(task)
        return task

    return _factory


@pytest_asyncio.fixture
async def authenticated_user(
    session: AsyncSession,
    client: AsyncClient,
) -> Callable[..., Awaitable[AuthenticatedUser]]:
    user_service = UserService(session)
    counter = count()

    async def _factory(
        *,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        name: str = "Test User",
        login: bool = True,
    ) -> AuthenticatedUser:
        actual_email = email or f"user-{next(counter)}@example.com"
        user = await user_service.create_user(name=name, email=actual_email, password=password)
        token: str | None = None
        if login:
            response = await client.post(
                "/api/login",
                json={"email": actual_email, "password": password},
            )
            assert response.status_code == 200, response.text
            token = response.json()["data"]["token"]
        return AuthenticatedUser(user=user, email=actual_email, password=password, token=token)

    return _factory
