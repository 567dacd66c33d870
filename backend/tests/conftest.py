"""
ICMS Admin API - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator, Dict, List, Set
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.models.user import User, UserRole
from app.services.cache_service import TTLCache
from app.services.dashboard_service import DashboardService, get_dashboard_service
from app.services.metrics_service import MetricsService
from app.services.metrics_source import ArticleRecord, DocumentRecord, MediaRecord, UserRecord

fake = Faker()

# Fixed "now" shared by the fake source and services under test
FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


class FakeClock:
    """Manually advanced monotonic clock for TTL tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMetricsSource:
    """
    In-memory MetricsSource.

    Add a method name to `failing` to make that call raise.
    """

    def __init__(self):
        self.failing: Set[str] = set()
        self.calls: Dict[str, int] = {}
        self.counts = {
            'users': 42,
            'documents': 17,
            'media': 9,
            'articles': 6,
            'departments': 4,
            'employees': 68,
            'downloads': 468,
        }
        self.roles = {
            UserRole.ADMIN: 2,
            UserRole.MANAGER: 3,
            UserRole.EDITOR: 7,
            UserRole.VIEWER: 30,
        }
        self.logins: List[datetime] = [
            FIXED_NOW - timedelta(hours=2),
            FIXED_NOW - timedelta(days=3),
            FIXED_NOW - timedelta(days=20),
            FIXED_NOW - timedelta(days=90),
        ]

    def _track(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        if name in self.failing:
            raise RuntimeError(f"{name} is unavailable")

    async def count_users(self) -> int:
        self._track('count_users')
        return self.counts['users']

    async def count_users_logged_in_since(self, since: datetime) -> int:
        self._track('count_users_logged_in_since')
        return sum(1 for login in self.logins if login >= since)

    async def count_users_by_role(self, role: UserRole) -> int:
        self._track('count_users_by_role')
        return self.roles.get(role, 0)

    async def count_documents(self) -> int:
        self._track('count_documents')
        return self.counts['documents']

    async def count_media(self) -> int:
        self._track('count_media')
        return self.counts['media']

    async def count_articles(self) -> int:
        self._track('count_articles')
        return self.counts['articles']

    async def count_departments(self) -> int:
        self._track('count_departments')
        return self.counts['departments']

    async def count_employees(self) -> int:
        self._track('count_employees')
        return self.counts['employees']

    async def sum_document_downloads(self) -> int:
        self._track('sum_document_downloads')
        return self.counts['downloads']

    async def top_documents_by_downloads(self, limit: int) -> List[DocumentRecord]:
        self._track('top_documents_by_downloads')
        documents = [
            DocumentRecord(id='doc-1', title={'en': 'Annual Report', 'ne': 'वार्षिक प्रतिवेदन'}, download_count=310, updated_at=FIXED_NOW),
            DocumentRecord(id='doc-2', title={'ne': 'सूचना'}, download_count=120, updated_at=FIXED_NOW),
            DocumentRecord(id='doc-3', title='Citizen Charter', download_count=38, updated_at=None),
        ]
        return documents[:limit]

    async def recent_media(self, limit: int) -> List[MediaRecord]:
        self._track('recent_media')
        return [
            MediaRecord(id=f'media-{i}', title=None if i == 2 else f'Photo {i}', created_at=FIXED_NOW)
            for i in range(1, 4)
        ][:limit]

    async def recent_articles(self, limit: int) -> List[ArticleRecord]:
        self._track('recent_articles')
        return [ArticleRecord(id='article-1', title={'en': 'Budget Speech'}, updated_at=FIXED_NOW)][:limit]

    async def users_by_recent_login(self, limit: int) -> List[UserRecord]:
        self._track('users_by_recent_login')
        users = [
            UserRecord(id='user-1', first_name='Sita', last_name='Sharma', role='admin', last_login_at=self.logins[0]),
            UserRecord(id='user-2', first_name=None, last_name=None, role=None, last_login_at=self.logins[1]),
        ]
        return users[:limit]


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory(db_session: AsyncSession) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database (tables created by db_session)"""
    return TestSessionLocal


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_source() -> FakeMetricsSource:
    return FakeMetricsSource()


@pytest.fixture
def metrics_service(fake_source: FakeMetricsSource) -> MetricsService:
    return MetricsService(fake_source, now=lambda: FIXED_NOW)


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(default_ttl=300, max_size=1000, sweep_interval=60, clock=clock)


@pytest.fixture
def dashboard_service(metrics_service: MetricsService, cache: TTLCache) -> DashboardService:
    return DashboardService(metrics_service, cache, now=lambda: FIXED_NOW)


@pytest.fixture
async def client(db_session: AsyncSession, dashboard_service: DashboardService) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and dashboard service overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dashboard_service] = lambda: dashboard_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, role: UserRole) -> User:
    user = User(
        email=fake.email(),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        role=role,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    return await _create_user(db_session, UserRole.ADMIN)


@pytest.fixture
async def editor_user(db_session: AsyncSession) -> User:
    """Create an editor test user"""
    return await _create_user(db_session, UserRole.EDITOR)


def _auth_headers(user: User) -> dict:
    token_data = {
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    }
    token = create_access_token(token_data)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return _auth_headers(admin_user)


@pytest.fixture
def editor_auth_headers(editor_user: User) -> dict:
    """Generate authentication headers for editor user"""
    return _auth_headers(editor_user)
