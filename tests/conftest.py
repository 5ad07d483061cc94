import fnmatch
import re
from typing import Dict, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from island_api.api.dependencies import get_verification_service
from island_api.core.database import get_db, init_database
from island_api.main import app
from island_api.services.verification_service import VerificationCodeService

CODE_PATTERN = re.compile(r'<div class="code-box">(\d{6})</div>')


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def advance(self, seconds: float):
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FakeRedis:
    """内存版 Redis，只实现验证码服务用到的命令，过期时间由 FakeClock 决定"""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self.failing_commands = set()

    def _check(self, command: str):
        if command in self.failing_commands or "*" in self.failing_commands:
            raise RedisConnectionError("Connection refused")

    def _entry(self, key: str):
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and expires_at <= self.clock():
            del self._data[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        self._check("get")
        entry = self._entry(key)
        return entry[0] if entry else None

    async def set(self, key: str, value, ex: Optional[int] = None):
        self._check("set")
        expires_at = self.clock() + ex if ex is not None else None
        self._data[key] = (str(value), expires_at)
        return True

    async def delete(self, *keys: str) -> int:
        self._check("delete")
        deleted = 0
        for key in keys:
            if self._entry(key) is not None:
                del self._data[key]
                deleted += 1
        return deleted

    async def ttl(self, key: str) -> int:
        self._check("ttl")
        entry = self._entry(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return int(round(entry[1] - self.clock()))

    async def scan_iter(self, match: Optional[str] = None):
        self._check("scan")
        for key in list(self._data):
            if self._entry(key) is None:
                continue
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def ping(self) -> bool:
        self._check("ping")
        return True


class RecordingMailer:
    """记录发出的邮件，可模拟发送失败"""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail = False
        self.error: Optional[Exception] = None

    async def send_mail(self, to: str, subject: str, html: str) -> bool:
        if self.error is not None:
            raise self.error
        if self.fail:
            return False
        self.sent.append({"to": to, "subject": subject, "html": html})
        return True

    def last_code(self) -> str:
        match = CODE_PATTERN.search(self.sent[-1]["html"])
        assert match, "no verification code in the last mail"
        return match.group(1)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_redis(clock):
    return FakeRedis(clock)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def verification_service(fake_redis, mailer):
    return VerificationCodeService(
        fake_redis, mailer, code_ttl_seconds=600, resend_cooldown_seconds=60)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_app(db_engine, verification_service):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_verification_service] = lambda: verification_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client
