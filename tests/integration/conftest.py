from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Iterator

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qrorder.infrastructure.cache import redis_client
from qrorder.infrastructure.db import session as db_session
from qrorder.infrastructure.security.jwt_tokens import issue_access_token

BACKEND_DIR = Path(__file__).resolve().parents[2]


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if BACKEND_DIR / "tests" / "integration" in item.path.parents:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session", autouse=True)
def integration_environment() -> Iterator[None]:
    database_url = os.getenv("INTEGRATION_DATABASE_URL")
    if not database_url:
        pytest.skip("INTEGRATION_DATABASE_URL is not set")
    redis_url = os.getenv("INTEGRATION_REDIS_URL", "redis://localhost:6379/0")

    os.environ["DATABASE_URL"] = database_url
    os.environ["REDIS_URL"] = redis_url
    os.environ["APP_ENV"] = "test"
    os.environ.setdefault("OTEL_SERVICE_NAME", "qrorder-backend-test")
    os.environ.setdefault("OTEL_EXPORTER_OTLP_ENDPOINT", "")

    db_session._build_engine.cache_clear()
    redis_client._build_client.cache_clear()

    env = os.environ.copy()
    env["PYTHONPATH"] = f"{BACKEND_DIR / 'src'}{os.pathsep}{env.get('PYTHONPATH', '')}".rstrip(
        os.pathsep
    )

    subprocess.run(
        [sys.executable, "-m", "alembic", "-c", "alembic.ini", "upgrade", "head"],
        cwd=BACKEND_DIR,
        env=env,
        check=True,
    )
    subprocess.run(
        [sys.executable, "-m", "qrorder.tools.seed"],
        cwd=BACKEND_DIR,
        env=env,
        check=True,
        capture_output=True,
    )
    yield


@pytest.fixture(autouse=True)
def clear_menu_cache() -> Iterator[None]:
    if redis_client.ping_redis():
        redis_client.get_redis_client().flushdb()
    yield


@pytest.fixture
def operator_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_access_token('usr_op_001')}"}


@pytest.fixture
def other_operator_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_access_token('usr_op_002')}"}


@pytest.fixture
def inactive_operator_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_access_token('usr_op_inactive')}"}
