from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from island_api.core.database import build_engine, init_database


def test_init_database_creates_missing_tables():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    assert init_database(bind=engine) == ["users"]
    assert "users" in inspect(engine).get_table_names()
    # 表已存在时不再创建
    assert init_database(bind=engine) == []
    engine.dispose()


def test_build_engine_for_sqlite():
    engine = build_engine("sqlite://")
    assert engine.dialect.name == "sqlite"
    engine.dispose()
