from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker

from island_api.config import settings
from island_api.utils.logger import db_logger


def build_engine(database_url: str):
    """按数据库类型创建引擎"""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,          # 连接池预检查，防止使用已断开的连接
        pool_recycle=300,            # 每5分钟回收连接
        pool_size=20,
        max_overflow=30,
        pool_timeout=60,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_database(bind=None):
    """初始化数据库，缺失的表自动创建"""
    bind = bind or engine

    # 导入所有模型以确保它们被注册到Base.metadata
    import island_api.models  # noqa: F401

    existing_tables = inspect(bind).get_table_names()
    expected_tables = list(Base.metadata.tables.keys())
    missing_tables = [
        table for table in expected_tables if table not in existing_tables]

    if missing_tables:
        db_logger.warning(f"发现缺失的数据库表: {missing_tables}，正在创建...")
        Base.metadata.create_all(bind=bind)
    return missing_tables


def get_db():
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
