from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool
from dotenv import load_dotenv

load_dotenv()

from entertainment_hub.config import settings
from entertainment_hub.models.base import Base  # noqa: F401

DATABASE_URL = settings.DATABASE_URL

if DATABASE_URL.startswith("sqlite"):
    # SQLite はスレッドを跨いで同じ接続を使うため check_same_thread を無効化
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=settings.SQL_ECHO,
    )
else:
    connect_args = {}
    # CA証明書が指定されていれば MySQL 接続で SSL を有効化
    if settings.SSL_CA_PATH:
        connect_args = {"ssl_ca": settings.SSL_CA_PATH, "ssl_verify_cert": True}

    engine = create_engine(
        DATABASE_URL,
        connect_args=connect_args,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=settings.SQL_ECHO,
    )

# セッションファクトリー
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# 依存性注入用のジェネレータ
def get_db():
    """
    FastAPIの依存性注入で使用するDBセッション

    使用例:
        from sqlalchemy.orm import Session
        from entertainment_hub.database import get_db

        @router.get("/categories")
        def list_categories(db: Session = Depends(get_db)):
            return db.query(Category).all()
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
