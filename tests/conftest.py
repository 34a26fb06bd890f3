"""
テスト用の共通設定・フィクスチャ
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# テスト用の環境変数を設定（entertainment_hub.mainをインポートする前に設定）
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from entertainment_hub.main import app
from entertainment_hub.auth import create_access_token, hash_password
from entertainment_hub.database import get_db
from entertainment_hub.models import Admin, AdminRole, Base, Category, Item, ItemStatus
from entertainment_hub.rate_limiter import limiter


# テスト用のインメモリSQLiteデータベース
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "Admin123"


def override_get_db():
    """テスト用のDBセッションを提供"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db_session():
    """各テスト用のDBセッション"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """テスト用のAPIクライアント（レート制限のカウンタは毎回リセット）"""
    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _create_admin(db, username, email, role, is_active=True):
    admin = Admin(
        username=username,
        email=email,
        password_hash=hash_password(ADMIN_PASSWORD),
        role=role,
        is_active=is_active,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def super_admin(db_session):
    """super_admin ロールの管理者"""
    return _create_admin(db_session, "superadmin", "super@example.com", AdminRole.SUPER_ADMIN)


@pytest.fixture
def normal_admin(db_session):
    """admin ロールの管理者"""
    return _create_admin(db_session, "editor", "editor@example.com", AdminRole.ADMIN)


@pytest.fixture
def inactive_admin(db_session):
    return _create_admin(
        db_session, "retired", "retired@example.com", AdminRole.ADMIN, is_active=False
    )


@pytest.fixture
def auth_headers(super_admin):
    """super_admin の認証ヘッダー"""
    return {"Authorization": f"Bearer {create_access_token(super_admin.id)}"}


@pytest.fixture
def admin_headers(normal_admin):
    """admin の認証ヘッダー"""
    return {"Authorization": f"Bearer {create_access_token(normal_admin.id)}"}


@pytest.fixture
def make_category(client, auth_headers):
    """APIでカテゴリを作成して data.category を返す"""

    def _make(name="Movies", **fields):
        response = client.post(
            "/api/categories", json={"name": name, **fields}, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["category"]

    return _make


@pytest.fixture
def make_item(client, auth_headers):
    """APIでアイテムを作成して data.item を返す"""

    def _make(category_id, title="Inception", **fields):
        response = client.post(
            "/api/items",
            json={"category": category_id, "title": title, **fields},
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["item"]

    return _make


@pytest.fixture
def get_category(client):
    """カテゴリを再取得（itemCount の確認用）"""

    def _get(category_id):
        response = client.get(f"/api/categories/{category_id}")
        assert response.status_code == 200, response.text
        return response.json()["data"]["category"]

    return _get


@pytest.fixture
def insert_categories(db_session):
    """APIを経由せずにカテゴリをまとめて作成"""

    def _insert(count, prefix="Category"):
        categories = [
            Category(name=f"{prefix} {i:02d}", slug=f"{prefix.lower()}-{i:02d}", sort_order=i)
            for i in range(count)
        ]
        db_session.add_all(categories)
        db_session.commit()
        return categories

    return _insert


@pytest.fixture
def insert_items(db_session):
    """APIを経由せずにアイテムをまとめて作成（カウンタは更新しない）"""

    def _insert(category_id, count, status=ItemStatus.ACTIVE, prefix="item"):
        items = [
            Item(
                slug=f"{prefix}-{i:02d}",
                title=f"{prefix} {i:02d}",
                category_id=category_id,
                status=status,
            )
            for i in range(count)
        ]
        db_session.add_all(items)
        db_session.commit()
        return items

    return _insert
