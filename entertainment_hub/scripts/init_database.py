"""
データベース初期化スクリプト

- テーブル作成
- デフォルトの super_admin を作成（同じメールアドレスが無い場合のみ）
- 初期カテゴリ（Movies / TV Series / Anime / Games）を投入（同じスラッグが無い場合のみ）

何度実行しても結果は同じ。

使い方:
    python -m entertainment_hub.scripts.init_database
"""
import sys
import logging
from datetime import datetime

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy.orm import Session

from entertainment_hub.auth import hash_password
from entertainment_hub.config import settings
from entertainment_hub.database import SessionLocal, engine
from entertainment_hub.models import Admin, AdminRole, Base, Category, CategoryStatus

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {
        "name": "Movies",
        "slug": "movies",
        "description": "Discover blockbuster hits and indie gems",
        "icon": "🎬",
        "gradient": "from-red-500 to-pink-600",
        "sort_order": 1,
    },
    {
        "name": "TV Series",
        "slug": "series",
        "description": "Binge-worthy shows and limited series",
        "icon": "📺",
        "gradient": "from-blue-500 to-purple-600",
        "sort_order": 2,
    },
    {
        "name": "Anime",
        "slug": "anime",
        "description": "Japanese animation and manga adaptations",
        "icon": "🗾",
        "gradient": "from-green-500 to-teal-600",
        "sort_order": 3,
    },
    {
        "name": "Games",
        "slug": "games",
        "description": "Gaming content and reviews",
        "icon": "🎮",
        "gradient": "from-orange-500 to-red-600",
        "sort_order": 4,
    },
]


def ensure_default_admin(db: Session) -> bool:
    """
    デフォルト管理者を作成

    Returns:
        新規作成した場合 True
    """
    email = settings.ADMIN_EMAIL.lower()
    if db.query(Admin).filter(Admin.email == email).first():
        return False

    db.add(
        Admin(
            username=settings.ADMIN_USERNAME,
            email=email,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role=AdminRole.SUPER_ADMIN,
        )
    )
    db.commit()
    logger.info(f"デフォルト管理者を作成: {email}")
    return True


def seed_categories(db: Session) -> int:
    """
    初期カテゴリを投入

    Returns:
        新規作成したカテゴリ数
    """
    created = 0
    for fields in DEFAULT_CATEGORIES:
        if db.query(Category.id).filter(Category.slug == fields["slug"]).first():
            continue
        db.add(Category(status=CategoryStatus.ACTIVE, **fields))
        created += 1
    db.commit()
    return created


def init_database(db: Session) -> dict:
    """テーブル作成と初期データ投入"""
    Base.metadata.create_all(bind=db.get_bind())
    return {
        "admin_created": ensure_default_admin(db),
        "categories_created": seed_categories(db),
    }


def main():
    """メイン処理"""
    print("=" * 60)
    print("🚀 データベース初期化")
    print(f"   実行日時: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"   接続先: {engine.url.render_as_string(hide_password=True)}")
    print("=" * 60)

    db = SessionLocal()
    try:
        result = init_database(db)

        print("\n📊 実行結果:")
        if result["admin_created"]:
            print(f"   管理者作成: {settings.ADMIN_EMAIL}")
            print("   ⚠️ 初回ログイン後にパスワードを変更してください")
        else:
            print("   管理者: 既に存在します")
        print(f"   カテゴリ作成: {result['categories_created']}件")

        print("\n✅ 初期化が完了しました")
        return 0

    except Exception as e:
        db.rollback()
        print(f"\n❌ エラーが発生しました: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    exit_code = main()
    sys.exit(exit_code)
