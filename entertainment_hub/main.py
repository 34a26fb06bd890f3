"""
FastAPI メインアプリケーション
Entertainment Hub - 映画・シリーズ・アニメ・ゲームのカタログ管理API
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

load_dotenv()

from entertainment_hub.config import settings
from entertainment_hub.database import engine
from entertainment_hub.exceptions import register_exception_handlers
from entertainment_hub.rate_limiter import limiter
from entertainment_hub.routers.auth import router as auth_router
from entertainment_hub.routers.categories import router as categories_router
from entertainment_hub.routers.items import router as items_router

# ログ設定
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# ============================================
# ライフサイクル管理
# ============================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションの起動・終了処理"""
    logger.info(f"🚀 {settings.PROJECT_NAME} starting ({settings.ENVIRONMENT})...")

    # DB接続テスト
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            logger.info("✅ Database connection test successful")
    except Exception as e:
        logger.error(f"❌ Database connection test failed: {e}")

    yield

    logger.info(f"👋 {settings.PROJECT_NAME} shutting down...")
    engine.dispose()


# ============================================
# FastAPI アプリケーション
# ============================================
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="エンターテインメントカタログ（カテゴリ・アイテム）管理API",
    version=settings.VERSION,
    lifespan=lifespan,
)

# レート制限
app.state.limiter = limiter

# CORS設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def access_log(request: Request, call_next):
    """1リクエスト1行のアクセスログ"""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
    )
    return response


register_exception_handlers(app)

# ルータ登録
app.include_router(auth_router)
app.include_router(categories_router)
app.include_router(items_router)


# ============================================
# 基本エンドポイント
# ============================================
@app.get("/")
async def root():
    """ルートエンドポイント"""
    return {
        "success": True,
        "message": f"{settings.PROJECT_NAME} API",
        "version": settings.VERSION,
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "auth": "/api/auth",
            "categories": "/api/categories",
            "items": "/api/items",
        },
    }


@app.get("/health")
async def health_check():
    """ヘルスチェックエンドポイント"""
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }


# ============================================
# 開発サーバー起動
# ============================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "entertainment_hub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not settings.is_production,
        log_level="info",
    )
