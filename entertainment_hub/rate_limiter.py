"""
レート制限設定

送信元IPごとのウィンドウカウンタ。リミッタ（api / auth / create / upload）ごとに
独立したスコープを持ち、同じリミッタを付けたエンドポイント同士でカウントを共有する。
ストレージはプロセス内メモリ。

各エンドポイントにはデコレータでリミッタを付け、判定そのものは
enforce_rate_limits() をルータの依存関係として登録して行う。
"""
from fastapi import Request
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from entertainment_hub.config import settings

# レート制限インスタンス
limiter = Limiter(key_func=get_remote_address)

# 全APIエンドポイント共通
api_limit = limiter.shared_limit(
    settings.API_RATE_LIMIT,
    scope="api",
    error_message="Too many requests from this IP, please try again later.",
)

# ログイン
AUTH_SCOPE = "auth"
auth_limit = limiter.shared_limit(
    settings.AUTH_RATE_LIMIT,
    scope=AUTH_SCOPE,
    error_message="Too many authentication attempts, please try again later.",
)

# カテゴリ・アイテム作成
create_limit = limiter.shared_limit(
    settings.CREATE_RATE_LIMIT,
    scope="create",
    error_message="Too many create requests, please try again later.",
)

# 画像アップロード
upload_limit = limiter.shared_limit(
    settings.UPLOAD_RATE_LIMIT,
    scope="upload",
    error_message="Too many upload requests, please try again later.",
)


def enforce_rate_limits(request: Request) -> None:
    """
    ルートに付けたリミッタを、リクエストの検証・認証より先に判定する

    判定済みフラグを立てるので、デコレータ側では再判定されない。

    Raises:
        RateLimitExceeded: いずれかのリミッタの上限超過
    """
    if not limiter.enabled:
        return
    limiter._check_request_limit(request, request.scope.get("endpoint"), False)
    request.state._rate_limiting_complete = True


def clear_auth_attempts(request: Request) -> None:
    """ログイン成功時、送信元IPの認証試行カウントを消去"""
    limiter.limiter.clear(
        parse(settings.AUTH_RATE_LIMIT), get_remote_address(request), AUTH_SCOPE
    )
