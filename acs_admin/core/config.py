from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """客户端设置，从环境变量加载。

    提供整个客户端库使用的类型化配置。
    """

    # ACS 管理后台地址
    ACS_BASE_URL: str = "http://localhost:2979"
    # 同源部署时为空，API 与前端共享同一路径前缀
    ACS_API_PREFIX: str = ""

    # 会话与登录
    ACS_LOGIN_PATH: str = "/login"
    ACS_LOGIN_PAGE_URL: str = "/reactui/login"
    ACS_LOGOUT_PATH: str = "/logout"

    # CSRF 配置
    CSRF_COOKIE_NAME: str = "csrf_token"
    CSRF_HEADER_NAME: str = "X-CSRF-Token"

    # HTTP 传输配置；None 表示不设超时
    ACS_REQUEST_TIMEOUT: float | None = None
    ACS_FOLLOW_REDIRECTS: bool = True
    ACS_VERIFY_TLS: bool = True

    LOG_LEVEL: str = "info"

    # 日志文件记录和轮转
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/acs_admin.log"
    LOG_ROTATION_POLICY: str = "time"  # 可选: "time", "size"
    LOG_ROTATION_WHEN: str = "D"  # 用于 TimedRotatingFileHandler
    LOG_ROTATION_INTERVAL: int = 1
    LOG_BACKUP_COUNT: int = 7
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # 用于基于大小的轮转

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()


def api_path(path: str) -> str:
    """在服务器相对路径前加上配置的 API 前缀。"""
    return f"{settings.ACS_API_PREFIX}{path}"


def api_url(path: str) -> str:
    """返回指定服务器相对路径的完整URL"""
    return f"{settings.ACS_BASE_URL.rstrip('/')}{api_path(path)}"
