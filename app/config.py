"""
App Config - 환경 설정
"""
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """ClubSphere 서버 설정"""

    APP_NAME: str = "ClubSphere API"
    APP_VERSION: str = "1.0.0"

    # Supabase (문서 저장소 + 인증)
    SUPABASE_URL: str = Field(default="", description="Supabase Project URL")
    SUPABASE_KEY: str = Field(default="", description="Supabase service key")

    # Stripe Checkout
    STRIPE_SECRET_KEY: str = ""
    CHECKOUT_CURRENCY: str = "usd"

    # 프론트엔드 (CORS + 결제 리다이렉트)
    CLIENT_DOMAIN: str = "http://localhost:5173"

    # 대시보드 분석 기간 (개월)
    ANALYTICS_MONTHS: int = Field(default=6, ge=1, le=24)

    # 서버 / 로깅
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
