"""
ClubSphere API 서버 실행
"""
import sys

import uvicorn
from loguru import logger

from app.config import get_settings
from app.server import create_app

settings = get_settings()

# 로깅 설정
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=settings.LOG_LEVEL,
)
logger.add(
    f"{settings.LOG_DIR}/clubsphere_{{time:YYYY-MM-DD}}.log",
    rotation="1 day",
    retention="30 days",
    level="DEBUG",
)

app = create_app(settings)


if __name__ == "__main__":
    logger.info(f"서버 시작: {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
