"""
공용 의존성

create_app() 에서 한 번 생성한 서비스 객체를 app.state 에서 꺼내 핸들러에 주입
"""
from fastapi import Request

from app.config import Settings
from database.repository import Repositories


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_identity_verifier(request: Request):
    return request.app.state.identity_verifier


def get_checkout_gateway(request: Request):
    return request.app.state.checkout_gateway


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
