"""Shared test fixtures."""

import os
from types import SimpleNamespace
from unittest.mock import MagicMock

# 앱 임포트 전에 테스트용 설정을 지정합니다.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import jwt
import pytest

from app import app as flask_app
from models import db


def make_completion(text):
    """OpenAI chat completion 응답 모양의 가짜 객체"""
    message = SimpleNamespace(content=text, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


SAMPLE_ANALYSIS = {
    "company": {
        "name": "Example",
        "domain": "example.com",
        "description": "An example company",
        "industry": "SaaS",
        "businessModel": "Subscription",
    },
    "traffic": {"monthlyVisitors": 120000, "bounceRate": 42.5, "growthRate": 12, "topCountries": ["US", "DE"], "dataSource": "research"},
    "seo": {"domainAuthority": 61, "backlinks": 3400, "topKeywords": ["example", "demo"], "dataSource": "estimated"},
    "techStack": {"frontend": ["React", "Tailwind"], "backend": ["Node.js"], "database": ["PostgreSQL"], "hosting": ["Vercel", "React"], "dataSource": "research"},
    "revenue": {"estimatedMRR": 50000, "estimatedARR": 600000, "growthRate": 8.5, "dataSource": "estimated"},
    "social": {"twitter": {"followers": 1200, "engagement": "medium"}},
    "competition": {"marketPosition": "Niche"},
    "aiInsights": {"strengths": ["Focus"], "weaknesses": ["Size"], "opportunities": ["EU"], "threats": ["Incumbents"]},
    "lovablePrompt": "Build an example SaaS.",
    "dataQuality": {"overallConfidence": "medium", "researchBased": 60},
}


@pytest.fixture
def sample_analysis():
    return {k: (dict(v) if isinstance(v, dict) else v) for k, v in SAMPLE_ANALYSIS.items()}


@pytest.fixture
def mock_openai_client():
    """chat.completions.create를 가진 가짜 OpenAI 클라이언트"""
    client = MagicMock()
    client.chat.completions.create = MagicMock()
    return client


@pytest.fixture
def app():
    flask_app.config["TESTING"] = True
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(user_id):
    return jwt.encode({"sub": user_id}, "test-secret", algorithm="HS256")


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token('user-1')}"}
