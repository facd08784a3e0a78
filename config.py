# config.py
import os

# AI 게이트웨이 설정
# 환경 변수에서 API 키를 가져옵니다. 키가 없으면 해당 요청은 설정 오류로 실패합니다.
LOVABLE_API_KEY = os.getenv("LOVABLE_API_KEY")
LOVABLE_GATEWAY_URL = os.getenv("LOVABLE_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
RESEARCH_MODEL = os.getenv("RESEARCH_MODEL", "google/gemini-2.5-flash")
ANALYSIS_MODEL = os.getenv("ANALYSIS_MODEL", "google/gemini-2.5-pro")

# 단일 호출 파이프라인 (Groq)
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")

# 사용할 분석 파이프라인: "research" (리서치 후 분석) 또는 "single" (단일 호출)
ANALYSIS_PIPELINE = os.getenv("ANALYSIS_PIPELINE", "research")

# 대시보드에서 불러올 저장된 분석 결과의 최대 개수
COMPANY_LIST_LIMIT = int(os.getenv("COMPANY_LIST_LIMIT", "50"))

# JWT 서명 키
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-default-secret-key")

#DB 연동
# SQLAlchemy 데이터베이스 URI
# PostgreSQL 형식: "postgresql+psycopg2://유저이름:비밀번호@호스트주소:포트/DB이름"
DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///local_database.db")  # 기본값은 SQLite 로컬 DB

# SQLAlchemy 설정
SQLALCHEMY_DATABASE_URI = DATABASE_URI
SQLALCHEMY_TRACK_MODIFICATIONS = False
