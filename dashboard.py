# dashboard.py
"""대시보드 상태와 캐시 우선 분석 흐름.

상태는 불변 스냅샷(DashboardState)이며, 아래의 액션 함수가 새 스냅샷을 반환합니다.
"""
import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

import config
from models import CompanyAnalysis, db
from utils import extract_domain


class CacheDecision(str, Enum):
    CACHE = "cache"
    NETWORK = "network"


class DashboardFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    industry: Optional[str] = None
    business_model: Optional[str] = None


class DashboardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    records: tuple[dict, ...] = ()  # 최신순
    current: Optional[dict] = None  # 화면에 표시 중인 분석
    current_record: Optional[dict] = None
    decision: Optional[CacheDecision] = None
    record_stale: bool = False  # current_record가 current보다 오래된 저장본인지 여부
    filters: DashboardFilters = DashboardFilters()


# --- 액션 ---
def records_loaded(state, records):
    return state.model_copy(update={"records": tuple(records)})


def analysis_served(state, analysis, record, decision, record_stale=False):
    return state.model_copy(update={
        "current": analysis,
        "current_record": record,
        "decision": decision,
        "record_stale": record_stale,
    })


def record_saved(state, record):
    """새로 저장된 레코드를 목록 맨 앞에 추가합니다."""
    return state.model_copy(update={"records": (record,) + state.records})


def filter_changed(state, **changes):
    filters = state.filters.model_copy(update=changes)
    return state.model_copy(update={"filters": filters})


# --- 조회 ---
def _matches(value, expected):
    if expected is None:
        return True
    return (value or "").lower() == expected.lower()


def visible_records(state):
    """활성화된 필터에 모두 일치하는 레코드"""
    f = state.filters
    return [
        r for r in state.records
        if _matches(r.get("industry"), f.industry) and _matches(r.get("businessModel"), f.business_model)
    ]


def find_cached(state, domain):
    for record in state.records:
        if record.get("domain") == domain:
            return record
    return None


class SqlCompanyStore:
    """CompanyAnalysis 테이블 기반 저장소"""

    def list_for_user(self, user_id, limit):
        rows = (
            CompanyAnalysis.query
            .filter_by(user_id=str(user_id))
            .order_by(CompanyAnalysis.created_at.desc(), CompanyAnalysis.id.desc())
            .limit(limit)
            .all()
        )
        return [row.to_dict() for row in rows]

    def find(self, user_id, domain):
        row = CompanyAnalysis.query.filter_by(user_id=str(user_id), domain=domain).first()
        return row.to_dict() if row else None

    def save(self, user_id, url, domain, analysis):
        row = CompanyAnalysis.from_analysis(user_id, url, domain, analysis)
        db.session.add(row)
        db.session.commit()
        return row.to_dict()


class DashboardService:
    """저장된 분석이 있으면 재사용하고, 없거나 강제 새로고침이면 파이프라인을 호출합니다."""

    def __init__(self, analyze, store):
        self.analyze_fn = analyze
        self.store = store

    def load(self, user_id, state=None):
        state = state or DashboardState()
        records = self.store.list_for_user(user_id, config.COMPANY_LIST_LIMIT)
        return records_loaded(state, records)

    def analyze(self, state, user_id, url, compare_url=None, force_refresh=False):
        domain = extract_domain(url)

        cached = find_cached(state, domain)
        if cached and not force_refresh:
            logging.info(f"저장된 분석 사용: {domain}")
            return analysis_served(state, cached.get("analysis") or {}, cached, CacheDecision.CACHE)

        outcome = self.analyze_fn(url, compare_url)

        # (user, domain) 기준으로 아직 저장되지 않은 경우에만 저장합니다.
        # 이미 저장된 경우 기존 행은 수정하지 않으므로 record는 새 분석보다 오래된 저장본입니다.
        record = self.store.find(user_id, domain)
        stale = record is not None
        if record is None:
            record = self.store.save(user_id, url, domain, outcome.analysis)
            state = record_saved(state, record)
            logging.info(f"분석 결과 저장 완료: {domain}")

        return analysis_served(state, outcome.analysis, record, CacheDecision.NETWORK, record_stale=stale)
