# models.py

from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

# SQLAlchemy 객체 생성 (app.py에서 초기화)
db = SQLAlchemy()


def _section(analysis, key):
    value = analysis.get(key)
    return value if isinstance(value, dict) else {}


def flatten_tech_stack(tech_stack):
    """카테고리별 기술 스택을 하나의 목록으로 펼칩니다. (dataSource 제외, 중복 제거)"""
    flat = []
    for category, items in tech_stack.items():
        if category == "dataSource" or not isinstance(items, list):
            continue
        for item in items:
            if isinstance(item, str) and item not in flat:
                flat.append(item)
    return flat


class CompanyAnalysis(db.Model):
    """
    회사 분석 결과를 저장하는 테이블 (사용자별, 도메인별 한 건)
    (user_id, domain) 중복 여부는 애플리케이션에서 확인합니다.
    """
    __tablename__ = 'company_analyses'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    url = db.Column(db.String(2048), nullable=False)
    domain = db.Column(db.String(255), nullable=False, index=True)
    name = db.Column(db.String(255))
    description = db.Column(db.Text)
    industry = db.Column(db.String(255))
    business_model = db.Column(db.String(255))
    tech_stack = db.Column(db.JSON)  # 기술 스택 목록
    traffic_data = db.Column(db.JSON)
    revenue_data = db.Column(db.JSON)
    seo_data = db.Column(db.JSON)
    social_data = db.Column(db.JSON)
    growth_data = db.Column(db.JSON)
    ai_insights = db.Column(db.JSON)  # SWOT 및 추천 액션
    lovable_prompt = db.Column(db.Text)
    analysis_json = db.Column(db.JSON)  # 모델이 반환한 분석 전체 (캐시 응답용)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @classmethod
    def from_analysis(cls, user_id, url, domain, analysis):
        """모델이 반환한 분석 JSON을 컬럼에 매핑합니다. 형식 검증은 하지 않습니다."""
        company = _section(analysis, "company")
        traffic = _section(analysis, "traffic")
        revenue = _section(analysis, "revenue")

        return cls(
            user_id=str(user_id),
            url=url,
            domain=domain,
            name=company.get("name") or domain,
            description=company.get("description"),
            industry=company.get("industry"),
            business_model=company.get("businessModel"),
            tech_stack=flatten_tech_stack(_section(analysis, "techStack")),
            traffic_data=traffic,
            revenue_data=revenue,
            seo_data=_section(analysis, "seo"),
            social_data=_section(analysis, "social"),
            growth_data={
                "trafficGrowth": traffic.get("growthRate"),
                "revenueGrowth": revenue.get("growthRate"),
            },
            ai_insights=_section(analysis, "aiInsights"),
            lovable_prompt=analysis.get("lovablePrompt"),
            analysis_json=analysis,
        )

    def to_analysis(self):
        """저장된 분석을 파이프라인 응답과 같은 형식으로 반환합니다.

        analysis_json이 없는 행은 컬럼 값으로 다시 구성합니다.
        """
        if isinstance(self.analysis_json, dict):
            return self.analysis_json
        return {
            "company": {
                "name": self.name,
                "domain": self.domain,
                "description": self.description,
                "industry": self.industry,
                "businessModel": self.business_model,
            },
            "traffic": self.traffic_data or {},
            "seo": self.seo_data or {},
            "techStack": {"all": self.tech_stack or []},
            "revenue": self.revenue_data or {},
            "social": self.social_data or {},
            "aiInsights": self.ai_insights or {},
            "lovablePrompt": self.lovable_prompt,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "url": self.url,
            "domain": self.domain,
            "name": self.name,
            "description": self.description,
            "industry": self.industry,
            "businessModel": self.business_model,
            "techStack": self.tech_stack or [],
            "trafficData": self.traffic_data or {},
            "revenueData": self.revenue_data or {},
            "seoData": self.seo_data or {},
            "socialData": self.social_data or {},
            "growthData": self.growth_data or {},
            "aiInsights": self.ai_insights or {},
            "lovablePrompt": self.lovable_prompt,
            "analysis": self.to_analysis(),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<CompanyAnalysis id={self.id} domain='{self.domain}' user='{self.user_id}'>"
