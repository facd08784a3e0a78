# analyzer.py
import json
import logging
from string import Template

import openai

import config
from research import search_company_data
from utils import company_name_from_domain, extract_domain, strip_code_fences


# --- ✨ 커스텀 예외 클래스 정의 ---
class AnalysisError(Exception):
    """분석 파이프라인 오류의 기본 클래스. status_code는 HTTP 응답 코드입니다."""
    status_code = 500


class ConfigurationError(AnalysisError):
    """API 키가 설정되지 않았을 때 발생하는 예외"""
    pass


class RateLimitError(AnalysisError):
    """AI 게이트웨이가 429를 반환했을 때 발생하는 예외"""
    status_code = 429

    def __init__(self, message="Rate limit exceeded. Please try again later."):
        super().__init__(message)


class BillingError(AnalysisError):
    """AI 게이트웨이가 402를 반환했을 때 발생하는 예외"""
    status_code = 402

    def __init__(self, message="Payment required. Please add credits to your workspace."):
        super().__init__(message)


class UpstreamError(AnalysisError):
    """그 외 AI 게이트웨이 오류"""
    pass


class AnalysisParseError(AnalysisError):
    """모델 출력이 JSON으로 파싱되지 않을 때 발생하는 예외"""

    def __init__(self, message="Failed to parse AI analysis"):
        super().__init__(message)


class AnalysisOutcome:
    """파이프라인 실행 결과"""

    def __init__(self, analysis, domain, compare_domain=None, research_data_used=False):
        self.analysis = analysis
        self.domain = domain
        self.compare_domain = compare_domain
        self.research_data_used = research_data_used

    def __repr__(self):
        return f"<AnalysisOutcome domain='{self.domain}' research={self.research_data_used}>"


ANALYST_SYSTEM_PROMPT = (
    "You are an expert business analyst. Always base your analysis on the provided research data. "
    "Be accurate and conservative with estimates. Return valid JSON only."
)

SINGLE_SHOT_SYSTEM_PROMPT = (
    "You are an expert business analyst with broad knowledge of internet companies. "
    "Be accurate and conservative with estimates. Return valid JSON only."
)

ANALYSIS_SCHEMA = Template("""{
  "company": {
    "name": "Company Name (from research or domain)",
    "domain": "$domain",
    "description": "Brief description",
    "industry": "Primary industry",
    "businessModel": "Revenue model",
    "foundedYear": "year or 'Unknown'",
    "employeeCount": "number or estimate range"
  },
  "traffic": {
    "monthlyVisitors": number or estimate,
    "pageViews": estimated number,
    "bounceRate": percentage (0-100),
    "avgSessionDuration": seconds,
    "topCountries": ["Country1", "Country2", "Country3"],
    "organicTraffic": percentage,
    "paidTraffic": percentage,
    "growthRate": percentage,
    "dataSource": "research" or "estimated"
  },
  "seo": {
    "domainAuthority": score (0-100),
    "domainAge": years,
    "backlinks": count,
    "organicKeywords": count,
    "topKeywords": ["keyword1", "keyword2", "keyword3"],
    "contentQuality": score (0-100),
    "dataSource": "research" or "estimated"
  },
  "techStack": {
    "frontend": ["technology"],
    "backend": ["technology"],
    "database": ["technology"],
    "hosting": ["technology"],
    "analytics": ["technology"],
    "marketing": ["technology"],
    "dataSource": "research" or "estimated"
  },
  "revenue": {
    "estimatedMRR": monthly amount in USD,
    "estimatedARR": annual amount in USD,
    "revenueModel": "subscription/freemium/etc",
    "pricingTiers": ["tier info"],
    "averageTicketSize": estimated,
    "growthRate": percentage,
    "dataSource": "research" or "estimated"
  },
  "social": {
    "twitter": { "followers": count, "engagement": "high/medium/low" },
    "linkedin": { "followers": count, "engagement": "high/medium/low" },
    "facebook": { "followers": count, "engagement": "high/medium/low" },
    "instagram": { "followers": count, "engagement": "high/medium/low" },
    "youtube": { "subscribers": count, "views": count },
    "dataSource": "research" or "estimated"
  },
  "competition": {
    "marketPosition": "Leader/Challenger/Niche",
    "competitiveAdvantage": "main differentiator",
    "mainCompetitors": ["Competitor1", "Competitor2"],
    "marketSize": "TAM estimate",
    "marketShare": "percentage or tier"
  },
  "aiInsights": {
    "strengths": ["strength1", "strength2", "strength3"],
    "weaknesses": ["weakness1", "weakness2"],
    "opportunities": ["opportunity1", "opportunity2"],
    "threats": ["threat1", "threat2"],
    "scalabilityScore": score (0-100),
    "innovationScore": score (0-100),
    "recommendedActions": ["action1", "action2"]
  },
  "lovablePrompt": "A detailed prompt to build a similar business using Lovable, including features, tech stack, and monetization strategy based on the analysis.",
  "dataQuality": {
    "overallConfidence": "high/medium/low",
    "researchBased": percentage of data from research vs estimated
  }
}""")

COMPARISON_SCHEMA = Template("""
Also analyze $compare_domain and add a comparison object to the same JSON:
{
  "comparison": {
    "winner": "$domain" or "$compare_domain",
    "trafficDiff": percentage difference,
    "revenueDiff": percentage difference,
    "keyDifferences": ["difference1", "difference2"],
    "recommendation": "Which is better positioned and why"
  }
}
""")


def build_analysis_prompt(domain, research_data=None, compare_domain=None):
    """분석 프롬프트를 만듭니다. research_data가 있으면 리서치 근거 규칙을 포함합니다."""
    if research_data is not None:
        prompt = (
            f'You are an expert business analyst. I have gathered research data about the company "{domain}".\n\n'
            "RESEARCH DATA:\n"
            f"{research_data}\n\n"
            "Based on this research data, provide a comprehensive business analysis. "
            "Use the REAL data from the research above whenever available. "
            "Only estimate when data is truly unavailable, and clearly mark estimates.\n\n"
            "IMPORTANT RULES:\n"
            "- Use actual numbers from the research when available\n"
            "- If data is unknown, use realistic industry benchmarks but mark them as \"estimated\"\n"
            "- Never fabricate specific numbers - use ranges if uncertain\n"
            "- Be conservative with estimates\n\n"
        )
    else:
        prompt = (
            f'You are an expert business analyst. Analyze the company behind the domain "{domain}".\n\n'
            "Provide a comprehensive business analysis from what you know about this company. "
            "Where exact figures are unknown, use realistic industry benchmarks and mark them as \"estimated\".\n\n"
        )

    prompt += "Provide your analysis in this JSON format:\n"
    prompt += ANALYSIS_SCHEMA.substitute(domain=domain)

    if compare_domain:
        prompt += "\n" + COMPARISON_SCHEMA.substitute(domain=domain, compare_domain=compare_domain)
    return prompt


def get_client(api_key, base_url):
    """OpenAI 호환 게이트웨이용 클라이언트를 만듭니다. 재시도는 하지 않습니다."""
    return openai.OpenAI(api_key=api_key, base_url=base_url, max_retries=0)


def request_analysis(client, model, prompt, system_prompt=ANALYST_SYSTEM_PROMPT):
    """분석 모델을 한 번 호출하고 응답 텍스트를 반환합니다. 게이트웨이 오류는 커스텀 예외로 변환합니다."""
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt}
            ],
            temperature=0.4,
            response_format={"type": "json_object"},
        )
    except openai.APIStatusError as e:
        logging.error(f"AI 게이트웨이 오류: {e.status_code} {e.message}")
        if e.status_code == 429:
            raise RateLimitError()
        if e.status_code == 402:
            raise BillingError()
        raise UpstreamError(f"AI Gateway error: {e.status_code}")
    except openai.OpenAIError as e:
        logging.error(f"AI 게이트웨이 연결 오류: {e}")
        raise UpstreamError("AI Gateway error: connection failed")

    if not response.choices or response.choices[0].message.content is None:
        raise AnalysisParseError()
    return response.choices[0].message.content


def parse_analysis(text):
    """모델 출력에서 코드 블록 표시를 제거하고 JSON 객체로 파싱합니다.

    스키마 검증은 하지 않습니다. 모델이 반환한 JSON 객체를 그대로 돌려줍니다.
    """
    cleaned = strip_code_fences(text)
    try:
        analysis = json.loads(cleaned)
    except json.JSONDecodeError:
        logging.error(f"AI 응답 파싱 실패: {cleaned[:500]}")
        raise AnalysisParseError()

    if not isinstance(analysis, dict):
        logging.error(f"AI 응답이 JSON 객체가 아닙니다: {cleaned[:500]}")
        raise AnalysisParseError()
    return analysis


def _compare_domain(compare_url):
    return extract_domain(compare_url) if compare_url else None


def run_research_pipeline(url, compare_url=None, client=None):
    """리서치 후 분석 파이프라인 (2단계)"""
    if not config.LOVABLE_API_KEY:
        raise ConfigurationError("LOVABLE_API_KEY is not configured")

    domain = extract_domain(url)
    compare_domain = _compare_domain(compare_url)
    client = client or get_client(config.LOVABLE_API_KEY, config.LOVABLE_GATEWAY_URL)

    logging.info(f"회사 분석 시작: {domain}")
    if compare_domain:
        logging.info(f"비교 대상: {compare_domain}")

    # 1. 리서치 데이터 수집
    logging.info("1단계: 리서치 데이터 수집 중...")
    research_data = search_company_data(client, domain, company_name_from_domain(domain))
    logging.info(f"리서치 데이터 길이: {len(research_data)}")

    # 2. 리서치 데이터를 근거로 분석
    logging.info(f"2단계: {config.ANALYSIS_MODEL} 모델로 분석 중...")
    prompt = build_analysis_prompt(domain, research_data=research_data, compare_domain=compare_domain)
    analysis_text = request_analysis(client, config.ANALYSIS_MODEL, prompt)
    analysis = parse_analysis(analysis_text)

    logging.info(f"✅ 분석 완료: {domain} (데이터 품질: {analysis.get('dataQuality')})")
    return AnalysisOutcome(analysis, domain, compare_domain, research_data_used=True)


def run_single_shot_pipeline(url, compare_url=None, client=None):
    """단일 호출 파이프라인. 리서치 단계 없이 도메인만으로 분석합니다."""
    if not config.GROQ_API_KEY:
        raise ConfigurationError("GROQ_API_KEY is not configured")

    domain = extract_domain(url)
    compare_domain = _compare_domain(compare_url)
    client = client or get_client(config.GROQ_API_KEY, config.GROQ_BASE_URL)

    logging.info(f"회사 분석 시작 (단일 호출): {domain}")
    prompt = build_analysis_prompt(domain, compare_domain=compare_domain)
    analysis_text = request_analysis(client, config.GROQ_MODEL, prompt, system_prompt=SINGLE_SHOT_SYSTEM_PROMPT)
    analysis = parse_analysis(analysis_text)

    logging.info(f"✅ 분석 완료: {domain}")
    return AnalysisOutcome(analysis, domain, compare_domain, research_data_used=False)


PIPELINES = {
    "research": run_research_pipeline,
    "single": run_single_shot_pipeline,
}


def analyze_company(url, compare_url=None, pipeline=None):
    """설정된 파이프라인으로 회사를 분석합니다."""
    name = pipeline or config.ANALYSIS_PIPELINE
    if name not in PIPELINES:
        raise ConfigurationError(f"Unknown analysis pipeline: {name}")
    return PIPELINES[name](url, compare_url)
