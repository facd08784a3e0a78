# research.py
import logging

import openai

import config

RESEARCH_SEPARATOR = "\n\n---\n\n"

NO_RESEARCH_PLACEHOLDER = (
    "No research data could be gathered for this company. "
    "Base the analysis on general knowledge and mark every figure as estimated."
)

RESEARCH_SYSTEM_PROMPT = (
    "You are a research assistant. Search your knowledge for real, factual information about companies. "
    "Be specific with numbers when available. "
    "If you don't know exact data, say \"Unknown\" rather than guessing."
)


def build_research_queries(domain, company_name):
    """트래픽, 기술 스택, 매출/투자, 인원, SEO에 대한 5개의 고정 리서치 질의를 만듭니다."""
    return [
        f"{domain} company traffic monthly visitors SimilarWeb",
        f"{domain} tech stack built with technologies",
        f"{domain} {company_name} revenue funding valuation",
        f"{domain} {company_name} employees team size LinkedIn",
        f"{domain} SEO domain authority backlinks",
    ]


def run_research_query(client, query):
    """리서치 질의 하나를 실행합니다. 실패하거나 내용이 없으면 빈 문자열을 반환합니다."""
    try:
        response = client.chat.completions.create(
            model=config.RESEARCH_MODEL,
            messages=[
                {"role": "system", "content": RESEARCH_SYSTEM_PROMPT},
                {"role": "user", "content": f"Find real information about: {query}. Provide specific numbers and facts only. No speculation."}
            ],
            temperature=0.3,
        )
    except openai.OpenAIError as e:
        # 개별 질의 실패는 건너뜁니다. 재시도하지 않습니다.
        logging.error(f"리서치 질의 실패 ({query}): {e}")
        return ""

    if not response.choices:
        return ""
    content = response.choices[0].message.content
    if not content:
        return ""
    return f'Research on "{query}":\n{content}'


def join_research(results):
    """리서치 결과를 구분자로 이어 붙입니다. 남는 결과가 없으면 안내 문구를 반환합니다."""
    collected = [r for r in results if r and r.strip()]
    if not collected:
        return NO_RESEARCH_PLACEHOLDER
    return RESEARCH_SEPARATOR.join(collected)


def search_company_data(client, domain, company_name):
    """5개의 리서치 질의를 순서대로 실행하고 결과를 하나의 리서치 텍스트로 합칩니다."""
    results = []
    for query in build_research_queries(domain, company_name):
        logging.info(f"리서치 중: {query}")
        results.append(run_research_query(client, query))

    succeeded = sum(1 for r in results if r)
    logging.info(f"리서치 완료: {succeeded}/{len(results)}개 질의 성공")
    return join_research(results)
