# app.py
import json
import logging
import jwt
from dotenv import load_dotenv

load_dotenv()

from datetime import datetime, timezone
from flask import Flask, request, jsonify
from flask_cors import CORS
from functools import wraps
from pydantic import ValidationError

# 모듈화된 기능들 임포트
import config
import analyzer
from analyzer import AnalysisError
from dashboard import DashboardService, SqlCompanyStore, filter_changed, visible_records
from models import db
from schemas import AnalyzeRequest, DashboardAnalyzeRequest
from utils import InvalidUrlError


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None
        auth_header = request.headers.get('Authorization', '')
        # Bearer 토큰 형식 "Bearer <token>"
        parts = auth_header.split(" ")
        if len(parts) == 2 and parts[0].lower() == 'bearer':
            token = parts[1]

        if not token:
            return jsonify({'success': False, 'error': 'Authentication token is missing.'}), 401

        try:
            data = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=["HS256"])
            current_user_id = data['sub']
        except jwt.ExpiredSignatureError:
            return jsonify({'success': False, 'error': 'Authentication token has expired.'}), 401
        except (jwt.InvalidTokenError, KeyError):
            return jsonify({'success': False, 'error': 'Invalid authentication token.'}), 401

        return f(current_user_id, *args, **kwargs)

    return decorated

# --- 로깅 설정 ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

def custom_serializer(*args, **kwargs):
    """ensure_ascii=False를 기본값으로 사용하는 커스텀 JSON 직렬 변환기"""
    kwargs['ensure_ascii'] = False
    return json.dumps(*args, **kwargs)

# Flask 앱 초기화
app = Flask(__name__)
app.json.ensure_ascii = False
# --- 🔽 DB 설정 로드 🔽 ---
app.config.from_object(config)

app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
    'json_serializer': custom_serializer
}

# --- 🔽 DB 초기화 🔽 ---
db.init_app(app)

# 모든 출처 허용, OPTIONS 프리플라이트는 flask-cors가 빈 200으로 응답합니다.
CORS(app, resources={r"/api/*": {"origins": "*"}}, send_wildcard=True,
     allow_headers=["authorization", "x-client-info", "apikey", "content-type"])


def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


def _validation_message(e):
    for err in e.errors():
        if err.get("loc") and err["loc"][0] == "url":
            return "URL is required"
    return "Invalid request body"


def _now():
    return datetime.now(timezone.utc).isoformat()


# --- ✨ 전역 에러 핸들러 ---
@app.errorhandler(404)
def not_found_error(error):
    return error_response("The requested resource was not found.", 404)

@app.errorhandler(500)
def internal_server_error(error):
    return error_response("Internal server error.", 500)


@app.route('/')
def health_check():
    """서버 상태 확인 엔드포인트"""
    return "✅ EchoDFT 회사 분석 서버가 정상적으로 실행 중입니다!"


@app.route('/api/analyze-company', methods=['POST'])
def analyze_company_endpoint():
    """회사 URL 분석 API 엔드포인트"""
    try:
        body = AnalyzeRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return error_response(_validation_message(e), 400)

    try:
        outcome = analyzer.analyze_company(body.url, body.compare_url)
        return jsonify({
            "success": True,
            "analysis": outcome.analysis,
            "timestamp": _now(),
            "researchDataUsed": outcome.research_data_used,
        }), 200

    # ✨ 각 모듈에서 발생시킨 커스텀 예외를 잡아 구체적인 오류 메시지 반환
    except InvalidUrlError as e:
        logging.warning(f"잘못된 URL: {e}")
        return error_response(str(e), 400)
    except AnalysisError as e:
        logging.error(f"회사 분석 실패 ({e.status_code}): {e}")
        return error_response(str(e), e.status_code)
    except Exception as e:
        # 그 외 예측하지 못한 모든 오류 처리
        logging.error(f"분석 엔드포인트에서 예측하지 못한 오류 발생: {e}", exc_info=True)
        return error_response("Unexpected error during analysis.", 500)


@app.route('/api/companies', methods=['GET'])
@token_required
def list_companies_endpoint(current_user_id):
    """저장된 회사 분석 목록 (최신순, 필터 적용)"""
    service = DashboardService(analyzer.analyze_company, SqlCompanyStore())
    state = service.load(current_user_id)
    state = filter_changed(
        state,
        industry=request.args.get('industry') or None,
        business_model=request.args.get('businessModel') or None,
    )
    return jsonify({"success": True, "companies": visible_records(state)}), 200


@app.route('/api/dashboard/analyze', methods=['POST'])
@token_required
def dashboard_analyze_endpoint(current_user_id):
    """저장된 분석이 있으면 재사용하고, 없으면 새로 분석해 저장합니다."""
    try:
        body = DashboardAnalyzeRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return error_response(_validation_message(e), 400)

    service = DashboardService(analyzer.analyze_company, SqlCompanyStore())
    try:
        state = service.load(current_user_id)
        state = service.analyze(state, current_user_id, body.url, body.compare_url, body.force_refresh)
        return jsonify({
            "success": True,
            "source": state.decision.value,
            "analysis": state.current,
            "record": state.current_record,
            "recordStale": state.record_stale,
            "timestamp": _now(),
        }), 200
    except InvalidUrlError as e:
        logging.warning(f"잘못된 URL: {e}")
        return error_response(str(e), 400)
    except AnalysisError as e:
        logging.error(f"회사 분석 실패 ({e.status_code}): {e}")
        return error_response(str(e), e.status_code)
    except Exception as e:
        db.session.rollback()
        logging.error(f"대시보드 분석 중 예측하지 못한 오류 발생: {e}", exc_info=True)
        return error_response("Unexpected error during analysis.", 500)


if __name__ == '__main__':
    # 운영 환경에서는 debug=False로 설정하는 것을 권장합니다.
    app.run(host='0.0.0.0', port=5000, debug=False)
