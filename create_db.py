# create_db.py

from app import app, db

# app 컨텍스트 내에서 실행
with app.app_context():
    # 정의된 모든 모델에 대해 테이블 생성 (company_analyses)
    db.create_all()

print("✅ 회사 분석 테이블이 성공적으로 생성되었습니다.")
