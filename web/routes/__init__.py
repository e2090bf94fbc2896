"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- vault: 입금/출금/Swap 입금, 현황 조회
- admin: 자산 등록, 런타임 설정, 회수
"""
