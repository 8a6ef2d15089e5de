"""서비스 패키지 — 이슈 보드 비즈니스 로직 계층.

Service package — Issue board business logic.
    issue_policy: 역할/부서 기반 권한 판정 (Pure permission predicates)
    issue_service: 이슈 생명주기와 응답 투영 (Issue lifecycle and projection)
    moderation_service: 추천/신고 토글과 자동 제재 (Toggles and escalation)
    image_service: 사전 업로드 이미지 (Pre-uploaded images)
    profile_service: 내 계정 상태 (Current user's account state)
    concurrency: 버전 충돌 재시도 (Optimistic concurrency retry)
"""
