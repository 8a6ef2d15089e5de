"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer for users, issues and images.
Repositories only read and stage rows; commits belong to the routers.
"""
