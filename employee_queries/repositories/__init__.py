"""레포지토리 패키지 — 데이터베이스 조회 계층.

Repository package — Database read layer.
Contains the repository classes that run read-only queries on a
caller-supplied session. Repositories are plain objects constructed at
wiring time and passed to their consumers.
"""
