"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from vfcash_gateway.infrastructure.storage.base import LimitsStore, TransactionStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_transaction_store(request: Request) -> TransactionStore:
    """Provide the process-wide transaction store created by the app factory"""
    return request.app.state.transaction_store


def get_limits_store(request: Request) -> LimitsStore:
    """Provide the process-wide limits store created by the app factory"""
    return request.app.state.limits_store
