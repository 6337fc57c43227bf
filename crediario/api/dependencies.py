"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request

from crediario.domain.orders import OrderService
from crediario.infrastructure.clients.store import StoreClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store_client() -> StoreClient:
    """Provide order store client instance"""
    return StoreClient()


def get_order_service(store: StoreClient = Depends(get_store_client)) -> OrderService:
    """Provide an order service with a fresh snapshot cache for this request"""
    return OrderService(store)
