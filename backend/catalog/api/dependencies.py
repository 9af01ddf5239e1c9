"""FastAPI dependencies."""

from fastapi import Request

from ..services.products.product_service import ProductService


def get_product_service(request: Request) -> ProductService:
    """Product service built at startup and held on ``app.state``."""
    return request.app.state.resources.service
