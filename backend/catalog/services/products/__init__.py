from .product_service import ProductService, parse_product_id

__all__ = ["ProductService", "parse_product_id"]
