"""
Product domain entity.

The product is an immutable value carried between every layer: store adapters
build it, the cache stores its dictionary form, and the API renders it.
"""

from dataclasses import dataclass
from typing import Any, Dict
from uuid import UUID

from .exceptions import ProductValidationError


def validate_product_fields(name: Any, description: Any, price: Any) -> None:
    """Check the mutable product fields against the entity invariants.

    Raises:
        ProductValidationError: If the name is empty, the description is not
            text, or the price is not a non-negative integer.
    """
    if not isinstance(name, str) or not name.strip():
        raise ProductValidationError("Product name must be a non-empty string", "name", name)
    if not isinstance(description, str):
        raise ProductValidationError(
            "Product description must be a string", "description", description
        )
    # bool is an int subclass
    if isinstance(price, bool) or not isinstance(price, int):
        raise ProductValidationError("Product price must be an integer", "price", price)
    if price < 0:
        raise ProductValidationError("Price can't be negative", "price", price)


@dataclass(frozen=True)
class Product:
    """Catalog product.

    Equality is structural (every field); use ``has_same_identity`` when only
    the identifier matters.
    """

    id: UUID
    name: str
    description: str
    price: int

    def __post_init__(self) -> None:
        if not isinstance(self.id, UUID):
            raise ProductValidationError("Product id must be a UUID", "id", self.id)
        validate_product_fields(self.name, self.description, self.price)

    def has_same_identity(self, other: "Product") -> bool:
        """Domain equality: two products are the same record if ids match."""
        return isinstance(other, Product) and self.id == other.id

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation."""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Rebuild a product from ``to_dict`` output.

        Raises:
            ProductValidationError: If the payload is not a product mapping.
        """
        if not isinstance(data, dict):
            raise ProductValidationError(
                f"Expected product mapping, got {type(data).__name__}"
            )
        missing = {"id", "name", "description", "price"} - data.keys()
        if missing:
            raise ProductValidationError(
                f"Product payload missing fields: {sorted(missing)}"
            )
        try:
            product_id = UUID(str(data["id"]))
        except ValueError as exc:
            raise ProductValidationError(
                "Product id is not a valid UUID", "id", data["id"]
            ) from exc
        return cls(
            id=product_id,
            name=data["name"],
            description=data["description"],
            price=data["price"],
        )
