"""
Exceptions raised below the HTTP layer and translated into responses by
the handlers in ``product_api.middleware``.
"""


class ProductApiError(Exception):
    """Base class for errors raised by the product service."""
    pass


class ProductNotFoundError(ProductApiError):
    """The product does not exist (or vanished before a write reached it)."""

    def __init__(self, product_id=None):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found" if product_id is not None else "Product not found")
