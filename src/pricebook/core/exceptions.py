"""Errors raised by the product store and the pricing engine."""


class PricebookError(Exception):
    """Base class for every expected failure of a store or pricing operation."""


class ValidationError(PricebookError):
    """Malformed, missing or out-of-range input. Nothing was persisted."""


class DuplicateKeyError(PricebookError):
    """A product with the same barcode already exists."""

    def __init__(self, barcode: str):
        super().__init__(f"Product with barcode {barcode!r} already exists")
        self.barcode = barcode


class NotFoundError(PricebookError):
    """No product is stored under the requested barcode."""

    def __init__(self, barcode: str):
        super().__init__(f"Product with barcode {barcode!r} not found")
        self.barcode = barcode


class StorageError(PricebookError):
    """The database was unavailable or rejected the write."""


class ConflictError(StorageError):
    """Another writer changed the product between this call's read and write."""

    def __init__(self, barcode: str):
        super().__init__(
            f"Product with barcode {barcode!r} was modified concurrently; update not applied"
        )
        self.barcode = barcode
