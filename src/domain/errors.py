"""
Tagged error kinds raised by the marketplace core.

Each subclass carries a stable ``kind`` string so outer layers can map
failures without inspecting messages.
"""


class MarketplaceError(Exception):
    kind: str = "marketplace_error"


class ValidationError(MarketplaceError):
    """A required field is missing or malformed at submission/edit."""

    kind = "validation_error"

    def __init__(self, missing_fields: list[str]) -> None:
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing or invalid fields: {', '.join(self.missing_fields)}")


class UnauthorizedError(MarketplaceError):
    kind = "unauthorized"


class InvalidStateError(MarketplaceError):
    kind = "invalid_state"


class InvalidArgumentError(MarketplaceError):
    kind = "invalid_argument"


class NotFoundError(MarketplaceError):
    kind = "not_found"


class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: object) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found.")
