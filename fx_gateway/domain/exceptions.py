"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DealStoreError(DomainException):
    """Deal store failed to read or persist a deal"""

    pass


class DealNotFoundError(DomainException):
    """No deal matches the requested identifier"""

    @classmethod
    def for_id(cls, deal_id: int) -> "DealNotFoundError":
        return cls(f"Deal with ID {deal_id} not found")

    @classmethod
    def for_unique_id(cls, deal_unique_id: str) -> "DealNotFoundError":
        return cls(f"Deal with unique ID '{deal_unique_id}' not found")


class DuplicateDealError(DomainException):
    """A deal with the same unique identifier has already been imported"""

    def __init__(self, deal_unique_id: str, detail: str = "This deal has already been imported"):
        self.deal_unique_id = deal_unique_id
        super().__init__(f"Deal with ID '{deal_unique_id}' already exists: {detail}")


class CurrencyPairError(DomainException):
    """Deal exchanges a currency for itself"""

    def __init__(self, message: str = "From and To currency codes must be different"):
        super().__init__(message)
