"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class NetworkError(ServiceError):
    """Transport failure, non-success status or unreadable search response."""


class StorageError(ServiceError):
    pass


class ContractViolation(ValueError):
    """A caller passed a filter value that has no mapping; a programming error."""
