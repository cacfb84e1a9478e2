from .base import BaseRepository, IRepository
from .exceptions import (
    BaseError,
    NotFoundError,
    ValidationError,
    ConflictError,
    BusinessLogicError,
    ExternalServiceError,
    AvailabilityConflictError,
    ReservationError,
    InvalidRequestError,
    RouteNotFoundError,
    InsufficientInventoryError,
    ContentionError,
    ReservationCancelledError,
    StoreUnavailableError,
    InventoryInconsistentError,
)
from .config import Settings, get_settings

__all__ = [
    # Base classes
    "BaseRepository",
    "IRepository",

    # Exceptions
    "BaseError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "BusinessLogicError",
    "ExternalServiceError",
    "AvailabilityConflictError",
    "ReservationError",
    "InvalidRequestError",
    "RouteNotFoundError",
    "InsufficientInventoryError",
    "ContentionError",
    "ReservationCancelledError",
    "StoreUnavailableError",
    "InventoryInconsistentError",

    # Config
    "Settings",
    "get_settings"
]
