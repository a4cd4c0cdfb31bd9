"""Art domain exceptions."""

from fastapi import status

from lifestack.core.domain.exceptions import (
    ConfigurationError,
    DomainException,
    ExternalServiceError,
    ValidationError,
)


class ArtSourceError(ExternalServiceError):
    """A single source adapter attempt produced no artwork.

    Recovered by the pool builder as one wasted attempt.
    """

    error_code = "ART_SOURCE_ERROR"

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class ArtSourceUnavailableError(ArtSourceError):
    """Network failure, timeout, HTTP error or malformed payload."""


class NoMatchingArtworkError(ArtSourceError):
    """The source returned no candidate with an image for the request."""


class ReligiousContentFilteredError(ArtSourceError):
    """Every candidate was removed by the religious-content filter."""


class ArtServiceError(DomainException):
    """Failure propagated to callers of the rotation service."""

    http_status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "ART_UNAVAILABLE"


class ArtworkPoolExhaustedError(ArtServiceError):
    """The whole attempt budget finished without a single artwork."""

    error_code = "ART_POOL_EXHAUSTED"

    def __init__(self, orientation: str | None):
        self.orientation = orientation
        label = f"{orientation} " if orientation else ""
        super().__init__(f"Failed to fetch any {label}artworks for pool")


class NoArtSourcesEnabledError(ArtServiceError, ConfigurationError):
    """No source is enabled with a positive weight."""

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "NO_ART_SOURCES"

    def __init__(self, message: str = "No art sources enabled"):
        super().__init__(message)


class InvalidOrientationError(ValidationError):
    """Requested display orientation is not one of portrait/landscape/tv."""

    error_code = "INVALID_ORIENTATION"

    def __init__(self, orientation: str):
        self.orientation = orientation
        super().__init__(
            "Invalid orientation. Must be portrait, landscape, or tv"
        )
