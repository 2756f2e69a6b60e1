"""Error taxonomy for the ingestion pipeline.

Every error carries the HTTP status it maps to, so the API layer can
translate any of them with a single ``except IngestError`` clause.
"""


class IngestError(Exception):
    """Base exception for ingestion errors."""

    status_code = 500


class ClientInputError(IngestError):
    """The request itself is unusable."""

    status_code = 400


class InvalidIdentifierError(ClientInputError):
    """Path identifier is not a valid UUID."""

    pass


class UnsupportedMediaTypeError(ClientInputError):
    """Declared content type is missing, malformed or not allowed."""

    pass


class MissingUploadError(ClientInputError):
    """Expected multipart field is absent."""

    pass


class StagingError(ClientInputError):
    """Upload body could not be copied to the staging area."""

    pass


class PayloadTooLargeError(ClientInputError):
    """Upload exceeds the configured ceiling."""

    status_code = 413


class AuthError(IngestError):
    """Missing or invalid credentials."""

    status_code = 401


class OwnershipError(AuthError):
    """Authenticated user does not own the record."""

    pass


class NotFoundError(IngestError):
    """Requested record does not exist."""

    status_code = 404


class VideoNotFoundError(NotFoundError):
    """Video record not found."""

    pass


class UpstreamError(IngestError):
    """A backing service or the host failed."""

    status_code = 500


class KeyGenerationError(UpstreamError):
    """Entropy source unavailable."""

    pass


class MetadataStoreError(UpstreamError):
    """Metadata store rejected or failed a write."""

    pass


class MissingThumbnailError(MetadataStoreError):
    """Update would persist a record without a thumbnail."""

    pass
