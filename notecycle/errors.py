class NoteCycleError(Exception):
    """Base class for every error the note controller reports to the user."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NoteCycleError):
    """A required form field is missing or invalid. No backend call was made."""

    status_code = 400

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(NoteCycleError):
    """Sign-in or sign-up was rejected; carries the backend message verbatim."""

    status_code = 401


class AuthorizationError(NoteCycleError):
    status_code = 403


class BusyError(NoteCycleError):
    """The same action is already in flight."""

    status_code = 409


class BackendError(NoteCycleError):
    status_code = 502


class StorageWriteError(BackendError):
    pass


class StorageDeleteError(BackendError):
    pass


class MetadataWriteError(BackendError):
    pass


class MetadataDeleteError(BackendError):
    pass


class NoteNotFoundError(NoteCycleError):
    status_code = 404
