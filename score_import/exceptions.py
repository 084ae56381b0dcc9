class AppError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class UnauthorizedError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="UNAUTHORIZED")


class OrchestrationError(AppError):
    """A pipeline stage failed; the import was aborted and nothing was persisted."""

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Import stage '{stage}' failed: {cause}", code="IMPORT_STAGE_FAILED")


class StatUpdateError(AppError):
    def __init__(self, playtype: str, cause: BaseException):
        self.playtype = playtype
        self.cause = cause
        super().__init__(
            f"Stat update for playtype '{playtype}' failed: {cause}", code="STAT_UPDATE_FAILED"
        )


class ConverterFailure(Exception):
    """Raised by a converter for an expected, per-record failure.

    The import carries on; the failure is recorded in the import's error list.
    """

    def __init__(self, kind: str, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)
