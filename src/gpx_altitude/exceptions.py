"""Custom exception hierarchy for the application."""


class AppError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ParseError(AppError):
    """Raised when the source markup is malformed."""

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message, code="PARSE_ERROR")
        self.line = line
        self.column = column


class InputFileError(AppError):
    """Raised when the input track file cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read input file {path}: {reason}", code="INPUT_FILE_ERROR")
        self.path = path


class MissingCredentialError(AppError):
    """Raised when no elevation API key is configured."""

    def __init__(self) -> None:
        super().__init__(
            "Elevation API key missing. Pass --key or set GOOGLE_MAPS_API_KEY.",
            code="MISSING_CREDENTIAL",
        )


class NoTrackpointsError(AppError):
    """Raised when a document holds no node with usable lat/lon values."""

    def __init__(self) -> None:
        super().__init__(
            "No coordinate node with numeric lat and lon found in the document",
            code="NO_TRACKPOINTS",
        )


class LookupFailure(AppError):
    """Raised when an elevation batch exhausts its retry budget."""

    def __init__(self, batch_index: int, attempts: int, reason: str) -> None:
        super().__init__(
            f"Elevation lookup for batch {batch_index} failed after {attempts} attempts: {reason}",
            code="LOOKUP_FAILURE",
        )
        self.batch_index = batch_index
        self.attempts = attempts


class ResultCardinalityMismatch(AppError):
    """Raised when the elevation service returns the wrong number of results."""

    def __init__(self, batch_index: int, expected: int, received: int) -> None:
        super().__init__(
            f"Unexpected result count for batch {batch_index}: expected {expected}, received {received}",
            code="RESULT_CARDINALITY_MISMATCH",
        )
        self.batch_index = batch_index
        self.expected = expected
        self.received = received


class OutputFileError(AppError):
    """Raised when an output file cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write output file {path}: {reason}", code="OUTPUT_FILE_ERROR")
        self.path = path


class ConfigurationError(AppError):
    """Raised when an environment setting has an unusable value."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        super().__init__(
            f"Environment variable {name}={value!r} is not a valid {expected}",
            code="CONFIGURATION_ERROR",
        )
        self.name = name
