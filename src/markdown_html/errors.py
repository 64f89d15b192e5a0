from __future__ import annotations


class ConversionError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class MalformedInputError(ConversionError):
    """Raised when a code fence is opened but never closed."""

    def __init__(self, message: str) -> None:
        super().__init__("MALFORMED_INPUT", message)


class MissingImageMappingError(ConversionError):
    def __init__(self, name: str) -> None:
        super().__init__("MISSING_IMAGE_MAPPING", f"missing image mapping for {name}")
        self.name = name


class BasePathUnsetError(ConversionError):
    def __init__(self, name: str) -> None:
        super().__init__("BASE_PATH_UNSET", f"base path is not configured, cannot link image {name}")


class ConfigParseError(ConversionError):
    def __init__(self, line_number: int, line: str, source: str = "<sidecar>") -> None:
        super().__init__("CONFIG_PARSE", f"{source}:{line_number}: unrecognized mapping line: {line!r}")
        self.line_number = line_number
        self.line = line


class ConfigurationFrozenError(ConversionError):
    def __init__(self, operation: str) -> None:
        super().__init__("CONFIG_FROZEN", f"cannot {operation} after the document has been converted")


__all__ = [
    "ConversionError",
    "MalformedInputError",
    "MissingImageMappingError",
    "BasePathUnsetError",
    "ConfigParseError",
    "ConfigurationFrozenError",
]
