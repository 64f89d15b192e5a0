"""Blog README Markdown to HTML converter."""

from .config import AppConfig, load_config
from .converter import MarkdownDocument, convert_markdown
from .core import ConversionService
from .errors import (
    BasePathUnsetError,
    ConfigParseError,
    ConfigurationFrozenError,
    ConversionError,
    MalformedInputError,
    MissingImageMappingError,
)
from .models import BatchConversionResult, ConversionConfig, ConversionResult, ImageMapping

__all__ = [
    "AppConfig",
    "load_config",
    "BasePathUnsetError",
    "BatchConversionResult",
    "ConfigParseError",
    "ConfigurationFrozenError",
    "ConversionConfig",
    "ConversionError",
    "ConversionResult",
    "ConversionService",
    "ImageMapping",
    "MalformedInputError",
    "MarkdownDocument",
    "MissingImageMappingError",
    "convert_markdown",
]
