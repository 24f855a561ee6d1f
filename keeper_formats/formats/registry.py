"""Format registry for handler lookup and artifact classification.

The host selects a handler by its ``format_key``, or asks the registry to
classify an upload it knows nothing about. Handlers stay stateless; the
registry only maps keys to instances.
"""

from typing import Dict, List, Optional

from ..common.config import KeeperFormatsConfig, get_enabled_formats
from ..common.logger import get_logger
from .base import FormatHandler, filename_of
from .errors import FormatError

logger = get_logger("format.registry")


class FormatRegistry:
    """Registry for package format handlers."""

    _instance: Optional["FormatRegistry"] = None
    _handlers: Dict[str, FormatHandler]

    def __new__(cls) -> "FormatRegistry":
        """Singleton pattern for global registry."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._handlers = {}
        return cls._instance

    def register(self, handler: FormatHandler) -> None:
        """Register a format handler.

        Args:
            handler: FormatHandler instance to register
        """
        format_key = handler.format_key
        if format_key in self._handlers:
            logger.warning(f"Overwriting existing handler for format: {format_key}")
        self._handlers[format_key] = handler
        logger.debug(f"Registered format handler: {format_key}")

    def get_handler(self, format_key: str) -> Optional[FormatHandler]:
        """Get handler by format key.

        Args:
            format_key: Key of the format (e.g., 'unity', 'rpm')

        Returns:
            FormatHandler or None if not found
        """
        return self._handlers.get(format_key)

    def detect_format(self, path: str, data: bytes) -> Optional[FormatHandler]:
        """Find the handler for an upload.

        The first handler whose ``validate`` accepts the artifact wins.
        Otherwise a handler claiming the path extension is returned, so the
        caller can run ``validate`` on it and report the precise rejection.

        Args:
            path: Artifact storage path
            data: Raw artifact bytes

        Returns:
            FormatHandler or None if no handler recognizes the artifact
        """
        for handler in self._handlers.values():
            try:
                handler.validate(path, data)
            except FormatError:
                continue
            logger.debug(f"Detected format '{handler.format_key}' for {filename_of(path)}")
            return handler

        for handler in self._handlers.values():
            if path and handler.matches_extension(path):
                logger.debug(
                    f"Detected format '{handler.format_key}' for {filename_of(path)} by extension"
                )
                return handler

        logger.warning(f"Could not detect format for: {path}")
        return None

    def list_formats(self) -> List[str]:
        """List all registered format keys."""
        return list(self._handlers.keys())

    def clear(self) -> None:
        """Clear all registered handlers (mainly for testing)."""
        self._handlers.clear()


# Global registry instance
_registry = FormatRegistry()


def get_registry() -> FormatRegistry:
    """Get the global format registry."""
    return _registry


def register_handler(handler: FormatHandler) -> None:
    """Register a format handler with the global registry."""
    _registry.register(handler)


def detect_format(path: str, data: bytes) -> Optional[FormatHandler]:
    """Detect the format of an upload using the global registry.

    Args:
        path: Artifact storage path
        data: Raw artifact bytes

    Returns:
        FormatHandler or None if not recognized
    """
    return _registry.detect_format(path, data)


def get_format_handler(format_key: str) -> Optional[FormatHandler]:
    """Get a format handler by key from the global registry."""
    return _registry.get_handler(format_key)


def create_handler(format_key: str, config: Optional[KeeperFormatsConfig] = None) -> FormatHandler:
    """Build a built-in handler with the options from config.

    Args:
        format_key: One of 'unity', 'rpm', 'pypi'
        config: Optional configuration; defaults apply when omitted

    Returns:
        New FormatHandler instance

    Raises:
        KeyError: If format_key names no built-in handler
    """
    # Import handlers here to avoid circular imports
    from .pypi import PypiFormatHandler
    from .rpm import RpmFormatHandler
    from .unity import UnityFormatHandler

    handler_classes = {
        "unity": UnityFormatHandler,
        "rpm": RpmFormatHandler,
        "pypi": PypiFormatHandler,
    }
    if format_key not in handler_classes:
        raise KeyError(f"Unknown format: {format_key}")

    config = config or KeeperFormatsConfig()
    format_config = config.get_format(format_key)
    return handler_classes[format_key](
        compute_checksum=format_config.compute_checksum, **format_config.options
    )


def auto_register_formats(config: Optional[KeeperFormatsConfig] = None) -> None:
    """Register every built-in handler enabled in config.

    Args:
        config: Optional configuration; all built-in formats are enabled
            when omitted
    """
    config = config or KeeperFormatsConfig()
    for format_key in get_enabled_formats(config):
        try:
            handler = create_handler(format_key, config)
        except KeyError:
            logger.warning(f"No built-in handler for configured format: {format_key}")
            continue
        except TypeError as e:
            logger.warning(f"Skipping {format_key} format handler, bad options: {e}")
            continue
        register_handler(handler)
        logger.info(f"Registered {format_key} format handler")
