#!/usr/bin/env python3
"""
BGP Node Status Error Handling Utilities

Provides the exception hierarchy and standardized error formatting used by
the collectors, the status reporter and the CLI.

Error Format Standards:
- INFO: "✓ {message}"                    # Success messages
- WARNING: "⚠ {message}"                 # Warning messages
- ERROR: "✗ {message}"                   # Error messages
- FATAL: "✗ Fatal: {message}"            # Critical errors
- USAGE: "Usage: {usage_help}"           # Usage guidance
"""

import logging
import socket
from functools import wraps
from typing import List, Optional, Union


class ErrorSeverity:
    """Error severity levels for consistent classification"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"
    USAGE = "usage"


class StatusError(Exception):
    """Base exception class for BGP Node Status with standardized error handling"""

    def __init__(self, message: str, severity: str = ErrorSeverity.ERROR,
                 guidance: Optional[str] = None, technical_details: Optional[str] = None):
        self.message = message
        self.severity = severity
        self.guidance = guidance
        self.technical_details = technical_details
        super().__init__(message)


class ConfigurationError(StatusError):
    """Raised when configuration is invalid or missing"""
    pass


class PrivilegeError(StatusError):
    """Raised when the process lacks the privileges to reach the BGP daemons"""

    def __init__(self, message: str = "Need super user privileges: Operation not permitted"):
        super().__init__(message, ErrorSeverity.FATAL,
                         "Run the command as root (e.g. with sudo)")


class ProcessInspectionError(StatusError):
    """
    Raised when the process list cannot be fully enumerated.

    Carries whatever was collected before the failure so callers can carry
    on with an incomplete view.
    """

    def __init__(self, message: str, partial: Optional[List[List[str]]] = None):
        self.partial = partial or []
        super().__init__(message, ErrorSeverity.WARNING)


class TransportError(StatusError):
    """Base class for control socket failures"""
    pass


class TransportConnectError(TransportError):
    """Raised when neither the primary nor the fallback socket accepts a connection"""

    def __init__(self, target: str, cause: Exception):
        self.target = target
        self.cause = cause
        super().__init__(f"unable to connect to {target} socket: {cause}",
                         guidance="Check that the BGP daemon is running and its control socket exists",
                         technical_details=repr(cause))


class TransportIOError(TransportError):
    """Raised when writing to or reading from the control socket fails"""
    pass


class TransportTimeoutError(TransportIOError):
    """Raised when the control socket stays silent longer than the read deadline"""
    pass


class ProtocolParseError(StatusError):
    """Base class for malformed control socket responses"""
    pass


class UnexpectedHeaderShape(ProtocolParseError):
    """Raised when the table header does not carry the expected columns"""

    def __init__(self, columns: List[str]):
        self.columns = columns
        super().__init__("unknown BIRD table output format",
                         technical_details=f"header columns: {columns}")


class UnrecognizedLineFormat(ProtocolParseError):
    """Raised when a response line matches none of the known prefixes"""

    def __init__(self, line: str):
        self.line = line
        super().__init__("unexpected output line from BIRD",
                         technical_details=f"line: {line!r}")


class BackendError(StatusError):
    """Raised when the GoBGP backend cannot be queried or returns bad data"""
    pass


class NoPeersFound(StatusError):
    """Raised when there is nothing to render in a peer table"""

    def __init__(self, message: str = "No peers found."):
        super().__init__(message, ErrorSeverity.INFO)


class ErrorFormatter:
    """Centralized error message formatting with consistent symbols and styles"""

    SYMBOLS = {
        ErrorSeverity.INFO: "✓",
        ErrorSeverity.WARNING: "⚠",
        ErrorSeverity.ERROR: "✗",
        ErrorSeverity.FATAL: "✗ Fatal:",
        ErrorSeverity.USAGE: "Usage:"
    }

    @classmethod
    def format_message(cls, message: str, severity: str = ErrorSeverity.ERROR,
                       guidance: Optional[str] = None) -> str:
        """Format a message with the appropriate symbol and structure"""
        symbol = cls.SYMBOLS.get(severity, "•")
        formatted = f"{symbol} {message}"

        if guidance:
            formatted += f"\n  Suggestion: {guidance}"

        return formatted

    @classmethod
    def format_error(cls, error: Union[Exception, StatusError],
                     hide_technical: bool = True) -> str:
        """Format an exception with appropriate level of detail"""
        if isinstance(error, StatusError):
            formatted = cls.format_message(error.message, error.severity, error.guidance)
            if not hide_technical and error.technical_details:
                formatted += f"\n  Technical: {error.technical_details}"
            return formatted

        error_type = type(error).__name__
        message = str(error)

        if isinstance(error, FileNotFoundError):
            guidance = "Check that the file path is correct and the file exists"
            return cls.format_message(f"File not found: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, PermissionError):
            guidance = "Check file permissions or run with appropriate privileges"
            return cls.format_message(f"Permission denied: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, socket.timeout):
            guidance = "Check that the BGP daemon is responsive or increase the timeout"
            return cls.format_message(f"Operation timed out: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, ValueError):
            guidance = "Verify input parameters and try again"
            return cls.format_message(f"Invalid input: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, KeyboardInterrupt):
            return cls.format_message("Operation interrupted by user", ErrorSeverity.WARNING)
        else:
            if hide_technical:
                return cls.format_message("Unexpected error occurred", ErrorSeverity.ERROR,
                                          "Check logs for details or run with --verbose")
            return cls.format_message(f"Unexpected {error_type}: {message}",
                                      ErrorSeverity.ERROR)


def handle_errors(logger_name: str = None, hide_technical: bool = True):
    """Decorator for standardized error handling in command functions"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(logger_name or f'bgp-status.{func.__name__}')

            try:
                return func(*args, **kwargs)
            except StatusError as e:
                logger.error(f"{e.severity.title()} in {func.__name__}: {e.message}")
                print(ErrorFormatter.format_error(e, hide_technical))

                if e.severity == ErrorSeverity.FATAL:
                    return 2
                elif e.severity == ErrorSeverity.ERROR:
                    return 1
                else:
                    return 0

            except KeyboardInterrupt:
                logger.info(f"Command {func.__name__} interrupted by user")
                print(ErrorFormatter.format_message("Operation interrupted by user",
                                                    ErrorSeverity.WARNING))
                return 130

            except Exception as e:
                logger.error(f"Unexpected error in {func.__name__}: {e}")
                print(ErrorFormatter.format_error(e, hide_technical))
                return 1

        return wrapper
    return decorator


def print_success(message: str):
    """Print a success message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.INFO))


def print_warning(message: str, guidance: str = None):
    """Print a warning message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.WARNING, guidance))


def print_error(message: str, guidance: str = None):
    """Print an error message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.ERROR, guidance))


__all__ = [
    'ErrorSeverity', 'StatusError', 'ConfigurationError', 'PrivilegeError',
    'ProcessInspectionError', 'TransportError', 'TransportConnectError',
    'TransportIOError', 'TransportTimeoutError', 'ProtocolParseError',
    'UnexpectedHeaderShape', 'UnrecognizedLineFormat', 'BackendError', 'NoPeersFound',
    'ErrorFormatter', 'handle_errors', 'print_success', 'print_warning', 'print_error'
]
