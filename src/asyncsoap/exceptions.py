from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .fault import Fault


class SOAPError(Exception):
    """Base class for SOAP client errors."""


class ConfigurationError(SOAPError):
    """Invalid endpoint, client option or service description."""


class UnknownOperationError(ConfigurationError):
    """The service description does not declare the requested operation."""

    operation: str

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not defined by the service description")


class SerializationError(SOAPError):
    """The request envelope could not be built."""


class TransportError(SOAPError):
    """HTTP transport or connectivity error."""


class DecodeError(SOAPError):
    """Malformed response envelope, or a payload that does not fit the requested type."""


class EmptyBodyError(DecodeError):
    """No result body is available to extract from."""

    def __init__(self, message: str = "body is empty") -> None:
        super().__init__(message)


class SOAPFaultError(SOAPError):
    """SOAP fault response returned by the server."""

    code: Optional[str]
    description: Optional[str]
    fault: Optional["Fault"]

    def __init__(self, code: Optional[str], description: Optional[str], fault: Optional["Fault"] = None) -> None:
        self.code = code
        self.description = description
        self.fault = fault
        super().__init__(f"[{code or 'no code'}]: {description or 'Unknown/generic SOAP fault'}")


FaultError = SOAPFaultError


class OperationFailedError(SOAPError):
    """The operation completed at the protocol level but reported a failure in its payload."""

    operation: str

    def __init__(self, operation: str, message: str = "the operation could not be performed") -> None:
        self.operation = operation
        super().__init__(message)
