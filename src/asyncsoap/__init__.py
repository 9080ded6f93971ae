from .auth import AuthMethod, basic, ntlm, resolve, from_env
from .client import Client, RPCClient, RPCResult, Invocation
from .decode import decode, dictify
from .exceptions import (
    SOAPError,
    ConfigurationError,
    UnknownOperationError,
    SerializationError,
    TransportError,
    DecodeError,
    EmptyBodyError,
    SOAPFaultError,
    FaultError,
    OperationFailedError,
)
from .fault import Fault
from .postprocess import PostProcessor, PostProcessorRegistry, default_registry, journal_number
from .wsdl import DefinitionModel, Definitions, OperationDescriptor, load_definitions, parse_definitions

__all__ = [
    "Client",
    "RPCClient",
    "RPCResult",
    "Invocation",
    "Fault",
    "DefinitionModel",
    "Definitions",
    "OperationDescriptor",
    "load_definitions",
    "parse_definitions",
    "PostProcessor",
    "PostProcessorRegistry",
    "default_registry",
    "journal_number",
    "decode",
    "dictify",
    "AuthMethod",
    "basic",
    "ntlm",
    "resolve",
    "from_env",
    "SOAPError",
    "ConfigurationError",
    "UnknownOperationError",
    "SerializationError",
    "TransportError",
    "DecodeError",
    "EmptyBodyError",
    "SOAPFaultError",
    "FaultError",
    "OperationFailedError",
]
