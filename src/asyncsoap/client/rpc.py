import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Self, TypeVar

import httpx
from lxml import etree

from .soap import SOAPClient, SOAPEnvelope, parse_fragment
from ..decode import decode
from ..exceptions import SerializationError, UnknownOperationError, EmptyBodyError
from ..fault import Fault, find_fault
from ..postprocess import PostProcessor, PostProcessorRegistry, default_registry
from ..protocol.xml.namespace import Namespace
from ..utils import find_child, first_element
from ..wsdl import DefinitionModel

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Invocation:
    """A single operation call: the operation name, the body element title and the ordered parameters."""

    operation: str
    title: str
    params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def new(cls, operation: str, title: Optional[str] = None, params: Optional[Mapping[str, str]] = None) -> Self:
        return cls(operation, title or operation, MappingProxyType(dict(params or {})))


@dataclass(frozen=True, slots=True)
class RPCResult:
    """
    The result body of one successful invocation.

    Extraction never consumes the stored bytes, so ``text`` and ``decode`` can be called any number of times.
    """

    invocation: Invocation
    content: bytes
    status_code: Optional[int] = None
    post_processor: Optional[PostProcessor] = field(default=None, repr=False, compare=False)

    def _fragment(self) -> etree._Element:
        return parse_fragment(self.content)

    @staticmethod
    def _find_fault(fragment: etree._Element) -> Optional[Fault]:
        fault = find_fault(fragment)
        if fault is not None:
            return fault
        # a response wrapper may carry the fault fields directly
        el = first_element(fragment)
        return Fault.from_element(el) if el is not None else None

    @property
    def fault(self) -> Optional[Fault]:
        if not self.content.strip():
            return None
        return self._find_fault(self._fragment())

    def text(self) -> str:
        """
        Returns the text of the ``response`` element inside the first body element, after the operation's
        post-processor (if any) has been applied.

        :raises EmptyBodyError: If there is no result body.
        :raises OperationFailedError: If the post-processor detects a failed operation.
        """
        el = first_element(self._fragment())
        if el is None:
            raise EmptyBodyError()

        el_response = find_child(el, "response")
        # all direct character data, including text after comments or child elements
        text = "".join(el_response.xpath("text()")) if el_response is not None else ""

        if self.post_processor is not None:
            return self.post_processor(self.invocation.operation, text)
        return text

    def decode(self, target: type[T]) -> T:
        """
        Decodes the result body into ``target``. See ``asyncsoap.decode.decode`` for the supported targets.

        :raises EmptyBodyError: If there is no result body.
        :raises SOAPFaultError: If the body holds a fault, either as a ``Fault`` element or as ``faultcode`` and
            ``faultstring`` directly inside the first body element.
        :raises DecodeError: If the payload does not fit ``target``.
        """
        fragment = self._fragment()
        fault = self._find_fault(fragment)
        if fault is not None:
            raise fault.to_error()
        return decode(fragment, target)


class RPCClient:
    """
    Stateless SOAP RPC client.

    Every invocation returns its own ``RPCResult``, so one instance can be shared between tasks.
    """

    __slots__ = ("_logger", "_soap", "definitions", "endpoint", "post_processors")

    _logger: logging.Logger
    _soap: SOAPClient
    definitions: DefinitionModel
    endpoint: str
    post_processors: PostProcessorRegistry

    def __init__(
        self,
        client: httpx.AsyncClient,
        definitions: DefinitionModel,
        endpoint: str,
        *,
        post_processors: Optional[PostProcessorRegistry] = None,
    ):
        self._logger = logging.getLogger(__name__)
        self._soap = SOAPClient(client)
        self.definitions = definitions
        self.endpoint = endpoint
        self.post_processors = post_processors if post_processors is not None else default_registry()

    async def close(self):
        """Closes the client and any currently open connections."""
        await self._soap.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def action(self, operation: str) -> str:
        """Returns the SOAPAction header value for an operation."""
        return f"{self.endpoint}/{operation}"

    def build_request(self, invocation: Invocation) -> SOAPEnvelope:
        """
        Constructs the request envelope for an invocation.

        :raises UnknownOperationError: If the service description does not declare the operation.
        :raises SerializationError: If the title or a parameter cannot be represented as XML.
        """
        if not self.definitions.has_operation(invocation.operation):
            raise UnknownOperationError(invocation.operation)

        target_namespace = self.definitions.target_namespace
        try:
            envelope = SOAPEnvelope.new(Namespace.nsmap(target_namespace))
            # the operation name must be usable as an XML name too
            etree.QName(target_namespace, invocation.operation)
            el_request = etree.SubElement(envelope.body, etree.QName(target_namespace, invocation.title))
            for name, value in invocation.params.items():
                etree.SubElement(el_request, etree.QName(target_namespace, name)).text = value
        except (ValueError, TypeError) as e:
            raise SerializationError(f"cannot serialize operation '{invocation.operation}': {e}") from e

        return envelope

    async def run_request(self, invocation: Invocation, envelope: SOAPEnvelope) -> RPCResult:
        """
        Sends an envelope and turns the response into a result.

        :raises TransportError: If the HTTP exchange fails.
        :raises DecodeError: If the response is not a SOAP envelope.
        :raises SOAPFaultError: If the response body holds a fault.
        """
        response = await self._soap.request(envelope, url=self.endpoint, action=self.action(invocation.operation))
        self._logger.debug(
            "response operation=%s status=%s size=%d", invocation.operation, response.status_code, len(response.content)
        )
        response.raise_for_fault()
        return RPCResult(
            invocation=invocation,
            content=response.content,
            status_code=response.status_code,
            post_processor=self.post_processors.get(invocation.operation),
        )

    async def invoke(
        self,
        operation: str,
        title: Optional[str] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> RPCResult:
        """
        Constructs and executes a call.

        :param operation: The operation to call. Also selects the SOAPAction header and the text post-processor.
        :param title: The local name of the request element in the body. Defaults to the operation name.
        :param params: Parameters, serialized as child elements in iteration order.
        :return: The result body of the call.
        """
        invocation = Invocation.new(operation, title, params)
        envelope = self.build_request(invocation)

        self._logger.info("request operation=%s endpoint=%s", operation, self.endpoint)
        return await self.run_request(invocation, envelope)


__all__ = ["Invocation", "RPCResult", "RPCClient"]
