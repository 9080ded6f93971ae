import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Protocol, runtime_checkable

import httpx
from lxml import etree

from .exceptions import ConfigurationError
from .protocol.xml.attribute import WSDLAttribute
from .protocol.xml.element import WSDLElement, WSDLSOAPElement, WSDLSOAP12Element
from .utils import XML_PARSER

_logger = logging.getLogger(__name__)


@runtime_checkable
class DefinitionModel(Protocol):
    """The read-only view of a service description that the RPC client needs."""

    @property
    def target_namespace(self) -> str: ...

    def has_operation(self, name: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    name: str
    input_message: Optional[str] = None
    output_message: Optional[str] = None
    soap_action: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Definitions:
    """An immutable, parsed WSDL 1.1 service description."""

    target_namespace: str
    operations: Mapping[str, OperationDescriptor] = field(default_factory=lambda: MappingProxyType({}))
    addresses: tuple[str, ...] = ()
    name: Optional[str] = None

    def has_operation(self, name: str) -> bool:
        # A description without any operations places no restriction on what can be called.
        return not self.operations or name in self.operations

    @property
    def address(self) -> Optional[str]:
        """The first service port address, if the description declares one."""
        return self.addresses[0] if self.addresses else None


def _local(qname: Optional[str]) -> Optional[str]:
    # message="tns:Foo" -> "Foo"
    if qname is None:
        return None
    return qname.rpartition(":")[2]


def parse_definitions(content: bytes) -> Definitions:
    """
    Parses a WSDL 1.1 document.

    :param content: The raw document.
    :return: The target namespace, operations and service addresses of the description.
    :raises ConfigurationError: If the document is not a usable WSDL 1.1 description.
    """
    try:
        root = etree.fromstring(content, XML_PARSER)
    except etree.XMLSyntaxError as e:
        raise ConfigurationError(f"Invalid service description: {e}") from e

    if root.tag != WSDLElement.Definitions:
        raise ConfigurationError(f"Invalid service description: unexpected root element {root.tag}")

    target_namespace = root.get(WSDLAttribute.TargetNamespace)
    if not target_namespace:
        raise ConfigurationError("Invalid service description: missing targetNamespace")

    soap_actions: dict[str, str] = {}
    for el_binding in root.iterfind(WSDLElement.Binding):
        for el_operation in el_binding.iterfind(WSDLElement.Operation):
            for tag in (WSDLSOAPElement.Operation, WSDLSOAP12Element.Operation):
                el_soap_operation = el_operation.find(tag)
                if el_soap_operation is not None and el_soap_operation.get(WSDLAttribute.SOAPAction):
                    soap_actions.setdefault(
                        el_operation.get(WSDLAttribute.Name), el_soap_operation.get(WSDLAttribute.SOAPAction)
                    )

    operations: dict[str, OperationDescriptor] = {}
    for el_port_type in root.iterfind(WSDLElement.PortType):
        for el_operation in el_port_type.iterfind(WSDLElement.Operation):
            name = el_operation.get(WSDLAttribute.Name)
            if not name or name in operations:
                continue

            el_input = el_operation.find(WSDLElement.Input)
            el_output = el_operation.find(WSDLElement.Output)
            operations[name] = OperationDescriptor(
                name=name,
                input_message=_local(el_input.get(WSDLAttribute.Message)) if el_input is not None else None,
                output_message=_local(el_output.get(WSDLAttribute.Message)) if el_output is not None else None,
                soap_action=soap_actions.get(name),
            )

    addresses = []
    for el_service in root.iterfind(WSDLElement.Service):
        for el_port in el_service.iterfind(WSDLElement.Port):
            for tag in (WSDLSOAPElement.Address, WSDLSOAP12Element.Address):
                el_address = el_port.find(tag)
                if el_address is not None and el_address.get(WSDLAttribute.Location):
                    addresses.append(el_address.get(WSDLAttribute.Location))

    return Definitions(
        target_namespace=target_namespace,
        operations=MappingProxyType(operations),
        addresses=tuple(addresses),
        name=root.get(WSDLAttribute.Name),
    )


async def load_definitions(
    source: str | os.PathLike,
    http: Optional[httpx.AsyncClient] = None,
) -> Definitions:
    """
    Loads and parses a service description. Only the description itself is fetched, the service is never contacted.

    :param source: An http(s) URL or a local file path.
    :param http: An optional client to fetch URLs with. A temporary one is used if omitted.
    :raises ConfigurationError: If the description cannot be fetched, read or parsed.
    """
    location = os.fspath(source)

    if location.startswith(("http://", "https://")):
        _logger.info("loading service description url=%s", location)
        try:
            if http is not None:
                response = await http.get(location)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(location)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ConfigurationError(f"Could not fetch service description from {location}: {e}") from e
        content = response.content
    else:
        _logger.info("loading service description path=%s", location)
        try:
            content = Path(location).read_bytes()
        except OSError as e:
            raise ConfigurationError(f"Could not read service description {location}: {e}") from e

    definitions = parse_definitions(content)
    _logger.debug(
        "loaded service description target_namespace=%s operations=%d",
        definitions.target_namespace,
        len(definitions.operations),
    )
    return definitions


__all__ = [
    "DefinitionModel",
    "OperationDescriptor",
    "Definitions",
    "parse_definitions",
    "load_definitions",
]
