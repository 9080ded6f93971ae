from dataclasses import dataclass, field
from typing import Optional, Self

import httpx
from lxml import etree

from ..exceptions import TransportError, DecodeError, EmptyBodyError
from ..fault import Fault, find_fault
from ..protocol.xml.element import SOAPElement
from ..utils import XML_PARSER, localname, find_child, inner_xml

CONTENT_TYPE = "text/xml;charset=UTF-8"
ACCEPT = "text/xml"


def parse_fragment(content: bytes) -> etree._Element:
    """
    Parses inner body markup into a detached wrapper element.

    :param content: Body content as produced by ``inner_xml``.
    :return: A ``fragment`` element whose children are the body's top-level nodes.
    :raises EmptyBodyError: If there is no content to parse.
    :raises DecodeError: If the content is not well-formed.
    """
    if not content.strip():
        raise EmptyBodyError()
    try:
        return etree.fromstring(b"<fragment>" + content + b"</fragment>", XML_PARSER)
    except etree.XMLSyntaxError as e:
        raise DecodeError(f"an error occurred decoding the body: {e}") from e


@dataclass
class SOAPEnvelope:
    """SOAP envelope"""

    root: etree._Element

    @classmethod
    def new(cls, nsmap: dict[str, str]) -> Self:
        """Creates a new envelope with an empty body and no header."""
        envelope = cls(etree.Element(SOAPElement.Envelope, nsmap=nsmap))
        # ensure the body exists
        envelope.body
        return envelope

    @property
    def header(self) -> etree._Element:
        el = find_child(self.root, "Header")
        if el is None:
            # Header must come before Body
            el = etree.Element(SOAPElement.Header)
            self.root.insert(0, el)
        return el

    @property
    def body(self) -> etree._Element:
        el = find_child(self.root, "Body")
        return el if el is not None else etree.SubElement(self.root, SOAPElement.Body)

    def __bytes__(self) -> bytes:
        return etree.tostring(self.root, xml_declaration=True, encoding="UTF-8")


@dataclass
class SOAPResponse(SOAPEnvelope):
    """A SOAP envelope that was received as a response"""

    content: bytes = b""
    http_response: Optional[httpx.Response] = field(default=None, repr=False)

    @classmethod
    def parse(cls, data: bytes, http_response: Optional[httpx.Response] = None) -> Self:
        """
        Parses a response envelope and captures the body's inner content.

        :param data: The raw response bytes.
        :param http_response: The HTTP response the bytes were read from, if any.
        :raises DecodeError: If the bytes are not a well-formed envelope with a body.
        """
        if not data or not data.strip():
            raise DecodeError("an error occurred decoding the body: empty response")

        try:
            root = etree.fromstring(data, XML_PARSER)
        except etree.XMLSyntaxError as e:
            raise DecodeError(f"an error occurred decoding the body: {e}") from e

        if localname(root) != "Envelope":
            raise DecodeError(f"an error occurred decoding the body: expected Envelope, got {root.tag}")

        el_body = find_child(root, "Body")
        if el_body is None:
            raise DecodeError("SOAP envelope missing Body")

        return cls(root, content=inner_xml(el_body), http_response=http_response)

    @property
    def status_code(self) -> Optional[int]:
        return self.http_response.status_code if self.http_response is not None else None

    @property
    def fault(self) -> Optional[Fault]:
        return find_fault(self.body)

    def raise_for_fault(self) -> Self:
        """Raises an exception if the response carries a fault. HTTP status codes are not considered."""
        fault = self.fault
        if fault is not None:
            raise fault.to_error()
        return self


@dataclass(frozen=True, slots=True)
class SOAPClient:
    """SOAP client"""

    http: httpx.AsyncClient

    async def close(self):
        """Closes the client and any currently open connections."""
        await self.http.aclose()

    async def request(self, envelope: SOAPEnvelope, *, url: httpx.URL | str, action: str) -> SOAPResponse:
        """
        Executes a SOAP request and returns a response.

        :param envelope: The envelope to send as the request body.
        :param url: The endpoint to POST to.
        :param action: The value of the SOAPAction header.
        :raises TransportError: If the exchange fails or the response body cannot be read.
        :raises DecodeError: If the response is not a SOAP envelope.
        """
        content = bytes(envelope)
        request = self.http.build_request(
            "POST",
            url,
            content=content,
            headers={
                "Content-Type": CONTENT_TYPE,
                "Accept": ACCEPT,
                "SOAPAction": action,
                "Content-Length": str(len(content)),
            },
        )

        try:
            response = await self.http.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        try:
            data = await response.aread()
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e
        finally:
            await response.aclose()

        return SOAPResponse.parse(data, http_response=response)


__all__ = ["SOAPEnvelope", "SOAPResponse", "SOAPClient", "parse_fragment"]
