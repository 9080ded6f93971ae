from lxml import etree

from .namespace import Namespace


class SOAPElement:
    Envelope = etree.QName(Namespace.SOAP, "Envelope")
    Header = etree.QName(Namespace.SOAP, "Header")
    Body = etree.QName(Namespace.SOAP, "Body")


class FaultElement:
    # SOAP 1.1 fault children are unqualified
    Code = "faultcode"
    String = "faultstring"
    Actor = "faultactor"
    Detail = "detail"


class WSDLElement:
    Definitions = etree.QName(Namespace.WSDL, "definitions")
    PortType = etree.QName(Namespace.WSDL, "portType")
    Binding = etree.QName(Namespace.WSDL, "binding")
    Operation = etree.QName(Namespace.WSDL, "operation")
    Input = etree.QName(Namespace.WSDL, "input")
    Output = etree.QName(Namespace.WSDL, "output")
    Service = etree.QName(Namespace.WSDL, "service")
    Port = etree.QName(Namespace.WSDL, "port")


class WSDLSOAPElement:
    Operation = etree.QName(Namespace.WSDLSOAP, "operation")
    Address = etree.QName(Namespace.WSDLSOAP, "address")


class WSDLSOAP12Element:
    Operation = etree.QName(Namespace.WSDLSOAP12, "operation")
    Address = etree.QName(Namespace.WSDLSOAP12, "address")


__all__ = [
    "SOAPElement",
    "FaultElement",
    "WSDLElement",
    "WSDLSOAPElement",
    "WSDLSOAP12Element",
]
