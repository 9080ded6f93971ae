from lxml import etree

from .namespace import Namespace


class XsiAttribute:
    Nil = etree.QName(Namespace.Xsi, "nil")


class WSDLAttribute:
    TargetNamespace = "targetNamespace"
    Name = "name"
    Message = "message"
    SOAPAction = "soapAction"
    Location = "location"


__all__ = [
    "XsiAttribute",
    "WSDLAttribute",
]
