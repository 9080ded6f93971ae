from enum import StrEnum


class Namespace(StrEnum):
    Xsi = "http://www.w3.org/2001/XMLSchema-instance"

    SOAP = "http://schemas.xmlsoap.org/soap/envelope/"

    WSDL = "http://schemas.xmlsoap.org/wsdl/"
    WSDLSOAP = "http://schemas.xmlsoap.org/wsdl/soap/"
    WSDLSOAP12 = "http://schemas.xmlsoap.org/wsdl/soap12/"

    @classmethod
    def nsmap(cls, target_namespace: str) -> dict[str, str]:
        # Same prefixes the reference servers emit in their own envelopes.
        return {
            "SOAP-ENV": cls.SOAP,
            "ns1": target_namespace,
        }


__all__ = ["Namespace"]
