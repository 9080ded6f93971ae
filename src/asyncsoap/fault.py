from dataclasses import dataclass
from typing import Optional, Self

from lxml import etree

from .exceptions import SOAPFaultError
from .protocol.xml.element import FaultElement
from .utils import localname, find_child


@dataclass(frozen=True, slots=True)
class Fault:
    """A SOAP 1.1 fault as carried in a response body."""

    code: str
    description: Optional[str] = None
    actor: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def from_element(cls, el_fault: etree._Element) -> Optional[Self]:
        """Reads a Fault element. Returns None unless it carries a non-empty fault code."""
        el_code = find_child(el_fault, FaultElement.Code)
        code = (el_code.text or "").strip() if el_code is not None else ""
        if not code:
            return None

        el_string = find_child(el_fault, FaultElement.String)
        el_actor = find_child(el_fault, FaultElement.Actor)
        el_detail = find_child(el_fault, FaultElement.Detail)

        detail = None
        if el_detail is not None:
            detail = "".join(el_detail.itertext()).strip() or None

        return cls(
            code=code,
            description=el_string.text if el_string is not None else None,
            actor=el_actor.text if el_actor is not None else None,
            detail=detail,
        )

    def to_error(self) -> SOAPFaultError:
        return SOAPFaultError(self.code, self.description, fault=self)


def find_fault(el_body: etree._Element) -> Optional[Fault]:
    """
    Looks for a fault among the top-level elements of a body.

    :param el_body: A Body element, or the wrapper element returned by ``parse_fragment``.
    :return: The first fault with a non-empty code, or None.
    """
    for el in el_body:
        if localname(el) == "Fault":
            fault = Fault.from_element(el)
            if fault is not None:
                return fault
    return None


__all__ = ["Fault", "find_fault"]
