import dataclasses
import types
from contextlib import suppress
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, TypeVar, Union, get_args, get_origin, get_type_hints

from lxml import etree

from .exceptions import DecodeError
from .protocol.xml.attribute import XsiAttribute
from .utils import localname, find_child, find_children, first_element

T = TypeVar("T")


def _dictify_coerce(text: Optional[str]) -> Any:
    if text is None:
        return None
    if text == "false":
        return False
    if text == "true":
        return True
    with suppress(ValueError):
        return int(text)
    return text


def dictify(root: etree._Element) -> dict[str, Any]:
    """Tries to convert an XML element to a flat Python dictionary keyed by local name."""
    result: dict[str, Any] = {}
    for el in root:
        name = localname(el)
        if name is None:
            continue
        if el.get(XsiAttribute.Nil) == "true":
            result[name] = None
        else:
            result[name] = _dictify_coerce(el.text)
    return result


def _unwrap_optional(tp: Any) -> tuple[Any, bool]:
    if get_origin(tp) in (Union, types.UnionType):
        args = get_args(tp)
        rest = [arg for arg in args if arg is not type(None)]
        if len(rest) == 1 and len(rest) != len(args):
            return rest[0], True
    return tp, False


def _coerce_text(text: Optional[str], tp: Any) -> Any:
    if tp is Any:
        return _dictify_coerce(text)

    text = text or ""
    try:
        if tp is str:
            return text
        if tp is bool:
            value = text.strip()
            if value in ("true", "1"):
                return True
            if value in ("false", "0"):
                return False
            raise ValueError(f"invalid boolean '{value}'")
        if tp is int:
            return int(text.strip())
        if tp is float:
            return float(text.strip())
        if tp is Decimal:
            return Decimal(text.strip())
    except (ValueError, InvalidOperation) as e:
        raise DecodeError(f"cannot decode '{text}' as {tp.__name__}: {e}") from e

    raise DecodeError(f"cannot decode into {tp!r}")


def _decode_value(el: Optional[etree._Element], tp: Any) -> Any:
    tp, optional = _unwrap_optional(tp)
    if el is None or el.get(XsiAttribute.Nil) == "true":
        if optional:
            return None
        if el is None:
            raise DecodeError(f"missing value for {tp!r}")

    if tp is etree._Element:
        return el
    if tp is dict or get_origin(tp) is dict:
        return dictify(el)
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _decode_dataclass(el, tp)
    return _coerce_text(el.text, tp)


def _decode_dataclass(el: etree._Element, cls: type) -> Any:
    expected = getattr(cls, "__xml_name__", None)
    if expected is not None and localname(el) != expected:
        raise DecodeError(f"expected element <{expected}> but have <{localname(el)}>")

    hints = get_type_hints(cls)
    kwargs: dict[str, Any] = {}

    for f in dataclasses.fields(cls):
        if not f.init:
            continue

        name = f.metadata.get("xml", f.name)
        tp, optional = _unwrap_optional(hints[f.name])

        if f.metadata.get("attribute", False):
            value = el.get(name)
            if value is not None:
                kwargs[f.name] = _coerce_text(value, tp)
                continue
        elif get_origin(tp) is list:
            (item_tp,) = get_args(tp) or (Any,)
            kwargs[f.name] = [_decode_value(item, item_tp) for item in find_children(el, name)]
            continue
        else:
            child = find_child(el, name)
            if child is not None:
                kwargs[f.name] = _decode_value(child, hints[f.name])
                continue

        # missing: defaults win, then Optional falls back to None
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        if optional:
            kwargs[f.name] = None
            continue
        raise DecodeError(f"missing '{name}' in <{localname(el)}> for {cls.__name__}.{f.name}")

    return cls(**kwargs)


def decode(fragment: etree._Element, target: type[T]) -> T:
    """
    Decodes the first element of a body fragment into ``target``.

    :param fragment: The wrapper element returned by ``parse_fragment``.
    :param target: A dataclass, ``dict``, ``str``, ``etree._Element`` or a scalar type (``int``, ``float``, ``bool``,
                   ``Decimal``). Dataclass fields are matched against child elements by local name. Use
                   ``field(metadata={"xml": "name"})`` to match a different name and ``{"attribute": True}`` to read an
                   attribute instead. ``__xml_name__`` on the dataclass requires a specific root element.
    :raises DecodeError: If the payload does not fit the target.
    """
    el = first_element(fragment)
    if el is None:
        raise DecodeError("body has no element to decode")

    if target is str:
        return "".join(el.itertext())
    return _decode_value(el, target)


__all__ = ["decode", "dictify"]
