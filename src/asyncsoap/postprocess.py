from collections.abc import Callable, Iterator, Mapping
from typing import Optional, TypeAlias

from .exceptions import OperationFailedError

# (operation name, extracted response text) -> text handed to the caller
PostProcessor: TypeAlias = Callable[[str, str], str]

FAILURE_MARKER = 'status="fail"'

# Servers wrap the journal number either as escaped markup or as plain tags.
JOURNAL_NUMBER_MARKERS = (
    ("&lt;JournalNumber&gt;", "&lt;/JournalNumber&gt;"),
    ("<JournalNumber>", "</JournalNumber>"),
)


def journal_number(operation: str, text: str) -> str:
    """
    Unwraps the journal number returned by an ``Execute`` call.

    :raises OperationFailedError: If the text carries the failure marker.
    """
    if FAILURE_MARKER in text:
        raise OperationFailedError(operation)

    text = text.strip()
    for prefix, suffix in JOURNAL_NUMBER_MARKERS:
        if text.startswith(prefix) and text.endswith(suffix):
            return text.removeprefix(prefix).removesuffix(suffix).strip()
    return text


class PostProcessorRegistry(Mapping[str, PostProcessor]):
    """Text post-processors selected by operation name."""

    __slots__ = ("_processors",)

    _processors: dict[str, PostProcessor]

    def __init__(self, processors: Optional[Mapping[str, PostProcessor]] = None):
        self._processors = dict(processors or {})

    def __getitem__(self, operation: str) -> PostProcessor:
        return self._processors[operation]

    def __iter__(self) -> Iterator[str]:
        return iter(self._processors)

    def __len__(self) -> int:
        return len(self._processors)

    def register(self, operation: str, processor: PostProcessor) -> None:
        self._processors[operation] = processor

    def unregister(self, operation: str) -> None:
        self._processors.pop(operation, None)

    def apply(self, operation: str, text: str) -> str:
        processor = self._processors.get(operation)
        return processor(operation, text) if processor is not None else text


def default_registry() -> PostProcessorRegistry:
    """Returns a fresh registry with the built-in post-processors."""
    return PostProcessorRegistry({"Execute": journal_number})


__all__ = [
    "PostProcessor",
    "PostProcessorRegistry",
    "journal_number",
    "default_registry",
]
