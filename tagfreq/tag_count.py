"""
Per-word tag frequency store.

A ``TagCount`` records how often each part-of-speech tag was seen with one
word in the training corpus. It is built once, either from a mapping of
counts or by reading a binary record, and is read-only afterwards except for
the ambiguity-class id, which an external registry assigns.
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from types import MappingProxyType
from typing import BinaryIO, Dict, Iterator, Mapping, Optional, Tuple, Union

from .binary_io import DeserializationError, read_int, read_utf, write_bytes, write_int, write_utf

logger = logging.getLogger(__name__)


class AbsentTag(Enum):
    """Key used for occurrences that had no applicable tag."""

    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT_TAG"


ABSENT_TAG = AbsentTag.ABSENT

Tag = Union[str, AbsentTag]

# Wire form of ABSENT_TAG. A real tag spelled like this cannot survive a
# write/read round trip: it comes back as ABSENT_TAG.
NULL_SYMBOL = "<<NULL>>"


def normalize_tag(tag: Optional[Tag]) -> Tag:
    """Map ``None`` to ABSENT_TAG; reject anything that is not a tag."""
    if tag is None or tag is ABSENT_TAG:
        return ABSENT_TAG
    if not isinstance(tag, str):
        raise TypeError(f"Tag must be a string or ABSENT_TAG, got {type(tag).__name__}")
    return tag


def tag_to_text(tag: Tag) -> str:
    return NULL_SYMBOL if tag is ABSENT_TAG else tag


def text_to_tag(text: str) -> Tag:
    return ABSENT_TAG if text == NULL_SYMBOL else text


class TagCount:
    """
    Tag counts observed for a single word.

    ``total`` and ``tags`` are computed once when the store is built and are
    never refreshed; nothing in this class changes the counts afterwards.

    ``majority_tag`` scans the counts in insertion order and keeps the first
    tag whose count is strictly greater than the best so far, starting from 0.
    On ties the earlier tag wins, and a store whose counts are all zero (or
    that is empty) has no majority tag. Insertion order is preserved by
    ``write``/``read``, so the answer is the same after reloading a model.
    """

    def __init__(self, counts: Optional[Mapping[Optional[Tag], int]] = None):
        built: Dict[Tag, int] = {}
        if counts:
            for tag, count in counts.items():
                tag = normalize_tag(tag)
                if isinstance(count, bool) or not isinstance(count, int):
                    raise TypeError(f"Count for tag {tag!r} must be an int, got {type(count).__name__}")
                if count < 0:
                    raise ValueError(f"Count for tag {tag!r} must be non-negative, got {count}")
                # None and ABSENT_TAG may both be present in the input
                built[tag] = built.get(tag, 0) + count
        self._set_counts(built)
        self._ambiguity_class_id = -1

    def _set_counts(self, counts: Dict[Tag, int]) -> None:
        self._counts = counts
        self._counts_view: Mapping[Tag, int] = MappingProxyType(counts)
        self._tags: Tuple[Tag, ...] = tuple(counts)
        self._total: int = sum(counts.values())

    @property
    def counts(self) -> Mapping[Tag, int]:
        """Read-only view of the tag counts."""
        return self._counts_view

    @property
    def tags(self) -> Tuple[Tag, ...]:
        return self._tags

    @property
    def total(self) -> int:
        return self._total

    # Queries -------------------------------------------------------------

    def total_count(self) -> int:
        """Number of occurrences of the word over all tags."""
        return self.total

    def count_for(self, tag: Optional[Tag]) -> int:
        """Occurrences of the word with ``tag``; 0 when never seen."""
        if tag is None:
            tag = ABSENT_TAG
        return self._counts.get(tag, 0)

    def distinct_tag_count(self) -> int:
        return len(self._counts)

    def majority_tag(self) -> Tag:
        """The most frequent tag, or ABSENT_TAG when no count is above zero."""
        best: Tag = ABSENT_TAG
        best_count = 0
        for tag, count in self._counts.items():
            if count > best_count:
                best = tag
                best_count = count
        return best

    # Ambiguity class -----------------------------------------------------

    def get_ambiguity_class_id(self) -> int:
        return self._ambiguity_class_id

    def set_ambiguity_class_id(self, ambiguity_class_id: int) -> None:
        self._ambiguity_class_id = ambiguity_class_id

    ambiguity_class_id = property(get_ambiguity_class_id, set_ambiguity_class_id)

    # Persistence ---------------------------------------------------------

    def write(self, stream: BinaryIO) -> None:
        """
        Write this store at the current position of ``stream``.

        The stream is left open so that further records can follow.
        Raises SerializationError if a value cannot be encoded or written.
        The record is encoded in full before anything reaches ``stream``, so
        an encoding error leaves the stream untouched.
        """
        buffer = io.BytesIO()
        write_int(buffer, len(self._counts))
        for tag, count in self._counts.items():
            if tag == NULL_SYMBOL:
                logger.warning("Tag %r collides with the absent-tag marker and will read back as absent", tag)
            write_utf(buffer, tag_to_text(tag))
            write_int(buffer, count)
        write_bytes(stream, buffer.getvalue())

    @classmethod
    def read(cls, stream: BinaryIO) -> "TagCount":
        """
        Read one store from the current position of ``stream``.

        Raises DeserializationError on truncated or malformed input; no
        partially filled store is ever returned.
        """
        num_tags = read_int(stream)
        if num_tags < 0:
            raise DeserializationError(f"Negative tag count in record: {num_tags}")
        counts: Dict[Tag, int] = {}
        for _ in range(num_tags):
            tag = text_to_tag(read_utf(stream))
            count = read_int(stream)
            if tag in counts:
                raise DeserializationError(f"Duplicate tag {tag_to_text(tag)!r} in record")
            if count < 0:
                raise DeserializationError(f"Negative count {count} for tag {tag_to_text(tag)!r}")
            counts[tag] = count
        store = cls()
        store._set_counts(counts)
        return store

    # Python protocol -----------------------------------------------------

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags)

    def __contains__(self, tag: object) -> bool:
        if tag is None:
            tag = ABSENT_TAG
        return tag in self._counts

    def __str__(self) -> str:
        inner = ", ".join(f"{tag_to_text(tag)}={count}" for tag, count in self._counts.items())
        return "{" + inner + "}"

    def __repr__(self) -> str:
        return f"TagCount({str(self)}, ambiguity_class_id={self._ambiguity_class_id})"
