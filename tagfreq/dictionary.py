"""
Word dictionary: one TagCount per word, plus the model file that stores them.

A dictionary is filled in two stages. Observations are accumulated with
``add``/``update`` (or ``from_tnt``), then ``build`` turns the raw counts into
immutable ``TagCount`` stores. Dictionaries read from a model file are built
already.

Model file layout (big-endian, see ``binary_io``)::

    int32   number of words
    repeated:
        utf     word
        record  TagCount record

Ambiguity-class ids are not stored; they are assigned after loading.
"""

from __future__ import annotations

import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .binary_io import DeserializationError, SerializationError, read_int, read_utf, write_int, write_utf
from .tag_count import ABSENT_TAG, Tag, TagCount, normalize_tag

logger = logging.getLogger(__name__)

# TnT-style files mark an unannotated token with "_" (or leave the column empty)
EMPTY_TAG_MARKERS = ("", "_")


class WordTagDictionary:
    """Maps word forms to their TagCount statistics."""

    def __init__(self) -> None:
        self._pending: Dict[str, Dict[Tag, int]] = defaultdict(dict)
        self._stores: Dict[str, TagCount] = {}
        self._built = False

    # Accumulation --------------------------------------------------------

    def add(self, word: str, tag: Optional[Tag], count: int = 1) -> None:
        """Record ``count`` occurrences of ``word`` with ``tag``."""
        if self._built:
            raise RuntimeError("Dictionary has been built; no more observations can be added")
        if count < 0:
            raise ValueError(f"Count must be non-negative, got {count}")
        tag = normalize_tag(tag)
        counts = self._pending[word]
        counts[tag] = counts.get(tag, 0) + count

    def update(self, pairs: Iterable[Tuple[str, Optional[Tag]]]) -> None:
        for word, tag in pairs:
            self.add(word, tag)

    def build(self, min_count: int = 1, lowercase: bool = False) -> "WordTagDictionary":
        """
        Freeze the accumulated counts into TagCount stores.

        Tags seen fewer than ``min_count`` times are dropped, and so are words
        left without any tag. With ``lowercase`` the forms are folded before
        grouping, so "The" and "the" share one store.
        """
        if self._built:
            return self
        grouped: Dict[str, Dict[Tag, int]] = self._pending
        if lowercase:
            grouped = defaultdict(dict)
            for word, counts in self._pending.items():
                merged = grouped[word.lower()]
                for tag, count in counts.items():
                    merged[tag] = merged.get(tag, 0) + count

        dropped_words = 0
        for word, counts in grouped.items():
            kept = {tag: count for tag, count in counts.items() if count >= min_count}
            if not kept:
                dropped_words += 1
                continue
            self._stores[word] = TagCount(kept)

        logger.info("Built %d word entries (%d dropped below min_count=%d)", len(self._stores), dropped_words, min_count)
        self._pending = defaultdict(dict)
        self._built = True
        return self

    @property
    def built(self) -> bool:
        return self._built

    @classmethod
    def from_tnt(cls, source: Union[str, Path, Iterable[str]]) -> "WordTagDictionary":
        """
        Accumulate observations from TnT-style lines: ``token<TAB>tag[<TAB>count]``.

        Blank lines (sentence breaks) and ``%%`` comment lines are skipped.
        The result still has to be built.
        """
        dictionary = cls()
        if isinstance(source, (str, Path)):
            with open(source, "r", encoding="utf-8") as f:
                dictionary._read_tnt_lines(f)
        else:
            dictionary._read_tnt_lines(source)
        return dictionary

    def _read_tnt_lines(self, lines: Iterable[str]) -> None:
        observations = 0
        for line_num, line in enumerate(lines, 1):
            line = line.rstrip("\r\n")
            if not line.strip() or line.startswith("%%"):
                continue
            parts = line.split("\t")
            if len(parts) < 2:
                raise ValueError(f"Line {line_num}: expected token<TAB>tag, got {line!r}")
            word = parts[0]
            tag_text = parts[1].strip()
            tag: Tag = ABSENT_TAG if tag_text in EMPTY_TAG_MARKERS else tag_text
            count = 1
            if len(parts) > 2 and parts[2].strip():
                try:
                    count = int(parts[2])
                except ValueError:
                    raise ValueError(f"Line {line_num}: count is not an integer: {parts[2]!r}") from None
                if count < 0:
                    raise ValueError(f"Line {line_num}: count must be non-negative, got {count}")
            self.add(word, tag, count)
            observations += 1
        logger.debug("Read %d observations for %d words", observations, len(self._pending))

    # Lookup --------------------------------------------------------------

    def _require_built(self) -> None:
        if not self._built:
            raise RuntimeError("Dictionary has not been built yet; call build() first")

    def __getitem__(self, word: str) -> TagCount:
        self._require_built()
        return self._stores[word]

    def get(self, word: str) -> Optional[TagCount]:
        self._require_built()
        return self._stores.get(word)

    def __contains__(self, word: object) -> bool:
        return word in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[str]:
        return iter(self._stores)

    def words(self) -> List[str]:
        return list(self._stores)

    def items(self):
        return self._stores.items()

    def count_for(self, word: str, tag: Optional[Tag]) -> int:
        store = self.get(word)
        return store.count_for(tag) if store is not None else 0

    def total_count(self, word: str) -> int:
        store = self.get(word)
        return store.total if store is not None else 0

    def majority_tag(self, word: str) -> Tag:
        store = self.get(word)
        return store.majority_tag() if store is not None else ABSENT_TAG

    def tag_vocabulary(self) -> Tuple[str, ...]:
        """All real tags seen with any word, sorted."""
        vocab = set()
        for store in self._stores.values():
            vocab.update(tag for tag in store.tags if tag is not ABSENT_TAG)
        return tuple(sorted(vocab))

    # Persistence ---------------------------------------------------------

    def write(self, stream: BinaryIO) -> None:
        self._require_built()
        write_int(stream, len(self._stores))
        for word, store in self._stores.items():
            write_utf(stream, word)
            store.write(stream)

    @classmethod
    def read(cls, stream: BinaryIO) -> "WordTagDictionary":
        num_words = read_int(stream)
        if num_words < 0:
            raise DeserializationError(f"Negative word count in model header: {num_words}")
        dictionary = cls()
        for index in range(num_words):
            word = read_utf(stream)
            if word in dictionary._stores:
                raise DeserializationError(f"Duplicate word {word!r} at entry {index}")
            try:
                dictionary._stores[word] = TagCount.read(stream)
            except DeserializationError as exc:
                raise DeserializationError(f"Entry {index} ({word!r}): {exc}") from exc
        dictionary._built = True
        return dictionary

    def save(self, path: Union[str, Path]) -> None:
        """
        Write the model to ``path``.

        The model goes to a ``.tmp`` sibling first and replaces ``path`` only
        once it is complete; on failure an existing model is left as it was.
        """
        self._require_built()
        path = Path(path)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, "wb") as f:
                    self.write(f)
                os.replace(tmp_path, path)
            except OSError as exc:
                raise SerializationError(f"Cannot write model file {path}: {exc}") from exc
        except SerializationError:
            if tmp_path.exists():
                tmp_path.unlink()
            raise
        logger.info("Saved %d words to %s", len(self._stores), path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "WordTagDictionary":
        path = Path(path)
        try:
            with open(path, "rb") as f:
                dictionary = cls.read(f)
                trailing = f.read(1)
        except OSError as exc:
            raise DeserializationError(f"Cannot read model file {path}: {exc}") from exc
        if trailing:
            raise DeserializationError(f"Trailing data after {len(dictionary)} entries in {path}")
        logger.info("Loaded %d words from %s", len(dictionary), path)
        return dictionary
