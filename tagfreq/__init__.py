"""
tagfreq: per-word part-of-speech tag frequencies for taggers.

Stores how often each tag was observed with each word, and reads/writes the
compact binary records that trained models are made of.
"""

__version__ = "1.0.0"

from tagfreq.binary_io import DeserializationError, SerializationError, TagCountIOError
from tagfreq.config import TagFreqConfig
from tagfreq.dictionary import WordTagDictionary
from tagfreq.tag_count import ABSENT_TAG, NULL_SYMBOL, AbsentTag, Tag, TagCount

__all__ = [
    'ABSENT_TAG',
    'NULL_SYMBOL',
    'AbsentTag',
    'DeserializationError',
    'SerializationError',
    'Tag',
    'TagCount',
    'TagCountIOError',
    'TagFreqConfig',
    'WordTagDictionary',
    '__version__',
]
