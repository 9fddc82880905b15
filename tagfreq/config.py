"""
Configuration classes for tagfreq.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class TagFreqConfig:
    """Options for building and locating a word/tag model."""
    min_count: int = 1  # Tags seen fewer times than this are dropped from a word
    lowercase: bool = False  # Fold word forms to lowercase before counting
    model_name: str = "lexicon.tfd"
    models_dir: Optional[Path] = None  # None: resolve via model_storage.get_models_dir()

    def __post_init__(self):
        if self.min_count < 1:
            raise ValueError(f"min_count must be at least 1, got {self.min_count}")
        if self.models_dir is not None:
            self.models_dir = Path(self.models_dir)
