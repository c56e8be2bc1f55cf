"""
Champion Catalog Collaborators

Interfaces to the outside world needed by champion identification: the
champion catalog (records with reference image URLs), the on-disk raw
image store, and the HTTP downloader.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from .result import ChampionClass

logger = logging.getLogger(__name__)

# Preferred reference image variants, in order
IMAGE_VARIANTS = ("p_128", "full_primary")


@dataclass(frozen=True)
class ChampionRecord:
    """Catalog entry for one champion."""
    name: str
    champion_class: ChampionClass
    images: Dict[str, str] = field(default_factory=dict)

    @property
    def image_url(self) -> Optional[str]:
        """Reference portrait URL, 128px variant first."""
        for variant in IMAGE_VARIANTS:
            url = self.images.get(variant)
            if url:
                return url
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChampionRecord":
        return cls(
            name=data["name"],
            champion_class=ChampionClass(str(data["class"]).upper()),
            images=dict(data.get("images") or {}),
        )


class ChampionCatalog(ABC):
    """Source of champion records, queried by class."""

    @abstractmethod
    def find_many(self, champion_class: ChampionClass) -> List[ChampionRecord]:
        """
        All champions of a class.

        Args:
            champion_class: Class filter

        Returns:
            Matching records, possibly empty
        """
        pass


class JsonChampionCatalog(ChampionCatalog):
    """
    Catalog backed by a JSON file.

    The file holds a list of {"name", "class", "images": {"p_128", "full_primary"}}
    objects. Records are read once on first use.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._records: Optional[List[ChampionRecord]] = None

    def _load(self) -> List[ChampionRecord]:
        if self._records is None:
            with open(self._path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            self._records = [ChampionRecord.from_dict(item) for item in raw]
            logger.info(f"Loaded {len(self._records)} champions from {self._path}")
        return self._records

    def find_many(self, champion_class: ChampionClass) -> List[ChampionRecord]:
        return [r for r in self._load() if r.champion_class == champion_class]


def sanitize_name(name: str) -> str:
    """Filesystem-safe cache key for a champion name."""
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower()


class RawImageStore:
    """
    Directory of downloaded reference images, one file per champion.

    Files hold the image exactly as downloaded, before any cropping, so
    crop constants can change without invalidating the store.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure(self) -> None:
        """Create the store directory if needed."""
        self._directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self._directory / f"{sanitize_name(name)}_raw"

    def read(self, name: str) -> Optional[bytes]:
        """Stored bytes for a champion, None if never stored."""
        try:
            return self.path_for(name).read_bytes()
        except FileNotFoundError:
            return None

    def write(self, name: str, data: bytes) -> None:
        self.path_for(name).write_bytes(data)


def download_image(url: str, timeout: float = 15.0) -> bytes:
    """
    Fetch image bytes over HTTP.

    Raises:
        requests.RequestException: On network errors, timeouts and non-2xx responses
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content
