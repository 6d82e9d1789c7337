"""
Source asset models.

Pure data classes for ingestion inputs: uploaded files and the
rasterized pages of a PDF catalog.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceAsset:
    """A user-supplied file: original filename plus raw bytes."""
    filename: str
    data: bytes

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceAsset":
        path = Path(path)
        return cls(filename=path.name, data=path.read_bytes())

    def __repr__(self) -> str:
        return f"SourceAsset(filename={self.filename!r}, size={len(self.data)})"


@dataclass(frozen=True)
class RasterizedPage:
    """One rendered page of a document. number is 1-indexed."""
    number: int
    data: bytes
    width: int
    height: int

    def __repr__(self) -> str:
        return (f"RasterizedPage(number={self.number}, "
                f"{self.width}x{self.height}, size={len(self.data)})")
