"""Protocol definitions for dependency injection.

These protocols define the abstract interfaces that engine hosts depend on,
enabling isolated unit testing with in-memory implementations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt
    import pandas as pd


@runtime_checkable
class Embedder(Protocol):
    """Maps text to a fixed-length numeric vector."""

    def embed(self, text: str) -> Sequence[float] | npt.NDArray[np.float64]:
        """Return the embedding for ``text``.

        Every call on one embedder must return vectors of the same length.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading inputs and writing result tables."""

    def read_csv(self, path: Path) -> pd.DataFrame:
        """Read CSV file into DataFrame."""
        ...

    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        """Write DataFrame to CSV file."""
        ...

    def read_json(self, path: Path) -> dict[str, object]:
        """Read JSON file."""
        ...

    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        """Write JSON file."""
        ...

    def read_text(self, path: Path) -> str:
        """Read text file."""
        ...

    def write_text(self, content: str, path: Path) -> None:
        """Write text file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...

    def mkdir(self, path: Path, parents: bool = True) -> None:
        """Create directory."""
        ...
