"""Deterministic hash-based text fingerprints and cosine similarity.

The pseudo embedding is a stand-in for a semantic model: each whitespace token is
hashed into one slot of a fixed-length vector. It is stable and cheap, but carries
no meaning beyond token identity and position. Anything satisfying the ``Embedder``
protocol can replace it.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from ..protocols import Embedder

EMBEDDING_DIMENSIONS = 384
HASH_MODULUS = 1000

_WHITESPACE_RE = re.compile(r"\s+")
_INT32_SPAN = 1 << 32
_INT32_MAX = (1 << 31) - 1


def tokenize(text: str) -> list[str]:
    """Lower-case and split on whitespace runs.

    Leading or trailing whitespace produces an empty token, and empty text yields
    a single empty token.
    """
    return _WHITESPACE_RE.split(text.lower())


def _to_int32(value: int) -> int:
    value %= _INT32_SPAN
    if value > _INT32_MAX:
        value -= _INT32_SPAN
    return value


def _utf16_units(token: str) -> list[int]:
    encoded = token.encode("utf-16-le", errors="surrogatepass")
    return [int.from_bytes(encoded[i : i + 2], "little") for i in range(0, len(encoded), 2)]


def utf16_length(token: str) -> int:
    """Length in UTF-16 code units; astral characters count twice."""
    return len(_utf16_units(token))


def token_hash(token: str) -> int:
    """Signed 32-bit polynomial hash (``h * 31 + unit``) over UTF-16 code units."""
    value = 0
    for unit in _utf16_units(token):
        value = _to_int32(_to_int32(value << 5) - value + unit)
    return value


def pseudo_embed(text: str, dimensions: int = EMBEDDING_DIMENSIONS) -> npt.NDArray[np.float64]:
    """Map text to a fixed-length vector, one slot per token position.

    Token ``k`` writes ``fmod(hash, 1000) / 1000`` into slot ``k % dimensions``,
    overwriting earlier tokens that wrapped onto the same slot. Negative hashes give
    negative slot values.
    """
    vector = np.zeros(dimensions, dtype=np.float64)
    for position, token in enumerate(tokenize(text)):
        vector[position % dimensions] = math.fmod(token_hash(token), HASH_MODULUS) / HASH_MODULUS
    return vector


class PseudoEmbedder(Embedder):
    """``Embedder`` backed by :func:`pseudo_embed`."""

    def __init__(self, dimensions: int = EMBEDDING_DIMENSIONS) -> None:
        self.dimensions = dimensions

    def embed(self, text: str) -> npt.NDArray[np.float64]:
        return pseudo_embed(text, self.dimensions)


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when the lengths differ or either vector has zero magnitude.
    """
    a = np.asarray(left, dtype=np.float64)
    b = np.asarray(right, dtype=np.float64)
    if a.shape != b.shape:
        return 0.0
    magnitude = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if magnitude == 0.0:
        return 0.0
    return float(np.dot(a, b)) / magnitude
