"""Layer order and lexical (layer, slice) classification.

A coordinate is derived from text alone: file paths and import
specifiers are never resolved against the real filesystem.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator, Sequence
from typing import NamedTuple

DEFAULT_LAYERS: tuple[str, ...] = ("app", "pages", "widgets", "features", "entities", "shared")
SLICED_LAYERS: tuple[str, ...] = ("pages", "widgets", "features", "entities")

APP_LAYER = "app"
DEPRECATED_LAYER = "processes"


class Coordinate(NamedTuple):
    """A ``(layer, slice)`` position in the source tree.

    ``slice`` is None for layer-root files and for imports that only
    name a layer.
    """

    layer: str
    slice: str | None = None


# Both kinds of coordinate share the same shape.
PathCoordinate = Coordinate
ImportCoordinate = Coordinate


class LayerOrder:
    """Ordered, duplicate-free sequence of layer names.

    Only relative position is meaningful: a lower index is a higher
    (more peripheral) layer, e.g. ``app`` sits above ``shared``.
    """

    def __init__(self, layers: Iterable[str] = DEFAULT_LAYERS) -> None:
        names = tuple(layers)
        seen: set[str] = set()
        for name in names:
            if name in seen:
                msg = f"Duplicate layer in order: {name!r}"
                raise ValueError(msg)
            seen.add(name)
        self._layers = names
        self._index = {name: i for i, name in enumerate(names)}

    def __contains__(self, layer: object) -> bool:
        return layer in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def __repr__(self) -> str:
        return f"LayerOrder({list(self._layers)!r})"

    def index(self, layer: str) -> int:
        """Position of *layer*; raises KeyError for unknown layers."""
        return self._index[layer]

    def is_above(self, layer: str, other: str) -> bool:
        """True when *layer* is strictly higher (earlier) than *other*."""
        return self._index[layer] < self._index[other]


def _segments(value: str) -> list[str]:
    normalized = posixpath.normpath(value.replace("\\", "/"))
    return [part for part in normalized.split("/") if part and part != "."]


def _find_run(parts: Sequence[str], run: Sequence[str]) -> int:
    """Index of the first occurrence of *run* inside *parts*, or -1."""
    if not run:
        return -1
    width = len(run)
    for i in range(len(parts) - width + 1):
        if list(parts[i : i + width]) == list(run):
            return i
    return -1


def classify_path(path: str, src_root: str) -> PathCoordinate | None:
    """Classify a file path into its ``(layer, slice)`` coordinate.

    Returns None when *src_root* does not occur in the path or nothing
    follows it.

    Examples:
        >>> classify_path("src/widgets/button/index.js", "src")
        Coordinate(layer='widgets', slice='button')
        >>> classify_path("src/widgets/index.js", "src")
        Coordinate(layer='widgets', slice=None)
        >>> classify_path("lib/widgets/button/index.js", "src") is None
        True
    """
    if not path or not src_root:
        return None
    parts = _segments(path)
    root = _segments(src_root)
    start = _find_run(parts, root)
    if start == -1:
        return None
    layer_at = start + len(root)
    if layer_at >= len(parts):
        return None

    layer = parts[layer_at]
    slice_name: str | None = None
    if layer_at + 1 < len(parts):
        slice_name = parts[layer_at + 1]
        is_last = layer_at + 1 == len(parts) - 1
        # A file sitting directly under the layer is not a slice.
        if is_last and "." in slice_name:
            slice_name = None
    return Coordinate(layer, slice_name)


def is_relative_specifier(specifier: str) -> bool:
    """Relative and absolute specifiers are local and never layered."""
    return specifier.startswith((".", "/"))


def classify_import(specifier: object, src_root: str) -> ImportCoordinate | None:
    """Classify an import specifier into its ``(layer, slice)`` coordinate.

    A leading *src_root* prefix (``src/widgets/...``) is stripped, so
    ``src/widgets/card`` and ``widgets/card`` classify identically.

    Examples:
        >>> classify_import("widgets/card/ui", "src")
        Coordinate(layer='widgets', slice='card')
        >>> classify_import("src/entities", "src")
        Coordinate(layer='entities', slice=None)
        >>> classify_import("./local", "src") is None
        True
    """
    if not isinstance(specifier, str) or not specifier:
        return None
    if is_relative_specifier(specifier):
        return None

    segs = specifier.split("/")
    root = [part for part in src_root.replace("\\", "/").split("/") if part]
    if root and segs[: len(root)] == root:
        segs = segs[len(root) :]

    layer = segs[0] if segs else ""
    if not layer:
        return None
    slice_name = segs[1] if len(segs) > 1 and segs[1] else None
    return Coordinate(layer, slice_name)
