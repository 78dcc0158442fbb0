# utils/progress.py
"""tqdm wrapper shared by the reconstruction rounds."""

from __future__ import annotations

from typing import Iterable, Iterator, TypeVar

from tqdm.auto import tqdm

T = TypeVar("T")

BAR_FORMAT = "{l_bar}{bar}| {n_fmt}/{total_fmt} {unit} [{elapsed}<{remaining}]"


def track(
    iterable: Iterable[T],
    *,
    description: str | None = None,
    total: int | None = None,
    unit: str = "it",
    disable: bool = False,
) -> Iterator[T]:
    """Yield from ``iterable`` behind a transient progress bar."""
    if total is None and hasattr(iterable, "__len__"):
        total = len(iterable)  # type: ignore[arg-type]
    yield from tqdm(
        iterable,
        desc=description,
        total=total,
        unit=unit,
        leave=False,
        disable=disable,
        bar_format=BAR_FORMAT,
    )


__all__ = ["BAR_FORMAT", "track"]
