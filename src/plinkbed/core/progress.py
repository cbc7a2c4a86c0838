"""Progress display for long decoding and export loops."""

import sys
from collections.abc import Iterable, Iterator

import progressbar


def progress_iterator(
    iterable: Iterable, total: int, desc: str = "", enabled: bool = True
) -> Iterator:
    """Yield from ``iterable`` while drawing a progressbar2 bar on stdout.

    With ``enabled=False`` items pass straight through, so callers can
    forward a ``show_progress`` flag without branching.

    Args:
        iterable: Items to yield.
        total: Expected number of items (sets the bar's maximum).
        desc: Label shown before the counter.
        enabled: Draw the bar.

    Yields:
        Items from ``iterable``.
    """
    if not enabled:
        yield from iterable
        return

    label = f"{desc}: " if desc else ""
    bar = progressbar.ProgressBar(
        max_value=total,
        widgets=[
            label,
            progressbar.SimpleProgress(),
            " ",
            progressbar.Bar(),
            " ",
            progressbar.AdaptiveETA(),
        ],
        fd=sys.stdout,
    )
    bar.start()
    # Finish the bar even when the consumer stops early
    try:
        for done, item in enumerate(iterable, start=1):
            yield item
            bar.update(done)
    finally:
        bar.finish()
