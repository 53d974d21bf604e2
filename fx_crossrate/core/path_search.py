"""Depth-first enumeration of conversion paths between two currencies."""

from __future__ import annotations

from typing import Container, Iterable, MutableMapping, Sequence

from fx_crossrate.core.models import ConversionPath, CurrencyPair

LinkIndex = dict[str, list[CurrencyPair]]


def index_links(links: Iterable[CurrencyPair]) -> LinkIndex:
    """Group ``links`` by base currency, keeping their original order."""

    index: LinkIndex = {}
    for link in links:
        index.setdefault(link.base, []).append(link)
    return index


def find_paths(
    target: CurrencyPair,
    rated: Container[CurrencyPair],
    links: Iterable[CurrencyPair],
) -> list[ConversionPath]:
    """Return every simple path from ``target.base`` to ``target.quote``.

    ``rated`` holds the pairs whose rate is already known; reaching one of them
    ends a branch. ``links`` are the pairs that may be used as a first hop out
    of a currency, which includes pairs that only have candidate paths so far.
    Paths are returned in discovery order, which follows the order of
    ``links``.
    """

    return _search(target, rated, index_links(links), (target,))


def _search(
    node: CurrencyPair,
    rated: Container[CurrencyPair],
    index: LinkIndex,
    trail: tuple[CurrencyPair, ...],
) -> list[ConversionPath]:
    if node in rated:
        return [ConversionPath.single(node)]

    results: list[ConversionPath] = []
    for link in index.get(node.base, ()):
        if link.quote == node.quote:
            # ``link`` is ``node`` itself, known only through candidates.
            continue
        remainder = CurrencyPair(link.quote, node.quote)
        if remainder in trail:
            continue
        for path in _search(remainder, rated, index, trail + (remainder,)):
            if path.resolves(remainder):
                results.append(path.prepend(link))
    return results


def merge_paths(
    candidates: MutableMapping[CurrencyPair, dict[ConversionPath, None]],
    pair: CurrencyPair,
    found: Sequence[ConversionPath],
) -> int:
    """Record the paths in ``found`` that ``pair`` does not have yet.

    Returns the number of paths added so callers can detect a fixpoint.
    """

    if not found:
        return 0
    known = candidates.setdefault(pair, {})
    added = 0
    for path in found:
        if path not in known:
            known[path] = None
            added += 1
    return added


__all__ = ["LinkIndex", "find_paths", "index_links", "merge_paths"]
