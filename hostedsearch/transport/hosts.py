"""Fixed, shuffled set of interchangeable API hosts."""
from __future__ import annotations

import random
from typing import Iterable, Iterator, Optional, Tuple


class HostPool:
    """Immutable ordering of candidate hosts for one client.

    The configured hosts are shuffled once at construction so that separate
    clients do not all start with the same host. Every host is kept exactly
    once.
    """

    __slots__ = ("_hosts",)

    def __init__(self, hosts: Iterable[str], *, rng: Optional[random.Random] = None) -> None:
        ordered = [str(h) for h in hosts]
        (rng or random.Random()).shuffle(ordered)
        self._hosts: Tuple[str, ...] = tuple(ordered)

    @property
    def hosts(self) -> Tuple[str, ...]:
        return self._hosts

    def __len__(self) -> int:
        return len(self._hosts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._hosts)

    def __getitem__(self, position: int) -> str:
        return self._hosts[position]

    def __repr__(self) -> str:
        return f"HostPool({list(self._hosts)!r})"


__all__ = ["HostPool"]
