# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Header mutations produced by policies and the header set they fold into."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class SetHeader:
    """Set ``name`` to ``value``, replacing any earlier value."""

    name: str
    value: str


@dataclass(frozen=True)
class RemoveHeader:
    """Delete ``name`` from the header set."""

    name: str


HeaderMutation = SetHeader | RemoveHeader


class ResolvedHeaderSet(Mapping[str, str]):
    """Immutable, ordered, case-insensitive mapping of header name to value.

    Iteration yields header names in the spelling and order in which they
    were first set. Lookups and membership ignore case.
    """

    __slots__ = ("_entries",)

    def __init__(self, headers: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        items = headers.items() if isinstance(headers, Mapping) else headers
        entries: dict[str, tuple[str, str]] = {}
        for name, value in items:
            key = name.lower()
            if key in entries:
                name = entries[key][0]
            entries[key] = (name, str(value))
        self._entries = entries

    def __getitem__(self, name: str) -> str:
        return self._entries[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ResolvedHeaderSet({dict(self.items())!r})"

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Return ASGI-style ``(name, value)`` byte pairs with lower-cased names."""
        return [(key.encode("latin-1"), value.encode("latin-1")) for key, (_, value) in self._entries.items()]
