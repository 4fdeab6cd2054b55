"""Ordered selection of locations used as route waypoints."""

from __future__ import annotations

from typing import Iterable, Iterator

from ..models.domain import GeoPoint, Location


class SelectionSet:
    """Immutable ordered set of locations, unique by ``id``.

    Selection order is waypoint order. ``toggle`` returns a new set and leaves
    the original untouched.
    """

    __slots__ = ("_locations",)

    def __init__(self, locations: Iterable[Location] = ()) -> None:
        unique: dict[int, Location] = {}
        for location in locations:
            unique.setdefault(location.id, location)
        self._locations: tuple[Location, ...] = tuple(unique.values())

    def toggle(self, location: Location) -> "SelectionSet":
        if location.id in self:
            return SelectionSet(item for item in self._locations if item.id != location.id)
        return SelectionSet((*self._locations, location))

    @property
    def locations(self) -> tuple[Location, ...]:
        return self._locations

    @property
    def ids(self) -> tuple[int, ...]:
        return tuple(location.id for location in self._locations)

    def waypoints(self) -> list[GeoPoint]:
        return [GeoPoint(lat=location.lat, lng=location.lng) for location in self._locations]

    def __contains__(self, item: object) -> bool:
        target = item.id if isinstance(item, Location) else item
        return any(location.id == target for location in self._locations)

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def __getitem__(self, index: int) -> Location:
        return self._locations[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return self._locations == other._locations

    def __hash__(self) -> int:
        return hash(self._locations)

    def __repr__(self) -> str:
        return f"SelectionSet({[location.name for location in self._locations]!r})"
