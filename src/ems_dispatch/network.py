"""
Road network and shortest-path routing.

The network is a small undirected weighted graph over a fixed set of named
locations. It is built once from configuration and frozen; the routing engine
caches shortest paths per source location on first use.
"""

import math
import numbers
from typing import Dict, List, NamedTuple, Sequence, Tuple

import networkx as nx

from ems_dispatch.exceptions import ConfigurationError

# Distance reported for location pairs with no connecting road.
UNREACHABLE = math.inf


def is_index(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


class Location(NamedTuple):
    """ A named point on the map. Coordinates are for display only. """
    name: str
    x: int = 0
    y: int = 0


class RoadNetwork:
    """
    Immutable weighted graph of locations joined by two-way roads.

    Locations are addressed by their index in the list given at setup.
    """

    def __init__(self,
                 locations: Sequence[Location],
                 roads: Sequence[Tuple[int, int, int]]) -> None:
        if not locations:
            raise ConfigurationError("Road network needs at least one location")

        self.locations: Tuple[Location, ...] = tuple(
            Location(loc) if isinstance(loc, str) else Location(*loc) for loc in locations
        )

        graph = nx.Graph()
        for idx, loc in enumerate(self.locations):
            graph.add_node(idx, name=loc.name, pos=(loc.x, loc.y))

        for road in roads:
            src, dst, distance = road
            for end in (src, dst):
                if not self.is_valid(end):
                    raise ConfigurationError(f"Road {road} references unknown location {end}")
            if not is_index(distance) or distance <= 0:
                raise ConfigurationError(f"Road {road} must have a positive integer distance")
            # Parallel roads collapse to the shortest one
            if graph.has_edge(src, dst) and graph[src][dst]["distance"] <= distance:
                continue
            graph.add_edge(src, dst, distance=distance)

        self.graph = nx.freeze(graph)

    def __len__(self) -> int:
        return len(self.locations)

    def is_valid(self, location) -> bool:
        return is_index(location) and 0 <= location < len(self.locations)

    def name(self, location: int) -> str:
        return self.locations[location].name

    def neighbours(self, location: int) -> List[Tuple[int, int]]:
        """ (neighbour, distance) pairs for the roads leaving `location`. """
        return [(dst, data["distance"]) for dst, data in self.graph[location].items()]

    def roads(self) -> List[Tuple[int, int, int]]:
        return [(u, v, data["distance"]) for u, v, data in self.graph.edges(data=True)]


class RoutingEngine:
    """ Dijkstra shortest-distance queries over a RoadNetwork. """

    def __init__(self, network: RoadNetwork) -> None:
        self.network = network
        # source -> target -> {'travel_time': int, 'path': [locations]}
        self.path_cache: Dict[int, Dict[int, Dict]] = {}

    def _routes_from(self, source: int) -> Dict[int, Dict]:
        if source not in self.path_cache:
            lengths, paths = nx.single_source_dijkstra(
                self.network.graph, source, weight="distance"
            )
            self.path_cache[source] = {
                target: {"travel_time": lengths[target], "path": paths[target]}
                for target in lengths
            }
        return self.path_cache[source]

    def shortest_distance(self, source: int, target: int):
        """
        Length of the shortest route between two locations.

        Returns UNREACHABLE when the locations are not connected; callers
        must treat that as ineligible rather than as a distance.
        """
        entry = self._routes_from(source).get(target)
        if entry is None:
            return UNREACHABLE
        return entry["travel_time"]

    def shortest_path(self, source: int, target: int) -> List[int]:
        """ Locations visited along the shortest route, or [] if unreachable. """
        entry = self._routes_from(source).get(target)
        if entry is None:
            return []
        return list(entry["path"])
