from __future__ import annotations

from collections import namedtuple
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from .constraints import Constraint
from .versions import Version

PkgName = str

if TYPE_CHECKING:

    class RequirementInformation(NamedTuple):
        name: PkgName
        constraint: Constraint
        parent: Optional[Package]

else:
    RequirementInformation = namedtuple(
        "RequirementInformation", ["name", "constraint", "parent"]
    )


class Package(namedtuple("Package", ["name", "version", "dependencies", "platform"])):
    """A published version of a package and the constraints it imposes.

    ``platform`` optionally restricts which platform (compiler, runtime)
    versions this release supports.
    """

    __slots__ = ()

    def __new__(
        cls,
        name: PkgName,
        version: Version,
        dependencies: Optional[Mapping[PkgName, Constraint]] = None,
        platform: Optional[Constraint] = None,
    ) -> Package:
        frozen = MappingProxyType(dict(dependencies or {}))
        return super(Package, cls).__new__(cls, name, version, frozen, platform)

    def __repr__(self) -> str:
        return f"<{self.name}=={self.version}>"

    def __hash__(self) -> int:
        return hash((self.name, self.version))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return (
            self.name == other.name
            and self.version == other.version
            and dict(self.dependencies) == dict(other.dependencies)
            and self.platform == other.platform
        )

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def supports(self, platform_version: Optional[Version]) -> bool:
        if platform_version is None or self.platform is None:
            return True
        return self.platform.contains(platform_version)


class Repository(object):
    """Read-only lookup of every known package release, grouped by name."""

    def __init__(self, packages_by_name: Mapping[PkgName, Sequence[Package]]) -> None:
        self._packages: Dict[PkgName, Tuple[Package, ...]] = {
            name: tuple(packages) for name, packages in packages_by_name.items()
        }

    @classmethod
    def from_packages(cls, *packages: Package) -> Repository:
        grouped: Dict[PkgName, List[Package]] = {}
        for package in packages:
            grouped.setdefault(package.name, []).append(package)
        return cls(grouped)

    def __repr__(self) -> str:
        return f"Repository({sorted(self._packages)!r})"

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[PkgName]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def lookup(self, name: PkgName) -> List[Package]:
        """Return every release of ``name``; an unknown name has none."""
        return list(self._packages.get(name, ()))


def _reachable(start: PkgName, edges: Mapping[PkgName, Set[PkgName]]) -> Set[PkgName]:
    seen: Set[PkgName] = set()
    stack = [start]
    while stack:
        for child in edges[stack.pop()]:
            if child not in seen:
                seen.add(child)
                stack.append(child)
    return seen


class DependencyGraph(object):
    """Dependency edges between resolved package names.

    The vertex ``None`` stands for the root requirements; an edge
    ``(parent, child)`` means ``parent`` depends on ``child``.
    """

    def __init__(self) -> None:
        self._vertices: Set[Optional[PkgName]] = set()
        self._forwards: Dict[Optional[PkgName], Set[PkgName]] = {}
        self._backwards: Dict[PkgName, Set[Optional[PkgName]]] = {}

    def __iter__(self) -> Iterator[Optional[PkgName]]:
        return iter(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, key: object) -> bool:
        return key in self._vertices

    def add(self, key: Optional[PkgName]) -> None:
        if key in self._vertices:
            raise ValueError("vertex exists")
        self._vertices.add(key)
        self._forwards[key] = set()
        if key is not None:
            self._backwards[key] = set()

    def connect(self, parent: Optional[PkgName], child: PkgName) -> None:
        """Record that ``parent`` depends on ``child``.

        Both vertices must exist. Connecting twice is harmless.
        """
        if parent not in self._vertices:
            raise KeyError(parent)
        if child not in self._vertices:
            raise KeyError(child)
        self._forwards[parent].add(child)
        self._backwards[child].add(parent)

    def iter_edges(self) -> Iterator[Tuple[Optional[PkgName], PkgName]]:
        for parent, children in self._forwards.items():
            for child in children:
                yield parent, child

    def iter_children(self, key: Optional[PkgName]) -> Iterator[PkgName]:
        return iter(self._forwards[key])

    def iter_parents(self, key: PkgName) -> Iterator[Optional[PkgName]]:
        return iter(self._backwards[key])

    def topological_order(self) -> List[PkgName]:
        """Names ordered so that every package follows its dependencies.

        Ties are broken by name, so the order is stable across runs.
        Members of a dependency cycle are emitted together, in name order,
        once nothing outside the cycle blocks them.
        """
        names = sorted(k for k in self._vertices if k is not None)
        remaining = {name: set(self._forwards[name]) for name in names}
        order: List[PkgName] = []
        while remaining:
            ready = [n for n in names if n in remaining and not remaining[n]]
            if not ready:
                reach = {name: _reachable(name, remaining) for name in remaining}
                ready = sorted(
                    name
                    for name in remaining
                    if all(name in reach[other] for other in reach[name])
                )
            for name in ready:
                del remaining[name]
                order.append(name)
            for deps in remaining.values():
                deps.difference_update(ready)
        return order


def build_graph(
    packages: Mapping[PkgName, Package], root_names: Iterable[PkgName]
) -> DependencyGraph:
    """Build the dependency graph between resolved ``packages``."""
    graph = DependencyGraph()
    graph.add(None)
    for name in packages:
        graph.add(name)
    for name in root_names:
        graph.connect(None, name)
    for name, package in packages.items():
        for child in package.dependencies:
            graph.connect(name, child)
    return graph
