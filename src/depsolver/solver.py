from __future__ import annotations

import collections
from typing import (
    TYPE_CHECKING,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Union,
)

from .reporters import BaseReporter
from .structs import (
    Package,
    PkgName,
    Repository,
    RequirementInformation,
    build_graph,
)

if TYPE_CHECKING:
    from .constraints import Constraint
    from .versions import Version

DEFAULT_MAX_ROUNDS = 100000


class SolverException(Exception):
    """A base class for all exceptions raised by this module.

    Failing to find a solution is not an exception; it is reported through
    the `Unsatisfiable` return value.
    """


class ResolutionTooDeep(SolverException):
    def __init__(self, round_count: int) -> None:
        super(ResolutionTooDeep, self).__init__(round_count)
        self.round_count = round_count


class Unsatisfiable(object):
    """No version assignment satisfies the given constraints.

    This is a regular return value, and is always falsy. ``causes`` holds
    the `RequirementInformation` records involved in the most recent
    conflict the search ran into, which is usually the best explanation
    to show to a user.
    """

    __slots__ = ("causes",)

    def __init__(self, causes: List[RequirementInformation]) -> None:
        self.causes = causes

    def __repr__(self) -> str:
        return f"Unsatisfiable({self.causes!r})"

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unsatisfiable):
            return NotImplemented
        return self.causes == other.causes

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Unsatisfiable):
            return NotImplemented
        return self.causes != other.causes

    __hash__ = None  # type: ignore[assignment]


# Search state after a pin. ``pending`` holds the accumulated constraint of
# every discovered but unbound name, ``solutions`` the bound versions, and
# ``information`` every requirement contributed for each name so far.
State = collections.namedtuple("State", ["pending", "solutions", "information"])

Result = collections.namedtuple("Result", ["mapping", "packages", "graph"])


class _Frame(object):
    """One choice point: a selected name and the candidates left to try."""

    __slots__ = ("name", "candidates", "state", "pinned")

    def __init__(
        self, name: PkgName, candidates: Iterator[Package], state: State
    ) -> None:
        self.name = name
        self.candidates = candidates
        self.state = state
        self.pinned: Optional[Package] = None


class Search(object):
    """Stateful search object.

    This is designed as a one-off object that runs a single search and
    holds on to its stack of choice points. Each choice point keeps its
    own copy of the search state, so discarding a frame discards every
    speculative change made below it.
    """

    def __init__(
        self,
        repository: Repository,
        reporter: BaseReporter,
        platform_version: Optional[Version] = None,
    ) -> None:
        self._repo = repository
        self._r = reporter
        self._platform = platform_version
        self._stack: List[_Frame] = []
        self._started = False
        self.causes: List[RequirementInformation] = []

    @property
    def packages(self) -> Dict[PkgName, Package]:
        """The package pinned at every open choice point."""
        return {f.name: f.pinned for f in self._stack if f.pinned is not None}

    def _find_candidates(self, name: PkgName, constraint: Constraint) -> List[Package]:
        candidates = [
            package
            for package in self._repo.lookup(name)
            if package.version in constraint and package.supports(self._platform)
        ]
        # Newest first: the first working candidate is the returned one.
        # Releases differing only in build metadata are ordered by their text.
        candidates.sort(key=lambda p: (p.version, str(p.version)), reverse=True)
        return candidates

    def _push_frame(self, state: State) -> None:
        # Deterministic selection: the lexicographically smallest name.
        name = min(state.pending)
        assert name not in state.solutions, f"{name!r} is pending and bound"
        rest = dict(state.pending)
        constraint = rest.pop(name)
        candidates = self._find_candidates(name, constraint)
        if not candidates:
            self.causes = list(state.information.get(name, ()))
        frame_state = State(rest, state.solutions, state.information)
        self._stack.append(_Frame(name, iter(candidates), frame_state))

    def _reject(self, package: Package, causes: List[RequirementInformation]) -> None:
        self.causes = causes
        self._r.rejecting_candidate(package, causes)

    def _get_updated_state(
        self, name: PkgName, package: Package, base: State
    ) -> Optional[State]:
        """Bind ``package`` for ``name`` and merge its dependencies.

        Returns ``None`` if a dependency cannot be reconciled with the
        constraints collected so far.
        """
        solutions = dict(base.solutions)
        solutions[name] = package.version
        pending = dict(base.pending)
        information = dict(base.information)

        for dep_name, constraint in package.dependencies.items():
            info = RequirementInformation(dep_name, constraint, package)
            known = information.get(dep_name, ())
            if dep_name in solutions:
                # Already bound in this branch: the bound version must
                # satisfy the new constraint as well.
                if solutions[dep_name] not in constraint:
                    self._reject(package, list(known) + [info])
                    return None
            elif dep_name in pending:
                merged = pending[dep_name].intersect(constraint)
                if merged is None:
                    self._reject(package, list(known) + [info])
                    return None
                pending[dep_name] = merged
            else:
                pending[dep_name] = constraint
            information[dep_name] = known + (info,)

        assert pending.keys().isdisjoint(solutions), "pending and solutions overlap"
        return State(pending, solutions, information)

    def _advance(self) -> Optional[State]:
        """Pin the next workable candidate, backtracking as needed.

        Returns ``None`` once every choice point is exhausted.
        """
        while self._stack:
            frame = self._stack[-1]
            for package in frame.candidates:
                state = self._get_updated_state(frame.name, package, frame.state)
                if state is None:
                    continue
                frame.pinned = package
                self._r.pinning(frame.name, package)
                return state
            self._stack.pop()
            self._r.backtracking(frame.name)
        return None

    def run(
        self, root_deps: Mapping[PkgName, Constraint], max_rounds: int
    ) -> Optional[State]:
        if self._started:
            raise RuntimeError("already searched")
        self._started = True

        information = {
            name: (RequirementInformation(name, constraint, None),)
            for name, constraint in root_deps.items()
        }
        state: Optional[State] = State(dict(root_deps), {}, information)
        if not state.pending:
            return state

        self._push_frame(state)
        for round_index in range(max_rounds):
            self._r.starting_round(round_index)
            state = self._advance()
            if state is None:
                return None
            if not state.pending:
                return state
            self._push_frame(state)

        raise ResolutionTooDeep(max_rounds)


class Solver(object):
    """The thing that performs the actual solving work.

    :param repository: Every known package release.
    :param reporter: Receives progress callbacks; see `BaseReporter`.
    :param platform_version: If given, releases whose ``platform``
        constraint excludes this version are never considered.
    """

    def __init__(
        self,
        repository: Repository,
        reporter: Optional[BaseReporter] = None,
        platform_version: Optional[Version] = None,
    ) -> None:
        self.repository = repository
        self.reporter = reporter if reporter is not None else BaseReporter()
        self.platform_version = platform_version

    def solve(
        self,
        root_deps: Mapping[PkgName, Constraint],
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ) -> Union[Result, Unsatisfiable]:
        """Take the root constraints, spit out a version assignment.

        On success the return value is a tuple subclass with three members:

        * `mapping`: A dict of resolved versions, keyed by package name. It
            covers every name reachable from ``root_deps``.
        * `packages`: A dict of the chosen `Package` records, keyed the
            same way.
        * `graph`: A `DependencyGraph` of why each package is included. A
            special vertex `None` is the parent of the root constraints.

        If no assignment exists, an `Unsatisfiable` value is returned.

        `ResolutionTooDeep` is raised if more than ``max_rounds`` candidates
        get pinned. This happens with very large search spaces, or with a
        repository that keeps introducing new package names.
        """
        self.reporter.starting(root_deps)
        search = Search(self.repository, self.reporter, self.platform_version)
        state = search.run(root_deps, max_rounds=max_rounds)
        if state is None:
            unsatisfiable = Unsatisfiable(search.causes)
            self.reporter.ending_unsatisfiable(unsatisfiable)
            return unsatisfiable

        packages = search.packages
        assert {n: p.version for n, p in packages.items()} == state.solutions
        result = Result(
            mapping=dict(state.solutions),
            packages=packages,
            graph=build_graph(packages, root_deps),
        )
        self.reporter.ending(result)
        return result


def solve(
    root_deps: Mapping[PkgName, Constraint],
    repository: Repository,
    platform_version: Optional[Version] = None,
) -> Union[Dict[PkgName, Version], Unsatisfiable]:
    """Resolve ``root_deps`` against ``repository``.

    Returns a dict of package names to versions, or an `Unsatisfiable`
    value if the constraints cannot all be met.
    """
    solver = Solver(repository, platform_version=platform_version)
    result = solver.solve(root_deps)
    if isinstance(result, Unsatisfiable):
        return result
    return result.mapping
