import pytest

from depsolver import BaseReporter, Constraint, Package, Repository, Version


class TestReporter(BaseReporter):
    def __init__(self):
        self._indent = 0
        self.pinned = []
        self.rejected = []
        self.backtracked = []

    def rejecting_candidate(self, package, causes):
        self.rejected.append(package)
        print(" " * self._indent, "Reject ", package, sep="")

    def pinning(self, name, package):
        print(" " * self._indent, "Pin  ", package, sep="")
        self.pinned.append(package)
        self._indent += 1

    def backtracking(self, name):
        self._indent = max(self._indent - 1, 0)
        self.backtracked.append(name)
        print(" " * self._indent, "Back ", name, sep="")


def read_index(text):
    """Build a repository from an indented text index.

    Each unindented line is ``<name> <version>``; the indented lines below
    it are ``<dependency> <constraint>``, or ``@platform <constraint>``.
    """
    releases = []
    latest = None
    for line in text.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        if not line.startswith(" "):
            name, version = line.split(None, 1)
            latest = {"name": name, "version": Version.parse(version)}
            latest["dependencies"] = {}
            releases.append(latest)
            continue
        if latest is None:
            raise RuntimeError("Index has dependencies before first package")
        name, constraint = line.strip().split(None, 1)
        if name == "@platform":
            latest["platform"] = Constraint.parse(constraint)
        else:
            latest["dependencies"][name] = Constraint.parse(constraint)
    return Repository.from_packages(*(Package(**r) for r in releases))


@pytest.fixture(scope="session")
def reporter_cls():
    return TestReporter


@pytest.fixture()
def reporter(reporter_cls):
    return reporter_cls()


@pytest.fixture(scope="session")
def index():
    return read_index
