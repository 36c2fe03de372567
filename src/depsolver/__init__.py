__all__ = [
    "BaseReporter",
    "Constraint",
    "DependencyGraph",
    "Package",
    "ParseError",
    "Repository",
    "RequirementInformation",
    "ResolutionTooDeep",
    "Result",
    "Solver",
    "SolverException",
    "Unsatisfiable",
    "Version",
    "__version__",
    "solve",
]

__version__ = "0.1.0.dev0"


from .constraints import Constraint
from .reporters import BaseReporter
from .solver import (
    ResolutionTooDeep,
    Result,
    Solver,
    SolverException,
    Unsatisfiable,
    solve,
)
from .structs import DependencyGraph, Package, Repository, RequirementInformation
from .versions import ParseError, Version
