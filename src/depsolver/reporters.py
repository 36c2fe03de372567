class BaseReporter(object):
    """Delegate class to provide progress reporting for the solver."""

    def starting(self, root_deps):
        """Called before the search starts, with the root constraints."""

    def starting_round(self, index):
        """Called before each candidate pin is attempted.

        The index is zero-based.
        """

    def pinning(self, name, package):
        """Called when a package is bound as the version of ``name``."""

    def rejecting_candidate(self, package, causes):
        """Called when a candidate's dependencies conflict with the search.

        ``causes`` is a list of `RequirementInformation` naming the
        constraints that could not be reconciled.
        """

    def backtracking(self, name):
        """Called when every candidate for ``name`` has failed.

        The search returns to the previous choice.
        """

    def ending(self, result):
        """Called before the search ends successfully."""

    def ending_unsatisfiable(self, unsatisfiable):
        """Called before the search ends without a solution."""
