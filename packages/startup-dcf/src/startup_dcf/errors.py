"""
Engine error types.

Every configuration problem the engine detects (bad scenario name, inconsistent
terminal-value inputs, non-finite assumptions) is reported as ``InputError`` so
callers only need a single ``except`` clause.  Non-convergence of the IRR solver
is *not* an error; it is returned as data.
"""


class InputError(ValueError):
    pass


class UnknownScenarioError(InputError):
    def __init__(self, name: str, valid_names):
        self.name = name
        self.valid_names = list(valid_names)
        super().__init__(f"Unknown scenario: {name}. Valid scenarios: {', '.join(self.valid_names)}")
