"""
ConfigurationError - Raised at startup when settings are missing or invalid.
Fatal: the process should not start.
"""


class ConfigurationError(Exception):
    def __init__(self, problems: list[str]):
        super().__init__("Invalid configuration: " + "; ".join(problems))
        self.problems = problems
