"""Error types for the decision core.

Only one error is ever raised by the algorithms themselves:

- INVALID_INPUT: required numeric inputs are missing or malformed

Every other degenerate numeric case (empty traces, zero baselines, missing
optional fields) is resolved by fallback values so a coaching UI can always
render something.
"""


class InvalidInputError(ValueError):
    """Raised when a computation is called without its required inputs.

    Always caller-recoverable: build valid inputs and call again.

    Attributes:
        code: Error code (e.g., "MISSING_REP_PEAKS", "INVALID_READINESS_INPUTS")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {'; '.join(details)}")
