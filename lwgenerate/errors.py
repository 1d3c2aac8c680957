"""
Error types surfaced by the generators.

Generation is all-or-nothing: a generator either returns the complete
document or raises one of these.
"""


class InvalidInputsError(ValueError):
    """Raised when the supplied arguments describe an invalid combination."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid inputs: {reason}")


class GenerationFailedError(RuntimeError):
    """
    Raised when a block cannot be built from otherwise valid arguments.

    This indicates a defect in a generator (e.g. an attribute value of an
    unsupported type) rather than a problem with user input. The lower-level
    exception is chained as ``__cause__``.
    """

    def __init__(self, cloud: str, cause: Exception) -> None:
        self.cloud = cloud
        super().__init__(f"failed to generate {cloud} terraform: {cause}")
