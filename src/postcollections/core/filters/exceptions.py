"""Errors raised while parsing or evaluating filter expressions."""


class FilterError(ValueError):
    """Base class for filter errors."""


class FilterSyntaxError(FilterError):
    """The expression does not follow the filter grammar.

    ``position`` is the zero-based offset of the offending character or
    token, when known.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.reason = message
        self.position = position
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)


class FilterEvaluationError(FilterError):
    """A parsed expression holds something the evaluator cannot apply."""
