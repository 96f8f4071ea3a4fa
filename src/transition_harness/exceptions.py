"""Exception types for the transition harness."""


class HarnessError(Exception):
    """Base exception for transition harness errors."""

    pass


class ConfigurationError(HarnessError):
    """Raised when the component under test cannot be analysed as configured."""

    pass


class ContainerNotFoundError(ConfigurationError):
    """Raised when no element carries the transition container test id."""

    def __init__(self, test_id: str) -> None:
        super().__init__(f"Unable to find transition container with test id '{test_id}'")
        self.test_id = test_id


class NoTransitioningElementsError(ConfigurationError):
    """Raised when a transition was expected but no element is transitioning."""

    def __init__(self, duration_marker: str) -> None:
        super().__init__(
            "No transitioning elements found: no element in the container carries a "
            f"'{duration_marker}' class with a non-zero transition duration"
        )
        self.duration_marker = duration_marker


class TriggerMismatchError(ConfigurationError):
    """Raised when observed transitions and supplied triggers disagree in number."""

    def __init__(self, expected: int, observed: int) -> None:
        super().__init__(
            f"Expected {expected} transition(s) from the supplied triggers "
            f"but observed {observed}"
        )
        self.expected = expected
        self.observed = observed


class TransitionTimingError(HarnessError, AssertionError):
    """Raised when a transition took less (or far more) time than expected."""

    def __init__(
        self, transition_index: int, expected_duration: float, actual_duration: float
    ) -> None:
        super().__init__(
            f"Transition #{transition_index} failed to take at least "
            f"{expected_duration:g}ms"
        )
        self.transition_index = transition_index
        self.expected_duration = expected_duration
        self.actual_duration = actual_duration
