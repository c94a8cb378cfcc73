"""Domain errors raised by the tracking core.

None of these are fatal: the API turns them into 4xx responses and the
tracker state is left untouched.
"""


class FlareError(ValueError):
    """Base class for tracker domain errors."""


class NoOpenPeriodError(FlareError):
    """A period end was toggled but no open period starts on or before that date."""

    def __init__(self, day) -> None:
        super().__init__(f"No open period starts on or before {day}")
        self.day = day


class UnknownSymptomError(FlareError):
    """A day entry names a symptom that is not in the configured catalog."""

    def __init__(self, category: str, names: list[str]) -> None:
        super().__init__(f"Unknown {category} symptom(s): {', '.join(sorted(names))}")
        self.category = category
        self.names = names


class ImportFormatError(FlareError):
    """An import document does not match the export format."""
