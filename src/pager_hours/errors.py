from __future__ import annotations


class PagerHoursError(Exception):
    """Base class for every failure a report run can raise."""


class ConfigurationError(PagerHoursError, ValueError):
    """Operator-fixable setup problem; the run cannot continue."""


class UnsupportedRegionError(ConfigurationError):
    pass


class UnmappedTimezoneError(ConfigurationError):
    pass


class MissingCredentialsError(ConfigurationError):
    pass


class CalendarDataGapError(PagerHoursError, LookupError):
    """The holiday tables do not cover the requested date."""


class CollaboratorError(PagerHoursError):
    """A remote service (PagerDuty, Google Drive) failed or answered unexpectedly."""


class PagerDutyError(CollaboratorError):
    pass


class DriveError(CollaboratorError):
    pass


class AmbiguousDirectoryError(DriveError):
    pass


class InputOrderError(PagerHoursError, AssertionError):
    """Hour events went back to a calendar day that was already flushed."""
