"""Exception hierarchy for departure-time optimization.

Three families are kept apart so callers can react to each differently:

- ``InputValidationError``: the request itself is unusable; raised before any
  provider call is made.
- ``EstimatorError``: one provider query failed. The optimizer skips the
  affected sample and carries on.
- ``OptimizationExhaustedError``: the search finished without a single viable
  departure option.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from commute_optimizer.domain.models.error_details import ErrorDetails


class CommuteOptimizerError(Exception):
    """Base class for all errors raised by this package."""


class InputValidationError(CommuteOptimizerError):
    """The optimization request failed validation."""


class MissingAddressError(InputValidationError):
    """Origin or destination address is blank."""


class InvalidTimeFormatError(InputValidationError):
    """A time-of-day string could not be parsed."""

    def __init__(self, field_name: str, value: object) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Invalid {field_name} time {value!r}: expected HH:MM with hours 0-23 and minutes 0-59"
        )


class ArrivalNotAfterDepartureError(InputValidationError):
    """Latest arrival does not come after earliest departure."""


class DepartureInPastError(InputValidationError):
    """Earliest departure lies too far in the past."""


class WindowTooShortError(InputValidationError):
    """The remaining window until the latest arrival is too short to search."""


class EstimatorError(CommuteOptimizerError):
    """A single travel-time or geocoding query failed."""

    def __init__(self, message: str, details: "ErrorDetails | None" = None) -> None:
        super().__init__(message)
        self.details = details


class InvalidAddressError(EstimatorError):
    """An address is missing or was rejected by the provider."""


class AddressNotFoundError(EstimatorError):
    """The geocoding provider returned no results for an address."""


class ProviderConfigurationError(EstimatorError):
    """Credentials are missing or were rejected by the provider."""


class NoRouteFoundError(EstimatorError):
    """The provider found no route between origin and destination."""


class MalformedResponseError(EstimatorError):
    """The provider response lacks required fields or is not valid JSON."""


class TransportError(EstimatorError):
    """Network failure, timeout or unexpected HTTP status."""


class OptimizationExhaustedError(CommuteOptimizerError):
    """No viable departure option was found."""


class AllSamplesFailedError(OptimizationExhaustedError):
    """Every sampled departure ended in an estimator error."""

    def __init__(self, error_count: int, last_error: Exception | None) -> None:
        self.error_count = error_count
        self.last_error = last_error
        if last_error is not None:
            message = (
                f"Could not calculate valid departure times due to {error_count} API errors. "
                f"Last error: {last_error}"
            )
        else:
            message = (
                f"Could not calculate valid departure times due to {error_count} API errors. "
                "Please check your addresses and try again."
            )
        super().__init__(message)


class NoViableOptionsError(OptimizationExhaustedError):
    """Estimates were obtained but none arrives before the deadline."""

    def __init__(self, samples: int) -> None:
        self.samples = samples
        super().__init__(
            f"No viable departure options: all {samples} sampled departures would arrive "
            "after the latest arrival time (deadline exceeded)."
        )
