""" Error kinds raised by the dispatch simulator. """


class DispatchError(Exception):
    """Base class for every error the simulator raises."""


class InvalidLocationIndex(DispatchError, ValueError):
    """A report referenced a location outside the road network."""

    def __init__(self, location: int, location_count: int) -> None:
        super().__init__(
            f"Location {location} is out of range (0..{location_count - 1})"
        )
        self.location = location
        self.location_count = location_count


class QueueFull(DispatchError):
    """The pending queue is at capacity."""


class ActiveSetFull(DispatchError):
    """The active emergency roster is at capacity."""


class NoHospitalAvailable(DispatchError):
    """A bed was requested from a hospital that has none free."""


class EmptyQueueDequeue(DispatchError, IndexError):
    """dequeue() was called on an empty pending queue."""


class ConfigurationError(DispatchError, ValueError):
    """Startup configuration is malformed (bad road, hospital or ambulance)."""
