class TrackerError(Exception):
    """Base class for every error raised by the tracker."""


class ConfigError(TrackerError):
    pass


class QuoteFetchError(TrackerError):
    pass


class StorageError(TrackerError):
    pass


class NotifierError(TrackerError):
    pass


class NotifierConfigError(NotifierError):
    pass


class DeliveryError(NotifierError):
    pass
