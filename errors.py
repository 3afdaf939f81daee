"""
CareSync: Error Taxonomy
"""


class CareSyncError(Exception):
    """Base class for every error raised by CareSync services"""


class RecordValidationError(CareSyncError):
    """A record did not match its entity model at the storage boundary"""


class RecordNotFoundError(CareSyncError):
    pass


class StorageError(CareSyncError):
    """Local storage medium unavailable, full or corrupt"""


class SyncError(CareSyncError):
    """A backend submission failed or timed out"""


class NetworkError(CareSyncError):
    pass


class AssetInstallError(CareSyncError):
    pass


class InvalidStatusTransition(CareSyncError):
    pass


class StockNotFoundError(CareSyncError):
    pass


class VoiceUnavailableError(CareSyncError):
    """Speech synthesis or recognition is not available on this host"""
