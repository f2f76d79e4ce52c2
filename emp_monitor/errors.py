"""Exception types raised by the EMP monitor."""


class EmpMonitorError(Exception):
    """Base class for EMP monitor errors."""


class ContractDataError(EmpMonitorError):
    """Contract gateway returned data in an unexpected shape."""


class SnapshotUnavailableError(EmpMonitorError):
    """A query needs a published snapshot and none exists yet."""
