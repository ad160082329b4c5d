from egcg_core.exceptions import EGCGError


class RunInfoError(EGCGError):
    pass


class RunInfoIOError(RunInfoError):
    pass


class MalformedRunInfoError(RunInfoError):
    pass


class ReadStructureError(RunInfoError):
    pass


class InvalidDateError(RunInfoError, ValueError):
    pass
