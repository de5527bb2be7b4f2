"""Error types raised by the scan and report pipeline."""


class BankGradeError(Exception):
    """Base class for all bankgrade errors."""


class ScannerUnavailable(BankGradeError):
    """A bank's site could not be probed."""

    def __init__(self, domain: str, reason: str = ""):
        self.domain = domain
        self.reason = reason
        message = f"Could not scan {domain}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedArchive(BankGradeError):
    """A history archive file could not be parsed or validated."""

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed archive {key}: {reason}" if reason else f"Malformed archive {key}")


class ConfigurationError(BankGradeError):
    """Bank registry or templates are missing or invalid."""
