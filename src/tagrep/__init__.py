"""tagrep: concurrent ID3 tag search over directory trees."""

__version__ = "0.1.0"


class TagrepError(Exception):
    """User-facing CLI error.

    Raised for invalid configuration and for runs aborted under the
    fail-fast directory policy. The message is printed to stderr
    and the process exits with code 1.
    """


class ScanAbortedError(TagrepError):
    """Run aborted on the first unreadable directory (``--fail-fast``)."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
