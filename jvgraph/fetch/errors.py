"""
Fetch Errors

Failures of a remote subgraph fetch. All of them leave the graph store
untouched; the controller records the failure and waits for the next
user action to retry.
"""

from typing import Optional


class FetchFailure(Exception):
    """A subgraph fetch did not produce a usable fragment"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(FetchFailure):
    """Token missing, expired or rejected (401/403)"""


class ServerError(FetchFailure):
    """Remote walker answered with an error status"""


class ResponseFormatError(FetchFailure):
    """Body is not JSON or has no reports[0] payload"""
