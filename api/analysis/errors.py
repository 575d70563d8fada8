"""Repository analyzer errors.

Per-file fetch failures never surface as these; they are skipped.
"""


class AnalysisError(Exception):
    """Top-level analysis failure"""
    status_code = 500


class InvalidRepositoryUrl(AnalysisError):
    """URL does not look like github.com/<owner>/<repo>"""
    status_code = 400


class RepositoryFetchError(AnalysisError):
    """Repository info or tree could not be fetched (private, missing, rate limited)"""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code
