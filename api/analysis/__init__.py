"""Repository analysis: best-effort guesses about MongoDB usage in GitHub repos."""

from .errors import AnalysisError, InvalidRepositoryUrl, RepositoryFetchError
from .repository_analyzer import AnalysisResult, RepositoryAnalyzer, analyze_repository, parse_repository_url

__all__ = [
    'AnalysisError',
    'InvalidRepositoryUrl',
    'RepositoryFetchError',
    'AnalysisResult',
    'RepositoryAnalyzer',
    'analyze_repository',
    'parse_repository_url',
]
