"""
GitHub repository analyzer.

Fetches a public repository's file tree, downloads up to `max_files`
source files in parallel and runs the substring heuristics over each.
The result is a best-effort hint about where the repository talks to
MongoDB, kept behind analyze(url) so a real static analyzer could replace
it without touching anything else.

Failure policy:
- bad URL, repository info or tree fetch failures raise AnalysisError
- a single file that fails to download is logged and skipped
"""
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import AnalyzerConfig
from analysis.errors import AnalysisError, InvalidRepositoryUrl, RepositoryFetchError
from analysis.flow_diagram import build_flow_diagram
from analysis.heuristics import FileScan, guess_collections_from_paths, is_source_file, scan_source

logger = logging.getLogger(__name__)

REPO_URL_PATTERN = re.compile(r"github\.com/([^/\s]+)/([^/\s?#]+)")

OPERATION_COUNTERS = {
    "insert": "inserts",
    "find": "finds",
    "update": "updates",
    "delete": "deletes",
    "aggregate": "aggregates",
}


@dataclass
class AnalysisResult:
    files: List[Dict[str, Any]] = field(default_factory=list)
    total_files: int = 0
    mongo_files: int = 0
    operations: Dict[str, int] = field(
        default_factory=lambda: {name: 0 for name in OPERATION_COUNTERS.values()}
    )
    collections: List[str] = field(default_factory=list)
    flow_diagram: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": self.files,
            "totalFiles": self.total_files,
            "mongoFiles": self.mongo_files,
            "operations": self.operations,
            "collections": self.collections,
            "flowDiagram": self.flow_diagram,
        }


def parse_repository_url(url: str) -> Tuple[str, str]:
    """Extract (owner, repo) from a GitHub URL; strips a trailing .git"""
    match = REPO_URL_PATTERN.search(url or "")
    if not match:
        raise InvalidRepositoryUrl("Invalid GitHub URL format. Use: https://github.com/owner/repo")
    owner, repo = match.groups()
    repo = re.sub(r"\.git$", "", repo)
    if not repo:
        raise InvalidRepositoryUrl("Invalid GitHub URL format. Use: https://github.com/owner/repo")
    return owner, repo


class RepositoryAnalyzer:
    """Scans a GitHub repository for likely MongoDB usage"""

    def __init__(self, config: Optional[AnalyzerConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or AnalyzerConfig()
        self.session = session or requests.Session()
        self.session.headers.update(self._headers())

    def analyze(self, url: str) -> AnalysisResult:
        """Analyze the repository at `url`"""
        owner, repo = parse_repository_url(url)
        logger.info(f"Analyzing repository {owner}/{repo}")

        branch = self._default_branch(owner, repo)
        blobs = self._list_files(owner, repo, branch)
        candidates = [path for path in blobs if is_source_file(path)][:self.config.max_files]

        scans = self._scan_files(owner, repo, branch, candidates)
        result = self._summarize(scans, blobs)
        logger.info(
            f"Analyzed {len(candidates)} of {len(blobs)} files in {owner}/{repo}: "
            f"{result.mongo_files} use MongoDB"
        )
        return result

    def close(self) -> None:
        self.session.close()

    # === Fetching ===

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.config.user_agent,
        }
        if self.config.github_token:
            headers["Authorization"] = f"token {self.config.github_token}"
        return headers

    def _default_branch(self, owner: str, repo: str) -> str:
        info = self._get_json(
            f"{self.config.api_base}/repos/{owner}/{repo}",
            "Failed to fetch repository info",
        )
        return info.get("default_branch") or "main"

    def _list_files(self, owner: str, repo: str, branch: str) -> List[str]:
        tree = self._get_json(
            f"{self.config.api_base}/repos/{owner}/{repo}/git/trees/{branch}?recursive=1",
            "Failed to fetch repository tree",
        )
        return [item["path"] for item in tree.get("tree", []) if item.get("type") == "blob"]

    def _get_json(self, url: str, failure: str) -> Dict[str, Any]:
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise RepositoryFetchError(f"{failure}: {e}") from e
        if not response.ok:
            raise RepositoryFetchError(f"{failure}: {response.reason}", response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise AnalysisError(f"{failure}: invalid JSON from GitHub") from e

    def _fetch_content(self, owner: str, repo: str, branch: str, path: str) -> Optional[str]:
        url = f"{self.config.raw_base}/{owner}/{repo}/{branch}/{path}"
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.debug(f"Skipping {path}: {e}")
            return None
        if not response.ok:
            logger.debug(f"Skipping {path}: HTTP {response.status_code}")
            return None
        return response.text

    # === Scanning ===

    def _scan_files(self, owner, repo, branch, paths: List[str]) -> List[Tuple[str, FileScan]]:
        """Fetch and scan files in parallel, keeping input order"""
        if not paths:
            return []

        def scan(path: str) -> Optional[Tuple[str, FileScan]]:
            content = self._fetch_content(owner, repo, branch, path)
            if content is None:
                return None
            return path, scan_source(content)

        workers = max(1, min(self.config.max_workers, len(paths)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return [outcome for outcome in executor.map(scan, paths) if outcome is not None]

    def _summarize(self, scans: List[Tuple[str, FileScan]], blobs: List[str]) -> AnalysisResult:
        result = AnalysisResult(total_files=len(blobs))
        collections = set()

        for path, scan in scans:
            for operation in scan.operations:
                result.operations[OPERATION_COUNTERS[operation]] += 1
            if not scan.is_mongo_file:
                continue
            result.mongo_files += 1
            result.files.append({
                "name": path.split("/")[-1],
                "path": path,
                "mongoOperations": scan.operations,
            })
            collections.update(scan.collections)

        result.collections = sorted(collections) or guess_collections_from_paths(blobs)
        result.flow_diagram = build_flow_diagram(result.files)
        return result


def analyze_repository(url: str, config: Optional[AnalyzerConfig] = None) -> AnalysisResult:
    """Pure entry point: one analyzer, one URL, session closed afterwards"""
    analyzer = RepositoryAnalyzer(config)
    try:
        return analyzer.analyze(url)
    finally:
        analyzer.close()
