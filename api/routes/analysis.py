"""Repository analyzer route."""
import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from analysis.errors import AnalysisError
from analysis.repository_analyzer import analyze_repository
from config import default_config
from models import AnalysisResponse, AnalyzeRequest
from routes.deps import get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])

GENERIC_FAILURE = "Failed to analyze repository. It might be too large or private."


@router.post("/analyze-github", response_model=AnalysisResponse)
async def analyze_github(request_data: AnalyzeRequest, request: Request):
    """
    Guess where a public GitHub repository uses MongoDB

    Scans at most 30 source files with substring heuristics. The result is
    a hint, not static analysis.
    """
    url = request_data.github_url.strip()
    if not url:
        return _error("GitHub URL is required", 400)

    analyzer = get_app_state(request).get_analyzer()
    try:
        if analyzer is None:
            result = await asyncio.to_thread(analyze_repository, url, default_config.analyzer)
        else:
            result = await asyncio.to_thread(analyzer.analyze, url)
    except AnalysisError as e:
        return _error(str(e), e.status_code)
    except Exception:
        logger.exception(f"Analysis error for {url}")
        return _error(GENERIC_FAILURE, 500)

    return AnalysisResponse(success=True, **result.to_dict())


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)
