from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

class HealthResponse(BaseModel):
    status: str
    store_connected: bool
    database: str
    collection: str
    performance_entries: int

class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    github_url: str = Field(default="", alias="githubUrl", description="Repository URL, e.g. https://github.com/owner/repo")

class PerformanceEntryModel(BaseModel):
    timestamp: int
    operation: str
    executionTime: float
    documentsExamined: Optional[int] = None
    documentsReturned: Optional[int] = None
    indexUsed: Optional[str] = None

class PerformanceLogResponse(BaseModel):
    entries: List[PerformanceEntryModel]
    count: int
    capacity: int

class InsightsResponse(BaseModel):
    total: int
    collectionScans: int
    indexedQueries: int
    averageLatency: float
    slowestOperation: Optional[PerformanceEntryModel] = None
    status: str
    message: str

class FlowNode(BaseModel):
    id: str
    type: str
    label: str
    file: Optional[str] = None
    operations: List[str] = []

class AnalyzedFile(BaseModel):
    name: str
    path: str
    mongoOperations: List[str]

class AnalysisResponse(BaseModel):
    """Repository analyzer output. Best-effort hints, not static analysis."""
    success: bool = True
    files: List[AnalyzedFile]
    totalFiles: int
    mongoFiles: int
    operations: Dict[str, int]
    collections: List[str]
    flowDiagram: List[FlowNode]
