"""
Explain output interpretation.

Find explains carry queryPlanner/executionStats at the top level.
Aggregate explains either do the same (pipelines the server pushes down
entirely) or nest them under the first stage's "$cursor" key. Newer
servers may wrap the winning plan in a "queryPlan" node, so the index
lookup walks the whole plan tree instead of a fixed path.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from value_objects import COLLECTION_SCAN


@dataclass(frozen=True)
class QueryPlan:
    """What the store reported about how a read was executed"""
    winning_plan: Optional[Dict[str, Any]]
    index_used: str
    execution_time_millis: Optional[int] = None
    total_docs_examined: Optional[int] = None
    total_keys_examined: Optional[int] = None

    @classmethod
    def from_explain(cls, explain: Optional[Dict[str, Any]]) -> 'QueryPlan':
        """Build a plan summary from raw explain output"""
        section = _plan_section(explain or {})
        planner = section.get('queryPlanner') or {}
        stats = section.get('executionStats') or {}
        winning_plan = planner.get('winningPlan')
        return cls(
            winning_plan=winning_plan,
            index_used=find_index_name(winning_plan) or COLLECTION_SCAN,
            execution_time_millis=stats.get('executionTimeMillis'),
            total_docs_examined=stats.get('totalDocsExamined'),
            total_keys_examined=stats.get('totalKeysExamined'),
        )

    @property
    def documents_examined(self) -> int:
        return self.total_docs_examined or 0

    def to_dict(self) -> Dict[str, Any]:
        """Wire format for the envelope's queryPlan block"""
        return {
            'winningPlan': self.winning_plan,
            'executionStats': {
                'executionTimeMillis': self.execution_time_millis,
                'totalDocsExamined': self.total_docs_examined,
                'totalKeysExamined': self.total_keys_examined,
            },
            'indexUsed': self.index_used,
        }


def find_index_name(plan: Any) -> Optional[str]:
    """Depth-first search for the first indexName in a plan tree"""
    if isinstance(plan, dict):
        name = plan.get('indexName')
        if isinstance(name, str):
            return name
        for value in plan.values():
            found = find_index_name(value)
            if found:
                return found
    elif isinstance(plan, list):
        for item in plan:
            found = find_index_name(item)
            if found:
                return found
    return None


def _plan_section(explain: Dict[str, Any]) -> Dict[str, Any]:
    if 'queryPlanner' in explain:
        return explain
    for stage in explain.get('stages') or []:
        cursor = stage.get('$cursor') if isinstance(stage, dict) else None
        if cursor:
            return cursor
    return {}
