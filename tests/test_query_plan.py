"""
Tests for explain output interpretation
"""
from operations.query_plan import QueryPlan, find_index_name


class TestQueryPlan:

    def test_collection_scan(self, collscan_explain):
        plan = QueryPlan.from_explain(collscan_explain)

        assert plan.index_used == 'COLLSCAN'
        assert plan.documents_examined == 0

    def test_index_scan(self, ixscan):
        plan = QueryPlan.from_explain(ixscan('email_1', docs_examined=3))

        assert plan.index_used == 'email_1'
        assert plan.total_docs_examined == 3
        assert plan.to_dict()['executionStats'] == {
            'executionTimeMillis': 1,
            'totalDocsExamined': 3,
            'totalKeysExamined': 3,
        }

    def test_aggregate_cursor_form(self, ixscan):
        explain = {'stages': [{'$cursor': ixscan('age_1')}, {'$sort': {'age': 1}}]}

        assert QueryPlan.from_explain(explain).index_used == 'age_1'

    def test_missing_explain(self):
        plan = QueryPlan.from_explain(None)

        assert plan.index_used == 'COLLSCAN'
        assert plan.winning_plan is None
        assert plan.documents_examined == 0


class TestFindIndexName:

    def test_nested_query_plan_wrapper(self):
        plan = {
            'isCached': False,
            'queryPlan': {
                'stage': 'FETCH',
                'inputStage': {'stage': 'IXSCAN', 'indexName': 'name_1'},
            },
        }
        assert find_index_name(plan) == 'name_1'

    def test_or_branches(self):
        plan = {'stage': 'OR', 'inputStages': [{'stage': 'IXSCAN', 'indexName': 'a_1'},
                                               {'stage': 'IXSCAN', 'indexName': 'b_1'}]}
        assert find_index_name(plan) == 'a_1'

    def test_no_index(self):
        assert find_index_name({'stage': 'COLLSCAN'}) is None
