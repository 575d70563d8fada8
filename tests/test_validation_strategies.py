"""
Tests for per-kind request shape validators
"""
import pytest

from operations.errors import RequestShapeError
from operations.kinds import OperationKind
from operations.validators import (
    AggregateValidator, BulkInsertValidator, DeleteValidator,
    FindValidator, InsertValidator, UpdateValidator, build_validators
)


class TestInsertValidator:

    def test_accepts_object(self):
        assert InsertValidator().validate({'a': 1}) == {'a': 1}

    @pytest.mark.parametrize("payload", [None, [], "text", 3])
    def test_rejects_non_object(self, payload):
        with pytest.raises(RequestShapeError):
            InsertValidator().validate(payload)


class TestBulkInsertValidator:

    def test_rejects_non_object_member(self):
        with pytest.raises(RequestShapeError, match="index 1"):
            BulkInsertValidator().validate([{'a': 1}, 2])

    def test_limit_is_inclusive(self):
        documents = [{}] * 5
        assert BulkInsertValidator(5).validate(documents) == documents

        with pytest.raises(RequestShapeError, match="Maximum 5"):
            BulkInsertValidator(5).validate(documents + [{}])


class TestFindValidator:

    def test_absent_filter_matches_all(self):
        assert FindValidator().validate(None) == {}

    def test_rejects_array(self):
        with pytest.raises(RequestShapeError):
            FindValidator().validate([{}])


class TestUpdateValidator:

    def test_accepts_operator_document(self):
        payload = {'filter': {'a': 1}, 'update': {'$set': {'b': 2}}}
        assert UpdateValidator().validate(payload) is payload

    def test_rejects_replacement_document(self):
        with pytest.raises(RequestShapeError, match="update operators"):
            UpdateValidator().validate({'filter': {}, 'update': {'b': 2}})

    def test_rejects_non_object_set(self):
        with pytest.raises(RequestShapeError, match=r"\$set"):
            UpdateValidator().validate({'filter': {}, 'update': {'$set': 5}})

    def test_rejects_non_object_filter(self):
        with pytest.raises(RequestShapeError, match='"filter"'):
            UpdateValidator().validate({'filter': [], 'update': {'$set': {}}})


class TestDeleteValidator:

    def test_empty_filter_allowed_with_warning(self, caplog):
        assert DeleteValidator().validate({}) == {}
        assert "every document" in caplog.text

    def test_rejects_null(self):
        with pytest.raises(RequestShapeError):
            DeleteValidator().validate(None)


class TestAggregateValidator:

    def test_empty_pipeline_allowed(self):
        assert AggregateValidator().validate([]) == []

    def test_stage_needs_exactly_one_operator(self):
        with pytest.raises(RequestShapeError, match="exactly one operator"):
            AggregateValidator().validate([{'$match': {}, '$limit': 1}])

    def test_stage_must_be_object(self):
        with pytest.raises(RequestShapeError, match="stage 2"):
            AggregateValidator().validate([{'$match': {}}, "$limit"])


def test_every_kind_has_a_validator():
    assert set(build_validators()) == set(OperationKind)


class TestOperationKind:

    @pytest.mark.parametrize("value, kind", [
        ("insert", OperationKind.INSERT),
        ("bulk_insert", OperationKind.BULK_INSERT),
        (" Aggregate ", OperationKind.AGGREGATE),
    ])
    def test_parse(self, value, kind):
        assert OperationKind.parse(value) is kind

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            OperationKind.parse("drop")

    def test_store_operation_names(self):
        assert OperationKind.BULK_INSERT.store_operation == "insertMany"
        assert OperationKind.UPDATE.store_operation == "updateMany"
