"""Tests for the comparison operator table (core/comparison_operator.py)."""

import pytest

from dynamodb_orm.core.comparison_operator import ComparisonOperator
from dynamodb_orm.exceptions import UnsupportedOperatorError


class TestOperatorMapping:
    """Symbol -> DynamoDB operator translation."""

    @pytest.mark.parametrize("symbol, expected", [
        ('=', ComparisonOperator.EQ),
        ('<', ComparisonOperator.LT),
        ('<=', ComparisonOperator.LE),
        ('>', ComparisonOperator.GT),
        ('>=', ComparisonOperator.GE),
        ('!=', ComparisonOperator.NE),
        ('<>', ComparisonOperator.NE),
        ('in', ComparisonOperator.IN),
        ('between', ComparisonOperator.BETWEEN),
        ('begins_with', ComparisonOperator.BEGINS_WITH),
        ('contains', ComparisonOperator.CONTAINS),
        ('not_contains', ComparisonOperator.NOT_CONTAINS),
        ('null', ComparisonOperator.NULL),
        ('not_null', ComparisonOperator.NOT_NULL),
    ])
    def test_get_dynamodb_operator(self, symbol, expected):
        assert ComparisonOperator.is_valid_operator(symbol)
        assert ComparisonOperator.get_dynamodb_operator(symbol) == expected

    def test_word_operators_are_case_insensitive(self):
        assert ComparisonOperator.get_dynamodb_operator('BEGINS_WITH') == ComparisonOperator.BEGINS_WITH

    @pytest.mark.parametrize("symbol", ['==', 'like', '', None, 30, ['=']])
    def test_unknown_symbols(self, symbol):
        assert not ComparisonOperator.is_valid_operator(symbol)
        with pytest.raises(UnsupportedOperatorError):
            ComparisonOperator.get_dynamodb_operator(symbol)

    def test_operator_values_are_wire_names(self):
        assert ComparisonOperator.EQ.value == 'EQ'
        assert ComparisonOperator.NOT_NULL == 'NOT_NULL'


class TestQueryEligibility:
    """Only a fixed subset may be used as a key condition."""

    @pytest.mark.parametrize("operator", ['EQ', 'LT', 'LE', 'GT', 'GE'])
    def test_eligible(self, operator):
        assert ComparisonOperator.is_valid_query_dynamodb_operator(operator)
        assert ComparisonOperator.is_valid_query_dynamodb_operator(ComparisonOperator(operator))

    @pytest.mark.parametrize("operator", [
        'NE', 'IN', 'BETWEEN', 'BEGINS_WITH', 'CONTAINS', 'NOT_CONTAINS', 'NULL', 'NOT_NULL'
    ])
    def test_not_eligible(self, operator):
        assert not ComparisonOperator.is_valid_query_dynamodb_operator(operator)

    def test_unknown_operator_is_not_eligible(self):
        assert not ComparisonOperator.is_valid_query_dynamodb_operator('SOMETHING')

    def test_eligible_set_is_a_subset_of_all_operators(self):
        supported = ComparisonOperator.get_query_supported_operators()
        assert supported < set(ComparisonOperator.get_operator_mapping().values())
