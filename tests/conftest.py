"""Shared fixtures for semgraph tests.

- Factory fixture for ParameterRecord objects
- Canonical parameter tables for the regression-only and latent-factor models
- Config cache reset so tests never see each other's config.yaml
"""

import math

import pytest

from semgraph.schemas import Operator, ParameterRecord
from semgraph.utils.config import load_config

# ══════════════════════════════════════════════════════════════════════════════
# FACTORY FIXTURES
# ══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def record_factory():
    """Factory for creating ParameterRecord objects.

    Usage:
        def test_something(record_factory):
            path = record_factory("price", "carat", Operator.REGRESSION, 0.9, 0.01)
            resid = record_factory("price", "price", Operator.VARIANCE, 0.1)
    """

    def _make(
        lhs: str,
        rhs: str,
        operator: Operator,
        estimate: float,
        p_value: float = 0.0,
    ) -> ParameterRecord:
        return ParameterRecord(
            lhs=lhs, rhs=rhs, operator=operator, estimate=estimate, p_value=p_value
        )

    return _make


@pytest.fixture(autouse=True)
def _clear_config_cache(monkeypatch):
    """Clear the lru_cache and any SEMGRAPH_CONFIG override between tests."""
    monkeypatch.delenv("SEMGRAPH_CONFIG", raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


# ══════════════════════════════════════════════════════════════════════════════
# PARAMETER TABLES
# ══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def regression_records(record_factory):
    """price ~ carat with residuals for both variables."""
    return [
        record_factory("price", "carat", Operator.REGRESSION, 0.9, 0.01),
        record_factory("carat", "carat", Operator.VARIANCE, 0.2, 0.0),
        record_factory("price", "price", Operator.VARIANCE, 0.1, 0.0),
    ]


@pytest.fixture
def latent_records(regression_records, record_factory):
    """Regression model plus a 'size' factor loading on x (x has no residual)."""
    return [
        *regression_records,
        record_factory("size", "x", Operator.LOADING, 0.8, 0.001),
        record_factory("size", "size", Operator.VARIANCE, 1.0, math.nan),
    ]


@pytest.fixture
def cfa_records(record_factory):
    """Two-factor CFA in lavaan's row order, with a factor covariance."""
    return [
        record_factory("visual", "x1", Operator.LOADING, 0.77, math.nan),
        record_factory("visual", "x2", Operator.LOADING, 0.42, 0.0),
        record_factory("textual", "x4", Operator.LOADING, 0.85, math.nan),
        record_factory("textual", "x5", Operator.LOADING, 0.86, 0.0),
        record_factory("x1", "x1", Operator.VARIANCE, 0.40, 0.0),
        record_factory("x2", "x2", Operator.VARIANCE, 0.82, 0.0),
        record_factory("x4", "x4", Operator.VARIANCE, 0.28, 0.0),
        record_factory("x5", "x5", Operator.VARIANCE, 0.26, 0.0),
        record_factory("visual", "visual", Operator.VARIANCE, 1.0, math.nan),
        record_factory("textual", "textual", Operator.VARIANCE, 1.0, math.nan),
        record_factory("visual", "textual", Operator.COVARIANCE, 0.46, 0.0),
    ]
