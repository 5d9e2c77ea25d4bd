"""Adapters between tabular parameter estimates and semgraph records.

SEM engines report standardized estimates as a table with one row per
parameter. lavaan (``parameterEstimates(fit, standardized=TRUE)`` /
``standardizedSolution``) writes columns ``lhs op rhs`` and these operators:

    =~   loading      (factor =~ indicator)
    ~    regression   (outcome ~ predictor)
    ~~   covariance, or variance when lhs == rhs

semopy (``Model.inspect(std_est=True)``) writes ``lval op rval`` and has no
loading operator in its output: a measurement row reads ``indicator ~ factor``.
Such rows can only be told apart from regressions by knowing the factor names,
so pass ``latent`` to turn them back into ``factor =~ indicator`` loadings.

Rows with any other operator (intercepts ``~1``, thresholds ``|``, defined
parameters ``:=`` ...) are excluded from the graph.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from pathlib import Path

import polars as pl

from semgraph.schemas import ModelGraph, Operator, ParameterRecord

logger = logging.getLogger(__name__)

# Canonical field -> accepted column names, in lookup order
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "lhs": ("lhs", "lval"),
    "rhs": ("rhs", "rval"),
    "operator": ("operator", "op"),
    "estimate": ("estimate", "est.std", "std.all", "Est. Std", "std_estimate"),
    "p_value": ("p_value", "pvalue", "p-value", "p"),
}

_SYMBOL_OPERATORS = {
    "=~": Operator.LOADING,
    "~": Operator.REGRESSION,
}
_COVARIANCE_SYMBOL = "~~"

# Placeholders engines write for parameters without an estimate or p-value
MISSING_MARKERS = ["NA", "-", ""]


def resolve_columns(columns: list[str]) -> dict[str, str]:
    """Map each canonical field to the first matching column in ``columns``.

    Raises:
        ValueError: If a required field has no matching column.
    """
    resolved = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        match = next((alias for alias in aliases if alias in columns), None)
        if match is None:
            raise ValueError(
                f"Parameter table has no '{field_name}' column "
                f"(looked for: {', '.join(aliases)}; found: {', '.join(columns)})"
            )
        resolved[field_name] = match
    return resolved


def parse_operator(symbol: str, lhs: str, rhs: str) -> Operator | None:
    """Translate an operator symbol or name into an Operator.

    Returns None for operators that are not part of the graph.
    """
    symbol = symbol.strip()
    if symbol == _COVARIANCE_SYMBOL:
        return Operator.VARIANCE if lhs == rhs else Operator.COVARIANCE
    if symbol in _SYMBOL_OPERATORS:
        return _SYMBOL_OPERATORS[symbol]
    try:
        return Operator(symbol.lower())
    except ValueError:
        return None


def _as_float(value) -> float:
    # Fixed parameters have no p-value: lavaan writes NA, semopy "-"
    if value is None or (isinstance(value, str) and value.strip() in MISSING_MARKERS):
        return math.nan
    return float(value)


def records_from_frame(
    frame: pl.DataFrame, latent: Iterable[str] | None = None
) -> list[ParameterRecord]:
    """Build ParameterRecords from a parameter-estimate table, keeping row order.

    Rows with an unrecognized operator are skipped and logged at debug level.

    Args:
        frame: lavaan- or semopy-style parameter table.
        latent: Factor names of a semopy table. A ``~`` row whose rval is one
            of them and whose lval is not becomes a loading of that factor.
            Ignored for lavaan tables, which spell loadings ``=~``.
    """
    columns = resolve_columns(frame.columns)
    factors = set(latent or ())
    semopy_layout = columns["lhs"] == "lval"
    if semopy_layout and not factors:
        logger.info("semopy table without latent names: '~' rows are read as regressions")
    table = frame.select(
        [pl.col(source).alias(field_name) for field_name, source in columns.items()]
    )

    records = []
    skipped = 0
    for row in table.iter_rows(named=True):
        lhs, rhs = str(row["lhs"]), str(row["rhs"])
        operator = parse_operator(str(row["operator"]), lhs, rhs)
        if operator is None:
            skipped += 1
            logger.debug("Skipping row with unrecognized operator: %s %s %s", lhs, row["operator"], rhs)
            continue
        if semopy_layout and operator == Operator.REGRESSION and rhs in factors and lhs not in factors:
            operator = Operator.LOADING
            lhs, rhs = rhs, lhs
        records.append(
            ParameterRecord(
                lhs=lhs,
                rhs=rhs,
                operator=operator,
                estimate=_as_float(row["estimate"]),
                p_value=_as_float(row["p_value"]),
            )
        )

    if skipped:
        logger.info("Excluded %d of %d rows with unrecognized operators", skipped, table.height)
    return records


def load_parameter_table(path: str | Path) -> pl.DataFrame:
    """Read a parameter table from .csv, .json or .parquet."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pl.read_csv(path, null_values=MISSING_MARKERS)
    if suffix == ".json":
        return pl.read_json(path)
    if suffix == ".parquet":
        return pl.read_parquet(path)
    raise ValueError(f"{path}: unsupported file type '{suffix}' (expected .csv, .json or .parquet)")


def load_records(
    path: str | Path, latent: Iterable[str] | None = None
) -> list[ParameterRecord]:
    """Read a parameter table file straight into ParameterRecords."""
    return records_from_frame(load_parameter_table(path), latent=latent)


def graph_to_frames(graph: ModelGraph) -> tuple[pl.DataFrame, pl.DataFrame]:
    """Return (nodes, edges) tables for renderers that take data frames."""
    nodes = pl.DataFrame(
        [node.model_dump() for node in graph.nodes],
        schema={"name": pl.Utf8, "residual_estimate": pl.Float64, "is_latent": pl.Boolean},
    )
    edges = pl.DataFrame(
        [
            {
                "from": edge.source,
                "to": edge.target,
                "value": edge.value,
                "kind": edge.kind.value,
            }
            for edge in graph.edges
        ],
        schema={"from": pl.Utf8, "to": pl.Utf8, "value": pl.Float64, "kind": pl.Utf8},
    )
    return nodes, edges
