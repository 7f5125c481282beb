"""
Parsing of precomputed clustermap payloads and JSON output of results.

Only local files are read here; fetching the payloads is the job of the
application shell.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import IO, Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from clustermap.elements.matrix import is_valid_distance
from clustermap.exceptions import DatasetFormatError

logger = logging.getLogger(__name__)


@dataclass
class ClustermapMatrix:
    """One distance matrix with its labels, as delivered by the precompute step."""

    label: str
    countries: List[str]
    distance_matrix: List[List[Optional[float]]]
    pair_count_matrix: Optional[List[List[Optional[int]]]] = None
    average_distance: Optional[float] = None
    average_pair_count: Optional[float] = None
    min_pair_threshold: Optional[float] = None

    @property
    def size(self) -> int:
        return len(self.countries)


@dataclass
class ClustermapCollection:
    overall: ClustermapMatrix
    councils: List[ClustermapMatrix] = field(default_factory=list)
    topics: List[ClustermapMatrix] = field(default_factory=list)

    def find(self, label: str) -> Optional[ClustermapMatrix]:
        for matrix in [self.overall, *self.councils, *self.topics]:
            if matrix.label == label:
                return matrix
        return None


def _distance_cell(value: Any) -> Optional[float]:
    return float(value) if is_valid_distance(value) else None


def _count_cell(value: Any) -> Optional[int]:
    if not is_valid_distance(value) or value < 0:
        return None
    return int(round(float(value)))


def _optional_number(value: Any) -> Optional[float]:
    return float(value) if is_valid_distance(value) else None


def _grid(payload: Mapping[str, Any], key: str) -> List[Sequence[Any]]:
    rows = payload.get(key)
    if not isinstance(rows, list):
        raise DatasetFormatError(f"'{key}' must be a list of rows")
    for row_index, row in enumerate(rows):
        if not isinstance(row, (list, tuple)):
            raise DatasetFormatError(f"'{key}' row {row_index} is not a list")
    return rows


def parse_clustermap_matrix(
    payload: Mapping[str, Any], label: Optional[str] = None
) -> ClustermapMatrix:
    """
    Build a :class:`ClustermapMatrix` from a ``{countries, distance_matrix,
    pair_count_matrix?}`` mapping. Non-numeric and non-finite cells become None.
    """
    if not isinstance(payload, Mapping):
        raise DatasetFormatError("clustermap payload must be a mapping")

    countries = payload.get("countries")
    if not isinstance(countries, list):
        raise DatasetFormatError("'countries' must be a list of labels")

    distance_matrix = [
        [_distance_cell(value) for value in row]
        for row in _grid(payload, "distance_matrix")
    ]
    pair_count_matrix = None
    if payload.get("pair_count_matrix") is not None:
        pair_count_matrix = [
            [_count_cell(value) for value in row]
            for row in _grid(payload, "pair_count_matrix")
        ]

    resolved_label = payload.get("label") or label or "Overall"
    logger.debug(
        f"Parsed clustermap '{resolved_label}' with {len(countries)} entities"
    )
    return ClustermapMatrix(
        label=str(resolved_label),
        countries=[str(country) for country in countries],
        distance_matrix=distance_matrix,
        pair_count_matrix=pair_count_matrix,
        average_distance=_optional_number(payload.get("average_distance")),
        average_pair_count=_optional_number(payload.get("average_pair_count")),
        min_pair_threshold=_optional_number(payload.get("min_pair_threshold")),
    )


def parse_clustermap_collection(payload: Mapping[str, Any]) -> ClustermapCollection:
    """
    Parse the grouped ``{overall, councils, topics}`` payload. A bare matrix
    payload is accepted as ``overall``.
    """
    if not isinstance(payload, Mapping):
        raise DatasetFormatError("clustermap payload must be a mapping")

    if "overall" not in payload:
        return ClustermapCollection(overall=parse_clustermap_matrix(payload))

    def parse_list(key: str, prefix: str) -> List[ClustermapMatrix]:
        entries = payload.get(key) or []
        if not isinstance(entries, list):
            raise DatasetFormatError(f"'{key}' must be a list of matrices")
        return [
            parse_clustermap_matrix(entry, label=f"{prefix} {position}")
            for position, entry in enumerate(entries, start=1)
        ]

    return ClustermapCollection(
        overall=parse_clustermap_matrix(payload["overall"], label="Overall"),
        councils=parse_list("councils", "Council"),
        topics=parse_list("topics", "Topic"),
    )


def parse_manual_overrides(payload: Mapping[str, Any]) -> Dict[str, List[Any]]:
    """
    Normalize a domain-key -> groups mapping. Each group is a list of labels or
    a ``{name, countries}`` mapping; non-string labels are dropped.
    """
    if not isinstance(payload, Mapping):
        raise DatasetFormatError("manual cluster overrides must be a mapping")

    overrides: Dict[str, List[Any]] = {}
    for domain_key, groups in payload.items():
        if not isinstance(groups, list):
            raise DatasetFormatError(
                f"overrides for '{domain_key}' must be a list of groups"
            )
        normalized: List[Any] = []
        for group in groups:
            if isinstance(group, Mapping):
                members = group.get("countries", group.get("members", []))
                if isinstance(members, str):
                    members = [members]
                normalized.append(
                    {
                        "name": group.get("name"),
                        "countries": [m for m in members if isinstance(m, str)],
                    }
                )
            elif isinstance(group, list):
                normalized.append([m for m in group if isinstance(m, str)])
            else:
                raise DatasetFormatError(
                    f"group in '{domain_key}' must be a list or mapping"
                )
        overrides[str(domain_key)] = normalized
    return overrides


def load_json(path: str) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def read_clustermap(path: str) -> ClustermapCollection:
    return parse_clustermap_collection(load_json(path))


def read_manual_overrides(path: str) -> Dict[str, List[Any]]:
    return parse_manual_overrides(load_json(path))


def _null_non_finite(value: Any) -> Any:
    """Copy of ``value`` with NaN and infinite floats replaced by None."""
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    if isinstance(value, np.ndarray):
        value = value.tolist()
    if isinstance(value, Mapping):
        return {key: _null_non_finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_null_non_finite(item) for item in value]
    # np.float64 subclasses float and bypasses JSONEncoder.default
    if isinstance(value, (float, np.floating)) and not math.isfinite(value):
        return None
    return value


class ClustermapJSONEncoder(json.JSONEncoder):
    def default(self, o: Any):
        if hasattr(o, "to_dict"):
            return o.to_dict()
        if isinstance(o, np.integer):
            return int(o)
        if isinstance(o, np.floating):
            value = float(o)
            return value if math.isfinite(value) else None
        if isinstance(o, np.ndarray):
            return o.tolist()
        return super().default(o)


def dump_result(result: Any, f: IO[str], indent: Optional[int] = None) -> None:
    json.dump(
        _null_non_finite(result),
        f,
        cls=ClustermapJSONEncoder,
        indent=indent,
        allow_nan=False,
    )


def write_result(result: Any, path: str, indent: Optional[int] = 2) -> None:
    with open(path, mode="w", encoding="utf-8") as f:
        dump_result(result, f, indent=indent)
