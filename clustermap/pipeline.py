"""Clustermap pipeline: sanitize, cluster, order, cut, segment and summarize."""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from clustermap.config import (
    DEFAULT_CUT_PERCENTILE,
    DEFAULT_SENTINEL_DISTANCE,
    ClusteringConfig,
)
from clustermap.clustering.cutting import (
    ClusterGroup,
    ManualClusterOverride,
    cut_dendrogram,
    cut_threshold,
)
from clustermap.clustering.linkage import AgglomerativeClusterer
from clustermap.clustering.ordering import leaf_order, ordered_labels, prioritize_order
from clustermap.clustering.segments import (
    ClusterSegment,
    build_segments,
    segments_for_groups,
)
from clustermap.clustering.statistics import (
    SetStatistics,
    group_statistics,
    selection_statistics,
)
from clustermap.elements.dendrogram import Dendrogram
from clustermap.elements.matrix import as_raw_matrix, validate_square
from clustermap.exceptions import InvalidMatrixShapeError
from clustermap.io import ClustermapMatrix, parse_clustermap_matrix
from clustermap.logger import cm_logger


def finite_distance_range(
    raw: NDArray[np.float64],
) -> Optional[Tuple[float, float]]:
    """(min, max) over finite off-diagonal entries, None if there are none."""
    n = len(raw)
    if n < 2:
        return None
    off_diagonal = raw[~np.eye(n, dtype=bool)]
    finite = off_diagonal[np.isfinite(off_diagonal)]
    if finite.size == 0:
        return None
    return float(finite.min()), float(finite.max())


def build_heatmap_rows(
    labels: Sequence[str],
    raw: NDArray[np.float64],
    pair_counts: Optional[Sequence[Sequence[Optional[int]]]],
    ordering: Sequence[int],
) -> List[Dict[str, Any]]:
    """
    Reindexed grid for the renderer: rows and columns both follow ``ordering``.
    Distances are raw (None when unknown); counts default to 0.
    """
    rows: List[Dict[str, Any]] = []
    for row_index in ordering:
        cells = []
        for column_index in ordering:
            distance = raw[row_index, column_index]
            count = None
            if pair_counts is not None:
                count = pair_counts[row_index][column_index]
            cells.append(
                {
                    "x": labels[column_index],
                    "distance": float(distance) if math.isfinite(distance) else None,
                    "count": count if count is not None else 0,
                }
            )
        rows.append({"id": labels[row_index], "data": cells})
    return rows


@dataclass
class ClustermapResult:
    label: str
    labels: List[str]
    dendrogram: Dendrogram
    ordering: List[int]
    ordered_labels: List[str]
    display_ordering: List[int]
    cut_mode: str
    threshold: Optional[float]
    clusters: List[ClusterGroup] = field(default_factory=list)
    segments: List[ClusterSegment] = field(default_factory=list)
    selection_segments: List[ClusterSegment] = field(default_factory=list)
    cluster_statistics: Dict[str, SetStatistics] = field(default_factory=dict)
    between_statistics: Dict[Tuple[str, str], SetStatistics] = field(
        default_factory=dict
    )
    selection_statistics: Dict[str, SetStatistics] = field(default_factory=dict)
    selection_comparison: Optional[SetStatistics] = None
    heatmap_rows: List[Dict[str, Any]] = field(default_factory=list)
    distance_range: Optional[Tuple[float, float]] = None
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "labels": list(self.labels),
            "ordering": list(self.ordering),
            "orderedLabels": list(self.ordered_labels),
            "displayOrdering": list(self.display_ordering),
            "dendrogram": self.dendrogram.to_dict(self.labels),
            "cutMode": self.cut_mode,
            "threshold": self.threshold,
            "clusters": [group.to_dict() for group in self.clusters],
            "segments": [segment.to_dict() for segment in self.segments],
            "selectionSegments": [
                segment.to_dict() for segment in self.selection_segments
            ],
            "clusterStatistics": {
                cluster_id: stats.to_dict()
                for cluster_id, stats in self.cluster_statistics.items()
            },
            "betweenStatistics": [
                {"clusterA": a, "clusterB": b, **stats.to_dict()}
                for (a, b), stats in self.between_statistics.items()
            ],
            "selectionStatistics": {
                selection_id: stats.to_dict()
                for selection_id, stats in self.selection_statistics.items()
            },
            "selectionComparison": (
                self.selection_comparison.to_dict()
                if self.selection_comparison is not None
                else None
            ),
            "heatmapRows": self.heatmap_rows,
            "distanceRange": list(self.distance_range)
            if self.distance_range is not None
            else None,
        }


class ClustermapPipeline:
    """
    Coordinates the full clustermap workflow for one distance matrix.

    Each call to :meth:`run` owns its own tree and scratch state; a pipeline
    instance holds configuration only and can be reused freely.
    """

    def __init__(
        self,
        config: Optional[ClusteringConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config: ClusteringConfig = config or ClusteringConfig()
        self.logger = logger or logging.getLogger(self.config.logger_name)
        self.clusterer = AgglomerativeClusterer(
            sentinel_distance=self.config.sentinel_distance
        )

    def run(
        self,
        dataset: Union[ClustermapMatrix, Mapping[str, Any]],
        manual_overrides: Optional[ManualClusterOverride] = None,
        domain_key: Optional[str] = None,
        selections: Optional[Mapping[str, Iterable[str]]] = None,
        prioritize_selections: bool = False,
    ) -> ClustermapResult:
        """
        Execute the pipeline.

        Args:
            dataset: A parsed matrix or a raw ``{countries, distance_matrix, ...}`` mapping.
            manual_overrides: Domain key -> label groups replacing the automatic cut.
            domain_key: Key into ``manual_overrides`` (e.g. a topic id).
            selections: Ad hoc selection id -> labels, segmented and summarized separately.
            prioritize_selections: Move selected entities to the front of the display ordering.

        Returns:
            A ClustermapResult with ordering, clusters, segments and statistics.
        """
        start_time = time.time()
        matrix = (
            dataset
            if isinstance(dataset, ClustermapMatrix)
            else parse_clustermap_matrix(dataset)
        )
        selection_map = {
            selection_id: list(members)
            for selection_id, members in (selections or {}).items()
        }

        n = validate_square(matrix.distance_matrix)
        if self.config.validate_shape:
            self._check_alignment(matrix, n)

        if not cm_logger.disabled:
            cm_logger.section(f"Clustermap '{matrix.label}'")
            cm_logger.matrix(
                matrix.distance_matrix, labels=matrix.countries, title="Distances"
            )

        raw = as_raw_matrix(matrix.distance_matrix)
        dendrogram = self.clusterer.fit(matrix.distance_matrix)
        ordering = leaf_order(dendrogram)
        labels = matrix.countries
        self.logger.debug(
            f"Clustered {n} entities with {len(dendrogram.merges)} merges"
        )

        manual = (
            manual_overrides is not None
            and domain_key is not None
            and manual_overrides.get(domain_key) is not None
        )
        cut_mode = "manual" if manual else "automatic"
        threshold = (
            None
            if manual
            else cut_threshold(dendrogram.merges, self.config.cut_percentile)
        )
        clusters = cut_dendrogram(
            dendrogram,
            ordering,
            labels,
            manual_overrides=manual_overrides,
            domain_key=domain_key,
            percentile=self.config.cut_percentile,
            min_cluster_size=self.config.min_cluster_size,
        )
        self.logger.info(
            f"{matrix.label}: {len(clusters)} {cut_mode} cluster(s) over {n} entities"
        )

        display_ordering = list(ordering)
        if prioritize_selections and selection_map:
            display_ordering = prioritize_order(
                ordering, labels, selection_map.values()
            )

        within, between = group_statistics(raw, clusters)
        selection_within: Dict[str, SetStatistics] = {}
        comparison: Optional[SetStatistics] = None
        if selection_map:
            selection_ids = list(selection_map)
            compare = (
                (selection_ids[0], selection_ids[1]) if len(selection_ids) >= 2 else None
            )
            selection_within, comparison = selection_statistics(
                raw, labels, selection_map, compare
            )

        processing_time = time.time() - start_time
        self.logger.debug(f"Clustermap '{matrix.label}' built in {processing_time:.3f}s")

        return ClustermapResult(
            label=matrix.label,
            labels=list(labels),
            dendrogram=dendrogram,
            ordering=ordering,
            ordered_labels=ordered_labels(ordering, labels),
            display_ordering=display_ordering,
            cut_mode=cut_mode,
            threshold=threshold,
            clusters=clusters,
            segments=segments_for_groups(ordering, labels, clusters),
            selection_segments=build_segments(display_ordering, labels, selection_map),
            cluster_statistics=within,
            between_statistics=between,
            selection_statistics=selection_within,
            selection_comparison=comparison,
            heatmap_rows=build_heatmap_rows(
                labels, raw, matrix.pair_count_matrix, display_ordering
            ),
            distance_range=finite_distance_range(raw),
            processing_time=processing_time,
        )

    # --- Private helpers ---

    def _check_alignment(self, matrix: ClustermapMatrix, n: int) -> None:
        if len(matrix.countries) != n:
            InvalidMatrixShapeError.raise_for_shape(
                "countries", n, len(matrix.countries)
            )
        if matrix.pair_count_matrix is not None:
            validate_square(matrix.pair_count_matrix, what="pair_count_matrix", size=n)


def cluster_dataset(
    dataset: Union[ClustermapMatrix, Mapping[str, Any]],
    manual_overrides: Optional[ManualClusterOverride] = None,
    domain_key: Optional[str] = None,
    selections: Optional[Mapping[str, Iterable[str]]] = None,
    cut_percentile: float = DEFAULT_CUT_PERCENTILE,
    sentinel_distance: float = DEFAULT_SENTINEL_DISTANCE,
    logger: Optional[logging.Logger] = None,
) -> ClustermapResult:
    """
    Run the complete clustermap pipeline on one dataset.

    Args:
        dataset: Parsed matrix or raw mapping of the precomputed payload
        manual_overrides: Optional domain key -> label groups
        domain_key: Which override entry applies
        selections: Optional ad hoc selections to segment and summarize
        cut_percentile: Percentile of merge distances used as cut threshold
        sentinel_distance: Substitute for unknown distances during clustering
        logger: Optional logger for tracking operations

    Returns:
        ClustermapResult containing all pipeline outputs
    """
    config = ClusteringConfig(
        cut_percentile=cut_percentile, sentinel_distance=sentinel_distance
    )
    pipeline = ClustermapPipeline(config=config, logger=logger)
    return pipeline.run(
        dataset,
        manual_overrides=manual_overrides,
        domain_key=domain_key,
        selections=selections,
    )
