"""
Per-client mirror of the report and prediction streams.
"""
from typing import Callable, Iterable, List, Optional, TypeVar

from ..common.schemas import Prediction, Report, FilterCriteria
from ..predictions.domain.filters import matches_filters

MAX_ITEMS = 120

T = TypeVar("T", Report, Prediction)


def add_unique(collection: List[T], item: Optional[T], max_items: int = MAX_ITEMS) -> List[T]:
    """Prepends item unless its id is already present; truncates to max_items."""
    if item is None or any(element.id == item.id for element in collection):
        return collection
    return [item, *collection][:max_items]


def merge_unique(
    incoming: Iterable[T],
    current: Iterable[T],
    max_items: int = MAX_ITEMS,
    accept: Optional[Callable[[T], bool]] = None
) -> List[T]:
    """
    Incoming entries first, then current ones; first occurrence of an id wins.
    Entries rejected by accept are dropped before deduplication.
    """
    seen = set()
    merged = []
    for item in [*incoming, *current]:
        if accept is not None and not accept(item):
            continue
        if item.id in seen:
            continue
        seen.add(item.id)
        merged.append(item)
    return merged[:max_items]


class ClientSyncCache:
    """
    Bounded, deduplicated, most-recent-first lists of reports and predictions.
    The predictions list always reflects the active filter: items are either
    replaced by a fresh filtered query or filter-checked on insertion.
    """

    def __init__(self, filters: Optional[FilterCriteria] = None, max_items: int = MAX_ITEMS):
        self.filters = filters or FilterCriteria()
        self.max_items = max_items
        self.reports: List[Report] = []
        self.predictions: List[Prediction] = []

    def accepts(self, prediction: Prediction) -> bool:
        return matches_filters(prediction, self.filters)

    def apply_init(self, reports: Iterable[Report], predictions: Iterable[Prediction]):
        self.reports = merge_unique(reports, self.reports, self.max_items)
        self.predictions = merge_unique(
            predictions, self.predictions, self.max_items, accept=self.accepts
        )

    def apply_new_report(self, report: Report):
        self.reports = add_unique(self.reports, report, self.max_items)

    def apply_new_prediction(self, prediction: Prediction) -> bool:
        """Returns False when the event is ignored (filtered out or duplicate)."""
        if not self.accepts(prediction):
            return False
        before = self.predictions
        self.predictions = add_unique(self.predictions, prediction, self.max_items)
        return self.predictions is not before

    def set_filters(self, filters: FilterCriteria):
        """Replaces the active filter; callers must follow with a fresh query."""
        self.filters = filters

    def replace_predictions(self, predictions: Iterable[Prediction]):
        """Hard refresh from a filtered query result."""
        self.predictions = list(predictions)[:self.max_items]

    def replace_reports(self, reports: Iterable[Report]):
        self.reports = list(reports)[:self.max_items]

    def map_predictions(self) -> List[Prediction]:
        """Predictions that can be drawn on the map (valid coordinates)."""
        return [p for p in self.predictions if p.has_coordinates]


def risk_band(risk_score: float) -> str:
    if risk_score >= 0.75:
        return "high"
    if risk_score >= 0.55:
        return "medium"
    return "low"
