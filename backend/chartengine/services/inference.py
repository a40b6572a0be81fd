"""
Chart inference service.

Picks a chart family and axis mapping from column profiles and the user's
optional X/Y selection, using deterministic first-match-wins rules.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from chartengine.core.performance import track_performance
from chartengine.core.sanitization import sanitize_for_logging
from chartengine.core.schemas import (
    ChartSuggestion,
    ChartType,
    ColumnProfile,
    ColumnType,
    ViewType,
)

logger = logging.getLogger(__name__)


class Scope(str, Enum):
    """Which axes the user selected when a rule is evaluated."""
    BOTH = "both"
    NONE = "none"
    X_ONLY = "x_only"
    Y_ONLY = "y_only"


@dataclass(frozen=True)
class Selection:
    profiles: Tuple[ColumnProfile, ...]
    x: Optional[ColumnProfile] = None
    y: Optional[ColumnProfile] = None

    def of_type(self, *types: ColumnType) -> List[ColumnProfile]:
        """Profiles of the given types, in original column order."""
        return [p for p in self.profiles if p.type in types]

    def first(self, *types: ColumnType) -> Optional[ColumnProfile]:
        matches = self.of_type(*types)
        return matches[0] if matches else None

    def count(self, column_type: ColumnType) -> int:
        return len(self.of_type(column_type))


@dataclass(frozen=True)
class Rule:
    name: str
    scope: Scope
    applies: Callable[[Selection], bool]
    build: Callable[[Selection], ChartSuggestion]


def _is(profile: Optional[ColumnProfile], column_type: ColumnType) -> bool:
    return profile is not None and profile.type is column_type


def _explorer(reason: str) -> ChartSuggestion:
    return ChartSuggestion(type=ChartType.TABLE, reason=reason, view_type=ViewType.EXPLORER)


N, D, C, T = ColumnType.NUMBER, ColumnType.DATE, ColumnType.CATEGORICAL, ColumnType.TEXT

RULES: Tuple[Rule, ...] = (
    # Both axes selected
    Rule(
        "selected_time_series", Scope.BOTH,
        lambda s: _is(s.x, D) and _is(s.y, N),
        lambda s: ChartSuggestion(type=ChartType.LINE, reason="time series data", x=s.x.name, y=s.y.name),
    ),
    Rule(
        "selected_categorical_comparison", Scope.BOTH,
        lambda s: _is(s.x, C) and _is(s.y, N),
        lambda s: ChartSuggestion(type=ChartType.BAR, reason="categorical comparison", x=s.x.name, y=s.y.name),
    ),
    Rule(
        "selected_correlation", Scope.BOTH,
        lambda s: _is(s.x, N) and _is(s.y, N),
        lambda s: ChartSuggestion(type=ChartType.SCATTER, reason="correlation analysis", x=s.x.name, y=s.y.name),
    ),
    Rule(
        "selected_numeric", Scope.BOTH,
        lambda s: _is(s.y, N),
        lambda s: ChartSuggestion(type=ChartType.BAR, reason="numeric analysis", x=s.x.name, y=s.y.name),
    ),

    # Nothing selected
    Rule(
        "auto_time_series", Scope.NONE,
        lambda s: s.count(D) > 0 and s.count(N) > 0,
        lambda s: ChartSuggestion(type=ChartType.LINE, reason="time series data", x=s.first(D).name, y=s.first(N).name),
    ),
    Rule(
        "auto_categorical", Scope.NONE,
        lambda s: s.count(C) > 0 and s.count(N) > 0,
        lambda s: ChartSuggestion(type=ChartType.BAR, reason="categorical analysis", x=s.first(C).name, y=s.first(N).name),
    ),
    Rule(
        "auto_correlation", Scope.NONE,
        lambda s: s.count(N) >= 2,
        lambda s: ChartSuggestion(
            type=ChartType.SCATTER, reason="correlation analysis",
            x=s.of_type(N)[0].name, y=s.of_type(N)[1].name,
        ),
    ),
    Rule(
        "auto_single_number", Scope.NONE,
        lambda s: s.count(N) == 1 and (s.count(C) > 0 or s.count(T) > 0),
        lambda s: ChartSuggestion(
            type=ChartType.BAR, reason="data analysis",
            x=(s.first(C) or s.first(T)).name, y=s.first(N).name,
        ),
    ),
    Rule(
        "auto_frequency", Scope.NONE,
        lambda s: s.count(C) > 0 and s.count(N) == 0,
        lambda s: ChartSuggestion(
            type=ChartType.PIE, reason="categorical distribution",
            x=s.first(C).name, y=None, view_type=ViewType.FREQUENCY,
        ),
    ),
    Rule(
        "auto_timeline", Scope.NONE,
        lambda s: s.count(D) > 0 and s.count(N) == 0 and s.count(C) == 0,
        lambda s: ChartSuggestion(
            type=ChartType.TABLE, reason="date-only dataset - use data explorer",
            x=s.first(D).name, view_type=ViewType.TIMELINE,
        ),
    ),
    Rule(
        "auto_explorer", Scope.NONE,
        lambda s: True,
        lambda s: _explorer("no numeric columns - use data explorer"),
    ),

    # One axis selected
    Rule(
        "x_with_first_number", Scope.X_ONLY,
        lambda s: s.count(N) > 0,
        lambda s: ChartSuggestion(type=ChartType.BAR, reason="numeric analysis", x=s.x.name, y=s.first(N).name),
    ),
    Rule(
        "y_with_first_label", Scope.Y_ONLY,
        lambda s: _is(s.y, N) and s.first(C, T) is not None,
        lambda s: ChartSuggestion(type=ChartType.BAR, reason="comparison analysis", x=s.first(C, T).name, y=s.y.name),
    ),
)

FALLBACK_REASON = "no suitable columns - use data explorer"


def find_profile(profiles: Sequence[ColumnProfile], name: Optional[str]) -> Optional[ColumnProfile]:
    if not name:
        return None
    return next((p for p in profiles if p.name == name), None)


def _evaluation_order(selection: Selection) -> List[Tuple[Scope, Selection]]:
    """
    Scopes to try, in order, for the given selection.

    When both axes are selected but no both-axes rule fits, the X selection
    alone is tried next and then the automatic rules.
    """
    if selection.x and selection.y:
        return [
            (Scope.BOTH, selection),
            (Scope.X_ONLY, replace(selection, y=None)),
            (Scope.NONE, replace(selection, x=None, y=None)),
        ]
    if selection.x:
        return [(Scope.X_ONLY, selection)]
    if selection.y:
        return [(Scope.Y_ONLY, selection)]
    return [(Scope.NONE, selection)]


def match_rule(selection: Selection, scope: Scope) -> Optional[Tuple[Rule, ChartSuggestion]]:
    """First rule of ``scope`` that applies to ``selection``, with its suggestion."""
    for rule in RULES:
        if rule.scope is scope and rule.applies(selection):
            return rule, rule.build(selection)
    return None


@track_performance("suggest_chart")
def suggest_chart(
    profiles: Sequence[ColumnProfile],
    selected_x: Optional[str] = None,
    selected_y: Optional[str] = None,
) -> ChartSuggestion:
    """
    Suggest a chart family and axes.

    Call again whenever the X or Y selection changes; the result replaces
    the previous suggestion.

    Args:
        profiles: Column profiles in original column order
        selected_x: Column chosen for the X axis, if any
        selected_y: Column chosen for the Y axis, if any

    Returns:
        A fresh ChartSuggestion; a table/explorer view when nothing fits
    """
    profiles = tuple(profiles)
    selection = Selection(
        profiles=profiles,
        x=find_profile(profiles, selected_x),
        y=find_profile(profiles, selected_y),
    )

    for scope, scoped in _evaluation_order(selection):
        matched = match_rule(scoped, scope)
        if matched is not None:
            rule, suggestion = matched
            logger.debug(
                f"Rule {rule.name} chose {suggestion.type.value} "
                f"(x={sanitize_for_logging(suggestion.x)!r}, y={sanitize_for_logging(suggestion.y)!r})"
            )
            return suggestion

    return _explorer(FALLBACK_REASON)


def override_chart_type(suggestion: ChartSuggestion, chart_type: ChartType) -> ChartSuggestion:
    """Keep the suggested axes but render them as ``chart_type``."""
    chart_type = ChartType(chart_type)
    if chart_type is suggestion.type:
        return suggestion
    return suggestion.model_copy(update={
        "type": chart_type,
        "reason": "user selected",
        "view_type": None,
    })
