# ========================
# crash_dashboard/pipeline/presentation.py
# ========================

"""
Presentation Boundary

Maps the composite result onto chart series for the dashboard view: one bar
chart of monthly crashes and one severity pie chart per feed.
"""

from typing import Any, Dict, List, Optional, Sequence

from .models import CategoryCount, DashboardData, MonthBucket, PipelineState

COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042', '#8884d8', '#82ca9d']

DASHBOARD_TITLE = "Crash Analysis Dashboard"
LOADING_MESSAGE = "Loading dashboard data..."


def describe_state(state: PipelineState) -> str:
    """Text shown for each of the mutually exclusive view states."""
    if state.is_loading:
        return LOADING_MESSAGE
    if state.is_error:
        return f"Error: {state.error}"
    return DASHBOARD_TITLE


def slice_label(item: CategoryCount) -> str:
    return f"{item.name}: {item.value}"


def bar_series(monthly: Sequence[MonthBucket]) -> Dict[str, Any]:
    """Monthly crashes bar chart, x axis keyed by "MM-YYYY"."""
    if monthly:
        title = f"Monthly Crashes ({monthly[0].sort_key[:4]}-{monthly[-1].sort_key[:4]})"
    else:
        title = "Monthly Crashes"
    return {
        'title': title,
        'series_name': "Number of Crashes",
        'x_key': 'axisDate',
        'y_key': 'count',
        'points': [bucket.to_dict() for bucket in monthly],
    }


def pie_series(label: str, counts: Sequence[CategoryCount], total: int) -> Dict[str, Any]:
    """Injury severity pie chart for one feed, colors cycled from the palette."""
    return {
        'title': f"{label} Injury Severity",
        'subtitle': f"Total Cases: {total}",
        'total': total,
        'slices': [
            {
                **item.to_dict(),
                'color': COLORS[index % len(COLORS)],
                'label': slice_label(item),
            }
            for index, item in enumerate(counts)
        ],
    }


def build_chart_payload(data: DashboardData) -> Dict[str, Any]:
    """
    Build the full chart payload for a ready dashboard.

    Args:
        data (DashboardData): Composite pipeline result

    Returns:
        dict: ``title``, ``monthly`` bar series and ``severity`` pie series list
    """
    return {
        'title': DASHBOARD_TITLE,
        'monthly': bar_series(data.monthly),
        'severity': [
            pie_series(data.label_a, data.category_a, data.total_a),
            pie_series(data.label_b, data.category_b, data.total_b),
        ],
    }


def tooltip_for(monthly: Sequence[MonthBucket], axis_label: str) -> Optional[Dict[str, Any]]:
    """Tooltip content for the bar under ``axis_label``, None if there is none."""
    for bucket in monthly:
        if bucket.axis_label == axis_label:
            return {'title': bucket.display_label, 'text': f"Crashes: {bucket.count}"}
    return None


def summary_lines(data: DashboardData) -> List[str]:
    """Plain-text rendering of the dashboard, used by the command line entry point."""
    lines = [DASHBOARD_TITLE, ""]
    lines.append(bar_series(data.monthly)['title'])
    for bucket in data.monthly:
        lines.append(f"   • {bucket.display_label}: {bucket.count}")
    for label, counts, total in ((data.label_a, data.category_a, data.total_a),
                                 (data.label_b, data.category_b, data.total_b)):
        lines.append("")
        lines.append(f"{label} Injury Severity (Total Cases: {total})")
        for item in counts:
            lines.append(f"   • {slice_label(item)}")
    return lines
