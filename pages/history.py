import logging

from dash import dcc, html, callback, Input, Output, State, Patch
import dash_bootstrap_components as dbc

import chart_wrappers as cw
import config
from components.chart_tooltip import create_chart_tooltip, tooltip_outputs
from components.load_status_badge import create_load_status_badge
from data_loader import LoadError
from pages.narrative_content import NARRATIVE
from scene import focus_trace_index

logger = logging.getLogger(__name__)

layout = html.Div([
    dbc.Row([
        dbc.Col(dbc.Card([
            html.Div([
                html.H5(NARRATIVE["history"]["title"], className="card-title p-2", style={"display": "inline-block"}),
                html.Div(id="history-status", style={"display": "inline-block"}),
            ]),
            dcc.Store(id="history-view-store"),
            html.Div([
                # No dcc.Loading here: every hover patches this figure
                dcc.Graph(
                    id="history-chart",
                    clear_on_unhover=True,
                    config={"displayModeBar": False},
                ),
                create_chart_tooltip("history-tooltip"),
            ], style={"position": "relative", "overflowX": "auto"}),
        ]), width=8),
        dbc.Col(dbc.Card([
            html.Div(dcc.Markdown(NARRATIVE["history"]["content"]), className="p-3"),
        ]), width=4),
    ], className="mb-4"),
])


@callback(
    [Output("history-chart", "figure"),
     Output("history-view-store", "data"),
     Output("history-status", "children")],
    [Input("data-signal", "data"),
     Input("theme-store", "data")]
)
def update_history(signal, theme):
    """Load the index series and draw Scene 1."""
    try:
        points = cw.load_index_view()
    except LoadError as e:
        logger.warning("History chart unavailable: %s", e)
        badge = create_load_status_badge([cw.load_status(config.INDEX_FILE, error=e)], "history-status-badge")
        return cw.empty_figure("Index data unavailable", theme), None, badge

    fig = cw.scene_to_figure(cw.build_history_scene(points), theme)
    view = {"points": cw.dump_price_series(points), "focus_trace": focus_trace_index(fig)}
    badge = create_load_status_badge([cw.load_status(config.INDEX_FILE, rows=len(points))], "history-status-badge")
    return fig, view, badge


@callback(
    [Output("history-tooltip", "show"),
     Output("history-tooltip", "bbox"),
     Output("history-tooltip", "children"),
     Output("history-chart", "figure", allow_duplicate=True)],
    [Input("history-chart", "hoverData")],
    [State("history-view-store", "data")],
    prevent_initial_call=True
)
def hover_history(hover_data, view):
    """Move the tooltip and focus circle to the point under the pointer."""
    view = view or {}
    points = cw.parse_price_series(view.get("points"))
    state, focus = cw.history_hover(hover_data, points)

    patched = Patch()
    trace = view.get("focus_trace")
    if trace is not None:
        patched["data"][trace]["x"] = [focus[0]] if focus else []
        patched["data"][trace]["y"] = [focus[1]] if focus else []

    show, bbox, children = tooltip_outputs(state)
    return show, bbox, children, patched
