import logging

from dash import dcc, html, callback, Input, Output, State, no_update
import dash_bootstrap_components as dbc

import chart_wrappers as cw
import config
from components.chart_tooltip import create_chart_tooltip, tooltip_outputs
from components.load_status_badge import create_load_status_badge
from data_loader import LoadError
from market_math import accept_investment_amount, calculate_investment_growth, format_currency
from pages.narrative_content import NARRATIVE

logger = logging.getLogger(__name__)

layout = html.Div([
    dbc.Row([
        dbc.Col(dbc.Card([
            html.Div([
                html.H5(NARRATIVE["growth"]["title"], className="card-title p-2", style={"display": "inline-block"}),
                html.Div(id="growth-status", style={"display": "inline-block"}),
            ]),
            dcc.Store(id="growth-amount-store", data=config.DEFAULT_INVESTMENT),
            dcc.Store(id="growth-view-store"),
            html.Div([
                dcc.Loading(dcc.Graph(
                    id="growth-chart",
                    clear_on_unhover=True,
                    config={"displayModeBar": False},
                )),
                create_chart_tooltip("growth-tooltip"),
            ], style={"position": "relative", "overflowX": "auto"}),
        ]), width=8),
        dbc.Col(dbc.Card([
            dbc.CardBody([
                dbc.Label(f"Amount Invested in {config.GROWTH_START_YEAR} ($)", html_for="growth-amount"),
                dbc.Input(id="growth-amount", type="number", min=0, step=0.01,
                          value=config.DEFAULT_INVESTMENT, debounce=True),
                html.P(id="growth-summary", className="mt-3 mb-0 fw-bold"),
            ]),
            html.Div(dcc.Markdown(NARRATIVE["growth"]["content"]), className="p-3"),
        ]), width=4),
    ], className="mb-4"),
])


@callback(
    Output("growth-amount-store", "data"),
    [Input("growth-amount", "value")],
    [State("growth-amount-store", "data")],
    prevent_initial_call=True
)
def update_amount(value, previous):
    """Only non-negative numbers replace the stored amount."""
    amount = accept_investment_amount(value, previous)
    return no_update if amount == previous else amount


@callback(
    [Output("growth-chart", "figure"),
     Output("growth-view-store", "data"),
     Output("growth-summary", "children"),
     Output("growth-status", "children")],
    [Input("data-signal", "data"),
     Input("theme-store", "data"),
     Input("growth-amount-store", "data")]
)
def update_growth(signal, theme, amount):
    """Recompute the whole growth curve for the current amount and draw Scene 3."""
    amount = config.DEFAULT_INVESTMENT if amount is None else amount
    try:
        entries = cw.load_growth_view()
    except LoadError as e:
        logger.warning("Growth chart unavailable: %s", e)
        badge = create_load_status_badge([cw.load_status(config.HISTORY_FILE, error=e)], "growth-status-badge")
        return cw.empty_figure("Return history unavailable", theme), None, "", badge

    points = calculate_investment_growth(entries, amount)
    fig = cw.scene_to_figure(cw.build_growth_scene(points, amount), theme)

    summary = ""
    if points:
        last = points[-1]
        summary = f"Investment Value in {last.year.year}: {format_currency(last.value)}"

    badge = create_load_status_badge([cw.load_status(config.HISTORY_FILE, rows=len(entries))], "growth-status-badge")
    return fig, cw.dump_growth(points, amount), summary, badge


@callback(
    [Output("growth-tooltip", "show"),
     Output("growth-tooltip", "bbox"),
     Output("growth-tooltip", "children")],
    [Input("growth-chart", "hoverData")],
    [State("growth-view-store", "data")],
    prevent_initial_call=True
)
def hover_growth(hover_data, view):
    points, _ = cw.parse_growth(view)
    return tooltip_outputs(cw.growth_hover(hover_data, points))
