import logging

from dash import dcc, html, callback, Input, Output, State
import dash_bootstrap_components as dbc
import dash_ag_grid as dag

import chart_wrappers as cw
import config
from components.chart_tooltip import create_chart_tooltip, tooltip_outputs
from components.load_status_badge import create_load_status_badge
from data_loader import LoadError
from pages.narrative_content import NARRATIVE

logger = logging.getLogger(__name__)

HOLDINGS_COLUMNS = [
    {"field": "Symbol", "pinned": "left", "maxWidth": 120},
    {"field": "Company", "minWidth": 220},
    {"field": "Weight", "headerName": "Weight (%)", "sort": "desc",
     "valueFormatter": {"function": "d3.format('.2f')(params.value) + '%'"}},
    {"field": "Price"},
    {"field": "YTD Return", "headerName": "YTD Return (%)",
     "valueFormatter": {"function": "params.value == null ? 'N/A' : d3.format('.2f')(params.value) + '%'"},
     "cellStyle": {
         "styleConditions": [
             {"condition": "params.value != null && params.value < 0", "style": {"color": "#dc3545"}},
             {"condition": "params.value != null && params.value >= 0", "style": {"color": "#28a745"}},
         ]
     }},
]

layout = html.Div([
    dbc.Row([
        dbc.Col(dbc.Card([
            html.Div(dcc.Markdown(NARRATIVE["companies"]["content"]), className="p-3"),
        ]), width=4),
        dbc.Col(dbc.Card([
            html.Div([
                html.H5(NARRATIVE["companies"]["title"], className="card-title p-2", style={"display": "inline-block"}),
                html.Div(id="companies-status", style={"display": "inline-block"}),
            ]),
            dcc.Store(id="treemap-view-store"),
            html.Div([
                dcc.Loading(dcc.Graph(
                    id="treemap-chart",
                    clear_on_unhover=True,
                    config={"displayModeBar": False},
                )),
                create_chart_tooltip("treemap-tooltip"),
            ], style={"position": "relative", "overflowX": "auto"}),
            html.Div([
                html.Div("Year to Date Price Return:", className="small p-2"),
                dcc.Graph(id="treemap-legend", config={"displayModeBar": False, "staticPlot": True}),
            ], style={"display": "flex", "alignItems": "center"}),
        ]), width=8),
    ], className="mb-4"),

    dbc.Row([
        dbc.Col(dbc.Card([
            html.H5("Holdings", className="card-title p-2"),
            dcc.Loading(html.Div(id="holdings-table-container")),
        ]), width=12, className="mb-4"),
    ]),
])


@callback(
    [Output("treemap-chart", "figure"),
     Output("treemap-legend", "figure"),
     Output("treemap-view-store", "data"),
     Output("holdings-table-container", "children"),
     Output("companies-status", "children")],
    [Input("data-signal", "data"),
     Input("theme-store", "data")]
)
def update_companies(signal, theme):
    """Load and join both company CSVs, then draw Scene 2 and its legend."""
    try:
        companies = cw.load_company_view()
    except LoadError as e:
        logger.warning("Treemap unavailable: %s", e)
        badge = create_load_status_badge(
            [cw.load_status(f"{config.COMPANIES_FILE} + {config.PERFORMANCE_FILE}", error=e)],
            "companies-status-badge")
        empty = cw.empty_figure("Company data unavailable", theme)
        return empty, cw.empty_figure("", theme), None, html.P("No data available.",
               style={'fontStyle': 'italic', 'color': 'gray', 'padding': '10px'}), badge

    scene, cells, scale = cw.build_treemap_scene(companies)
    treemap = cw.scene_to_figure(scene, theme)
    legend = cw.scene_to_figure(cw.build_legend_scene(scale), theme)

    with_return = sum(1 for c in companies if c.has_return)
    badge = create_load_status_badge([
        cw.load_status(config.COMPANIES_FILE, rows=len(companies)),
        cw.load_status(config.PERFORMANCE_FILE, rows=with_return),
    ], "companies-status-badge")

    table = dag.AgGrid(
        id="holdings-grid",
        rowData=cw.holdings_rows(companies),
        columnDefs=HOLDINGS_COLUMNS,
        defaultColDef={"flex": 1, "minWidth": 100, "sortable": True, "filter": True, "resizable": True},
        className="ag-theme-alpine-dark" if theme == "dark" else "ag-theme-alpine",
        dashGridOptions={"pagination": True, "paginationPageSize": 25, "domLayout": "autoHeight"},
    )
    return treemap, legend, cw.dump_cells(cells), table, badge


@callback(
    [Output("treemap-tooltip", "show"),
     Output("treemap-tooltip", "bbox"),
     Output("treemap-tooltip", "children")],
    [Input("treemap-chart", "hoverData")],
    [State("treemap-view-store", "data")],
    prevent_initial_call=True
)
def hover_treemap(hover_data, view):
    """Show the hovered company's weight and return."""
    state = cw.treemap_hover(hover_data, cw.parse_cells(view))
    return tooltip_outputs(state)
