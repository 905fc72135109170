import logging

import dash
from dash import dcc, html, Input, Output
import dash_bootstrap_components as dbc
from datetime import datetime

import config

# Configure logging before the pages import the pipeline modules
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize App
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.CYBORG],
    suppress_callback_exceptions=True,
    title="S&P 500 Data Visualization",
    url_base_pathname=f"{config.BASE_PATH}/",
)

# Import Pages (their callbacks register on import)
from pages import overview, history, companies, growth  # noqa: E402

SIDEBAR_STYLE = {
    "position": "fixed",
    "top": 0,
    "left": 0,
    "bottom": 0,
    "width": "16rem",
    "padding": "2rem 1rem",
    "overflowY": "auto",
}

CONTENT_STYLE = {
    "marginLeft": "17rem",
    "marginRight": "1rem",
    "padding": "2rem 1rem",
}

# Sidebar Component
sidebar = html.Div(
    [
        html.H3("S&P 500", className="display-6"),
        html.P("Data Visualization", className="lead"),
        html.Hr(),

        dbc.Nav(
            [
                dbc.NavLink("Overview", href=app.get_relative_path("/"), active="exact"),
                dbc.NavLink("History", href=app.get_relative_path("/history"), active="exact"),
                dbc.NavLink("Companies", href=app.get_relative_path("/companies"), active="exact"),
                dbc.NavLink("Growth", href=app.get_relative_path("/growth"), active="exact"),
            ],
            vertical=True,
            pills=True,
        ),

        html.Hr(),

        # Controls
        html.Div([
            dbc.Label("Theme"),
            dbc.Switch(id="theme-switch", label="Dark Mode", value=True, className="mb-2"),
            html.Hr(),
            dbc.Button("Reload Data", id="btn-reload-data", color="secondary", className="w-100"),
        ]),
    ],
    id="sidebar",
    style=SIDEBAR_STYLE,
)

# Content Container
content = html.Div(id="page-content", style=CONTENT_STYLE)

# Main Layout
app.layout = html.Div(
    [
        dcc.Location(id="url"),

        # Stores for Global State
        dcc.Store(id="data-signal", data=datetime.now().isoformat()),
        dcc.Store(id="theme-store", data="dark"),

        sidebar,
        content,
    ],
    id="main-container",
    **{"data-theme": "dark"}
)

# Validation Layout (Required for multi-page apps with global callbacks)
app.validation_layout = html.Div([
    app.layout,
    overview.layout,
    history.layout,
    companies.layout,
    growth.layout,
])

# ============================================================
# CALLBACKS
# ============================================================

# 1. Router
@app.callback(Output("page-content", "children"), [Input("url", "pathname")])
def render_page_content(pathname):
    route = app.strip_relative_path(pathname or "/")
    if not route:
        return overview.create_layout(app.get_relative_path)
    elif route == "history":
        return history.layout
    elif route == "companies":
        return companies.layout
    elif route == "growth":
        return growth.layout
    logger.info("Unknown path requested: %s", pathname)
    return dbc.Container(
        [
            html.H1("404: Not found", className="text-danger"),
            html.Hr(),
            html.P(f"The pathname {pathname} was not recognised..."),
        ],
        className="py-3"
    )

# 2. Theme
@app.callback(
    [Output("theme-store", "data"),
     Output("main-container", "data-theme")],
    [Input("theme-switch", "value")]
)
def update_theme(is_dark):
    theme = "dark" if is_dark else "light"
    return theme, theme

# 3. Reload Signal
@app.callback(
    Output("data-signal", "data"),
    [Input("btn-reload-data", "n_clicks")],
    prevent_initial_call=True
)
def reload_data(n):
    logger.info("Reloading chart data")
    return datetime.now().isoformat()


if __name__ == "__main__":
    app.run(debug=config.DEBUG)
