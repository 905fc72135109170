from dash import dcc, html
import dash_bootstrap_components as dbc

import config
from pages.narrative_content import NARRATIVE, SOURCES


def create_section_card(title, text, href):
    """Short teaser card linking to one chart page."""
    return dbc.Card(dbc.CardBody([
        html.H5(title, className="card-title"),
        html.P(text, className="text-muted small"),
        dcc.Link("Open →", href=href, style={"color": config.LINE_COLOR}),
    ]), className="h-100")


def create_layout(get_path=lambda p: p):
    """`get_path` maps an app route onto the deployment base path."""
    intro = NARRATIVE["overview"]
    sources = html.Ul([
        html.Li(html.A(label, href=url, target="_blank", style={"color": config.LINE_COLOR}))
        for label, url in SOURCES
    ])

    return html.Div([
        dbc.Row([
            dbc.Col(dbc.Card([
                html.H1("S&P 500", className="display-4 p-2"),
                html.H5(intro["title"], className="card-title p-2"),
                html.Div(dcc.Markdown(intro["content"]), className="p-2"),
                html.H6("Data sources", className="p-2 mb-0"),
                html.Div(sources, className="px-2"),
            ]), width=12),
        ], className="mb-4"),

        dbc.Row([
            dbc.Col(create_section_card(
                "History", "The index level since 1980 with major market events.",
                get_path("/history")), width=4),
            dbc.Col(create_section_card(
                "Companies", "Constituents by weight, colored by YTD return.",
                get_path("/companies")), width=4),
            dbc.Col(create_section_card(
                "Growth", "What an investment made in 2009 is worth now.",
                get_path("/growth")), width=4),
        ], className="mb-4"),
    ])


layout = create_layout()
