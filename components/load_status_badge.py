import dash_bootstrap_components as dbc
from dash import html


def create_load_status_badge(statuses, badge_id):
    """
    Creates a badge summarizing the CSV loads behind a chart.
    statuses: list of {
        'name': resource file name,
        'rows': records loaded (None when unknown),
        'error': message when the load failed, else None
    }
    """
    if not statuses:
        return html.Div()

    failed = [s for s in statuses if s.get("error")]

    if not failed:
        label = "Data Loaded"
        color = "success"
        header = "All resources loaded."
    else:
        label = "Data Unavailable"
        color = "danger"
        header = "Some resources could not be loaded. The chart is left empty."

    summary_lines = []
    for s in statuses:
        if s.get("error"):
            summary_lines.append(f"• {s['name']}: {s['error']}")
        elif s.get("rows") is not None:
            summary_lines.append(f"• {s['name']}: {s['rows']} rows")
        else:
            summary_lines.append(f"• {s['name']}")

    tooltip_content = html.Div([
        html.P(header, className="mb-2 fw-bold"),
        html.Div([html.P(line, className="mb-0") for line in summary_lines]),
    ], style={"textAlign": "left", "padding": "5px"})

    badge = dbc.Badge(
        label,
        color=color,
        pill=True,
        id=badge_id,
        style={"cursor": "pointer", "fontSize": "0.8rem"}
    )

    return html.Div([
        badge,
        dbc.Tooltip(
            tooltip_content,
            target=badge_id,
            placement="bottom",
        )
    ], style={"display": "inline-block", "marginLeft": "10px"})
