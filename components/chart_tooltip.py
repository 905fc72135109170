from dash import dcc, html


def create_chart_tooltip(tooltip_id):
    """The single tooltip element a chart page owns. Callbacks only move and refill it."""
    return dcc.Tooltip(
        id=tooltip_id,
        direction="right",
        background_color="white",
        border_color="#000",
        loading_text="",
        style={"color": "#000", "fontSize": "14px", "pointerEvents": "none"},
    )


def render_lines(lines):
    """TooltipLine list -> html children, one row per line."""
    rows = []
    for line in lines:
        value = html.B(line.value) if line.bold else html.Span(line.value)
        if line.color:
            value = html.Span(value, style={"color": line.color})
        parts = [html.Span(line.label + " ")] if line.label else []
        rows.append(html.Div(parts + [value], className="mb-0"))
    return html.Div(rows, style={"whiteSpace": "nowrap"})


def tooltip_outputs(state):
    """(show, bbox, children) for a TooltipState."""
    show, bbox, lines = state.props()
    if not show:
        return False, None, None
    return True, bbox, render_lines(lines)
