import argparse
import logging
import sys

import dash
import dash_bootstrap_components as dbc
from dash import dcc, html
from dash.dependencies import Input, Output
from dash.development.base_component import Component
from dash.exceptions import PreventUpdate

from .config import CAMEL_CASE_NAMES, SLIDER_RANGES, AppConfig, CanvasSize, Family, Hyperparameters
from .descriptions import describe
from .errors import InvalidHyperparametersError, InvalidTopologyError, RenderSurfaceUnavailableError
from .session import IDLE, TRAINING, Playground

logger = logging.getLogger(__name__)

# Components the callbacks draw into; the app refuses to start without them
REQUIRED_COMPONENTS = (
    'network-graph',
    'loss-chart',
    'accuracy-chart',
    'log-panel',
    'train-button',
    'training-interval',
)

FAMILY_OPTIONS = [
    {'label': 'MLP', 'value': Family.FULLY_CONNECTED.value},
    {'label': 'CNN', 'value': Family.CONVOLUTIONAL.value},
    {'label': 'RNN', 'value': Family.RECURRENT.value},
]

SLIDER_LABELS = {
    'learning_rate': 'Learning Rate',
    'batch_size': 'Batch Size',
    'epochs': 'Epochs',
    'hidden_units': 'Hidden Units',
    'filters': 'Filters',
}

SLIDER_FIELDS = ('learning_rate', 'batch_size', 'epochs', 'hidden_units', 'filters')


def _slider(name, value):
    slider_id = CAMEL_CASE_NAMES[name]
    low, high, step = SLIDER_RANGES[name]
    return html.Div([
        html.Label([f"{SLIDER_LABELS[name]}: ", html.Span(str(value), id=f'{slider_id}Value')]),
        dcc.Slider(
            id=slider_id,
            min=low,
            max=high,
            step=step,
            value=value,
            marks={low: str(low), high: str(high)},
            className="mb-3"
        ),
    ], id=f'{slider_id}-control')


def model_info(family):
    info = describe(family)
    return [
        html.H4(info['title']),
        html.P(info['description']),
        html.Ul([html.Li([html.B(f"{label}: "), text]) for label, text in info['details']]),
        html.H6("Preset parameters"),
        html.Ul([html.Li([html.B(f"{label}: "), text]) for label, text in info['preset']]),
        html.H6("Adjustable parameters"),
        html.Ul([html.Li([html.B(f"{label}: "), text]) for label, text in info['variable']]),
    ]


def log_lines(playground):
    return [html.Div(f"> {line}") for line in playground.log.lines]


def build_layout(playground, config):
    hyperparameters = playground.hyperparameters
    controls = [
        html.Label("Model Type:"),
        dbc.RadioItems(
            id='family-selector',
            options=FAMILY_OPTIONS,
            value=playground.family.value,
            inline=True,
            className="mb-3"
        ),
    ]
    controls += [_slider(name, getattr(hyperparameters, name)) for name in SLIDER_FIELDS]
    controls.append(dbc.Button(playground.button_label, id='train-button', color="success", className="w-100"))

    return dbc.Container([
        dbc.Row([
            dbc.Col([
                html.H1("Neural Network Visualizer", className="text-center my-4"),
                html.P("Pick a network, tune it and watch it train", className="text-center lead mb-4")
            ], width=12)
        ]),

        dbc.Row([
            # Left sidebar for model selection and hyperparameters
            dbc.Col([
                dbc.Card([
                    dbc.CardHeader("Network Configuration"),
                    dbc.CardBody(controls)
                ]),
                dbc.Card([
                    dbc.CardHeader("Model Info"),
                    dbc.CardBody(model_info(playground.family), id='model-info')
                ], className="mt-3")
            ], width=3),

            # Main content area
            dbc.Col([
                dbc.Card([
                    dbc.CardHeader("Network Architecture"),
                    dbc.CardBody([
                        dcc.Graph(id='network-graph', figure=playground.controller.figure(),
                                  config={'displayModeBar': False})
                    ])
                ]),
                dbc.Row([
                    dbc.Col([dcc.Graph(id='loss-chart', figure=playground.chart.loss_figure(),
                                       style={'height': '260px'})], width=6),
                    dbc.Col([dcc.Graph(id='accuracy-chart', figure=playground.chart.accuracy_figure(),
                                       style={'height': '260px'})], width=6),
                ], className="mt-3"),
                dbc.Card([
                    dbc.CardHeader([
                        "Console ",
                        dbc.Badge("Idle", id='training-status', color="secondary", className="ms-2")
                    ]),
                    dbc.CardBody([
                        html.Div(
                            html.Div(log_lines(playground), id='log-panel'),
                            style={'height': '200px', 'overflowY': 'auto', 'display': 'flex',
                                   'flexDirection': 'column-reverse', 'fontFamily': 'monospace'}
                        )
                    ])
                ], className="mt-3 mb-5"),
                # Each tick runs one epoch, letting the browser repaint in between
                dcc.Interval(id='training-interval', interval=config.tick_interval, disabled=True)
            ], width=9)
        ])
    ], fluid=True)


def component_ids(layout):
    ids = set()
    stack = [layout]
    while stack:
        node = stack.pop()
        if isinstance(node, (list, tuple)):
            stack.extend(node)
            continue
        if not isinstance(node, Component):
            continue
        node_id = getattr(node, 'id', None)
        if isinstance(node_id, str):
            ids.add(node_id)
        stack.append(getattr(node, 'children', None))
    return ids


def check_surfaces(layout, required=REQUIRED_COMPONENTS):
    missing = [component for component in required if component not in component_ids(layout)]
    if missing:
        raise RenderSurfaceUnavailableError(f"Missing page components: {', '.join(missing)}")


def _status_badge(playground):
    status = playground.status
    if status == IDLE:
        return "Idle", "secondary"
    if status == TRAINING:
        return "Training...", "success"
    return "Stopping...", "warning"


def register_callbacks(app, playground):
    slider_ids = [CAMEL_CASE_NAMES[name] for name in SLIDER_FIELDS]

    @app.callback(
        [Output('network-graph', 'figure'),
         Output('model-info', 'children'),
         Output('hiddenUnits-control', 'style'),
         Output('filters-control', 'style')] +
        [Output(f'{slider_id}Value', 'children') for slider_id in slider_ids],
        [Input('family-selector', 'value')] +
        [Input(slider_id, 'value') for slider_id in slider_ids]
    )
    def select_model(family_value, *slider_values):
        # The running model keeps its topology until training ends
        if playground.is_training:
            raise PreventUpdate
        values = dict(zip(slider_ids, slider_values))
        try:
            hyperparameters = Hyperparameters.from_dict(values)
            playground.select(family_value, hyperparameters)
        except (InvalidHyperparametersError, InvalidTopologyError) as e:
            logger.warning("Ignoring model selection: %s", e)
            raise PreventUpdate

        family = playground.family
        hidden_style = {'display': 'none'} if family is Family.CONVOLUTIONAL else {}
        filters_style = {} if family is Family.CONVOLUTIONAL else {'display': 'none'}
        readouts = [str(value) for value in slider_values]
        return [playground.controller.figure(), model_info(family), hidden_style, filters_style] + readouts

    @app.callback(
        [Output('training-interval', 'disabled', allow_duplicate=True),
         Output('train-button', 'children', allow_duplicate=True),
         Output('log-panel', 'children', allow_duplicate=True),
         Output('loss-chart', 'figure', allow_duplicate=True),
         Output('accuracy-chart', 'figure', allow_duplicate=True),
         Output('training-status', 'children', allow_duplicate=True),
         Output('training-status', 'color', allow_duplicate=True)],
        Input('train-button', 'n_clicks'),
        prevent_initial_call=True
    )
    def toggle_training(n_clicks):
        if not n_clicks:
            raise PreventUpdate
        if playground.is_training:
            playground.stop()
        else:
            playground.start()
        label, color = _status_badge(playground)
        return (not playground.is_training, playground.button_label, log_lines(playground),
                playground.chart.loss_figure(), playground.chart.accuracy_figure(), label, color)

    @app.callback(
        [Output('network-graph', 'figure', allow_duplicate=True),
         Output('loss-chart', 'figure'),
         Output('accuracy-chart', 'figure'),
         Output('log-panel', 'children'),
         Output('training-interval', 'disabled'),
         Output('train-button', 'children'),
         Output('training-status', 'children'),
         Output('training-status', 'color')],
        Input('training-interval', 'n_intervals'),
        prevent_initial_call=True
    )
    def training_tick(n_intervals):
        if not playground.is_training:
            label, color = _status_badge(playground)
            return (dash.no_update,) * 4 + (True, playground.button_label, label, color)
        running = playground.advance()
        label, color = _status_badge(playground)
        return (playground.controller.figure(), playground.chart.loss_figure(),
                playground.chart.accuracy_figure(), log_lines(playground),
                not running, playground.button_label, label, color)

    return app


def create_app(config=None, playground=None, layout=None):
    """Build the Dash app around a caller-owned Playground."""
    config = config or AppConfig()
    if playground is None:
        playground = Playground(canvas_size=config.canvas, chart_window=config.chart_window,
                                sample_count=config.sample_count)
    if not playground.controller.initialized:
        playground.select(playground.family, playground.hyperparameters)

    layout = layout if layout is not None else build_layout(playground, config)
    check_surfaces(layout)

    app = dash.Dash(__name__, external_stylesheets=[dbc.themes.FLATLY])
    app.title = "Neural Network Visualizer"
    app.layout = layout
    register_callbacks(app, playground)
    return app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive neural network training visualizer")
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=8050)
    parser.add_argument('--debug', action='store_true')
    parser.add_argument('--width', type=int, default=900, help="Network canvas width in pixels")
    parser.add_argument('--height', type=int, default=500, help="Network canvas height in pixels")
    parser.add_argument('--chart-window', type=int, default=20, help="Epochs kept on the metric charts")
    args = parser.parse_args(argv)
    return AppConfig(
        host=args.host,
        port=args.port,
        debug=args.debug,
        canvas=CanvasSize(args.width, args.height),
        chart_window=args.chart_window,
    )


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    # Suppress per-request werkzeug logging
    logging.getLogger('werkzeug').setLevel(logging.ERROR)

    config = parse_args(argv)
    try:
        app = create_app(config)
    except RenderSurfaceUnavailableError as e:
        logger.error("Cannot start visualizer: %s", e)
        return 1

    logger.info("Serving on http://%s:%d", config.host, config.port)
    app.run(debug=config.debug, host=config.host, port=config.port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
