import math
from collections import deque

import plotly.graph_objects as go

from .config import CHART_WINDOW, COLORS


class MetricsChart:
    """Loss and accuracy series keeping only the most recent ``window`` epochs."""

    def __init__(self, window=CHART_WINDOW):
        if window < 1:
            raise ValueError(f"Chart window must be positive, got {window}")
        self.window = window
        self.loss_points = deque(maxlen=window)
        self.accuracy_points = deque(maxlen=window)

    def push(self, epoch, loss, accuracy=None):
        if _is_number(loss):
            self.loss_points.append((epoch, float(loss)))
        # "N/A" and None mean the trainer reported no accuracy for this epoch
        if _is_number(accuracy):
            self.accuracy_points.append((epoch, float(accuracy)))

    def clear(self):
        self.loss_points.clear()
        self.accuracy_points.clear()

    def loss_figure(self):
        return _line_figure(self.loss_points, 'Loss', COLORS['loss'])

    def accuracy_figure(self):
        return _line_figure(self.accuracy_points, 'Accuracy (%)', COLORS['accuracy'])


def _is_number(value):
    if value is None or isinstance(value, bool):
        return False
    try:
        return not math.isnan(float(value))
    except (TypeError, ValueError):
        return False


def _line_figure(points, label, color):
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[f"Epoch {epoch}" for epoch, _ in points],
        y=[value for _, value in points],
        mode='lines+markers',
        name=label,
        line=dict(color=color, width=2, shape='spline', smoothing=0.2),
        marker=dict(color=color),
    ))
    fig.update_layout(
        title=label,
        paper_bgcolor=COLORS['background'],
        plot_bgcolor=COLORS['background'],
        font=dict(color=COLORS['text']),
        xaxis=dict(showgrid=False),
        yaxis=dict(gridcolor='#222222'),
        margin=dict(l=40, r=10, t=40, b=30),
        showlegend=False,
    )
    return fig
