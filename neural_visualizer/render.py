import math
from collections import namedtuple

import numpy as np
import plotly.graph_objects as go

from .config import COLORS, MEDIUM_LIMIT, NODE_RADIUS, TIER_OPACITY, WEAK_LIMIT
from .weights import WeightKey, resolve_weight

EdgeSegment = namedtuple('EdgeSegment', ['key', 'start', 'end', 'weight', 'tier', 'width'])

TIER_COLORS = {
    'weak': COLORS['weight_weak'],
    'medium': COLORS['weight_medium'],
    'strong': COLORS['weight_strong'],
}


class NetworkCanvas:
    """Drawing surface for the network diagram, backed by a plotly figure.

    Coordinates follow canvas conventions: the origin is the top-left corner
    and y grows downwards.
    """

    def __init__(self, width=900, height=500):
        self.figure = go.Figure()
        self.figure.update_layout(
            paper_bgcolor=COLORS['background'],
            plot_bgcolor=COLORS['background'],
            margin=dict(l=0, r=0, t=0, b=0),
            showlegend=False,
        )
        self.resize(width, height)

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.figure.update_layout(
            width=width,
            height=height,
            xaxis=dict(range=[0, width], visible=False, fixedrange=True),
            yaxis=dict(range=[height, 0], visible=False, fixedrange=True),
        )

    def clear(self):
        self.figure.data = []

    def draw(self, traces):
        self.figure.add_traces(list(traces))

    def snapshot(self):
        return self.figure.to_dict()


def weight_tier(weight):
    magnitude = abs(weight)
    # NaN fails every comparison below
    if math.isnan(magnitude) or magnitude < WEAK_LIMIT:
        return 'weak'
    if magnitude < MEDIUM_LIMIT:
        return 'medium'
    return 'strong'


def edge_segments(layout, weight_map, rng=None):
    """Style every dense edge between adjacent layers."""
    rng = rng if rng is not None else np.random.default_rng()
    segments = []
    for layer_index in range(1, layout.layer_count):
        previous = layout.layer(layer_index - 1)
        for node in layout.layer(layer_index):
            for prev in previous:
                weight = resolve_weight(weight_map, layer_index - 1, prev.neuron_index, node.neuron_index, rng)
                segments.append(EdgeSegment(
                    key=WeightKey(layer_index - 1, prev.neuron_index, node.neuron_index),
                    start=(prev.x, prev.y),
                    end=(node.x, node.y),
                    weight=weight,
                    tier=weight_tier(weight),
                    width=abs(weight) * 2,
                ))
    return segments


def _edge_traces(segments):
    # One trace per distinct magnitude keeps the trace count small on large layers
    groups = {}
    for segment in segments:
        group = groups.setdefault((abs(segment.weight), segment.tier), ([], []))
        group[0].extend([segment.start[0], segment.end[0], None])
        group[1].extend([segment.start[1], segment.end[1], None])

    traces = []
    for (magnitude, tier), (xs, ys) in sorted(groups.items()):
        traces.append(go.Scatter(
            x=xs,
            y=ys,
            mode='lines',
            line=dict(color=TIER_COLORS[tier], width=magnitude * 2),
            opacity=TIER_OPACITY[tier],
            hoverinfo='none',
            showlegend=False,
            name=f'{tier} {magnitude:.2f}',
            meta={'tier': tier, 'magnitude': magnitude},
        ))
    return traces


def _node_traces(layout):
    last = layout.layer_count - 1
    outer = [node for node in layout if node.layer_index in (0, last)]
    hidden = [node for node in layout if 0 < node.layer_index < last]

    traces = []
    for nodes, color, name in ((outer, COLORS['neuron'], 'io-neurons'),
                               (hidden, COLORS['hidden_neuron'], 'hidden-neurons')):
        if not nodes:
            continue
        traces.append(go.Scatter(
            x=[node.x for node in nodes],
            y=[node.y for node in nodes],
            mode='markers',
            marker=dict(size=NODE_RADIUS * 2, color=color),
            customdata=[[node.layer_index, node.neuron_index] for node in nodes],
            hovertemplate='Layer %{customdata[0]}<br>Neuron %{customdata[1]}<extra></extra>',
            showlegend=False,
            name=name,
        ))
    return traces


def render_network(surface, layout, weight_map, rng=None):
    """Redraw the whole diagram: edges first, then the neurons on top."""
    surface.clear()
    surface.draw(_edge_traces(edge_segments(layout, weight_map, rng)))
    surface.draw(_node_traces(layout))
