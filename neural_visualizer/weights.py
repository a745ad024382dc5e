"""Edge weights shown on the network diagram.

Weights are addressed by a three-part key: the source layer, the neuron in
that layer and the neuron it feeds in the next layer. Only the edges the
trainer reports are stored. Every other edge is drawn with a random
placeholder in [-1, 1] that is drawn again on each render, so those edges
flicker between epochs and say nothing about the trained parameters.
"""
import logging
import math
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)

WeightKey = namedtuple('WeightKey', ['source_layer', 'source_neuron', 'dest_neuron'])


def format_key(key):
    return '-'.join(str(part) for part in key)


def parse_key(text):
    parts = str(text).split('-')
    if len(parts) != 3:
        raise ValueError(f"Weight key must have three parts, got {text!r}")
    return WeightKey(*(int(part) for part in parts))


def normalize_weight_map(weights):
    """Return a dict keyed by WeightKey with float values.

    Accepts "layer-source-dest" strings or 3-tuples as keys and numbers or
    numeric strings as values. None and non-finite values are left out, so
    those edges get a placeholder like any unobserved edge.
    """
    normalized = {}
    for key, value in (weights or {}).items():
        if value is None:
            continue
        if isinstance(key, str):
            key = parse_key(key)
        else:
            key = WeightKey(*key)
        value = float(value)
        if not math.isfinite(value):
            logger.debug("Dropping non-finite weight for %s", format_key(key))
            continue
        normalized[key] = value
    return normalized


def fallback_weight(rng=None):
    rng = rng if rng is not None else np.random.default_rng()
    return round(float(rng.uniform(-1.0, 1.0)), 2)


def resolve_weight(weight_map, source_layer, source_neuron, dest_neuron, rng=None):
    value = weight_map.get((source_layer, source_neuron, dest_neuron))
    if value is not None:
        return value
    return fallback_weight(rng)


def _first_weight(module):
    for name, param in module.named_parameters(recurse=False):
        if 'weight' in name:
            return param
    return None


def observed_weights(model, widths):
    """Translate a model's parameters into diagram edge weights.

    The k-th weight-bearing layer (first weight tensor, at least 2-D) feeds
    diagram layer k. Its tensor is viewed as (out, in) and every entry that
    fits inside the diagram becomes the edge (k, in, out), rounded to two
    decimals. Layers beyond the last diagram connection are ignored.
    """
    weights = {}
    layer = 0
    for module in model.modules():
        if layer >= len(widths) - 1:
            break
        if any(True for _ in module.children()):
            continue
        tensor = _first_weight(module)
        if tensor is None or tensor.dim() < 2:
            continue

        matrix = tensor.detach().reshape(tensor.shape[0], -1).cpu().numpy()
        rows = min(matrix.shape[0], widths[layer + 1])
        cols = min(matrix.shape[1], widths[layer])
        block = np.round(matrix[:rows, :cols], 2)
        for dest in range(rows):
            for source in range(cols):
                weights[WeightKey(layer, source, dest)] = float(block[dest, source])
        layer += 1

    logger.debug("Observed %d weights across %d layers", len(weights), layer)
    return weights
