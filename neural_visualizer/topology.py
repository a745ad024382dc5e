from .config import INPUT_FEATURE_COUNT, Family
from .errors import InvalidTopologyError


def derive_layer_widths(family, hyperparameters):
    """Return the neuron count of every diagram layer, input and output included.

    The widths describe the illustrative diagram only; they do not have to
    match the tensor shapes of the model that is actually trained.
    """
    family = Family.parse(family)

    if family is Family.FULLY_CONNECTED:
        hidden = hyperparameters.hidden_units
        widths = (10, hidden, max(4, hidden // 2), 1)
    elif family is Family.CONVOLUTIONAL:
        widths = (INPUT_FEATURE_COUNT, hyperparameters.filters * 4, 64, 10)
    else:  # Recurrent
        hidden = hyperparameters.hidden_units
        widths = (20, hidden, max(4, hidden // 2), 1)

    if any(width < 1 for width in widths):
        raise InvalidTopologyError(f"Every layer needs at least one neuron, got {widths}")
    return widths


def edge_count(widths):
    # Adjacent layers are drawn fully connected
    return sum(a * b for a, b in zip(widths, widths[1:]))
