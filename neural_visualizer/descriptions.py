from .config import Family

# Copy shown in the model info card for each family
MODEL_DESCRIPTIONS = {
    Family.FULLY_CONNECTED: {
        'title': 'Multi-Layer Perceptron (MLP)',
        'description': 'A fully connected network for tabular and structured data. '
                       'Every input feature reaches every neuron of the next layer.',
        'details': [
            ('Fully connected layers', 'each neuron feeds every neuron of the following layer.'),
            ('ReLU activation', 'adds the non-linearity needed to learn curved decision boundaries.'),
            ('Batch normalization', 'keeps activations in a stable range between layers.'),
            ('Dropout', 'randomly silences neurons while training to reduce overfitting.'),
            ('Best for', 'structured data and small classification tasks.'),
            ('Downside', 'no notion of spatial or temporal structure in the input.'),
        ],
        'preset': [
            ('Input shape', 'vector of 10 features'),
            ('Output', 'one sigmoid unit (binary classification)'),
        ],
        'variable': [
            ('Hidden units', 'width of the first hidden layer; the second is half as wide.'),
            ('Learning rate', 'step size of the Adam optimizer.'),
            ('Batch size', 'samples processed per optimizer step.'),
            ('Epochs', 'passes over the synthetic dataset.'),
        ],
    },
    Family.CONVOLUTIONAL: {
        'title': 'Convolutional Neural Network (CNN)',
        'description': 'A network specialised for images. Convolutions learn local '
                       'patterns and pooling keeps the strongest responses.',
        'details': [
            ('Convolutional layers', 'detect edges, textures and shapes with small sliding filters.'),
            ('Max pooling', 'halves the feature maps while keeping the dominant features.'),
            ('Batch normalization', 'speeds up and stabilises training.'),
            ('Dropout', 'reduces overfitting in the dense head.'),
            ('Best for', 'image recognition and feature extraction.'),
            ('Downside', 'more compute per sample than an MLP.'),
        ],
        'preset': [
            ('Input shape', '28x28x1 grayscale image'),
            ('Kernel size', '3x3 with same padding'),
            ('Output', 'softmax over 10 classes'),
        ],
        'variable': [
            ('Filters', 'number of feature detectors in the convolution.'),
            ('Learning rate', 'step size of the Adam optimizer.'),
            ('Batch size', 'images processed per optimizer step.'),
            ('Epochs', 'passes over the synthetic dataset.'),
        ],
    },
    Family.RECURRENT: {
        'title': 'Recurrent Neural Network (RNN)',
        'description': 'A sequence model that reads its input step by step and carries '
                       'a hidden state from one step to the next.',
        'details': [
            ('Sequential processing', 'the hidden state summarises everything seen so far.'),
            ('Stacked simple RNN layers', 'capture dependencies across time steps.'),
            ('Useful for', 'time series, speech and text.'),
            ('Downside', 'long-range dependencies fade (vanishing gradients).'),
        ],
        'preset': [
            ('Input shape', '20 time steps of 10 features'),
            ('Output', 'one sigmoid unit (binary classification)'),
        ],
        'variable': [
            ('Hidden units', 'size of the first recurrent state; the second is half as wide.'),
            ('Learning rate', 'step size of the Adam optimizer.'),
            ('Batch size', 'sequences processed per optimizer step.'),
            ('Epochs', 'passes over the synthetic dataset.'),
        ],
    },
}


def describe(family):
    return MODEL_DESCRIPTIONS[Family.parse(family)]
