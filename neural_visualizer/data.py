import numpy as np
import torch
from sklearn.datasets import make_classification

from .config import CLASS_COUNT, FEATURE_COUNT, IMAGE_SIZE, SAMPLE_COUNT, SEQUENCE_LENGTH, Family


def generate_dataset(family, sample_count=SAMPLE_COUNT, seed=None):
    """Generate a synthetic (xs, ys) batch shaped for the family.

    fully_connected: (N, 10) vectors with binary labels (N, 1)
    convolutional:   (N, 1, 28, 28) images with one-hot labels (N, 10)
    recurrent:       (N, 20, 10) sequences with binary labels (N, 1)
    """
    family = Family.parse(family)
    if sample_count < 1:
        raise ValueError(f"sample_count must be positive, got {sample_count}")

    if family is Family.CONVOLUTIONAL:
        X, y = make_classification(n_samples=sample_count, n_features=IMAGE_SIZE * IMAGE_SIZE,
                                   n_informative=10, n_redundant=0, n_classes=CLASS_COUNT,
                                   n_clusters_per_class=1, random_state=seed)
        X = X.reshape(-1, 1, IMAGE_SIZE, IMAGE_SIZE)
        labels = np.eye(CLASS_COUNT)[y]
    elif family is Family.RECURRENT:
        X, y = make_classification(n_samples=sample_count, n_features=SEQUENCE_LENGTH * FEATURE_COUNT,
                                   n_informative=8, n_redundant=0, random_state=seed)
        X = X.reshape(-1, SEQUENCE_LENGTH, FEATURE_COUNT)
        labels = y.reshape(-1, 1)
    else:
        X, y = make_classification(n_samples=sample_count, n_features=FEATURE_COUNT,
                                   n_informative=5, n_redundant=2, random_state=seed)
        labels = y.reshape(-1, 1)

    xs = torch.tensor(X, dtype=torch.float32)
    ys = torch.tensor(labels, dtype=torch.float32)
    return xs, ys
