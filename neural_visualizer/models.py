import torch
import torch.nn as nn
import torch.nn.functional as F

from .config import CLASS_COUNT, FEATURE_COUNT, IMAGE_SIZE, Family

# Layers are registered in forward order; weights.observed_weights relies on it


class FullyConnectedNet(nn.Module):
    def __init__(self, hidden_units):
        super(FullyConnectedNet, self).__init__()
        second = max(4, hidden_units // 2)
        self.fc1 = nn.Linear(FEATURE_COUNT, hidden_units)
        self.norm = nn.BatchNorm1d(hidden_units)
        self.dropout = nn.Dropout(0.2)
        self.fc2 = nn.Linear(hidden_units, second)
        self.output = nn.Linear(second, 1)  # Binary classification

    def forward(self, x):
        x = F.relu(self.fc1(x))
        x = self.dropout(self.norm(x))
        x = F.relu(self.fc2(x))
        return torch.sigmoid(self.output(x))


class ConvolutionalNet(nn.Module):
    def __init__(self, filters):
        super(ConvolutionalNet, self).__init__()
        self.conv = nn.Conv2d(1, filters, kernel_size=3, padding=1)
        self.norm = nn.BatchNorm2d(filters)
        self.dropout1 = nn.Dropout(0.3)
        pooled = IMAGE_SIZE // 2
        self.fc1 = nn.Linear(filters * pooled * pooled, 128)
        self.dropout2 = nn.Dropout(0.3)
        self.output = nn.Linear(128, CLASS_COUNT)

    def forward(self, x):
        # Reshape flat input to [batch_size, channels, height, width]
        if x.dim() == 2:
            x = x.view(-1, 1, IMAGE_SIZE, IMAGE_SIZE)

        x = self.norm(F.relu(self.conv(x)))
        x = self.dropout1(F.max_pool2d(x, 2))
        x = x.view(x.size(0), -1)
        x = self.dropout2(F.relu(self.fc1(x)))
        return self.output(x)  # Logits, softmax is applied by the loss


class RecurrentNet(nn.Module):
    def __init__(self, hidden_units):
        super(RecurrentNet, self).__init__()
        second = max(4, hidden_units // 2)
        self.rnn1 = nn.RNN(input_size=FEATURE_COUNT, hidden_size=hidden_units,
                           nonlinearity='relu', batch_first=True)
        self.dropout = nn.Dropout(0.2)
        self.rnn2 = nn.RNN(input_size=hidden_units, hidden_size=second,
                           nonlinearity='relu', batch_first=True)
        self.output = nn.Linear(second, 1)

    def forward(self, x):
        # Reshape input to [batch_size, seq_len, features]
        if x.dim() == 2:
            x = x.unsqueeze(1)

        x, _ = self.rnn1(x)
        x = self.dropout(x)
        x, _ = self.rnn2(x)

        # Take the output from the last time step
        x = x[:, -1, :]
        return torch.sigmoid(self.output(x))


def build_model(family, hyperparameters):
    family = Family.parse(family)
    if family is Family.FULLY_CONNECTED:
        return FullyConnectedNet(hyperparameters.hidden_units)
    if family is Family.CONVOLUTIONAL:
        return ConvolutionalNet(hyperparameters.filters)
    return RecurrentNet(hyperparameters.hidden_units)
