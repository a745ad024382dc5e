import pytest

from neural_visualizer.charts import MetricsChart


def test_keeps_only_the_latest_window():
    chart = MetricsChart(window=20)
    for epoch in range(1, 26):
        chart.push(epoch, 1.0 / epoch, 50.0)

    assert len(chart.loss_points) == 20
    assert chart.loss_points[0][0] == 6
    assert chart.loss_points[-1][0] == 25
    assert list(chart.loss_figure().data[0].x)[0] == 'Epoch 6'


@pytest.mark.parametrize("accuracy", ["N/A", None, float('nan')])
def test_missing_accuracy_is_skipped(accuracy):
    chart = MetricsChart()
    chart.push(1, 0.69, accuracy)
    assert list(chart.loss_points) == [(1, 0.69)]
    assert list(chart.accuracy_points) == []


def test_figures():
    chart = MetricsChart()
    chart.push(1, 0.5, 62.5)
    chart.push(2, 0.4, 75.0)

    loss = chart.loss_figure()
    accuracy = chart.accuracy_figure()
    assert loss.layout.title.text == 'Loss'
    assert list(loss.data[0].y) == [0.5, 0.4]
    assert accuracy.layout.title.text == 'Accuracy (%)'
    assert list(accuracy.data[0].y) == [62.5, 75.0]


def test_clear():
    chart = MetricsChart()
    chart.push(1, 0.5, 62.5)
    chart.clear()
    assert not chart.loss_points and not chart.accuracy_points


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        MetricsChart(window=0)
