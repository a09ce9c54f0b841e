from typing import List
import pyqtgraph as pg


def setup_wpm_plot(plot_widget: pg.PlotWidget, line_color: str):
    plot_widget.setBackground(None)
    plot_widget.showGrid(x=False, y=True, alpha=0.15)
    plot_widget.setMenuEnabled(False)
    plot_widget.setMouseEnabled(x=False, y=False)
    plot_widget.hideButtons()
    plot_widget.setLabel('left', 'WPM')
    plot_widget.setLabel('bottom', 'Chunk')
    curve = plot_widget.plot([], [], pen=pg.mkPen(line_color, width=2.5),
                             symbol='o', symbolSize=6, antialias=True)
    return curve


def update_curve(curve, y: List[float]):
    # chunks are numbered from 1
    x = list(range(1, len(y) + 1))
    curve.setData(x, y)
