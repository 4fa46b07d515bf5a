"""Example: training loss curve with exponential decay, drawn in-process."""

import numpy as np

import plotbridge as pb

pb.setup_logger("INFO")

epochs = np.arange(1, 51)
loss = 2.8 * np.exp(-0.08 * epochs) + 0.15 + np.random.default_rng(42).normal(0, 0.03, len(epochs))

with pb.native() as plt:
    (
        plt.set_style("ggplot")
        .new_figure()
        .plot(epochs, loss, label="Training Loss", color="#2E4D37", linewidth=2.0)
        .set_ylim((0.0, 3.0))
        .set_grid(True)
        .set_legend("upper right")
        .save_figure("training-loss.svg")
    )
