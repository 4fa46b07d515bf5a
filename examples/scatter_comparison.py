"""Example: two scatter panels rendered by a child interpreter."""

import numpy as np

import plotbridge as pb

rng = np.random.default_rng(7)
x = rng.uniform(0, 10, 40)
manual = 2.5 * x + 5 + rng.normal(0, 2, len(x))
assisted = 2.5 * x + 1 + rng.normal(0, 2, len(x))

with pb.MatplotlibPipe() as plt:
    plt.run_script("import matplotlib; matplotlib.use('Agg')")
    plt.new_figure()

    plt.set_subplot(2, 1, 1)
    plt.scatter(x, manual, label="Manual", color="#A0522D", marker="o")
    plt.set_legend("upper left")

    plt.set_subplot(2, 1, 2)
    plt.scatter(x, assisted, label="AI-Assisted", color="#2E4D37", marker="^")
    plt.set_xlim((0.0, 10.0))
    plt.set_legend("upper left")

    plt.save_figure("scatter-comparison.png")
