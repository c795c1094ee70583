#!/usr/bin/env python3
"""
Accuracy comparison across vector dimensions.

Runs the dot-product suite for a range of dimensions, collects one summary
row per algorithm and precision, and plots median relative error against
dimension and against CPU time.
"""

import io
import sys
from typing import List

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

sys.path.append('..')

from sumbench import DOT_PRODUCT_ALGORITHMS, RunConfig, summary_frame
from sumbench.harness import run_dot_product_suite


class AccuracyBenchmark:
    """
    Dimension sweep over every dot-product algorithm.
    """

    def __init__(self, dimensions: List[int] = None, trials: int = 2000, seed: int = 42,
                 precisions=("float", "double")):
        self.dimensions = dimensions or [2, 3, 4, 8, 16]
        self.trials = trials
        self.seed = seed
        self.precisions = list(precisions)
        self.results = []

    def run_dimension(self, dimension: int) -> pd.DataFrame:
        """
        Run the suite for one dimension.

        Args:
            dimension: Length of the operand vectors

        Returns:
            Summary frame with ``dimension``, ``algorithm`` and ``precision`` columns added
        """
        config = RunConfig(trials=self.trials, dimension=dimension, seed=self.seed,
                           precisions=self.precisions, dump=False)
        tests = run_dot_product_suite(config, io.StringIO())
        frame = summary_frame(tests)
        frame['dimension'] = dimension
        frame['algorithm'] = [test.algorithm.label for test in tests]
        frame['precision'] = [test.precision.label for test in tests]
        return frame

    def run_comprehensive_benchmark(self) -> pd.DataFrame:
        """Run every dimension and concatenate the summaries."""
        print("Running accuracy sweep...")
        print(f"Dimensions: {self.dimensions}")
        print(f"Precisions: {self.precisions}")
        print(f"Trials per dimension: {self.trials}")
        print()

        for i, dimension in enumerate(self.dimensions, 1):
            print(f"[{i}/{len(self.dimensions)}] Dimension {dimension}...")
            self.results.append(self.run_dimension(dimension))

        return pd.concat(self.results, ignore_index=True)

    def analyze_results(self, df: pd.DataFrame) -> None:
        """
        Print error and timing tables.

        Args:
            df: Concatenated summary frames
        """
        print("\n" + "=" * 80)
        print("ACCURACY SWEEP ANALYSIS")
        print("=" * 80)

        for precision, precision_df in df.groupby('precision', sort=False):
            print(f"\nMEDIAN RELATIVE ERROR ({precision}):")
            table = precision_df.pivot(index='dimension', columns='algorithm',
                                       values='median_rel_error')
            print(table.to_string(float_format=lambda x: f"{x:.2e}"))

        print("\nCPU TIME PER TRIAL (us):")
        per_trial = df.assign(us_per_trial=1e6 * df['cpu_seconds'] / self.trials)
        table = per_trial.pivot_table(index='algorithm', columns='precision',
                                      values='us_per_trial', aggfunc='mean')
        print(table.to_string(float_format=lambda x: f"{x:.2f}"))

        undefined = int(df['undefined'].sum())
        if undefined:
            print(f"\nTrials with a zero reference: {undefined}")

    def plot_results(self, df: pd.DataFrame, save_plots: bool = True) -> None:
        """
        Plot error against dimension, and error against time.

        Args:
            df: Concatenated summary frames
            save_plots: Whether to save plots to files
        """
        labels = [algorithm.label for algorithm in DOT_PRODUCT_ALGORITHMS.values()]
        colors = plt.get_cmap('tab10')(np.arange(len(labels)))

        for precision, precision_df in df.groupby('precision', sort=False):
            plt.figure(figsize=(12, 8))
            for color, label in zip(colors, labels):
                rows = precision_df[precision_df['algorithm'] == label]
                # Exact algorithms can have a median error of zero
                errors = rows['median_rel_error'].replace(0, np.nan)
                plt.semilogy(rows['dimension'], errors, 'o-', color=color,
                             label=label, markersize=6)

            plt.xlabel('Vector Dimension')
            plt.ylabel('Median Relative Error')
            plt.title(f'Accuracy vs Dimension ({precision})')
            plt.legend()
            plt.grid(True, alpha=0.3)

            if save_plots:
                plt.savefig(f'accuracy_vs_dimension_{precision.replace(" ", "_")}.png',
                            dpi=300, bbox_inches='tight')
            plt.show()

        plt.figure(figsize=(10, 8))
        grouped = df.groupby('algorithm').agg(cpu=('cpu_seconds', 'mean'),
                                              error=('mean_rel_error', 'median'))
        for color, label in zip(colors, labels):
            if label not in grouped.index:
                continue
            mean_time = grouped.loc[label, 'cpu'] * 1000
            error = grouped.loc[label, 'error']
            plt.scatter(mean_time, error, s=100, color=color, label=label, alpha=0.8)
            plt.annotate(label, (mean_time, error),
                         xytext=(5, 5), textcoords='offset points')

        plt.xlabel('Mean CPU Time per Suite (ms)')
        plt.ylabel('Mean Relative Error')
        plt.title('Time vs Accuracy Trade-off')
        plt.yscale('log')
        plt.legend()
        plt.grid(True, alpha=0.3)

        if save_plots:
            plt.savefig('time_vs_accuracy.png', dpi=300, bbox_inches='tight')
        plt.show()


def main():
    """Run the accuracy sweep."""
    print("SUMMATION ACCURACY BENCHMARK - DIMENSION SWEEP")
    print("=" * 60)

    benchmark = AccuracyBenchmark()
    results_df = benchmark.run_comprehensive_benchmark()

    results_df.to_csv('accuracy_sweep_results.csv', index=False)
    print("\nResults saved to accuracy_sweep_results.csv")

    benchmark.analyze_results(results_df)
    benchmark.plot_results(results_df)

    print("\n" + "=" * 60)
    print("Accuracy sweep completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
