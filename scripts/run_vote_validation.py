#!/usr/bin/env python3
"""
Vote clustering validation - does k-means recover party from roll-call votes?

Loads a vote table (first column = party, remaining columns = y/n/? votes),
runs PCA + k-means on the reduced and the raw votes, and reports mutual
information with party, ARI and (optionally) a permutation-test p-value.
Saves:
- variance.png: cumulative variance explained per component
- pc1_pc2.png, pc1_pc3.png, pc2_pc3.png: PCA scatters coloured by party
- kmeans_pc1_pc2.png, kmeans_raw.png: PCA scatters coloured by cluster

Usage:
  python scripts/run_vote_validation.py data/house-votes-84.csv --out-dir plots
  python scripts/run_vote_validation.py data/house-votes-84.csv --permutations --n-permutations 200
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from cluster_validation.algorithms import PipelineResult, run_pipeline
from cluster_validation.algorithms.errors import ClusteringError, ReductionError, ShapeError
from cluster_validation.config import config
from cluster_validation.utils import get_logger, load_vote_table, setup_logging

logger = get_logger("run_vote_validation")

GROUP_COLORS = {1: "red", -1: "blue"}


def plot_variance(ratios: np.ndarray, out_path: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 6))
    ax.plot(np.arange(1, len(ratios) + 1), ratios, color="red", marker="o")
    ax.set_title("Cumulative Variance Explained")
    ax.set_xlabel("Component")
    ax.set_ylim(0.0, 1.0)
    ax.grid(True, alpha=0.3)
    fig.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved: {out_path}")


def scatter_plot(data: np.ndarray, groups: np.ndarray, out_path: Path, x: int, y: int) -> None:
    colors = [GROUP_COLORS.get(int(g), "black") for g in groups]
    fig, ax = plt.subplots(figsize=(8, 6))
    ax.scatter(data[:, x], data[:, y], c=colors, s=16)
    ax.set_title(f"PC{x + 1} vs PC{y + 1}")
    ax.set_xlabel(f"PC{x + 1}")
    ax.set_ylabel(f"PC{y + 1}")
    fig.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved: {out_path}")


def write_plots(result: PipelineResult, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    plot_variance(result.cumulative_variance_ratio, out_dir / "variance.png")

    Z = result.transformed
    n_dims = Z.shape[1]
    for x, y in ((0, 1), (0, 2), (1, 2)):
        if y < n_dims:
            scatter_plot(Z, result.truth, out_dir / f"pc{x + 1}_pc{y + 1}.png", x, y)

    if n_dims >= 2:
        scatter_plot(Z, result.runs["pca"].signed_labels, out_dir / "kmeans_pc1_pc2.png", 0, 1)
        scatter_plot(Z, result.runs["raw"].signed_labels, out_dir / "kmeans_raw.png", 0, 1)


def print_summary(result: PipelineResult) -> None:
    print("\nExplained variance ratio:", np.round(result.explained_variance_ratio, 4).tolist())
    for name, run in result.runs.items():
        label = "PCA" if name == "pca" else "Raw"
        if run.permutation is not None:
            print(f"\nPermutation Test for {label}:")
            print(f"  Original inertia: {run.permutation.observed_inertia:.4f}")
            print(f"  Permutation scores (first 10): {np.round(run.permutation.sample(), 4).tolist()}")
            print(f"  p-value: {run.permutation.p_value:.4f}")
            if run.permutation.n_failed:
                print(f"  Failed permutations: {run.permutation.n_failed}")
        print(f"Mutual information between clusters and parties {label}: {run.mutual_information:.4f}")
        print(f"Adjusted Rand Index between clusters and parties {label}: {run.adjusted_rand_index:.4f}")


def main():
    parser = argparse.ArgumentParser(description="Validate k-means clusters of vote records against party")
    parser.add_argument("votes_path", type=Path, help="Delimited vote table, party in the first column")
    parser.add_argument("--out-dir", type=Path, default=Path("."))
    parser.add_argument("--n-components", type=int, default=None)
    parser.add_argument("--k", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--permutations", action="store_true", default=None,
                        help="Run the (slow) permutation test for each clustering")
    parser.add_argument("--n-permutations", type=int, default=None)
    parser.add_argument("--n-jobs", type=int, default=None)
    parser.add_argument("--no-plots", action="store_true")
    args = parser.parse_args()

    setup_logging(config.log_level)

    cfg = config.pipeline_config(
        n_components=args.n_components,
        k=args.k,
        seed=args.seed,
        run_permutation_test=args.permutations,
        n_permutations=args.n_permutations,
        n_jobs=args.n_jobs,
        show_progress=True,
    )

    try:
        rows = load_vote_table(args.votes_path)
        result = run_pipeline(rows, cfg)
    except FileNotFoundError as e:
        logger.error("Vote table not found: %s", e)
        sys.exit(1)
    except (ShapeError, ReductionError, ClusteringError) as e:
        logger.error("Validation run aborted: %s", e)
        sys.exit(1)

    if not args.no_plots:
        print(f"Writing plots to {args.out_dir}...")
        write_plots(result, args.out_dir)
    print_summary(result)


if __name__ == "__main__":
    main()
