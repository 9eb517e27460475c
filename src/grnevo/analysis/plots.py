"""Plotting helpers."""
from __future__ import annotations
from pathlib import Path
import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402


def plot_metrics(run_dir: Path):
    run_dir = Path(run_dir)
    metrics_path = run_dir / "metrics.csv"
    if not metrics_path.exists():
        return None
    df = pd.read_csv(metrics_path)
    out_dir = run_dir / "plots"
    out_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots()
    x = df.get("generation", pd.Series(range(len(df))))
    for col in ("best", "mean", "worst"):
        if col in df.columns:
            ax.plot(x, df[col], label=col)
    if {"mean", "std"}.issubset(df.columns):
        ax.fill_between(x, df["mean"] - df["std"], df["mean"] + df["std"], alpha=0.2)
    ax.set_xlabel("generation")
    ax.set_ylabel("score")
    ax.legend()
    out = out_dir / "fitness.png"
    fig.savefig(out)
    plt.close(fig)

    if "genome_size_mean" in df.columns:
        fig2, ax2 = plt.subplots()
        ax2.plot(x, df["genome_size_mean"])
        ax2.set_xlabel("generation")
        ax2.set_ylabel("proteins per genome")
        ax2.set_title("Genome growth")
        fig2.savefig(out_dir / "genome_size.png")
        plt.close(fig2)
    return out


def plot_trace(run_dir: Path):
    """Best individual's outputs against the target signal."""
    run_dir = Path(run_dir)
    trace_path = run_dir / "best_trace.csv"
    if not trace_path.exists():
        return None
    df = pd.read_csv(trace_path)
    out_dir = run_dir / "plots"
    out_dir.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots()
    for col in df.columns:
        if col == "step":
            continue
        style = "--" if col == "target" else "-"
        ax.plot(df["step"], df[col], style, label=col)
    ax.set_xlabel("step")
    ax.set_ylabel("concentration")
    ax.legend()
    out = out_dir / "best_trace.png"
    fig.savefig(out)
    plt.close(fig)
    return out
