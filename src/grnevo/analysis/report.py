"""Generate markdown run reports with evolution summaries."""
from __future__ import annotations
from pathlib import Path
import pandas as pd
import json


def write_report(run_dir: Path):
    run_dir = Path(run_dir)
    metrics_path = run_dir / "metrics.csv"
    if not metrics_path.exists():
        return None
    df = pd.read_csv(metrics_path)
    columns = [c for c in ("best", "mean", "worst", "std", "genome_size_mean") if c in df.columns]
    try:
        summary = df[columns].describe().to_markdown()
    except ImportError:
        summary = df[columns].describe().to_string()
    first = df.iloc[0].to_dict()
    latest = df.iloc[-1].to_dict()
    progress = "\n".join(
        f"- **{k}**: {first[k]:.4f} -> {latest[k]:.4f}" for k in ("best", "mean", "worst") if k in latest
    )
    best_section = ""
    best_path = run_dir / "best_genome.json"
    if best_path.exists():
        best = json.loads(best_path.read_text())
        genome = best.get("genome", {})
        proteins = genome.get("proteins", [])
        counts: dict[str, int] = {}
        for protein in proteins:
            counts[protein["type"]] = counts.get(protein["type"], 0) + 1
        fitness = ", ".join(f"{k}={v:.4f}" for k, v in best.get("fitness", {}).items())
        best_section = "\n".join(
            [
                "## Best genome",
                "",
                f"- individual {best.get('id')} (born generation {best.get('born')})",
                f"- fitness: {fitness}",
                f"- beta={genome.get('beta', float('nan')):.4f}, delta={genome.get('delta', float('nan')):.4f}",
                "- proteins: " + ", ".join(f"{k}: {v}" for k, v in sorted(counts.items())),
            ]
        )
    plot_png = run_dir / "plots" / "fitness.png"
    plot_section = f"![fitness]({plot_png})" if plot_png.exists() else ""
    report_path = run_dir / "report.md"
    report_path.write_text(
        "\n".join(
            [
                "# Run Report",
                "",
                f"## Progress (generations {int(first['generation'])} -> {int(latest['generation'])})",
                progress,
                "",
                "## Metrics summary",
                summary,
                "",
                best_section,
                "",
                plot_section,
            ]
        )
    )
    return report_path
