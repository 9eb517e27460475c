"""Typer CLI for grnevo."""
from __future__ import annotations
import json
import typer
from pathlib import Path
from rich import print

from grnevo.config import DEFAULTS_PATH, EvolutionConfig, TaskConfig, load_config
from grnevo.engine.runner import run_sinusoid, resume_run
from grnevo.analysis import plot_metrics, plot_trace, write_report

app = typer.Typer(help="Evolve gene regulatory networks")


@app.command()
def run(
    config: Path = typer.Option(DEFAULTS_PATH, help="YAML config path"),
    seed: int = typer.Option(None, help="Override seed"),
    generations: int = typer.Option(None, help="Override generations"),
    pop: int = typer.Option(None, help="Override population"),
    steps: int = typer.Option(None, help="Override evaluation steps per individual"),
    workers: int = typer.Option(None, help="Worker processes"),
    verbosity: int = typer.Option(None, help="0 silent, 1 per-generation, 2 tables, 3 timings"),
    run_dir: Path = typer.Option(None, help="Override output root"),
):
    cfg = load_config(config)
    if seed is not None:
        cfg.seed = seed
    if run_dir is not None:
        cfg.outputs.run_dir = run_dir
    overrides = {"generations": generations, "population": pop, "workers": workers, "verbosity": verbosity}
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        cfg.evolution = EvolutionConfig(**{**cfg.evolution.model_dump(), **overrides})
    if steps is not None:
        cfg.task = TaskConfig(**{**cfg.task.model_dump(), "eval_steps": steps})
    out = run_sinusoid(cfg)
    print(f"Run directory: {out}")


@app.command()
def resume(
    run_dir: Path = typer.Argument(..., help="Run directory holding checkpoint.db"),
    generations: int = typer.Option(10, help="Additional generations"),
):
    out = resume_run(run_dir, generations)
    print(f"Resumed run written to {out}")


@app.command()
def analyze(run: Path = typer.Option(..., help="Run directory")):
    plot_metrics(run)
    plot_trace(run)
    write_report(run)
    print(f"Analysis complete for {run}")


@app.command()
def best(run: Path = typer.Option(..., help="Run directory")):
    """Print the best genome of a finished run."""
    path = run / "best_genome.json"
    if not path.exists():
        raise typer.BadParameter(f"no best_genome.json in {run}")
    print(json.loads(path.read_text()))


if __name__ == "__main__":
    app()
