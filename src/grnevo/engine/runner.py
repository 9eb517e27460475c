"""Run driver for the sinusoid tracking experiment."""
from __future__ import annotations

import json
from functools import partial
from pathlib import Path

import yaml
from rich.console import Console
from rich.table import Table

from grnevo.config import ConfigSchema
from grnevo.engine.metrics import save_metrics
from grnevo.evolution import GA, GRNDNA
from grnevo.tasks import SinusoidTask

console = Console()

CHECKPOINT_NAME = "checkpoint.db"


def run_dir_for(config: ConfigSchema) -> Path:
    return Path(config.outputs.run_dir) / f"sinusoid_{config.seed}"


def _advance(ga: GA, generations: int, checkpoint_interval: int, checkpoint: Path) -> None:
    """Step ``generations`` times, checkpointing every ``checkpoint_interval`` generations."""
    remaining = generations
    while remaining > 0:
        chunk = min(remaining, checkpoint_interval) if checkpoint_interval else remaining
        ga.step(chunk)
        remaining -= chunk
        ga.save_checkpoint(checkpoint)


def _write_config(config: ConfigSchema, run_dir: Path) -> None:
    config_dict = config.model_dump(mode="json")
    with open(run_dir / "config.yaml", "w") as f:
        yaml.safe_dump(config_dict, f)


def _write_outputs(ga: GA, task: SinusoidTask, config: ConfigSchema, run_dir: Path) -> None:
    save_metrics(ga.history, run_dir / "metrics.csv")
    if ga.best is not None:
        (run_dir / "best_genome.json").write_text(
            json.dumps(
                {
                    "id": ga.best.id,
                    "born": ga.best.born,
                    "fitness": ga.best.fitnesses,
                    "genome": json.loads(ga.best.dna.serialize()),
                },
                indent=2,
            )
        )
        task.trace(ga.best.dna).to_csv(run_dir / "best_trace.csv", index=False)
    _write_config(config, run_dir)
    if config.outputs.summarize and ga.history:
        first, last = ga.history[0], ga.history[-1]
        table = Table(title="Evolution summary", show_lines=True)
        table.add_column("metric")
        table.add_column(f"gen {first['generation']}")
        table.add_column(f"gen {last['generation']}")
        for key in ("best", "mean", "worst", "std", "genome_size_mean"):
            if key in first and key in last:
                table.add_row(key, f"{first[key]:.4f}", f"{last[key]:.4f}")
        console.print(table)
    console.print(f"sinusoid run complete -> {run_dir}")


def run_sinusoid(config: ConfigSchema) -> Path:
    run_dir = run_dir_for(config)
    run_dir.mkdir(parents=True, exist_ok=True)
    _write_config(config, run_dir)
    (run_dir / CHECKPOINT_NAME).unlink(missing_ok=True)
    task = SinusoidTask(config.task, config.grn)
    ga = GA(config.evolution, seed=config.seed, console=console)
    ga.set_evaluator(task, task.name)
    ga.initialize_population(task.make_dna)
    _advance(ga, config.evolution.generations, config.evolution.checkpoint_interval, run_dir / CHECKPOINT_NAME)
    _write_outputs(ga, task, config, run_dir)
    return run_dir


def resume_run(run_dir: Path, generations: int) -> Path:
    """Continue a run from its latest checkpoint for ``generations`` more generations."""
    run_dir = Path(run_dir)
    config = ConfigSchema(**yaml.safe_load((run_dir / "config.yaml").read_text()))
    task = SinusoidTask(config.task, config.grn)
    checkpoint = run_dir / CHECKPOINT_NAME
    ga = GA.from_checkpoint(
        checkpoint,
        partial(GRNDNA.from_string, config=config.grn),
        config=config.evolution,
        console=console,
    )
    ga.set_evaluator(task, task.name)
    console.log(f"resuming {run_dir} at generation {ga.generation}")
    _advance(ga, generations, config.evolution.checkpoint_interval, checkpoint)
    config.evolution.generations = ga.generation
    _write_outputs(ga, task, config, run_dir)
    return run_dir
