import numpy as np
import pytest

from grnevo.config import TaskConfig
from grnevo.core.rng import make_rng
from grnevo.evolution import Individual
from grnevo.tasks import SinusoidTask, input_waves


def test_input_waves():
    cfg = TaskConfig(inputs=["a", "b", "c"], eval_steps=100)
    waves = input_waves(cfg)
    assert waves.shape == (100, 3)
    assert waves.min() >= 0.0 and waves.max() <= 1.0
    assert waves[0, 0] == pytest.approx(0.5)  # sine starts mid-range
    assert waves[0, 1] == pytest.approx(1.0)  # cosine starts at the top


def test_evaluator_fills_objective():
    task = SinusoidTask(TaskConfig(eval_steps=30, substeps=3))
    ind = Individual(dna=task.make_dna(make_rng(0)))
    task(ind)
    assert set(ind.fitnesses) == {"mean_error"}
    assert 0.0 <= ind.fitnesses["mean_error"] <= 1.0


def test_evaluation_is_deterministic_after_reset():
    task = SinusoidTask(TaskConfig(eval_steps=30, substeps=3))
    ind = Individual(dna=task.make_dna(make_rng(1)))
    task(ind)
    first = ind.fitnesses["mean_error"]
    ind.dna.reset()
    task(ind)
    assert ind.fitnesses["mean_error"] == first


def test_make_dna_follows_config():
    task = SinusoidTask(TaskConfig(inputs=["x", "y"], outputs=["o1", "o2"], initial_regulators=3))
    grn = task.make_dna(make_rng(2)).grn
    assert [p.name for p in grn.inputs] == ["x", "y"]
    assert [p.name for p in grn.outputs] == ["o1", "o2"]
    assert len(grn.regulators) == 3


def test_trace():
    task = SinusoidTask(TaskConfig(eval_steps=12, substeps=2))
    df = task.trace(task.make_dna(make_rng(3)))
    assert list(df.columns) == ["step", "in0", "in1", "target", "out"]
    assert len(df) == 12
    np.testing.assert_allclose(df["target"], (df["in0"] + df["in1"]) / 2)
