"""Sinusoid tracking task: the network output should follow the mean of its inputs."""
from __future__ import annotations

import numpy as np
import pandas as pd

from grnevo.config.schema import GRNConfig, TaskConfig
from grnevo.evolution.dna import GRNDNA
from grnevo.evolution.individual import Individual


def input_waves(config: TaskConfig) -> np.ndarray:
    """``(eval_steps, n_inputs)`` array of waves in ``[0, 1]``.

    Even inputs are sines at ``freq_a``, odd inputs cosines at ``freq_b``; every
    further pair speeds up by one harmonic.
    """

    t = np.arange(config.eval_steps, dtype=np.float64)[:, None]
    waves = []
    for k in range(len(config.inputs)):
        harmonic = 1 + k // 2
        if k % 2 == 0:
            waves.append(np.sin(t * config.freq_a * harmonic))
        else:
            waves.append(np.cos(t * config.freq_b * harmonic))
    return np.hstack(waves) * 0.5 + 0.5


class SinusoidTask:
    """Evaluator and DNA factory for the tracking task.

    Instances are picklable, so they can be handed to worker processes.
    """

    def __init__(self, config: TaskConfig | None = None, grn_config: GRNConfig | None = None):
        self.config = config or TaskConfig()
        self.grn_config = grn_config or GRNConfig()
        self.waves = input_waves(self.config)
        self.targets = self.waves.mean(axis=1)

    @property
    def name(self) -> str:
        return "sinusoid_mean"

    def make_dna(self, rng: np.random.Generator) -> GRNDNA:
        return GRNDNA.random(
            rng,
            inputs=self.config.inputs,
            outputs=self.config.outputs,
            regulators=self.config.initial_regulators,
            config=self.grn_config,
        )

    def __call__(self, ind: Individual) -> None:
        grn = ind.dna.grn
        inputs, outputs = self.config.inputs, self.config.outputs
        error = 0.0
        for row, target in zip(self.waves, self.targets):
            grn.set_inputs(dict(zip(inputs, row)))
            grn.step(self.config.substeps)
            error += sum(abs(grn.get_concentration(name, "output") - target) for name in outputs) / len(outputs)
        ind.fitnesses[self.config.objective] = error / self.config.eval_steps

    def trace(self, dna: GRNDNA) -> pd.DataFrame:
        """Step-by-step record of inputs, target and outputs for one DNA."""
        grn = dna.grn
        grn.reset()
        rows = []
        for step, (row, target) in enumerate(zip(self.waves, self.targets)):
            grn.set_inputs(dict(zip(self.config.inputs, row)))
            grn.step(self.config.substeps)
            rows.append({"step": step, **dict(zip(self.config.inputs, row)), "target": float(target), **grn.get_outputs()})
        return pd.DataFrame(rows)
