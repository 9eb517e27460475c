import math

import numpy as np
import pytest

from grnevo.core.rng import make_rng
from grnevo.errors import ConfigError, ProteinLookupError
from grnevo.evolution import GRNDNA
from grnevo.grn import GRN, ProteinType, affinity_matrix


def _network(beta=2.0, delta=0.5):
    grn = GRN(beta=beta, delta=delta)
    grn.registry.add("in0", ProteinType.INPUT, np.array([0.2, 0.9, 0.1]))
    grn.registry.add("out", ProteinType.OUTPUT, np.array([0.8, 0.2, 0.7]))
    grn.registry.add("r0", ProteinType.REGULATORY, np.array([0.4, 0.5, 0.3]))
    return grn


def test_affinity_sign_and_range():
    coords = np.array([[0.5, 0.5, 0.9], [0.5, 0.1, 0.5]])
    w = affinity_matrix(coords)
    assert w[0, 0] > 0  # identifier sits on its own enhancer
    assert w[0, 1] < 0  # and on the inhibitor of the second protein
    assert np.all(np.abs(w) < 1)


def test_step_is_synchronous_update():
    grn = _network()
    grn.set_concentration("in0", "input", 0.6)
    grn.set_concentration("out", "output", 0.3)
    grn.set_concentration("r0", None, 0.9)
    coords = np.array([p.coords for p in grn.proteins])
    conc = np.array([0.6, 0.3, 0.9])
    target = np.clip(np.tanh(2.0 / 3 * (conc @ affinity_matrix(coords))), 0.0, 1.0)
    expected = conc + 0.5 * (target - conc)
    expected[0] = 0.6

    grn.step()

    got = [grn.get_concentration(name) for name in ("in0", "out", "r0")]
    np.testing.assert_allclose(got, expected)


def test_inputs_are_not_changed_by_step():
    grn = _network()
    grn.set_inputs({"in0": 0.7})
    grn.step(25)
    assert grn.get_concentration("in0", ProteinType.INPUT) == pytest.approx(0.7)


def test_output_without_regulation_decays():
    grn = GRN(beta=3.0, delta=0.5)
    grn.registry.add("in0", ProteinType.INPUT, np.array([0.1, 0.9, 0.9]))
    grn.registry.add("out", ProteinType.OUTPUT, np.array([0.5, 0.3, 0.3]))
    grn.set_concentration("in0", "input", 1.0)
    grn.set_concentration("out", "output", 1.0)
    grn.step()
    assert grn.get_concentration("out") == pytest.approx(0.5)
    grn.step(60)
    assert grn.get_concentration("out") == pytest.approx(0.0, abs=1e-12)


def test_step_zero_and_negative():
    grn = _network()
    grn.set_concentration("out", "output", 0.4)
    grn.step(0)
    assert grn.get_concentration("out") == 0.4
    with pytest.raises(ConfigError):
        grn.step(-1)


def test_empty_network_steps():
    grn = GRN()
    grn.step(3)
    assert grn.get_outputs() == {}


def test_concentrations_stay_in_unit_interval():
    dna = GRNDNA.random(make_rng(11), regulators=6)
    grn = dna.grn
    for t in range(50):
        grn.set_inputs({"in0": (t % 7) / 6, "in1": 1.0 - (t % 5) / 4})
        grn.step(3)
        for protein in grn.proteins:
            assert 0.0 <= protein.concentration <= 1.0


def test_set_concentration_clips_and_rejects_nan():
    grn = _network()
    grn.set_concentration("in0", "input", 2.5)
    assert grn.get_concentration("in0") == 1.0
    grn.set_concentration("in0", "input", -1.0)
    assert grn.get_concentration("in0") == 0.0
    with pytest.raises(ValueError):
        grn.set_concentration("in0", "input", math.nan)


def test_reset_zeros_everything_but_inputs():
    grn = _network()
    grn.set_inputs({"in0": 0.8})
    grn.step(10)
    grn.reset()
    assert grn.get_concentration("in0") == pytest.approx(0.8)
    assert grn.get_outputs() == {"out": 0.0}
    assert grn.get_concentration("r0") == 0.0


def test_lookup_errors():
    grn = _network()
    with pytest.raises(ProteinLookupError):
        grn.get_concentration("nope")
    with pytest.raises(ProteinLookupError):
        grn.set_concentration("out", "input", 0.5)
    with pytest.raises(ProteinLookupError):
        grn.set_inputs({"missing": 0.5})
    with pytest.raises(ProteinLookupError):
        grn.get_concentration("out", "bogus")


def test_structure_change_is_picked_up():
    grn = _network()
    grn.set_inputs({"in0": 1.0})
    grn.step()
    grn.randomize_regulators(2, make_rng(0))
    assert len(grn.regulators) == 3
    grn.step()
    assert len(grn.proteins) == 5
    with pytest.raises(ConfigError):
        grn.randomize_regulators(-1, make_rng(0))
