import json

import pytest

from grnevo.core.rng import make_rng
from grnevo.errors import ParseError
from grnevo.evolution import GRNDNA
from grnevo.grn import GENOME_FORMAT, GRN


def _evolved_grn(seed=3):
    rng = make_rng(seed)
    grn = GRNDNA.random(rng, regulators=4).grn
    for _ in range(5):
        grn.mutate(rng)
    return grn


def _base():
    return {
        "format": GENOME_FORMAT,
        "beta": 2.0,
        "delta": 0.5,
        "proteins": [
            {"name": "in0", "type": "input", "coords": [0.1, 0.2, 0.3]},
            {"name": "out", "type": "output", "coords": [0.4, 0.5, 0.6]},
        ],
    }


def test_serialize_roundtrip_is_exact():
    grn = _evolved_grn()
    text = grn.serialize()
    restored = GRN.deserialize(text)
    assert restored.serialize() == text
    assert restored.interface() == grn.interface()
    assert len(restored) == len(grn)


def test_roundtrip_preserves_behaviour():
    grn = _evolved_grn(5)
    restored = GRN.deserialize(grn.serialize())
    for t in range(30):
        values = {"in0": (t % 4) / 3, "in1": 0.25}
        grn.set_inputs(values)
        restored.set_inputs(values)
        grn.step(4)
        restored.step(4)
    assert restored.get_outputs() == grn.get_outputs()


def test_concentrations_are_not_serialized():
    grn = _evolved_grn()
    grn.set_inputs({"in0": 0.9})
    grn.step(10)
    restored = GRN.deserialize(grn.serialize())
    assert all(p.concentration == 0.0 for p in restored.proteins)
    assert "concentration" not in grn.serialize()


def test_minimal_genome_decodes():
    grn = GRN.from_dict(_base())
    assert grn.beta == 2.0 and grn.delta == 0.5
    assert [p.name for p in grn.inputs] == ["in0"]
    assert grn.regulators == []


def _broken(mutator):
    data = _base()
    mutator(data)
    return json.dumps(data)


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        _broken(lambda d: d.update(format="grn/0")),
        _broken(lambda d: d.pop("beta")),
        _broken(lambda d: d.update(beta=-1.0)),
        _broken(lambda d: d.update(beta=float("nan"))),
        _broken(lambda d: d.update(delta=1.5)),
        _broken(lambda d: d.update(delta="0.5")),
        _broken(lambda d: d.update(proteins={})),
        _broken(lambda d: d["proteins"].append("r0")),
        _broken(lambda d: d["proteins"].append({"type": "regulatory", "coords": [0, 0, 0]})),
        _broken(lambda d: d["proteins"].append({"name": "r0", "type": "enzyme", "coords": [0, 0, 0]})),
        _broken(lambda d: d["proteins"].append({"name": "r0", "type": "regulatory", "coords": [0, 0]})),
        _broken(lambda d: d["proteins"].append({"name": "r0", "type": "regulatory", "coords": [0, 0, 1.5]})),
        _broken(lambda d: d["proteins"].append({"name": "out", "type": "regulatory", "coords": [0, 0, 0]})),
        _broken(lambda d: d.update(beta=10**400)),
        _broken(lambda d: d.update(delta=-(10**400))),
        _broken(lambda d: d["proteins"].append({"name": "r0", "type": "regulatory", "coords": [0, 0, 10**400]})),
        "[" * 100000 + "]" * 100000,
    ],
)
def test_malformed_genomes_raise_parse_error(text):
    with pytest.raises(ParseError):
        GRN.deserialize(text)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        GRNDNA.from_string("{}")
