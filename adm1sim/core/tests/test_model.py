#################################################################################
# WaterTAP Copyright (c) 2020-2026, The Regents of the University of California,
# through Lawrence Berkeley National Laboratory, Oak Ridge National Laboratory,
# National Laboratory of the Rockies, and National Energy Technology
# Laboratory (subject to receipt of any required approvals from the U.S. Dept.
# of Energy). All rights reserved.
#
# Please see the files COPYRIGHT.md and LICENSE.md for full copyright and license
# information, respectively. These files are also available online at the URL
# "https://github.com/watertap-org/watertap/"
#################################################################################
from concurrent import futures

import numpy as np
import pytest

from adm1sim.core.discrete_event import CrossingDirection, DiscreteEvent
from adm1sim.core.model import DEFAULT_RESOLUTION, Model, SimulationTask
from adm1sim.core.state import StateIndex


class ListRecorder:
    def __init__(self):
        self.rows = []

    def record(self, t, values):
        self.rows.append((t, np.array(values)))


@pytest.fixture
def model(parameters, digester_init, influent):
    return Model(0.0, 0.5, parameters, digester_init, influent)


@pytest.mark.unit
def test_construction(model, influent):
    assert model.x[StateIndex.Q_D] == influent[StateIndex.Q_D]
    assert model.S_H_ion > 0
    assert model.progress == 0.0
    assert not model.finished
    assert model.working is None
    assert model.config.dae
    assert model.config.fixed_pH == -1.0
    assert model.config.resolution == DEFAULT_RESOLUTION
    assert model.mode.ions_algebraic


@pytest.mark.unit
def test_config_validation(parameters, digester_init, influent):
    with pytest.raises(ValueError):
        Model(0.0, 1.0, parameters, digester_init, influent, resolution=-1.0)
    with pytest.raises(ValueError):
        Model(
            0.0,
            1.0,
            parameters,
            digester_init,
            influent,
            integrator={"method": "Euler"},
        )
    m = Model(
        0.0, 1.0, parameters, digester_init, influent, integrator={"method": "BDF"}
    )
    assert m.config.integrator.method == "BDF"


@pytest.mark.unit
def test_setters(model, influent):
    model.set_time(2.0, 3.0)
    assert (model.start, model.end, model.progress) == (2.0, 3.0, 2.0)

    model.set_influent(influent.with_value(StateIndex.Q_D, 100.0))
    assert model.u[StateIndex.Q_D] == 100.0
    assert model.x[StateIndex.Q_D] == 100.0

    model.set_dae(False)
    assert not model.mode.ion_dae and not model.mode.hydrogen_dae
    model.set_ion_dae(True)
    assert model.mode.ion_dae and not model.mode.hydrogen_dae

    model.set_ph(7.0)
    assert model.mode.ph_fixed

    model.set_resolution(0.5)
    assert model.config.resolution == 0.5

    first = DiscreteEvent(11, 1.0)
    model.add_event(first)
    model.add_events([DiscreteEvent(12, 1.0), DiscreteEvent(13, 1.0)])
    assert len(model.events) == 2
    assert first not in model.events


@pytest.mark.component
def test_simulate_span(model):
    state = model.simulate()

    assert model.finished
    assert model.progress == pytest.approx(0.5)
    assert model.end == 0.5
    assert state == model.x
    assert all(v >= 0 for v in state)
    assert 6.5 < state.by_name("pH") < 8.0
    assert state.by_name("q_gas") > 0
    assert model.working.ion_solve.converged
    assert model.working.hydrogen_solve.converged


@pytest.mark.component
def test_event_shortens_span(parameters, digester_init, influent):
    initial = digester_init.with_value(StateIndex.S_I, 0.0)
    model = Model(0.0, 5.0, parameters, initial, influent)
    event = DiscreteEvent(StateIndex.S_I, 0.01, CrossingDirection.rising)
    model.add_event(event)

    state = model.simulate()

    assert 0 < model.end < 5.0
    assert model.end == event.crossing_time
    assert model.progress == pytest.approx(model.end)
    assert state.by_name("S_I") == pytest.approx(0.01, abs=1e-6)


@pytest.mark.component
def test_falling_ph_event(parameters, digester_init, influent):
    # a strong acid load in the influent drives the pH down
    acid = influent.with_value(StateIndex.S_an, 0.5)
    model = Model(0.0, 10.0, parameters, digester_init, acid)
    model.add_event(DiscreteEvent(StateIndex.pH, 7.0, CrossingDirection.falling))

    state = model.simulate()

    assert model.end < 10.0
    assert model.end == model.events[0].crossing_time
    assert state.by_name("pH") == pytest.approx(7.0, abs=1e-6)


@pytest.mark.component
def test_event_in_other_direction_is_ignored(parameters, digester_init, influent):
    initial = digester_init.with_value(StateIndex.S_I, 0.0)
    model = Model(0.0, 1.0, parameters, initial, influent)
    model.add_event(DiscreteEvent(StateIndex.S_I, 0.01, CrossingDirection.falling))

    model.simulate()

    assert model.end == 1.0
    assert model.events[0].crossing_time is None


@pytest.mark.component
def test_fixed_ph(model):
    model.set_ph(7.0)
    state = model.simulate()
    assert model.S_H_ion == pytest.approx(1e-7, rel=1e-15)
    assert state.by_name("pH") == pytest.approx(7.0)


@pytest.mark.component
def test_ode_mode(parameters, digester_init, influent):
    model = Model(0.0, 0.05, parameters, digester_init, influent, dae=False)
    state = model.simulate()
    assert model.working.ion_solve is None
    assert model.working.hydrogen_solve is None
    assert 6.0 < state.by_name("pH") < 9.0


@pytest.mark.component
def test_spans_carry_state(model, influent):
    first = model.simulate()

    model.set_influent(influent.with_value(StateIndex.Q_D, 150.0))
    model.set_time(0.5, 1.0)
    second = model.simulate()

    assert first != second
    assert second[StateIndex.Q_D] == 150.0
    assert model.progress == pytest.approx(1.0)


@pytest.mark.component
def test_independent_runs_are_identical(parameters, digester_init, influent):
    runs = [
        Model(0.0, 0.5, parameters, digester_init, influent).simulate()
        for _ in range(2)
    ]
    np.testing.assert_array_equal(runs[0].to_array(), runs[1].to_array())


@pytest.mark.component
def test_online_record(parameters, digester_init, influent):
    recorder = ListRecorder()
    model = Model(
        0.0,
        0.5,
        parameters,
        digester_init,
        influent,
        online_record=True,
        recorder=recorder,
        resolution=0.05,
    )
    model.simulate()

    assert len(recorder.rows) > 0
    times = [t for t, _ in recorder.rows]
    assert np.all(np.diff(times) > 0.05)
    assert times[0] > 0.05
    assert all(values.shape == (42,) for _, values in recorder.rows)
    assert all(np.all(values >= 0) for _, values in recorder.rows)


@pytest.mark.component
def test_submit(model):
    task = model.submit()
    assert isinstance(task, SimulationTask)
    state = task.result(timeout=600)

    assert task.done()
    assert task.progress() == pytest.approx(0.5)
    assert state == model.x
    assert model.finished


@pytest.mark.component
def test_submit_to_executor(model):
    with futures.ThreadPoolExecutor(max_workers=1) as executor:
        task = model.submit(executor)
        progress = [task.progress()]
        state = task.result()
        progress.append(task.progress())

    assert progress == sorted(progress)
    assert state.by_name("q_gas") > 0


@pytest.mark.integration
def test_steady_state(parameters, digester_init, influent):
    model = Model(0.0, 200.0, parameters, digester_init, influent)
    state = model.simulate()

    x = state.to_array()
    assert np.all(x[: StateIndex.S_gas_co2 + 1] >= 0)
    assert 6.5 < state.by_name("pH") < 8.0
    assert 0 < state.by_name("q_ch4") < state.by_name("q_gas")
    assert 1000 < state.by_name("q_gas") < 5000
