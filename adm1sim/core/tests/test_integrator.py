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
import math

import numpy as np
import pytest

from adm1sim.core.discrete_event import CrossingDirection, DiscreteEvent
from adm1sim.core.integrator import FirstOrderIntegrator
from adm1sim.custom_exceptions import IntegrationError


def _decay(t, y):
    return -y


def _falling_ph(t, y):
    dy = np.zeros_like(y)
    dy[39] = -1.0
    return dy


def _ph_state(value=7.5):
    y = np.zeros(42)
    y[39] = value
    return y


@pytest.mark.unit
@pytest.mark.parametrize("method", ["LSODA", "BDF", "RK45", "DOP853"])
def test_exponential_decay(method):
    integrator = FirstOrderIntegrator(method=method)
    t, y = integrator.integrate(_decay, 0.0, [1.0, 2.0], 1.0)
    assert t == pytest.approx(1.0)
    assert y.tolist() == pytest.approx([math.exp(-1.0), 2.0 * math.exp(-1.0)], rel=1e-6)


@pytest.mark.unit
def test_step_handlers():
    times = []
    integrator = FirstOrderIntegrator(max_step=0.1)
    integrator.add_step_handler(lambda t, y: times.append(t))
    integrator.integrate(_decay, 0.0, [1.0], 1.0)
    assert len(times) >= 10
    assert times == sorted(times)
    assert times[-1] == pytest.approx(1.0)


@pytest.mark.unit
def test_empty_span():
    integrator = FirstOrderIntegrator()
    t, y = integrator.integrate(_decay, 2.0, [1.0], 2.0)
    assert t == 2.0
    assert y.tolist() == [1.0]


@pytest.mark.unit
def test_falling_ph_event_stops_integration():
    event = DiscreteEvent(39, 6.5, CrossingDirection.falling)
    times = []
    integrator = FirstOrderIntegrator()
    integrator.add_step_handler(lambda t, y: times.append(t))
    integrator.add_event_handler(event)

    t, y = integrator.integrate(_falling_ph, 0.0, _ph_state(), 5.0)

    assert t == pytest.approx(1.0, abs=1e-9)
    assert event.crossing_time == t
    assert y[39] == pytest.approx(6.5, abs=1e-9)
    assert times[-1] == t


@pytest.mark.unit
def test_crossing_in_other_direction_continues():
    event = DiscreteEvent(39, 6.5, CrossingDirection.rising)
    integrator = FirstOrderIntegrator()
    integrator.add_event_handler(event)

    t, y = integrator.integrate(_falling_ph, 0.0, _ph_state(), 5.0)

    assert t == pytest.approx(5.0)
    assert y[39] == pytest.approx(2.5)
    assert event.crossing_time is None


@pytest.mark.unit
def test_earliest_event_wins():
    late = DiscreteEvent(39, 6.0, CrossingDirection.falling)
    early = DiscreteEvent(39, 7.0, CrossingDirection.falling)
    integrator = FirstOrderIntegrator(max_step=10.0)
    integrator.add_event_handler(late)
    integrator.add_event_handler(early)

    t, _ = integrator.integrate(_falling_ph, 0.0, _ph_state(), 5.0)

    assert t == pytest.approx(0.5, abs=1e-9)
    assert early.crossing_time == t


@pytest.mark.unit
def test_custom_switching_function():
    event = DiscreteEvent(0, 0.5, CrossingDirection.falling)
    integrator = FirstOrderIntegrator()
    # watch twice the state instead of the state itself
    integrator.add_event_handler(event, g=lambda t, y: event.g(t, 2.0 * y))
    t, _ = integrator.integrate(_decay, 0.0, [1.0], 5.0)
    assert t == pytest.approx(math.log(4.0), rel=1e-6)


@pytest.mark.unit
def test_solver_failure():
    # y = 1 / (1 - t) has no solution past t = 1
    integrator = FirstOrderIntegrator(method="RK45")
    with pytest.raises(IntegrationError, match="RK45 failed"):
        integrator.integrate(lambda t, y: y * y, 0.0, [1.0], 2.0)


@pytest.mark.unit
def test_step_limit():
    integrator = FirstOrderIntegrator(max_step=0.01, max_steps=5)
    with pytest.raises(IntegrationError, match="exceeded 5 steps"):
        integrator.integrate(_decay, 0.0, [1.0], 1.0)


@pytest.mark.unit
def test_config_validation():
    with pytest.raises(ValueError):
        FirstOrderIntegrator(method="Euler")
    with pytest.raises(ValueError):
        FirstOrderIntegrator(rtol=-1.0)
    integrator = FirstOrderIntegrator(method="Radau", first_step=1e-3)
    assert integrator.config.method == "Radau"
    assert integrator.config.first_step == 1e-3
