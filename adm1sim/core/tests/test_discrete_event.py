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
import numpy as np
import pytest

from adm1sim.core.discrete_event import (
    CrossingDirection,
    DiscreteEvent,
    EventAction,
    parse_event,
)
from adm1sim.core.state import StateIndex


@pytest.mark.unit
def test_switching_function():
    event = DiscreteEvent(StateIndex.pH, 6.5, CrossingDirection.falling)
    x = np.zeros(42)
    x[39] = 7.0
    assert event.g(0.0, x) == pytest.approx(0.5)
    x[39] = 6.0
    assert event.g(0.0, x) == pytest.approx(-0.5)


@pytest.mark.unit
@pytest.mark.parametrize(
    "direction, increasing, action",
    [
        (CrossingDirection.rising, True, EventAction.stop),
        (CrossingDirection.rising, False, EventAction.continue_),
        (CrossingDirection.falling, False, EventAction.stop),
        (CrossingDirection.falling, True, EventAction.continue_),
    ],
)
def test_event_occurred(direction, increasing, action):
    event = DiscreteEvent(11, 0.1, direction)
    assert event.event_occurred(3.0, np.zeros(42), increasing) is action
    if action is EventAction.stop:
        assert event.crossing_time == 3.0
    else:
        assert event.crossing_time is None


@pytest.mark.unit
def test_reset():
    event = DiscreteEvent(11, 0.1, "rising")
    event.event_occurred(2.0, np.zeros(42), True)
    assert event.crossing_time == 2.0
    event.reset()
    assert event.crossing_time is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, direction",
    [
        ("rising", CrossingDirection.rising),
        ("true", CrossingDirection.rising),
        ("True", CrossingDirection.rising),
        ("falling", CrossingDirection.falling),
        ("false", CrossingDirection.falling),
        (" FALLING ", CrossingDirection.falling),
    ],
)
def test_direction_from_string(text, direction):
    assert CrossingDirection.from_string(text) is direction


@pytest.mark.unit
def test_direction_from_string_invalid():
    with pytest.raises(ValueError, match="unknown crossing direction"):
        CrossingDirection.from_string("sideways")


@pytest.mark.unit
def test_parse_event():
    event = parse_event("39", "6.5", "false")
    assert event.index == 39
    assert event.target == 6.5
    assert event.direction is CrossingDirection.falling
    assert repr(event) == "DiscreteEvent(pH, 6.5, falling)"


@pytest.mark.unit
@pytest.mark.parametrize("index", [-1, 42])
def test_index_out_of_range(index):
    with pytest.raises(ValueError, match="outside the state vector"):
        DiscreteEvent(index, 1.0)
