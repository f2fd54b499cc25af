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
"""
G-stop events: integrate until a state reaches a target value.

An event watches one slot of the state vector. The integrator evaluates
``g(t, x) = x[index] - target`` and, on a sign change, asks the event whether
to stop. Only crossings in the configured direction stop the integration; the
time of the stopping crossing is kept on the event.
"""

from enum import Enum, auto

import idaes.logger as idaeslog

from adm1sim.core.state import N_STATES, StateIndex

_log = idaeslog.getLogger(__name__)


class CrossingDirection(Enum):
    """
    rising: stop when the watched value crosses the target from below
    falling: stop when the watched value crosses the target from above
    """

    rising = auto()
    falling = auto()

    @classmethod
    def from_string(cls, text):
        """Accepts the direction name or a boolean "stop when increasing" flag"""
        key = str(text).strip().lower()
        if key in ("rising", "true", "increasing"):
            return cls.rising
        if key in ("falling", "false", "decreasing"):
            return cls.falling
        raise ValueError(
            f"unknown crossing direction {text!r}, expected rising or falling"
        )


class EventAction(Enum):
    """
    stop: end the integration at the crossing
    continue_: keep integrating
    """

    stop = auto()
    continue_ = auto()


class DiscreteEvent:
    """
    Stops a simulation when ``x[index]`` crosses ``target`` in ``direction``.

    Args:
        index: watched state slot (int or StateIndex)
        target: target value of the watched slot
        direction: CrossingDirection or its string form
    """

    def __init__(self, index, target, direction=CrossingDirection.rising):
        index = int(index)
        if not 0 <= index < N_STATES:
            raise ValueError(
                f"event index {index} is outside the state vector (0-{N_STATES - 1})"
            )
        if not isinstance(direction, CrossingDirection):
            direction = CrossingDirection.from_string(direction)
        self.index = index
        self.target = float(target)
        self.direction = direction
        self.crossing_time = None

    def g(self, t, x):
        return x[self.index] - self.target

    def event_occurred(self, t, x, increasing):
        """
        Decides whether a crossing at ``t`` ends the integration.

        Args:
            t: crossing time
            x: state at the crossing
            increasing: True when ``g`` goes from negative to positive

        Returns:
            EventAction
        """
        if increasing != (self.direction is CrossingDirection.rising):
            return EventAction.continue_
        self.crossing_time = t
        _log.info(
            f"{StateIndex(self.index).name} reached {self.target} ({self.direction.name}) at t = {t}"
        )
        return EventAction.stop

    def reset(self):
        self.crossing_time = None

    def __repr__(self):
        return (
            f"DiscreteEvent({StateIndex(self.index).name}, {self.target}, "
            f"{self.direction.name})"
        )


def parse_event(index, target, direction):
    """Builds an event from its command line triple, e.g. ``39 6.5 falling``"""
    return DiscreteEvent(int(index), float(target), direction)
