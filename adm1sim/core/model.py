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
Simulation controller for a single ADM1 digester.

A :class:`Model` owns the reactor state, the influent, the parameters and the
stopping events of a session. :meth:`Model.simulate` integrates one time span
and keeps the closed state reached at its end, so the next span (for example
with a new influent row) continues from it. :meth:`Model.submit` runs the span
on an executor and returns a :class:`SimulationTask` that can be polled for
progress and joined.

Only one span may run per Model at a time, and the Model must not be
reconfigured while a span is running.
"""

from concurrent import futures
import threading

import numpy as np

from pyomo.common.config import Bool, ConfigDict, ConfigValue, PositiveFloat

import idaes.logger as idaeslog

from adm1sim.core.dae_model import (
    ADM1DAEModel,
    EquilibriumMode,
    initial_hydrogen_ion,
)
from adm1sim.core.integrator import FirstOrderIntegrator
from adm1sim.core.state import StateIndex, StateVariables, as_state_array

_log = idaeslog.getLogger(__name__)

# 15 minutes [d]
DEFAULT_RESOLUTION = 0.01041666667


class SimulationTask:
    """
    Handle on a span running in the background.

    Args:
        model: the Model performing the span
        future: concurrent.futures.Future of ``model.simulate``
    """

    def __init__(self, model, future):
        self.model = model
        self._future = future

    def progress(self):
        """Last time [d] reached by the integrator"""
        return self.model.progress

    def done(self):
        return self._future.done()

    def result(self, timeout=None):
        """Waits for the span and returns the final state; re-raises its failure"""
        return self._future.result(timeout=timeout)


class Model:
    """
    Drives the ADM1 DAE model across time spans.

    Args:
        start: start time [d]
        end: requested end time [d]
        parameters: DigesterParameters
        initial: initial reactor StateVariables
        influent: influent StateVariables
        online_record: pass each step at the sampling resolution to ``recorder``
        recorder: object with ``record(t, values)``; defaults to a
            ContinuousOutputWriter on ``cont_model_output.csv``
        **options: entries of ``Model.CONFIG``
    """

    CONFIG = ConfigDict()

    CONFIG.declare(
        "dae",
        ConfigValue(
            default=True,
            domain=Bool,
            description="close S_H+ and S_h2 algebraically instead of integrating them",
        ),
    )
    CONFIG.declare(
        "fixed_pH",
        ConfigValue(
            default=-1.0,
            domain=float,
            description="hold the pH at this value, negative values disable",
        ),
    )
    CONFIG.declare(
        "resolution",
        ConfigValue(
            default=DEFAULT_RESOLUTION,
            domain=PositiveFloat,
            description="minimum time between recorded rows [d]",
        ),
    )
    CONFIG.declare(
        "integrator",
        FirstOrderIntegrator.CONFIG(),
    )

    def __init__(
        self,
        start,
        end,
        parameters,
        initial,
        influent,
        online_record=False,
        recorder=None,
        **options,
    ):
        self.config = self.CONFIG(options)
        self.online_record = online_record
        self.recorder = recorder

        self.parameters = parameters
        self._u = as_state_array(influent)
        self._x = as_state_array(initial)
        self._ion_dae = self.config.dae
        self._hydrogen_dae = self.config.dae
        self.events = []
        self._working = None

        self._lock = threading.Lock()
        self._finished = False
        self.set_time(start, end)

        # effluent flow follows the influent
        self._x[StateIndex.Q_D] = self._u[StateIndex.Q_D]
        self._S_H_ion = initial_hydrogen_ion(self._x, self.parameters)

    def set_time(self, start, end):
        self.start = start
        self.end = end
        with self._lock:
            self._progress = start

    def set_influent(self, influent):
        self._u = as_state_array(influent)
        self._x[StateIndex.Q_D] = self._u[StateIndex.Q_D]

    def set_initial(self, initial):
        self._x = as_state_array(initial)

    def set_parameters(self, parameters):
        self.parameters = parameters

    def set_dae(self, dae):
        """Switches both algebraic closures on or off"""
        self._ion_dae = bool(dae)
        self._hydrogen_dae = bool(dae)

    def set_ion_dae(self, ion_dae):
        self._ion_dae = bool(ion_dae)

    def set_hydrogen_dae(self, hydrogen_dae):
        self._hydrogen_dae = bool(hydrogen_dae)

    def set_ph(self, ph):
        self.config.fixed_pH = ph

    def add_event(self, event):
        self.events.append(event)

    def add_events(self, events):
        """Replaces the registered events"""
        self.events = list(events)

    def set_resolution(self, resolution):
        self.config.resolution = resolution

    @property
    def mode(self):
        return EquilibriumMode(
            ion_dae=self._ion_dae,
            hydrogen_dae=self._hydrogen_dae,
            fixed_pH=self.config.fixed_pH,
        )

    @property
    def progress(self):
        with self._lock:
            return self._progress

    def _advance(self, t):
        with self._lock:
            if t > self._progress:
                self._progress = t

    @property
    def finished(self):
        return self._finished

    @property
    def x(self):
        return StateVariables(self._x)

    @property
    def u(self):
        return StateVariables(self._u)

    @property
    def S_H_ion(self):
        return self._S_H_ion

    @property
    def working(self):
        """WorkingState at the end of the last span"""
        return self._working

    def _default_recorder(self):
        from adm1sim.tools.csv_io import ContinuousOutputWriter

        return ContinuousOutputWriter("cont_model_output.csv")

    def simulate(self):
        """
        Integrates from ``start`` to ``end``, or to the first stopping event.

        Afterwards ``end`` is the time actually reached and ``x`` the closed
        state at that time.

        Returns:
            StateVariables at the reached time

        Raises:
            IntegrationError: the integrator failed
        """
        self._finished = False
        with self._lock:
            self._progress = self.start

        ode = ADM1DAEModel(self.parameters, self._u, self.mode)
        working = ode.initial_working_state(self._x, self._S_H_ion)

        def rhs(t, y):
            nonlocal working
            dx, working = ode.derivatives(t, y, working)
            return dx

        def closed_state(t, y):
            return ode.derivatives(t, y, working)[1].x

        integrator = FirstOrderIntegrator(**self.config.integrator.value())
        integrator.add_step_handler(lambda t, y: self._advance(t))

        if self.online_record:
            if self.recorder is None:
                self.recorder = self._default_recorder()
            resolution = self.config.resolution
            recorder = self.recorder
            prev_t = self.start

            def record(t, y):
                nonlocal prev_t
                if t - prev_t > resolution:
                    recorder.record(t, closed_state(t, y))
                    prev_t = t

            integrator.add_step_handler(record)

        for event in self.events:
            event.reset()
            integrator.add_event_handler(
                event, g=lambda t, y, event=event: event.g(t, closed_state(t, y))
            )

        _log.info(
            f"Simulating {self.start} - {self.end} d (ion DAE {self._ion_dae}, "
            f"hydrogen DAE {self._hydrogen_dae}, fixed pH {self.config.fixed_pH})"
        )
        t_reached, y = integrator.integrate(rhs, self.start, self._x, self.end)

        for event in self.events:
            if event.crossing_time is not None and event.crossing_time < self.end:
                self.end = event.crossing_time

        # closed slots (S_h2, ions, reporting values) carry into the next span
        _, working = ode.derivatives(t_reached, y, working)
        self._working = working
        self._x = np.array(working.x)
        self._S_H_ion = working.S_H_ion

        self._advance(t_reached)
        self._finished = True
        _log.info(
            f"Reached t = {t_reached} d, pH {self._x[StateIndex.pH]:.4f}, "
            f"gas flow {self._x[StateIndex.q_gas]:.2f} m3/d"
        )
        return self.x

    def submit(self, executor=None):
        """
        Runs :meth:`simulate` in the background.

        Args:
            executor: concurrent.futures.Executor, a single worker thread is
                used when None

        Returns:
            SimulationTask
        """
        if executor is not None:
            return SimulationTask(self, executor.submit(self.simulate))

        executor = futures.ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.simulate)
        finally:
            # already submitted work still runs to completion
            executor.shutdown(wait=False)
        return SimulationTask(self, future)
