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
First order ODE integrator with step observers and stopping events.

Wraps the step-by-step interface of the scipy ``OdeSolver`` classes. After
every accepted step the registered step handlers are called with the new
time and state, and every registered event function is checked for a sign
change over the step. Crossings are located on the solver's dense output
with Brent's method and handed to the event in time order; the first event
that asks to stop ends the integration at its crossing time.
"""

import numpy as np
from scipy import integrate, optimize

from pyomo.common.config import (
    ConfigDict,
    ConfigValue,
    In,
    PositiveFloat,
    PositiveInt,
)

import idaes.logger as idaeslog

from adm1sim.core.discrete_event import EventAction
from adm1sim.custom_exceptions import IntegrationError

_log = idaeslog.getLogger(__name__)

_METHODS = {
    "LSODA": integrate.LSODA,
    "BDF": integrate.BDF,
    "Radau": integrate.Radau,
    "RK45": integrate.RK45,
    "RK23": integrate.RK23,
    "DOP853": integrate.DOP853,
}


class FirstOrderIntegrator:
    CONFIG = ConfigDict()

    CONFIG.declare(
        "method",
        ConfigValue(
            default="LSODA",
            domain=In(list(_METHODS)),
            description="scipy ODE stepper",
        ),
    )
    CONFIG.declare(
        "rtol",
        ConfigValue(
            default=1e-8, domain=PositiveFloat, description="relative tolerance"
        ),
    )
    CONFIG.declare(
        "atol",
        ConfigValue(
            default=1e-10, domain=PositiveFloat, description="absolute tolerance"
        ),
    )
    CONFIG.declare(
        "max_step",
        ConfigValue(
            default=100.0,
            domain=PositiveFloat,
            description="largest step the solver may take [d]",
        ),
    )
    CONFIG.declare(
        "first_step",
        ConfigValue(
            default=None,
            domain=PositiveFloat,
            description="initial step size [d], None lets the solver choose",
        ),
    )
    CONFIG.declare(
        "max_steps",
        ConfigValue(
            default=1000000,
            domain=PositiveInt,
            description="accepted steps after which the integration is abandoned",
        ),
    )
    CONFIG.declare(
        "event_convergence",
        ConfigValue(
            default=1e-12,
            domain=PositiveFloat,
            description="absolute time tolerance of the event root search",
        ),
    )
    CONFIG.declare(
        "event_max_iterations",
        ConfigValue(
            default=100,
            domain=PositiveInt,
            description="iteration limit of the event root search",
        ),
    )

    def __init__(self, **options):
        self.config = self.CONFIG(options)
        self._step_handlers = []
        self._events = []

    def add_step_handler(self, handler):
        """Registers ``handler(t, y)``, called after every accepted step"""
        self._step_handlers.append(handler)

    def add_event_handler(self, event, g=None):
        """
        Registers a stopping event.

        Args:
            event: object with ``g(t, y)`` and ``event_occurred(t, y, increasing)``
            g: optional switching function used instead of ``event.g``
        """
        self._events.append((event, g if g is not None else event.g))

    def clear_handlers(self):
        self._step_handlers = []
        self._events = []

    def _notify(self, t, y):
        for handler in self._step_handlers:
            handler(t, y)

    def _locate(self, g, dense, t_old, t_new):
        g_old = g(t_old, dense(t_old))
        g_new = g(t_new, dense(t_new))
        if g_old * g_new > 0:
            # the interpolant does not bracket the sign change seen at the nodes
            return t_new
        return optimize.brentq(
            lambda s: g(s, dense(s)),
            t_old,
            t_new,
            xtol=self.config.event_convergence,
            maxiter=self.config.event_max_iterations,
            disp=False,
        )

    def integrate(self, fun, t0, y0, t_end):
        """
        Integrates ``dy/dt = fun(t, y)`` from ``t0`` to ``t_end``.

        Returns:
            (t, y) at ``t_end`` or at the crossing time of a stopping event

        Raises:
            IntegrationError: the stepper failed or the step limit was reached
        """
        y0 = np.array(y0, dtype=np.float64)
        if t_end <= t0:
            return t0, y0

        solver_class = _METHODS[self.config.method]
        options = dict(
            rtol=self.config.rtol,
            atol=self.config.atol,
            max_step=self.config.max_step,
        )
        if self.config.first_step is not None:
            options["first_step"] = self.config.first_step
        solver = solver_class(fun, t0, y0, t_end, **options)

        g_prev = [g(t0, y0) for _, g in self._events]
        steps = 0
        while solver.status == "running":
            message = solver.step()
            if solver.status == "failed":
                raise IntegrationError(
                    f"{self.config.method} failed at t = {solver.t}: {message}"
                )
            steps += 1
            if steps > self.config.max_steps:
                raise IntegrationError(
                    f"{self.config.method} exceeded {self.config.max_steps} steps "
                    f"at t = {solver.t}"
                )

            t_old, t_new, y_new = solver.t_old, solver.t, solver.y
            g_new = [g(t_new, y_new) for _, g in self._events]

            crossings = []
            dense = None
            for i, (event, g) in enumerate(self._events):
                if g_prev[i] == 0 or np.sign(g_prev[i]) == np.sign(g_new[i]):
                    continue
                if dense is None:
                    dense = solver.dense_output()
                t_root = self._locate(g, dense, t_old, t_new)
                crossings.append((t_root, i, g_new[i] > g_prev[i]))

            for t_root, i, increasing in sorted(crossings):
                y_root = dense(t_root)
                event = self._events[i][0]
                if event.event_occurred(t_root, y_root, increasing) is EventAction.stop:
                    _log.debug(f"Integration stopped by {event!r} at t = {t_root}")
                    self._notify(t_root, y_root)
                    return t_root, y_root

            self._notify(t_new, y_new)
            g_prev = g_new

        _log.debug(f"Integration reached t = {solver.t} in {steps} steps")
        return solver.t, np.array(solver.y)
