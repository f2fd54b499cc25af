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
ADM1 derivative function with optional algebraic closures.

The hydrogen ion concentration and the dissolved hydrogen concentration are
fast compared with the rest of the network. Depending on the
:class:`EquilibriumMode` they are either integrated as ordinary states or
closed algebraically at every evaluation (the DAE formulation of the BSM2
implementation).

Every call to :meth:`ADM1DAEModel.derivatives` takes the working state of the
previous call and returns a new one next to the derivative. The working state
holds the clamped and closed state vector used for reporting, the hydrogen ion
concentration that seeds the next ion balance solve, and the convergence
records of the Newton solves.
"""

from collections import namedtuple
from dataclasses import dataclass
import math

import numpy as np

from adm1sim.core import kinetics
from adm1sim.core.equilibrium import (
    equilibrium_constants,
    hydrogen_ion_from_ions,
    ion_states,
    solve_hydrogen,
    solve_hydrogen_ion,
)
from adm1sim.core.state import (
    GAS_STATES,
    ION_STATES,
    N_STATES,
    REACTING_STATES,
    StateIndex,
    as_state_array,
)
from adm1sim.custom_exceptions import MalformedDataError

# parent acid of each ion state, aligned with StateIndex.S_va_ion ... S_nh3
_ION_PARENTS = (
    StateIndex.S_va,
    StateIndex.S_bu,
    StateIndex.S_pro,
    StateIndex.S_ac,
    StateIndex.S_IC,
    StateIndex.S_IN,
)

WorkingState = namedtuple(
    "WorkingState", ["x", "S_H_ion", "ion_solve", "hydrogen_solve"]
)


@dataclass(frozen=True)
class EquilibriumMode:
    """
    Selects which fast equilibria are closed algebraically.

    A non-negative ``fixed_pH`` holds the hydrogen ion concentration at
    ``10**-fixed_pH`` and takes precedence over ``ion_dae``.
    """

    ion_dae: bool = True
    hydrogen_dae: bool = True
    fixed_pH: float = -1.0

    @property
    def ph_fixed(self):
        return self.fixed_pH is not None and self.fixed_pH >= 0

    @property
    def ions_algebraic(self):
        """True when the six ion states are closed rather than integrated"""
        return self.ion_dae or self.ph_fixed


def initial_hydrogen_ion(x, parameters):
    """
    Hydrogen ion seed for a new session.

    Closed-form root of the charge balance over the stored ion states, with
    the water dissociation constant taken at the operating temperature
    ``T_op``.
    """
    x = as_state_array(x)
    k = equilibrium_constants(parameters, parameters.T_op - 273.15)
    return hydrogen_ion_from_ions(x, k.K_w)


class ADM1DAEModel:
    """
    Right hand side of the ADM1 digester balances.

    Args:
        parameters: DigesterParameters
        influent: influent StateVariables (or any 42-value sequence)
        mode: EquilibriumMode, defaults to both algebraic closures
    """

    def __init__(self, parameters, influent, mode=None):
        self.parameters = parameters
        self.influent = as_state_array(influent)
        self.mode = mode if mode is not None else EquilibriumMode()

        self._stoich = kinetics.carbon_stoichiometry(parameters)
        self._limits = kinetics.ph_inhibition_limits(parameters)

    def initial_working_state(self, x, S_H_ion):
        """Working state for the first evaluation of a span"""
        return WorkingState(np.maximum(as_state_array(x), 0.0), S_H_ion, None, None)

    def derivatives(self, t, x, working):
        """
        Evaluates the state derivatives at ``(t, x)``.

        Args:
            t: time [d], the balances are autonomous
            x: candidate state from the integrator, not modified
            working: WorkingState returned by the previous call

        Returns:
            (dx, working) where dx is a length 42 array and working the new
            WorkingState
        """
        p = self.parameters
        u = self.influent
        mode = self.mode

        x = np.asarray(x, dtype=np.float64)
        if x.size != N_STATES:
            raise MalformedDataError(
                f"derivative requested for {x.size} states, expected {N_STATES}"
            )
        xt = np.maximum(x, 0.0)

        k = equilibrium_constants(p, xt[StateIndex.T_D])

        # the hydrogen balance sees the pH of the previous evaluation
        ion_solve = None
        if mode.ph_fixed:
            S_H_ion = 10 ** (-mode.fixed_pH)
            S_H_h2 = S_H_ion
        else:
            S_H_h2 = working.S_H_ion
            if mode.ion_dae:
                ion_solve = solve_hydrogen_ion(working.S_H_ion, xt, k)
                S_H_ion = ion_solve.value
            else:
                S_H_ion = hydrogen_ion_from_ions(xt, k.K_w)

        if mode.ions_algebraic:
            xt[ION_STATES.start : ION_STATES.stop] = ion_states(S_H_ion, xt, k)

        gas = kinetics.gas_phase(xt, xt[StateIndex.T_D], k.p_gas_h2o)

        hydrogen_solve = None
        if mode.hydrogen_dae:
            seed = working.x[StateIndex.S_h2]
            if seed <= 0:
                seed = xt[StateIndex.S_h2]
            hydrogen_solve = solve_hydrogen(
                seed,
                xt,
                u[StateIndex.S_h2],
                p,
                k,
                gas,
                S_H_h2,
                self._limits,
            )
            xt[StateIndex.S_h2] = hydrogen_solve.value

        inhib = kinetics.inhibition_factors(S_H_ion, xt, p, self._limits)
        rho = kinetics.process_rates(xt, p, kinetics.composite_inhibition(inhib))
        rho_T = kinetics.gas_transfer_rates(xt, p, k, gas)
        reac = kinetics.reaction_rates(rho, rho_T, p, self._stoich)
        q_gas = kinetics.gas_flow(gas.P_gas, p)

        dx = np.zeros(N_STATES, dtype=np.float64)
        dilution = x[StateIndex.Q_D] / p.V_liq
        reacting = slice(REACTING_STATES.start, REACTING_STATES.stop)
        dx[reacting] = dilution * (u[reacting] - x[reacting]) + np.asarray(reac)
        if mode.hydrogen_dae:
            dx[StateIndex.S_h2] = 0.0
        dx[StateIndex.S_cat : StateIndex.S_an + 1] = dilution * (
            u[StateIndex.S_cat : StateIndex.S_an + 1]
            - x[StateIndex.S_cat : StateIndex.S_an + 1]
        )

        if not mode.ions_algebraic:
            K_a = (k.K_a_va, k.K_a_bu, k.K_a_pro, k.K_a_ac, k.K_a_co2, k.K_a_IN)
            k_AB = (p.k_A_Bva, p.k_A_Bbu, p.k_A_Bpro, p.k_A_Bac, p.k_A_Bco2, p.k_A_BIN)
            for i, parent in enumerate(_ION_PARENTS):
                ion = StateIndex.S_va_ion + i
                dx[ion] = -k_AB[i] * (xt[ion] * (K_a[i] + S_H_ion) - K_a[i] * xt[parent])

        for i, gas_state in enumerate(GAS_STATES):
            dx[gas_state] = (
                -xt[gas_state] * q_gas / p.V_gas + rho_T[i] * p.V_liq / p.V_gas
            )

        # flow, temperature and the reporting slots are not integrated
        xt[StateIndex.q_ch4] = q_gas * gas.p_gas_ch4 / gas.P_gas
        xt[StateIndex.q_gas] = q_gas
        xt[StateIndex.pH] = -math.log10(S_H_ion)
        xt[StateIndex.spare_1] = 0.0
        xt[StateIndex.spare_2] = 0.0

        return dx, WorkingState(xt, S_H_ion, ion_solve, hydrogen_solve)
