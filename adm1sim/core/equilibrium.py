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
Acid-base and dissolved hydrogen equilibria of the ADM1 liquid phase.

The temperature corrected equilibrium constants follow the Van't Hoff
relations of the BSM2 implementation. The hydrogen ion concentration and the
dissolved hydrogen concentration can be closed algebraically with a scalar
Newton-Raphson iteration; both solves return a :class:`NewtonResult` so the
caller can see how well the iteration converged. Non-convergence is not an
error: the last estimate is returned as a best-effort value.
"""

from collections import namedtuple
import math

import idaes.logger as idaeslog

from adm1sim.core import kinetics
from adm1sim.core.kinetics import R

_log = idaeslog.getLogger(__name__)

TOL = 1.0e-12
MAX_STEPS = 1000

NewtonResult = namedtuple(
    "NewtonResult", ["value", "iterations", "residual", "converged"]
)

EquilibriumConstants = namedtuple(
    "EquilibriumConstants",
    [
        "K_w",
        "K_a_va",
        "K_a_bu",
        "K_a_pro",
        "K_a_ac",
        "K_a_co2",
        "K_a_IN",
        "K_H_h2",
        "K_H_ch4",
        "K_H_co2",
        "p_gas_h2o",
    ],
)


def equilibrium_constants(p, temperature):
    """
    Temperature adjusted equilibrium constants.

    Args:
        p: DigesterParameters
        temperature: reactor temperature [deg C]

    Returns:
        EquilibriumConstants
    """
    inverse_dT = 1.0 / p.T_base - 1.0 / (273.15 + temperature)
    factor = inverse_dT / (100.0 * R)
    return EquilibriumConstants(
        K_w=10 ** (-p.pK_w_base) * math.exp(55900.0 * factor),
        K_a_va=10 ** (-p.pK_a_va_base),
        K_a_bu=10 ** (-p.pK_a_bu_base),
        K_a_pro=10 ** (-p.pK_a_pro_base),
        K_a_ac=10 ** (-p.pK_a_ac_base),
        K_a_co2=10 ** (-p.pK_a_co2_base) * math.exp(7646.0 * factor),
        K_a_IN=10 ** (-p.pK_a_IN_base) * math.exp(51965.0 * factor),
        K_H_h2=p.K_H_h2_base * math.exp(-4180.0 * factor),
        K_H_ch4=p.K_H_ch4_base * math.exp(-14240.0 * factor),
        K_H_co2=p.K_H_co2_base * math.exp(-19410.0 * factor),
        p_gas_h2o=p.K_H_h2o_base * math.exp(5290.0 * inverse_dT),
    )


def newton_raphson(residual_and_gradient, x0, tol=TOL, max_steps=MAX_STEPS, floor=TOL):
    """
    Scalar Newton-Raphson iteration.

    Iterates until the residual evaluated at the current iterate is within
    ``tol`` or ``max_steps`` iterations have been made. Iterates that are not
    positive are replaced by ``floor``.

    Args:
        residual_and_gradient: callable returning ``(f(x), f'(x))``
        x0: starting estimate

    Returns:
        NewtonResult with the final iterate, the iterations used and the last
        evaluated residual
    """
    value = x0
    residual = math.inf
    steps = 0
    while abs(residual) > tol and steps < max_steps:
        residual, gradient = residual_and_gradient(value)
        value = value - residual / gradient
        if value <= 0:
            value = floor
        steps += 1

    converged = abs(residual) <= tol
    if not converged:
        _log.debug(
            "Newton-Raphson stopped after %s iterations with residual %.3e",
            steps,
            residual,
        )
    return NewtonResult(value, steps, residual, converged)


def charge_balance(S_H_ion, x, k):
    """
    Ion balance residual [kmol/m3] for a hydrogen ion concentration.

    Cations, ammonium and protons against bicarbonate, the volatile fatty acid
    anions (converted from kg COD by their COD per mole), hydroxide and the
    strong-acid anions.
    """
    S_IN = x[10]
    return (
        x[24]
        + S_IN
        - k.K_a_IN * S_IN / (k.K_a_IN + S_H_ion)
        + S_H_ion
        - k.K_a_co2 * x[9] / (k.K_a_co2 + S_H_ion)
        - k.K_a_ac * x[6] / (k.K_a_ac + S_H_ion) / 64.0
        - k.K_a_pro * x[5] / (k.K_a_pro + S_H_ion) / 112.0
        - k.K_a_bu * x[4] / (k.K_a_bu + S_H_ion) / 160.0
        - k.K_a_va * x[3] / (k.K_a_va + S_H_ion) / 208.0
        - k.K_w / S_H_ion
        - x[25]
    )


def charge_balance_gradient(S_H_ion, x, k):
    return (
        1.0
        + k.K_a_IN * x[10] / (k.K_a_IN + S_H_ion) ** 2
        + k.K_a_co2 * x[9] / (k.K_a_co2 + S_H_ion) ** 2
        + k.K_a_ac * x[6] / (k.K_a_ac + S_H_ion) ** 2 / 64.0
        + k.K_a_pro * x[5] / (k.K_a_pro + S_H_ion) ** 2 / 112.0
        + k.K_a_bu * x[4] / (k.K_a_bu + S_H_ion) ** 2 / 160.0
        + k.K_a_va * x[3] / (k.K_a_va + S_H_ion) ** 2 / 208.0
        + k.K_w / S_H_ion**2
    )


def solve_hydrogen_ion(S_H_ion, x, k):
    """Closes the charge balance for S_H+ starting from ``S_H_ion``"""
    return newton_raphson(
        lambda s: (charge_balance(s, x, k), charge_balance_gradient(s, x, k)),
        S_H_ion,
    )


def ion_states(S_H_ion, x, k):
    """
    Dissociated species in equilibrium with ``S_H_ion``.

    Returns:
        (S_va-, S_bu-, S_pro-, S_ac-, S_hco3-, S_nh3)
    """
    return (
        k.K_a_va * x[3] / (k.K_a_va + S_H_ion),
        k.K_a_bu * x[4] / (k.K_a_bu + S_H_ion),
        k.K_a_pro * x[5] / (k.K_a_pro + S_H_ion),
        k.K_a_ac * x[6] / (k.K_a_ac + S_H_ion),
        k.K_a_co2 * x[9] / (k.K_a_co2 + S_H_ion),
        k.K_a_IN * x[10] / (k.K_a_IN + S_H_ion),
    )


def hydrogen_ion_from_ions(x, K_w):
    """
    S_H+ from the integrated ion states.

    Root of S_H**2 + phi*S_H - K_w = 0 where phi is the net charge of all
    other ions, written in a form that does not cancel for large phi.
    """
    phi = (
        x[24]
        + (x[10] - x[31])
        - x[30]
        - x[29] / 64.0
        - x[28] / 112.0
        - x[27] / 160.0
        - x[26] / 208.0
        - x[25]
    )
    root = math.sqrt(phi * phi + 4.0 * K_w)
    if phi > 0:
        return 2.0 * K_w / (phi + root)
    return 0.5 * (root - phi)


def hydrogen_balance(S_h2, x, u_h2, p, k, gas, S_H_ion, limits):
    """
    Dissolved hydrogen mass balance residual and its derivative with respect
    to S_h2.

    The pH inhibition is evaluated at ``S_H_ion`` and held fixed while S_h2
    varies.

    Args:
        S_h2: dissolved hydrogen estimate [kg COD/m3]
        x: clamped working state
        u_h2: influent dissolved hydrogen [kg COD/m3]
        p: DigesterParameters
        k: EquilibriumConstants
        gas: GasPhase
        S_H_ion: hydrogen ion concentration for the pH inhibition
        limits: PhInhibitionLimits

    Returns:
        (residual [kg COD m-3 d-1], gradient [d-1])
    """
    xs = list(x)
    xs[7] = S_h2
    inhib = kinetics.inhibition_factors(S_H_ion, xs, p, limits)
    rho = kinetics.process_rates(xs, p, kinetics.composite_inhibition(inhib))
    rho_T8 = kinetics.hydrogen_transfer_rate(S_h2, p, k.K_H_h2, gas.p_gas_h2)
    dilution = xs[35] / p.V_liq
    residual = dilution * (u_h2 - S_h2) + kinetics.hydrogen_reaction_rate(
        rho, rho_T8, p
    )

    S_fa, S_va, S_bu, S_pro = xs[2], xs[3], xs[4], xs[5]
    X_fa, X_c4, X_pro, X_h2 = xs[18], xs[19], xs[20], xs[22]
    I_aa = inhib.I_pH_aa * inhib.I_IN_lim
    I_h2 = inhib.I_pH_h2 * inhib.I_IN_lim
    c4_total = S_va + S_bu + kinetics.EPS

    gradient = (
        -dilution
        - 0.3
        * (1.0 - p.Y_fa)
        * p.k_m_fa
        * S_fa
        / (p.K_S_fa + S_fa)
        * X_fa
        * I_aa
        / (1.0 + S_h2 / p.K_Ih2_fa) ** 2
        / p.K_Ih2_fa
        - 0.15
        * (1.0 - p.Y_c4)
        * p.k_m_c4
        * S_va
        * S_va
        / (p.K_S_c4 + S_va)
        * X_c4
        / c4_total
        * I_aa
        / (1.0 + S_h2 / p.K_Ih2_c4) ** 2
        / p.K_Ih2_c4
        - 0.2
        * (1.0 - p.Y_c4)
        * p.k_m_c4
        * S_bu
        * S_bu
        / (p.K_S_c4 + S_bu)
        * X_c4
        / c4_total
        * I_aa
        / (1.0 + S_h2 / p.K_Ih2_c4) ** 2
        / p.K_Ih2_c4
        - 0.43
        * (1.0 - p.Y_pro)
        * p.k_m_pro
        * S_pro
        / (p.K_S_pro + S_pro)
        * X_pro
        * I_aa
        / (1.0 + S_h2 / p.K_Ih2_pro) ** 2
        / p.K_Ih2_pro
        - p.k_m_h2 * p.K_S_h2 / (p.K_S_h2 + S_h2) ** 2 * X_h2 * I_h2
        - p.kLa
    )
    return residual, gradient


def solve_hydrogen(S_h2, x, u_h2, p, k, gas, S_H_ion, limits):
    """Closes the dissolved hydrogen balance starting from ``S_h2``"""
    return newton_raphson(
        lambda s: hydrogen_balance(s, x, u_h2, p, k, gas, S_H_ion, limits),
        S_h2,
    )
