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
ADM1 kinetics: inhibition functions, the 19 biochemical process rates, the
gas-liquid transfer rates and the stoichiometric combination of process rates
into the 24 net reaction rates of the liquid phase.

Process numbering follows the standard ADM1 numbering:

R1:  Disintegration
R2:  Hydrolysis of carbohydrates
R3:  Hydrolysis of proteins
R4:  Hydrolysis of lipids
R5:  Uptake of sugars
R6:  Uptake of amino acids
R7:  Uptake of long chain fatty acids (LCFAs)
R8:  Uptake of valerate
R9:  Uptake of butyrate
R10: Uptake of propionate
R11: Uptake of acetate
R12: Uptake of hydrogen
R13 - R19: Decay of X_su, X_aa, X_fa, X_c4, X_pro, X_ac, X_h2

All functions work on plain sequences of floats indexed as
:class:`adm1sim.core.state.StateIndex`.
"""

from collections import namedtuple

# Universal gas constant [bar m3 kmol-1 K-1]
R = 0.083145
# Atmospheric pressure [bar]
P_ATM = 1.013
# Guards the competitive valerate/butyrate uptake split
EPS = 1.0e-6

PhInhibitionLimits = namedtuple(
    "PhInhibitionLimits", ["K_pH_aa", "K_pH_ac", "K_pH_h2", "n_aa", "n_ac", "n_h2"]
)

Inhibition = namedtuple(
    "Inhibition",
    [
        "I_pH_aa",
        "I_pH_ac",
        "I_pH_h2",
        "I_IN_lim",
        "I_h2_fa",
        "I_h2_c4",
        "I_h2_pro",
        "I_nh3",
    ],
)

GasPhase = namedtuple("GasPhase", ["p_gas_h2", "p_gas_ch4", "p_gas_co2", "P_gas"])


def ph_inhibition_limits(p):
    """
    Hill-type pH inhibition constants, computed once per parameter set.

    The half-inhibition concentration is the mid point of the upper and lower
    pH limits and the exponent gives the transition its width.
    """
    return PhInhibitionLimits(
        K_pH_aa=10 ** (-(p.pH_UL_aa + p.pH_LL_aa) / 2.0),
        K_pH_ac=10 ** (-(p.pH_UL_ac + p.pH_LL_ac) / 2.0),
        K_pH_h2=10 ** (-(p.pH_UL_h2 + p.pH_LL_h2) / 2.0),
        n_aa=3.0 / (p.pH_UL_aa - p.pH_LL_aa),
        n_ac=3.0 / (p.pH_UL_ac - p.pH_LL_ac),
        n_h2=3.0 / (p.pH_UL_h2 - p.pH_LL_h2),
    )


def ph_inhibition(S_H_ion, K_pH, n):
    return K_pH**n / (S_H_ion**n + K_pH**n)


def inhibition_factors(S_H_ion, x, p, limits):
    """
    Evaluates the eight elementary inhibition factors.

    Args:
        S_H_ion: hydrogen ion concentration [kmol/m3]
        x: clamped state (non-negative)
        p: DigesterParameters
        limits: PhInhibitionLimits

    Returns:
        Inhibition
    """
    S_h2 = x[7]
    S_IN = x[10]
    return Inhibition(
        I_pH_aa=ph_inhibition(S_H_ion, limits.K_pH_aa, limits.n_aa),
        I_pH_ac=ph_inhibition(S_H_ion, limits.K_pH_ac, limits.n_ac),
        I_pH_h2=ph_inhibition(S_H_ion, limits.K_pH_h2, limits.n_h2),
        # written as S/(S+K) so that an empty nitrogen pool gives zero
        I_IN_lim=S_IN / (S_IN + p.K_S_IN),
        I_h2_fa=1.0 / (1.0 + S_h2 / p.K_Ih2_fa),
        I_h2_c4=1.0 / (1.0 + S_h2 / p.K_Ih2_c4),
        I_h2_pro=1.0 / (1.0 + S_h2 / p.K_Ih2_pro),
        I_nh3=1.0 / (1.0 + x[31] / p.K_I_nh3),
    )


def composite_inhibition(inhib):
    """
    Combines the elementary factors into the six composite coefficients.

    Returns:
        tuple gating (R5 and R6, R7, R8 and R9, R10, R11, R12)
    """
    I_5_6 = inhib.I_pH_aa * inhib.I_IN_lim
    return (
        I_5_6,
        I_5_6 * inhib.I_h2_fa,
        I_5_6 * inhib.I_h2_c4,
        I_5_6 * inhib.I_h2_pro,
        inhib.I_pH_ac * inhib.I_IN_lim * inhib.I_nh3,
        inhib.I_pH_h2 * inhib.I_IN_lim,
    )


def process_rates(x, p, composite):
    """Returns the 19 biochemical process rates R1 - R19 [kg COD m-3 d-1]"""
    (
        S_su,
        S_aa,
        S_fa,
        S_va,
        S_bu,
        S_pro,
        S_ac,
        S_h2,
    ) = x[0:8]
    (
        X_xc,
        X_ch,
        X_pr,
        X_li,
        X_su,
        X_aa,
        X_fa,
        X_c4,
        X_pro,
        X_ac,
        X_h2,
    ) = x[12:23]
    I_5_6, I_7, I_8_9, I_10, I_11, I_12 = composite

    c4_total = S_va + S_bu + EPS

    return [
        p.k_dis * X_xc,
        p.k_hyd_ch * X_ch,
        p.k_hyd_pr * X_pr,
        p.k_hyd_li * X_li,
        p.k_m_su * S_su / (p.K_S_su + S_su) * X_su * I_5_6,
        p.k_m_aa * S_aa / (p.K_S_aa + S_aa) * X_aa * I_5_6,
        p.k_m_fa * S_fa / (p.K_S_fa + S_fa) * X_fa * I_7,
        p.k_m_c4 * S_va / (p.K_S_c4 + S_va) * X_c4 * S_va / c4_total * I_8_9,
        p.k_m_c4 * S_bu / (p.K_S_c4 + S_bu) * X_c4 * S_bu / c4_total * I_8_9,
        p.k_m_pro * S_pro / (p.K_S_pro + S_pro) * X_pro * I_10,
        p.k_m_ac * S_ac / (p.K_S_ac + S_ac) * X_ac * I_11,
        p.k_m_h2 * S_h2 / (p.K_S_h2 + S_h2) * X_h2 * I_12,
        p.k_dec_Xsu * X_su,
        p.k_dec_Xaa * X_aa,
        p.k_dec_Xfa * X_fa,
        p.k_dec_Xc4 * X_c4,
        p.k_dec_Xpro * X_pro,
        p.k_dec_Xac * X_ac,
        p.k_dec_Xh2 * X_h2,
    ]


def gas_phase(x, temperature, p_gas_h2o):
    """Partial pressures of the headspace gases and the total pressure [bar]"""
    RT = R * (273.15 + temperature)
    p_gas_h2 = x[32] * RT / 16.0
    p_gas_ch4 = x[33] * RT / 64.0
    p_gas_co2 = x[34] * RT
    return GasPhase(
        p_gas_h2,
        p_gas_ch4,
        p_gas_co2,
        p_gas_h2 + p_gas_ch4 + p_gas_co2 + p_gas_h2o,
    )


def hydrogen_transfer_rate(S_h2, p, K_H_h2, p_gas_h2):
    return p.kLa * (S_h2 - 16.0 * K_H_h2 * p_gas_h2)


def gas_transfer_rates(x, p, constants, gas):
    """Liquid to gas transfer of H2, CH4 [kg COD m-3 d-1] and CO2 [kmol m-3 d-1]"""
    return (
        hydrogen_transfer_rate(x[7], p, constants.K_H_h2, gas.p_gas_h2),
        p.kLa * (x[8] - 64.0 * constants.K_H_ch4 * gas.p_gas_ch4),
        # only dissolved CO2 takes part in the transfer
        p.kLa * ((x[9] - x[30]) - constants.K_H_co2 * gas.p_gas_co2),
    )


def carbon_stoichiometry(p):
    """
    Carbon balance coefficients of the inorganic carbon equation, one per
    carbon-converting process; R13 - R19 share the last coefficient.
    """
    return (
        -p.C_xc
        + p.f_sI_xc * p.C_sI
        + p.f_ch_xc * p.C_ch
        + p.f_pr_xc * p.C_pr
        + p.f_li_xc * p.C_li
        + p.f_xI_xc * p.C_xI,
        -p.C_ch + p.C_su,
        -p.C_pr + p.C_aa,
        -p.C_li + (1.0 - p.f_fa_li) * p.C_su + p.f_fa_li * p.C_fa,
        -p.C_su
        + (1.0 - p.Y_su)
        * (p.f_bu_su * p.C_bu + p.f_pro_su * p.C_pro + p.f_ac_su * p.C_ac)
        + p.Y_su * p.C_bac,
        -p.C_aa
        + (1.0 - p.Y_aa)
        * (
            p.f_va_aa * p.C_va
            + p.f_bu_aa * p.C_bu
            + p.f_pro_aa * p.C_pro
            + p.f_ac_aa * p.C_ac
        )
        + p.Y_aa * p.C_bac,
        -p.C_fa + (1.0 - p.Y_fa) * 0.7 * p.C_ac + p.Y_fa * p.C_bac,
        -p.C_va
        + (1.0 - p.Y_c4) * 0.54 * p.C_pro
        + (1.0 - p.Y_c4) * 0.31 * p.C_ac
        + p.Y_c4 * p.C_bac,
        -p.C_bu + (1.0 - p.Y_c4) * 0.8 * p.C_ac + p.Y_c4 * p.C_bac,
        -p.C_pro + (1.0 - p.Y_pro) * 0.57 * p.C_ac + p.Y_pro * p.C_bac,
        -p.C_ac + (1.0 - p.Y_ac) * p.C_ch4 + p.Y_ac * p.C_bac,
        (1.0 - p.Y_h2) * p.C_ch4 + p.Y_h2 * p.C_bac,
        -p.C_bac + p.C_xc,
    )


def hydrogen_reaction_rate(rho, rho_T8, p):
    """Net production of dissolved hydrogen [kg COD m-3 d-1]"""
    return (
        (1.0 - p.Y_su) * p.f_h2_su * rho[4]
        + (1.0 - p.Y_aa) * p.f_h2_aa * rho[5]
        + (1.0 - p.Y_fa) * 0.3 * rho[6]
        + (1.0 - p.Y_c4) * 0.15 * rho[7]
        + (1.0 - p.Y_c4) * 0.2 * rho[8]
        + (1.0 - p.Y_pro) * 0.43 * rho[9]
        - rho[11]
        - rho_T8
    )


def reaction_rates(rho, rho_T, p, stoich):
    """
    Net reaction rates of state slots 0 - 23.

    Args:
        rho: the 19 process rates
        rho_T: the three gas transfer rates
        p: DigesterParameters
        stoich: carbon stoichiometry from ``carbon_stoichiometry``

    Returns:
        list of 24 rates aligned with StateIndex.S_su ... StateIndex.X_I
    """
    decay = rho[12] + rho[13] + rho[14] + rho[15] + rho[16] + rho[17] + rho[18]

    carbon = -sum(s * r for s, r in zip(stoich[:12], rho[:12]))
    carbon -= stoich[12] * decay
    carbon -= rho_T[2]

    nitrogen = (
        (p.N_xc - p.f_xI_xc * p.N_I - p.f_sI_xc * p.N_I - p.f_pr_xc * p.N_aa) * rho[0]
        - p.Y_su * p.N_bac * rho[4]
        + (p.N_aa - p.Y_aa * p.N_bac) * rho[5]
        - p.Y_fa * p.N_bac * rho[6]
        - p.Y_c4 * p.N_bac * rho[7]
        - p.Y_c4 * p.N_bac * rho[8]
        - p.Y_pro * p.N_bac * rho[9]
        - p.Y_ac * p.N_bac * rho[10]
        - p.Y_h2 * p.N_bac * rho[11]
        + (p.N_bac - p.N_xc) * decay
    )

    return [
        rho[1] + (1.0 - p.f_fa_li) * rho[3] - rho[4],
        rho[2] - rho[5],
        p.f_fa_li * rho[3] - rho[6],
        (1.0 - p.Y_aa) * p.f_va_aa * rho[5] - rho[7],
        (1.0 - p.Y_su) * p.f_bu_su * rho[4]
        + (1.0 - p.Y_aa) * p.f_bu_aa * rho[5]
        - rho[8],
        (1.0 - p.Y_su) * p.f_pro_su * rho[4]
        + (1.0 - p.Y_aa) * p.f_pro_aa * rho[5]
        + (1.0 - p.Y_c4) * 0.54 * rho[7]
        - rho[9],
        (1.0 - p.Y_su) * p.f_ac_su * rho[4]
        + (1.0 - p.Y_aa) * p.f_ac_aa * rho[5]
        + (1.0 - p.Y_fa) * 0.7 * rho[6]
        + (1.0 - p.Y_c4) * 0.31 * rho[7]
        + (1.0 - p.Y_c4) * 0.8 * rho[8]
        + (1.0 - p.Y_pro) * 0.57 * rho[9]
        - rho[10],
        hydrogen_reaction_rate(rho, rho_T[0], p),
        (1.0 - p.Y_ac) * rho[10] + (1.0 - p.Y_h2) * rho[11] - rho_T[1],
        carbon,
        nitrogen,
        p.f_sI_xc * rho[0],
        -rho[0] + decay,
        p.f_ch_xc * rho[0] - rho[1],
        p.f_pr_xc * rho[0] - rho[2],
        p.f_li_xc * rho[0] - rho[3],
        p.Y_su * rho[4] - rho[12],
        p.Y_aa * rho[5] - rho[13],
        p.Y_fa * rho[6] - rho[14],
        p.Y_c4 * rho[7] + p.Y_c4 * rho[8] - rho[15],
        p.Y_pro * rho[9] - rho[16],
        p.Y_ac * rho[10] - rho[17],
        p.Y_h2 * rho[11] - rho[18],
        p.f_xI_xc * rho[0],
    ]


def gas_flow(P_gas, p):
    """Headspace outflow through the gas pipe [m3/d], never negative"""
    return max(p.k_P * (P_gas - P_ATM), 0.0)
