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
Default digester initial conditions and influent from the BSM2 benchmark.

Reference:

C. Rosén, U. Jeppsson, Aspects on ADM1 Implementation within the BSM2 Framework,
Department of Industrial Electrical Engineering and Automation, Lund University, Lund, Sweden. (2006) 1–35.
"""

from adm1sim.core.state import StateVariables

# fmt: off
_DIGESTER_INIT = [
    0.012,     # S_su
    0.0053,    # S_aa
    0.099,     # S_fa
    0.012,     # S_va
    0.013,     # S_bu
    0.016,     # S_pro
    0.2,       # S_ac
    2.30e-7,   # S_h2
    0.055,     # S_ch4
    0.15,      # S_IC
    0.13,      # S_IN
    0.033,     # S_I
    0.31,      # X_xc
    0.028,     # X_ch
    0.1,       # X_pr
    0.029,     # X_li
    0.42,      # X_su
    1.18,      # X_aa
    0.24,      # X_fa
    0.43,      # X_c4
    0.14,      # X_pro
    0.76,      # X_ac
    0.32,      # X_h2
    25.6,      # X_I
    0.04,      # S_cat
    0.02,      # S_an
    0.011,     # S_va_ion
    0.013,     # S_bu_ion
    0.016,     # S_pro_ion
    0.2,       # S_ac_ion
    0.14,      # S_hco3
    0.0041,    # S_nh3
    1.02e-5,   # S_gas_h2
    1.63,      # S_gas_ch4
    0.014,     # S_gas_co2
    0.0,       # Q_D, taken from the influent
    35.0,      # T_D
    0.0,       # q_ch4
    0.0,       # q_gas
    0.0,       # pH
    0.0,
    0.0,
]

_INFLUENT = [
    0.01,      # S_su
    0.001,     # S_aa
    0.001,     # S_fa
    0.001,     # S_va
    0.001,     # S_bu
    0.001,     # S_pro
    0.001,     # S_ac
    1.0e-8,    # S_h2
    1.0e-5,    # S_ch4
    0.04,      # S_IC
    0.01,      # S_IN
    0.02,      # S_I
    2.0,       # X_xc
    5.0,       # X_ch
    20.0,      # X_pr
    5.0,       # X_li
    0.0,       # X_su
    0.01,      # X_aa
    0.01,      # X_fa
    0.01,      # X_c4
    0.01,      # X_pro
    0.01,      # X_ac
    0.01,      # X_h2
    25.0,      # X_I
    0.04,      # S_cat
    0.02,      # S_an
    0.0,       # S_va_ion
    0.0,       # S_bu_ion
    0.0,       # S_pro_ion
    0.0,       # S_ac_ion
    0.0,       # S_hco3
    0.0,       # S_nh3
    0.0,       # S_gas_h2
    0.0,       # S_gas_ch4
    0.0,       # S_gas_co2
    170.0,     # Q_D [m3/d]
    0.0,       # T_D, set by the digester
    0.0,
    0.0,
    0.0,
    0.0,
    0.0,
]
# fmt: on


def digester_init():
    """BSM2 digester initial conditions"""
    return StateVariables(_DIGESTER_INIT)


def influent():
    """BSM2 steady digester influent"""
    return StateVariables(_INFLUENT)
