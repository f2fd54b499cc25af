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
Digester parameters for the ADM1 model.

The 100 constants are stored by name. Their position in the flat numeric
representation (parameter files, ``to_array``) is the declaration order of the
fields below and must not change.

References:

[1] D.J. Batstone, J. Keller, I. Angelidaki, S.V. Kalyuzhnyi, S.G. Pavlostathis,
A. Rozzi, W.T.M. Sanders, H. Siegrist, V.A. Vavilin,
The IWA Anaerobic Digestion Model No 1 (ADM1), Water Science and Technology.
45 (2002) 65–73. https://doi.org/10.2166/wst.2002.0292.

[2] C. Rosén, U. Jeppsson, Aspects on ADM1 Implementation within the BSM2 Framework,
Department of Industrial Electrical Engineering and Automation, Lund University, Lund, Sweden. (2006) 1–35.
"""

import dataclasses
from dataclasses import dataclass

import numpy as np

from adm1sim.custom_exceptions import MalformedDataError

N_PARAMETERS = 100


@dataclass(frozen=True)
class DigesterParameters:
    """Fixed digester parameters, defaults are the BSM2 sludge digester values"""

    # Temperatures [K]
    T_base: float = 298.15
    T_op: float = 308.15
    # Acid-base equilibrium coefficients (-log10)
    pK_w_base: float = 14.0
    pK_a_va_base: float = 4.86
    pK_a_bu_base: float = 4.82
    pK_a_pro_base: float = 4.88
    pK_a_ac_base: float = 4.76
    pK_a_co2_base: float = 6.35
    pK_a_IN_base: float = 9.25
    # Henry's law coefficients at T_base [kmol m-3 bar-1]
    K_H_h2_base: float = 7.8e-4
    K_H_ch4_base: float = 0.0014
    K_H_co2_base: float = 0.035
    # Water vapour saturation pressure at T_base [bar]
    K_H_h2o_base: float = 0.0313
    # pH inhibition limits
    pH_UL_aa: float = 5.5
    pH_LL_aa: float = 4.0
    pH_UL_ac: float = 7.0
    pH_LL_ac: float = 6.0
    pH_UL_h2: float = 6.0
    pH_LL_h2: float = 5.0
    # Inhibition and limitation
    K_S_IN: float = 1.0e-4
    K_Ih2_fa: float = 5.0e-6
    K_Ih2_c4: float = 1.0e-5
    K_Ih2_pro: float = 3.5e-6
    K_I_nh3: float = 0.0018
    # First order disintegration and hydrolysis [d-1]
    k_dis: float = 0.5
    k_hyd_ch: float = 10.0
    k_hyd_pr: float = 10.0
    k_hyd_li: float = 10.0
    # Monod uptake [d-1] and half saturation [kg COD m-3]
    k_m_su: float = 30.0
    K_S_su: float = 0.5
    k_m_aa: float = 50.0
    K_S_aa: float = 0.3
    k_m_fa: float = 6.0
    K_S_fa: float = 0.4
    k_m_c4: float = 20.0
    K_S_c4: float = 0.2
    k_m_pro: float = 13.0
    K_S_pro: float = 0.1
    k_m_ac: float = 8.0
    K_S_ac: float = 0.15
    k_m_h2: float = 35.0
    K_S_h2: float = 7.0e-6
    # First order decay [d-1]
    k_dec_Xsu: float = 0.02
    k_dec_Xaa: float = 0.02
    k_dec_Xfa: float = 0.02
    k_dec_Xc4: float = 0.02
    k_dec_Xpro: float = 0.02
    k_dec_Xac: float = 0.02
    k_dec_Xh2: float = 0.02
    # Acid-base kinetic parameters [m3 kmol-1 d-1]
    k_A_Bva: float = 1.0e10
    k_A_Bbu: float = 1.0e10
    k_A_Bpro: float = 1.0e10
    k_A_Bac: float = 1.0e10
    k_A_Bco2: float = 1.0e10
    k_A_BIN: float = 1.0e10
    # Gas-liquid transfer coefficient [d-1]
    kLa: float = 200.0
    # Carbon contents [kmol C/kg COD] and fractionation yields
    C_xc: float = 0.02786
    f_sI_xc: float = 0.1
    C_sI: float = 0.03
    f_ch_xc: float = 0.2
    C_ch: float = 0.0313
    f_pr_xc: float = 0.2
    C_pr: float = 0.03
    f_li_xc: float = 0.3
    C_li: float = 0.022
    f_xI_xc: float = 0.2
    C_xI: float = 0.03
    C_su: float = 0.0313
    C_aa: float = 0.03
    f_fa_li: float = 0.95
    C_fa: float = 0.0217
    Y_su: float = 0.1
    f_bu_su: float = 0.13
    C_bu: float = 0.025
    f_pro_su: float = 0.27
    C_pro: float = 0.0268
    f_ac_su: float = 0.41
    C_ac: float = 0.0313
    C_bac: float = 0.0313
    Y_aa: float = 0.08
    f_va_aa: float = 0.23
    C_va: float = 0.024
    f_bu_aa: float = 0.26
    f_pro_aa: float = 0.05
    f_ac_aa: float = 0.40
    Y_fa: float = 0.06
    Y_c4: float = 0.06
    Y_pro: float = 0.04
    Y_ac: float = 0.05
    C_ch4: float = 0.0156
    Y_h2: float = 0.06
    f_h2_su: float = 0.19
    f_h2_aa: float = 0.06
    # Nitrogen contents [kmol N/kg COD]
    N_xc: float = 0.0376 / 14
    N_I: float = 0.06 / 14
    N_aa: float = 0.007
    N_bac: float = 0.08 / 14
    # Gas outlet pipe resistance [m3 d-1 bar-1]
    k_P: float = 5.0e4
    # Reactor volumes [m3]
    V_liq: float = 3400.0
    V_gas: float = 300.0

    @classmethod
    def names(cls):
        """Returns the parameter names in positional order"""
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def index_of(cls, name):
        """Returns the position of the named parameter"""
        try:
            return cls.names().index(name)
        except ValueError:
            raise KeyError(f"Unrecognized digester parameter {name}")

    @classmethod
    def from_array(cls, values):
        """
        Builds a parameter set from an ordered numeric sequence.

        Args:
            values: sequence of exactly 100 numbers, ordered as ``names()``

        Returns:
            DigesterParameters

        Raises:
            MalformedDataError: if the sequence has the wrong length
        """
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size != N_PARAMETERS:
            raise MalformedDataError(
                f"expected {N_PARAMETERS} digester parameters, got {values.size}"
            )
        return cls(*(float(v) for v in values))

    def to_array(self):
        """Returns the parameters as a float64 array ordered as ``names()``"""
        return np.array(dataclasses.astuple(self), dtype=np.float64)

    def replace(self, **changes):
        """Returns a copy with the given named parameters changed"""
        unknown = set(changes) - set(self.names())
        if unknown:
            raise KeyError(f"Unrecognized digester parameters {sorted(unknown)}")
        return dataclasses.replace(self, **changes)

    def __getitem__(self, index):
        return getattr(self, self.names()[index])

    def __len__(self):
        return N_PARAMETERS
