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
State vector of the ADM1 digester.

The same 42 slots describe both the influent and the reactor contents. Units
are kg COD/m3 for organic species, kmol/m3 for inorganic carbon and nitrogen
and the ions, m3/d for flows, deg C for the temperature.
"""

from enum import IntEnum

import numpy as np

from adm1sim.custom_exceptions import MalformedDataError

N_STATES = 42


class StateIndex(IntEnum):
    """
    Position of each variable in the state vector.

    S_*_ion: dissociated forms of the volatile fatty acids
    S_hco3, S_nh3: bicarbonate and free ammonia
    Q_D, T_D: flow rate and temperature, held constant during a span
    q_ch4, q_gas, pH: reporting values derived from the other slots
    """

    S_su = 0
    S_aa = 1
    S_fa = 2
    S_va = 3
    S_bu = 4
    S_pro = 5
    S_ac = 6
    S_h2 = 7
    S_ch4 = 8
    S_IC = 9
    S_IN = 10
    S_I = 11
    X_xc = 12
    X_ch = 13
    X_pr = 14
    X_li = 15
    X_su = 16
    X_aa = 17
    X_fa = 18
    X_c4 = 19
    X_pro = 20
    X_ac = 21
    X_h2 = 22
    X_I = 23
    S_cat = 24
    S_an = 25
    S_va_ion = 26
    S_bu_ion = 27
    S_pro_ion = 28
    S_ac_ion = 29
    S_hco3 = 30
    S_nh3 = 31
    S_gas_h2 = 32
    S_gas_ch4 = 33
    S_gas_co2 = 34
    Q_D = 35
    T_D = 36
    q_ch4 = 37
    q_gas = 38
    pH = 39
    spare_1 = 40
    spare_2 = 41


# Slots with a convective and reaction term
REACTING_STATES = range(StateIndex.S_su, StateIndex.X_I + 1)
ION_STATES = range(StateIndex.S_va_ion, StateIndex.S_nh3 + 1)
GAS_STATES = range(StateIndex.S_gas_h2, StateIndex.S_gas_co2 + 1)


def as_state_array(values):
    """Copies a StateVariables or any 42-value sequence into a float array"""
    if isinstance(values, StateVariables):
        return values.to_array()
    values = np.array(values, dtype=np.float64).ravel()
    if values.size != N_STATES:
        raise MalformedDataError(
            f"expected {N_STATES} state variables, got {values.size}"
        )
    return values


class StateVariables:
    """
    Ordered 42-slot state vector.

    Values are read by position or by name. The only write path is
    ``with_value``, which returns a new vector, used to update single influent
    variables between spans.
    """

    def __init__(self, values=None):
        if values is None:
            self._values = np.zeros(N_STATES, dtype=np.float64)
        else:
            self._values = as_state_array(values)

    @classmethod
    def from_array(cls, values):
        return cls(values)

    def to_array(self):
        return self._values.copy()

    def by_name(self, name):
        return float(self._values[StateIndex[name]])

    def with_value(self, index, value):
        values = self._values.copy()
        values[index] = value
        return StateVariables(values)

    def as_dict(self):
        return {s.name: float(self._values[s]) for s in StateIndex}

    def __getitem__(self, index):
        return float(self._values[index])

    def __len__(self):
        return N_STATES

    def __iter__(self):
        return iter(self._values.tolist())

    def __eq__(self, other):
        if not isinstance(other, StateVariables):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __repr__(self):
        return f"StateVariables({self._values.tolist()!r})"
