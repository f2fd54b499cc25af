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

from adm1sim.core import kinetics
from adm1sim.core.equilibrium import equilibrium_constants


@pytest.fixture
def x(digester_init):
    return digester_init.to_array()


@pytest.mark.unit
def test_ph_inhibition_limits(parameters):
    limits = kinetics.ph_inhibition_limits(parameters)
    assert limits.K_pH_aa == pytest.approx(10 ** -((5.5 + 4.0) / 2))
    assert limits.n_aa == pytest.approx(3.0 / 1.5)
    assert limits.n_h2 == pytest.approx(3.0)


@pytest.mark.unit
def test_ph_inhibition_midpoint():
    assert kinetics.ph_inhibition(1e-5, 1e-5, 2.0) == pytest.approx(0.5)
    assert kinetics.ph_inhibition(1e-9, 1e-5, 2.0) == pytest.approx(1.0)


@pytest.mark.unit
def test_nitrogen_limitation_without_nitrogen(parameters, x):
    limits = kinetics.ph_inhibition_limits(parameters)
    x[10] = 0.0
    inhib = kinetics.inhibition_factors(1e-7, x, parameters, limits)
    assert inhib.I_IN_lim == 0.0
    rho = kinetics.process_rates(x, parameters, kinetics.composite_inhibition(inhib))
    # uptake processes stop, disintegration and decay carry on
    assert rho[4:12] == [0.0] * 8
    assert rho[0] > 0
    assert all(r > 0 for r in rho[12:])


@pytest.mark.unit
def test_competitive_uptake_without_substrate(parameters, x):
    limits = kinetics.ph_inhibition_limits(parameters)
    x[3] = 0.0
    x[4] = 0.0
    inhib = kinetics.inhibition_factors(1e-7, x, parameters, limits)
    rho = kinetics.process_rates(x, parameters, kinetics.composite_inhibition(inhib))
    assert rho[7] == 0.0
    assert rho[8] == 0.0
    assert all(np.isfinite(rho))


@pytest.mark.unit
def test_cod_is_conserved(parameters, x):
    # with gas transfer off every process only moves COD between states
    limits = kinetics.ph_inhibition_limits(parameters)
    inhib = kinetics.inhibition_factors(1e-7, x, parameters, limits)
    rho = kinetics.process_rates(x, parameters, kinetics.composite_inhibition(inhib))
    stoich = kinetics.carbon_stoichiometry(parameters)
    reac = kinetics.reaction_rates(rho, (0.0, 0.0, 0.0), parameters, stoich)

    cod_states = list(range(0, 9)) + [11] + list(range(12, 24))
    assert sum(reac[i] for i in cod_states) == pytest.approx(0.0, abs=1e-10)


@pytest.mark.unit
def test_gas_phase(parameters, x):
    k = equilibrium_constants(parameters, 35.0)
    gas = kinetics.gas_phase(x, 35.0, k.p_gas_h2o)
    RT = kinetics.R * 308.15
    assert gas.p_gas_ch4 == pytest.approx(1.63 * RT / 64.0)
    assert gas.P_gas == pytest.approx(
        gas.p_gas_h2 + gas.p_gas_ch4 + gas.p_gas_co2 + k.p_gas_h2o
    )
    assert kinetics.gas_flow(gas.P_gas, parameters) > 0
    assert kinetics.gas_flow(0.5, parameters) == 0.0


@pytest.mark.unit
def test_reaction_rates_length(parameters, x):
    limits = kinetics.ph_inhibition_limits(parameters)
    k = equilibrium_constants(parameters, 35.0)
    gas = kinetics.gas_phase(x, 35.0, k.p_gas_h2o)
    inhib = kinetics.inhibition_factors(1e-7, x, parameters, limits)
    rho = kinetics.process_rates(x, parameters, kinetics.composite_inhibition(inhib))
    rho_T = kinetics.gas_transfer_rates(x, parameters, k, gas)
    assert len(rho) == 19
    assert len(rho_T) == 3
    reac = kinetics.reaction_rates(
        rho, rho_T, parameters, kinetics.carbon_stoichiometry(parameters)
    )
    assert len(reac) == 24
