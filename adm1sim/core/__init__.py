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

from .parameters import DigesterParameters
from .state import StateIndex, StateVariables
from .equilibrium import NewtonResult
from .dae_model import ADM1DAEModel, EquilibriumMode, WorkingState
from .discrete_event import CrossingDirection, DiscreteEvent, EventAction
from .integrator import FirstOrderIntegrator
from .model import Model, SimulationTask
