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
import contextlib
import enum
from typing import Container

import pytest
from _pytest.nodes import Item
from _pytest.config import Config

from adm1sim.core import bsm2_defaults
from adm1sim.core.parameters import DigesterParameters


class MarkerSpec(enum.Enum):
    unit = "Quick tests of single functions, must run in < 2 s"
    component = "Tests that integrate the model over a short span"
    integration = "Long duration simulations"

    @property
    def description(self) -> str:
        return self.value

    @classmethod
    def for_item(cls, item: Item) -> Container["MarkerSpec"]:
        found = []
        for marker in item.iter_markers():
            with contextlib.suppress(KeyError):
                found.append(cls[marker.name])
        return found


def pytest_configure(config: Config):

    for marker_spec in MarkerSpec:
        config.addinivalue_line(
            "markers", f"{marker_spec.name}: {marker_spec.description}"
        )


@contextlib.contextmanager
def _convert_to_exceptions(deprecation_messages=None):
    """
    Create a context within which deprecation messages are converted to exceptions.
    """

    import idaes

    with idaes.temporary_config_ctx():
        if deprecation_messages:
            idaes.cfg.deprecation_to_exception = True
        idaes.reconfig()
        yield


@pytest.fixture(scope="session", autouse=True)
def ensure_deprecations_cause_failure() -> None:
    with _convert_to_exceptions(deprecation_messages=True):
        yield


@pytest.fixture
def parameters():
    return DigesterParameters()


@pytest.fixture
def digester_init():
    return bsm2_defaults.digester_init()


@pytest.fixture
def influent():
    return bsm2_defaults.influent()
