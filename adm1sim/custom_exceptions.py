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
class MalformedDataError(ValueError):
    """
    Custom exception for malformed parameter or state data.

    Raised when a parameter or state sequence does not have the length the
    digester model expects, or when a numeric input file cannot be parsed.

    Parameters
    ----------
    message : str
        Error message describing the issue
    """

    def __init__(self, message):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return f"MalformedDataError: {self.message}"


class IntegrationError(RuntimeError):
    """
    Custom exception for failures of the time integration.

    Raised when the ODE stepper reports a failure or exceeds its step limit.
    The simulation controller does not retry.

    Parameters
    ----------
    message : str
        Error message describing the issue
    """

    def __init__(self, message):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return f"IntegrationError: {self.message}"
