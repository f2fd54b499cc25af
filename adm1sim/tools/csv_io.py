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
Plain text formats of the digester simulator.

Parameter and state files hold one line of ``;`` separated numbers, written
with a trailing separator. Dynamic influent files hold one ``,`` separated
row of 42 values per time step. Recorded trajectories are ``;`` separated rows
of the time followed by the state vector.
"""

import os

import numpy as np

import idaes.logger as idaeslog

from adm1sim.core.parameters import DigesterParameters
from adm1sim.core.state import N_STATES, StateVariables, as_state_array
from adm1sim.custom_exceptions import MalformedDataError

_log = idaeslog.getLogger(__name__)

# full double precision, so vectors survive a write and read unchanged
_FMT = "%.17g"


def _parse_line(line, delimiter, source):
    fields = [f.strip() for f in line.strip().split(delimiter)]
    # written files end with a separator
    while fields and fields[-1] == "":
        fields.pop()
    try:
        return np.array([float(f) for f in fields], dtype=np.float64)
    except ValueError as err:
        raise MalformedDataError(f"non-numeric value in {source}: {err}") from err


def read_vector(path, delimiter=";"):
    """Reads the first non-empty line of ``path`` as a float array"""
    with open(path, "r") as fh:
        for line in fh:
            if line.strip():
                values = _parse_line(line, delimiter, path)
                _log.debug(f"Read {values.size} values from {path}")
                return values
    raise MalformedDataError(f"{path} contains no data")


def write_vector(path, values, delimiter=";"):
    np.savetxt(
        path,
        np.atleast_2d(np.asarray(values, dtype=np.float64)),
        delimiter=delimiter,
        fmt=_FMT,
        newline=delimiter + "\n",
    )


def read_parameters(path):
    return DigesterParameters.from_array(read_vector(path))


def write_parameters(path, parameters):
    write_vector(path, parameters.to_array())


def read_state(path):
    return StateVariables(read_vector(path))


def write_state(path, state):
    write_vector(path, as_state_array(state))


def iter_influent_rows(path, delimiter=","):
    """
    Yields the influent of each time step of a dynamic influent file.

    Raises:
        MalformedDataError: a row does not hold 42 numbers
    """
    with open(path, "r") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            values = _parse_line(line, delimiter, f"{path} line {lineno}")
            if values.size != N_STATES:
                raise MalformedDataError(
                    f"{path} line {lineno}: expected {N_STATES} values, got {values.size}"
                )
            yield StateVariables(values)


def format_steady_result(elapsed, start, end, influent, effluent):
    """
    Summary table of a steady run.

    Args:
        elapsed: wall clock time of the run [ms]
        start, end: simulated time window [d]
        influent, effluent: StateVariables
    """
    lines = [f"Simulation time; {elapsed}; Start; {start}; Finish; {end}"]
    for i, (u, x) in enumerate(zip(influent, effluent), start=1):
        lines.append(f"State no; {i};\t Influent; {u!r};\t Effluent; {x!r}")
    return "\n".join(lines) + "\n"


def write_steady_result(path, elapsed, start, end, influent, effluent):
    """Appends the steady run summary to ``path`` and returns its text"""
    text = format_steady_result(elapsed, start, end, influent, effluent)
    with open(path, "a") as fh:
        fh.write(text)
    return text


class ContinuousOutputWriter:
    """
    Appends ``[t, x_0, ..., x_41]`` rows to a CSV file.

    Args:
        path: output file
        clear: truncate the file on construction
    """

    def __init__(self, path, clear=True, delimiter=";"):
        self.path = path
        self.delimiter = delimiter
        if clear:
            self.clear()

    def clear(self):
        with open(self.path, "w"):
            pass

    def record(self, t, values):
        row = np.concatenate(([t], np.asarray(values, dtype=np.float64)))
        with open(self.path, "a") as fh:
            np.savetxt(
                fh,
                row[np.newaxis, :],
                delimiter=self.delimiter,
                fmt=_FMT,
                newline=self.delimiter + "\n",
            )

    def read(self):
        """All recorded rows as a 2-D array, empty when nothing was recorded"""
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return np.empty((0, N_STATES + 1))
        with open(self.path, "r") as fh:
            rows = [
                _parse_line(line, self.delimiter, self.path)
                for line in fh
                if line.strip()
            ]
        return np.vstack(rows)
