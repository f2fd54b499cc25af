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
import itertools
import time
from concurrent import futures

import click

import idaes.logger as idaeslog
from idaes.core.util.exceptions import ConfigurationError

from adm1sim.core import bsm2_defaults
from adm1sim.core.discrete_event import parse_event
from adm1sim.core.model import DEFAULT_RESOLUTION, Model
from adm1sim.core.parameters import DigesterParameters
from adm1sim.tools.csv_io import (
    ContinuousOutputWriter,
    iter_influent_rows,
    read_parameters,
    read_state,
    write_steady_result,
)

_LOG_LEVELS = {
    "debug": idaeslog.DEBUG,
    "info": idaeslog.INFO,
    "warning": idaeslog.WARNING,
    "error": idaeslog.ERROR,
}


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(list(_LOG_LEVELS)),
    default="warning",
    show_default=True,
    help="Verbosity of the simulator log",
)
def cli(log_level):
    """ADM1 anaerobic digester simulator."""
    idaeslog.getLogger("adm1sim").setLevel(_LOG_LEVELS[log_level])


def _common_options(func):
    options = [
        click.option("--start", "-s", type=float, default=0.0, help="Start time [d]"),
        click.option("--init", type=click.Path(exists=True), help="Initial state file"),
        click.option("--param", type=click.Path(exists=True), help="Parameter file"),
        click.option(
            "--ode",
            is_flag=True,
            help="Integrate S_H+ and S_h2 instead of closing them algebraically",
        ),
        click.option(
            "--event",
            "events",
            nargs=3,
            type=(int, float, str),
            multiple=True,
            metavar="INDEX TARGET DIRECTION",
            help="Stop when state INDEX crosses TARGET, DIRECTION is rising or falling",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_inputs(init, param, events):
    parameters = read_parameters(param) if param else DigesterParameters()
    initial = read_state(init) if init else bsm2_defaults.digester_init()
    try:
        parsed = [parse_event(*triple) for triple in events]
    except ValueError as err:
        raise click.BadParameter(str(err), param_hint="--event") from err
    return parameters, initial, parsed


def _percent(t, start, finish):
    return 100.0 * (t - start) / (finish - start)


@cli.command()
@_common_options
@click.option("--finish", "-f", type=float, default=200.0, help="Finish time [d]")
@click.option(
    "--influent", "-in", type=click.Path(exists=True), help="Influent state file"
)
@click.option("--cont", is_flag=True, help="Record cont_model_output.csv")
@click.option(
    "--output",
    type=click.Path(),
    default="steady_result.csv",
    show_default=True,
    help="Result table, appended to",
)
@click.option(
    "--poll-interval",
    type=float,
    default=3.0,
    show_default=True,
    help="Seconds between progress reports",
)
def steady(start, init, param, ode, events, finish, influent, cont, output, poll_interval):
    """Run the digester with a constant influent."""
    if finish <= start:
        raise ConfigurationError(f"finish time {finish} must be after start {start}")
    parameters, initial, events = _load_inputs(init, param, events)
    influent_state = read_state(influent) if influent else bsm2_defaults.influent()

    recorder = ContinuousOutputWriter("cont_model_output.csv") if cont else None
    model = Model(
        start,
        finish,
        parameters,
        initial,
        influent_state,
        online_record=cont,
        recorder=recorder,
        dae=not ode,
    )
    model.add_events(events)

    tic = time.time()
    task = model.submit()
    while True:
        try:
            task.result(timeout=poll_interval)
            break
        except futures.TimeoutError:
            click.echo(f"Progress = {_percent(task.progress(), start, finish):.2f}%")
    elapsed = round((time.time() - tic) * 1000)

    text = write_steady_result(output, elapsed, start, model.end, model.u, model.x)
    click.echo(text)


@cli.command()
@_common_options
@click.option("--finish", "-f", type=float, default=609.0, help="Finish time [d]")
@click.option(
    "--influent",
    "-in",
    type=click.Path(exists=True),
    default="digesterin.csv",
    show_default=True,
    help="Influent file, one comma separated row per step",
)
@click.option(
    "--step",
    type=click.FloatRange(min=0.0, min_open=True),
    default=DEFAULT_RESOLUTION,
    show_default=True,
    help="Time between influent rows [d]",
)
@click.option(
    "--output",
    type=click.Path(),
    default="dynamic_output.csv",
    show_default=True,
    help="Trajectory file, rewritten",
)
def dynamic(start, init, param, ode, events, finish, influent, step, output):
    """Run the digester through a time series of influent rows."""
    if finish <= start:
        raise ConfigurationError(f"finish time {finish} must be after start {start}")
    parameters, initial, events = _load_inputs(init, param, events)

    rows = iter_influent_rows(influent)
    first = next(rows, None)
    if first is None:
        raise ConfigurationError(f"{influent} holds no influent rows")

    writer = ContinuousOutputWriter(output)
    model = Model(start, start + step, parameters, initial, first, dae=not ode)
    model.add_events(events)

    report_every = max(1, round((finish - start) / step / 100))
    tic = time.time()
    t = start
    for n, row in enumerate(itertools.chain([first], rows), start=1):
        if t >= finish:
            break
        model.set_influent(row)
        model.set_time(t, t + step)
        model.simulate()
        writer.record(model.end, model.x.to_array())
        t += step
        if n % report_every == 0:
            click.echo(f"Progress = {_percent(t, start, finish):.2f}%")

    click.echo(f"Simulation time; {round((time.time() - tic) * 1000)}")


if __name__ == "__main__":
    cli()
