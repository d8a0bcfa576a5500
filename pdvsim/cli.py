"""Command-line runner for the PDV flight simulator.

Usage:
    $ pdvsim run --nodes nodes.csv --path path.csv --config pdv.json
    $ pdvsim random --nodes 40 --area 800 --seed 7 --single-stage

The runner loads (or generates) the sensor catalog and the path, drives one
simulation and prints charged energy, flight time and completion ratio in a
rich panel. Errors are reported on the console with exit status 1.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from pdvsim.config import PdvParameters, load_parameters
from pdvsim.errors import PdvSimError
from pdvsim.geo import Point, load_path_csv
from pdvsim.sensors import SensorCatalog
from pdvsim.simulator import FlightResult, FlightSimulator
from pdvsim.vehicles import PDV

CONSOLE = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdvsim", description="Simulate a PDV recharging sensor nodes over IPT."
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="JSON file overriding PDV parameters")
    common.add_argument(
        "--single-stage", action="store_true", help="visit only the head of the path"
    )
    common.add_argument("-v", "--verbose", action="store_true", help="log every decision")

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", parents=[common], help="simulate a catalog loaded from CSV")
    run.add_argument("--nodes", required=True, help="sensor node CSV file")
    run.add_argument("--path", help="waypoint CSV file, defaults to the requesting nodes")

    rnd = sub.add_parser("random", parents=[common], help="simulate a random sensor field")
    rnd.add_argument("--nodes", type=int, default=40, help="number of nodes")
    rnd.add_argument("--area", type=float, default=1000.0, help="side of the square area [m]")
    rnd.add_argument(
        "--request-ratio", type=float, default=1.0, help="probability a node requests service"
    )
    rnd.add_argument("--seed", type=int, default=None, help="random seed")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=CONSOLE, show_path=False)],
        force=True,
    )


def _load_scenario(args: argparse.Namespace) -> tuple[SensorCatalog, list[Point]]:
    if args.command == "run":
        catalog = SensorCatalog.from_csv(args.nodes)
        path = load_path_csv(args.path) if args.path else catalog.requesting_path()
    else:
        catalog = SensorCatalog.generate_random(
            args.nodes,
            area_size=args.area,
            request_ratio=args.request_ratio,
            seed=args.seed,
        )
        path = catalog.requesting_path()
    return catalog, path


def render_result(result: FlightResult) -> Panel:
    """Render the outputs of one run as a rich panel."""
    t = Table.grid(padding=(0, 2))
    t.add_row("[b]Charged energy[/b]:", f"{result.charged_energy:.6f} Wh")
    t.add_row("[b]Flight time[/b]:", f"{result.flight_time:.6f} h")
    t.add_row("[b]Completion[/b]:", f"{result.completion_ratio:.2f} %")
    t.add_section()
    t.add_row(
        "[b]Serviced nodes[/b]:", f"{result.serviced_count} / {result.initial_requests}"
    )
    t.add_row("[b]Flight distance[/b]:", f"{result.flight_distance:.1f} m")
    t.add_row("[b]Remaining energy[/b]:", f"{result.remaining_energy:.3f} Wh")
    t.add_row("[b]Terminal state[/b]:", result.terminal_state.name)
    if result.rth_triggered:
        t.add_row("[b]RTH[/b]:", "[yellow]aborted before end of path[/yellow]")
    if result.energy_exhausted:
        t.add_row("[b]Energy[/b]:", "[red]exhausted on the way home[/red]")
    return Panel(t, title="Flight Simulation", padding=(1, 2))


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        params = load_parameters(args.config) if args.config else PdvParameters()
        catalog, path = _load_scenario(args)
        simulator = FlightSimulator(PDV(params))
        if args.single_stage:
            result = simulator.single_stage_flight(catalog, path)
        else:
            result = simulator.flight_simulation(catalog, path)
    except PdvSimError as e:
        CONSOLE.print(f"[bold red]{type(e).__name__}[/bold red]: {e}")
        if e.result is not None:
            CONSOLE.print(render_result(e.result))
        return 1
    except OSError as e:
        CONSOLE.print(f"[bold red]Cannot read input[/bold red]: {e}")
        return 1

    CONSOLE.print(render_result(result))
    return 0
