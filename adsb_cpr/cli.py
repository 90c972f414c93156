"""Click CLI — the main entry point for adsb-cpr.

Commands:
  adsb-cpr pair EVEN_XZ EVEN_YZ ODD_XZ ODD_YZ   Decode one even/odd CPR pair
  adsb-cpr decode FILE                          Decode positions from a hex frame file
  adsb-cpr zones LAT                            Show longitude zones at a latitude
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.table import Table

from . import cpr
from .cache import FrameCache
from .capture import FrameReader
from .config import load_config
from .cpr import CprFrame, DecodeTrace
from .exceptions import CprError
from .messages import parse_message

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="adsb-cpr")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """ADS-B CPR position decoder — even/odd frame pairs to latitude/longitude."""
    cfg = load_config()
    level = "DEBUG" if verbose else str(cfg["logging"].get("level") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = cfg


@cli.command()
@click.argument("even_xz", type=click.IntRange(0, cpr.CPR_MAX - 1))
@click.argument("even_yz", type=click.IntRange(0, cpr.CPR_MAX - 1))
@click.argument("odd_xz", type=click.IntRange(0, cpr.CPR_MAX - 1))
@click.argument("odd_yz", type=click.IntRange(0, cpr.CPR_MAX - 1))
@click.option("--t-even", type=float, default=0.0, help="Even frame receive time (ms)")
@click.option("--t-odd", type=float, default=0.0, help="Odd frame receive time (ms)")
@click.option("--max-age", type=float, default=None, help="Maximum even/odd separation (seconds)")
@click.option("--trace", is_flag=True, help="Print intermediate decode values")
@click.pass_obj
def pair(cfg: dict, even_xz: int, even_yz: int, odd_xz: int, odd_yz: int,
         t_even: float, t_odd: float, max_age: float | None, trace: bool):
    """Decode one even/odd CPR pair.

    \b
    Examples:
      adsb-cpr pair 51372 93000 50194 74158 --t-even 1000 --t-odd 500
      adsb-cpr pair 102345 23456 94567 123456 --t-odd 2000 --trace
    """
    if max_age is None:
        max_age = float(cfg["cpr"]["max_pair_age"])

    even = CprFrame(xz=even_xz, yz=even_yz, t=t_even)
    odd = CprFrame(xz=odd_xz, yz=odd_yz, t=t_odd)

    traces: list[DecodeTrace] = []
    try:
        position = cpr.decode_pair(even, odd, max_pair_age=max_age, diagnostics=traces.append)
    except CprError as e:
        if trace and traces:
            _print_trace(traces[0])
        console.print(f"[red]{e}[/]")
        raise click.exceptions.Exit(1)

    if trace:
        _print_trace(traces[0])
    console.print(f"[bold]Position:[/] {position.lat:.6f}, {position.lon:.6f}")


@cli.command()
@click.argument("file", type=click.Path(exists=True))
@click.option("--max-age", type=float, default=None, help="Maximum even/odd separation (seconds)")
@click.pass_obj
def decode(cfg: dict, file: str, max_age: float | None):
    """Decode aircraft positions from a hex frame file."""
    if max_age is None:
        max_age = float(cfg["cpr"]["cache_max_age"])

    cache = FrameCache(max_age=max_age)
    skipped = 0
    for raw_frame in FrameReader(file):
        msg = parse_message(raw_frame.hex_str, timestamp=raw_frame.timestamp)
        if msg is None:
            skipped += 1
            continue
        cache.process(msg)

    _print_aircraft_table(cache)
    _print_summary(cache, skipped)


@cli.command()
@click.argument("lat", type=float)
def zones(lat: float):
    """Show longitude zone count and widths at a latitude."""
    table = Table(title=f"Longitude zones at {lat:g}°")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("NL", str(cpr.nl(lat)))
    table.add_row("Dlon even", f"{cpr.dlon(lat, False):.6f}°")
    table.add_row("Dlon odd", f"{cpr.dlon(lat, True):.6f}°")

    console.print(table)


def _print_trace(trace: DecodeTrace):
    """Print Rich table of intermediate decode values."""
    table = Table(title="CPR decode trace")
    table.add_column("Value", style="cyan")
    table.add_column("Result", justify="right")

    for name in ("x0", "y0", "x1", "y1", "j", "rlat0", "rlat1", "nl_even", "nl_odd",
                 "use_odd", "lat", "nl", "m", "ni", "lon_raw", "lon"):
        value = getattr(trace, name)
        if isinstance(value, float):
            text = f"{value:.6f}"
        elif value is None:
            text = "-"
        else:
            text = str(value)
        table.add_row(name, text)

    console.print(table)


def _print_aircraft_table(cache: FrameCache):
    """Print Rich table of all aircraft that sent position frames."""
    table = Table(title="Aircraft")
    table.add_column("ICAO", style="cyan")
    table.add_column("Even", justify="center")
    table.add_column("Odd", justify="center")
    table.add_column("Lat", justify="right")
    table.add_column("Lon", justify="right")
    table.add_column("Fix age (s)", justify="right")

    for icao in sorted(cache.aircraft):
        state = cache.aircraft[icao]
        even, odd = state.snapshot()
        fix = cache.positions.get(icao)
        pos = fix.position if fix else None
        age = cache.fix_age(icao)
        table.add_row(
            icao,
            "✓" if even else "-",
            "✓" if odd else "-",
            f"{pos.lat:.4f}" if pos else "-",
            f"{pos.lon:.4f}" if pos else "-",
            f"{age:.1f}" if age is not None else "-",
        )

    console.print(table)


def _print_summary(cache: FrameCache, skipped: int):
    """Print decode summary."""
    console.print(f"\n[bold]Summary:[/]")
    console.print(f"  Total messages:    {cache.total_messages}")
    console.print(f"  Position messages: {cache.position_messages}")
    console.print(f"  Position decodes:  {cache.position_decodes}")
    console.print(f"  Skipped frames:    {skipped}")
    console.print(f"  Aircraft seen:     {len(cache.aircraft)}")
