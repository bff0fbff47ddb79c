"""edidrw CLI - read and write display EDID EEPROMs over I2C."""

from __future__ import annotations

from pathlib import Path

import click

from edidrw.config import Command, EdidConfig, ReadEdid, WriteEdid
from edidrw.core.transfer import read_edid, write_edid
from edidrw.driver.manager import I2cDriverManager
from edidrw.exceptions import EdidError, UserDeclined
from edidrw.models.edid import EDID_SIZE
from edidrw.transport import Transport, TransportKind, make_transport
from edidrw.transport.smbus import DEFAULT_WRITE_DELAY_S
from edidrw.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

CONFIRM_PROMPT = "Really write? (N/y)"


class EdidGroup(click.Group):
    """Group that exits with status 1 on usage errors instead of click's 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


@click.group(cls=EdidGroup, no_args_is_help=False)
@click.option("-d", "--danger", is_flag=True,
              help="Really perform bus transactions (default: simulate)")
@click.option("-n", "--dry-run", is_flag=True,
              help="Simulate even if -d is given")
@click.option("-b", "--bus", type=click.IntRange(min=0), envvar="EDIDRW_BUS",
              default=None, help="I2C bus number (/dev/i2c-N)")
@click.option("--transport", type=click.Choice([k.value for k in TransportKind]),
              envvar="EDIDRW_TRANSPORT", default=TransportKind.I2C_TOOLS.value,
              show_default=True, help="How bus transactions are issued")
@click.option("--write-delay", type=click.FloatRange(min=0.0),
              default=DEFAULT_WRITE_DELAY_S, show_default=True,
              help="Seconds to wait after each byte write (smbus transport)")
@click.option("-v", "--verbose", is_flag=True, help="Enable info logging")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(
    ctx: click.Context, danger: bool, dry_run: bool, bus: int | None,
    transport: str, write_delay: float, verbose: bool, debug: bool, json_logs: bool,
) -> None:
    """Read or write the EDID EEPROM of a display over I2C."""
    level = "DEBUG" if debug else ("INFO" if verbose else "WARNING")
    setup_logging(level=level, json_output=json_logs)
    ctx.obj = EdidConfig.from_flags(
        danger=danger, dry_run=dry_run, bus=bus,
        transport=transport, write_delay=write_delay,
    )
    logger.debug("config_parsed", config=str(ctx.obj))


@cli.command("read_edid")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Also save the hex dump to this file")
@click.pass_context
def read_edid_cmd(ctx: click.Context, output: Path | None) -> None:
    """Print the 256-byte EDID as one hex string."""
    _execute(ctx, ReadEdid(output=output))


@cli.command("write_edid")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--verify", is_flag=True, help="Read back and compare after writing")
@click.pass_context
def write_edid_cmd(ctx: click.Context, file: Path, verify: bool) -> None:
    """Write the hex-encoded EDID in FILE to the display."""
    _execute(ctx, WriteEdid(path=file, verify=verify))


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check host prerequisites for I2C access."""
    config: EdidConfig = ctx.obj
    report = I2cDriverManager().check_prerequisites(config.bus)

    if not report.is_supported_platform:
        click.echo("ERROR: I2C access is only supported on Linux.", err=True)
        ctx.exit(1)
        return

    click.echo("I2C Prerequisites")
    click.echo("=" * 50)
    for prereq in report.items:
        icon = "OK" if prereq.satisfied else "MISSING"
        click.echo(f"  [{icon:>7}]  {prereq.name}: {prereq.description}")
        if prereq.detail:
            click.echo(f"             {prereq.detail}")

    click.echo()
    if report.all_satisfied:
        click.echo("All prerequisites satisfied.")
    else:
        click.echo("Some prerequisites are missing. See details above.")
        ctx.exit(1)


@cli.command()
def buses() -> None:
    """List the I2C buses exposed under /dev."""
    found = I2cDriverManager().list_buses()
    if not found:
        click.echo("No I2C buses found. Is the i2c-dev module loaded?")
        return
    for info in found:
        click.echo(f"  {info.number:>3}  {info.device:<14}  {info.name}")


def _confirm_write() -> bool:
    try:
        answer = click.prompt(CONFIRM_PROMPT, default="N", show_default=False)
    except click.Abort:
        # Closed stdin counts as "no".
        click.echo()
        return False
    return answer.strip().lower() in ("y", "yes")


def _open_transport(config: EdidConfig) -> Transport:
    """Run the host checks and return the transport for *config*."""
    mgr = I2cDriverManager()
    mgr.require_root()
    if config.bus is None:
        raise EdidError("No I2C bus specified (use -b BUS)")
    # I2cToolsTransport.open checks for the tools itself in danger mode.
    if config.transport == TransportKind.I2C_TOOLS and not config.danger_mode:
        mgr.check_tools()

    if config.danger_mode:
        mgr.load_modules()
    else:
        click.echo("INFO: simulation mode, printing transactions only (use -d)", err=True)

    return make_transport(config)


def _execute(ctx: click.Context, command: Command) -> None:
    config: EdidConfig = ctx.obj
    try:
        with _open_transport(config) as transport:
            match command:
                case ReadEdid(output=output):
                    blob = read_edid(transport)
                    click.echo(blob.hex)
                    if output is not None:
                        output.write_text(blob.hex + "\n")
                case WriteEdid(path=path, verify=verify):
                    report = write_edid(
                        transport,
                        path.read_text(errors="replace"),
                        confirm=_confirm_write,
                        check_device=config.danger_mode,
                        verify=verify,
                    )
                    if report.truncated:
                        click.echo(
                            f"WARNING: input holds {report.bytes_supplied} bytes, "
                            f"only the first {EDID_SIZE} were written",
                            err=True,
                        )
                    click.echo(f"Wrote {report.bytes_written} bytes to bus {config.bus}.")
                    if report.verified:
                        click.echo("Verify OK.")
    except UserDeclined:
        click.echo("Not written.")
    except EdidError as exc:
        logger.debug("command_failed", error=str(exc), kind=type(exc).__name__)
        click.echo(f"ERROR: {exc}", err=True)
        ctx.exit(1)
    except OSError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        ctx.exit(1)


def main() -> None:
    cli(prog_name="edidrw")


if __name__ == "__main__":
    main()
