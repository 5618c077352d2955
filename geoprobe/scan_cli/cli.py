"""geoprobe command line interface"""

import contextlib
import signal
import sys
import threading

import click

from .. import __version__
from ..scan_core.config import ConfigManager, create_cli_overrides
from ..scan_core.exceptions import ConfigurationError, GeoProbeError, StartupError
from ..scan_core.logging_setup import resolve_log_level, setup_logging
from ..scan_engine.coordinator import ScanPipeline
from .cli_output import CLIOutput

EXIT_FAILURE = 1
EXIT_CANCELLED = 130


@contextlib.contextmanager
def cancel_on_interrupt(pipeline: ScanPipeline):
    """Turn Ctrl+C into a graceful pipeline cancellation while the scan runs"""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    
    def _handle_sigint(signum, frame):
        pipeline.cancel()
    
    previous_handler = signal.signal(signal.SIGINT, _handle_sigint)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous_handler)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.version_option(version=__version__, prog_name="geoprobe")
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False), help='Load YAML/JSON config file')
@click.option('-f', '--input', 'input_path', help='Endpoint list, one address[:port] per line (default: ips)')
@click.option('-o', '--output', 'output_path', help='Coordinates output file (default: coordinates)')
@click.option('-g', '--geo-db', 'geo_db_path', help='MaxMind City database (default: GeoLite2-City.mmdb)')
@click.option('-t', '--threads', type=int, help='Number of concurrent probe workers (default: 100)')
@click.option('-T', '--timeout', type=float, help='TCP connect timeout in seconds (default: 3)')
@click.option('-p', '--precision', type=int, help='Fixed decimal places for coordinates (default: exact)')
@click.option('--job-queue-size', type=int, help='Endpoints buffered ahead of the workers (default: 10)')
@click.option('--result-queue-size', type=int, help='Coordinates buffered ahead of the writer (default: 100)')
@click.option('-V', '--verbose', is_flag=True, help='Verbose output (DEBUG level)')
@click.option('-q', '--quiet', is_flag=True, help='Quiet mode (WARNING level, minimal output)')
@click.option('-N', '--silent', is_flag=True, help='Silent mode (ERROR level, suppress all output except errors)')
@click.option('-l', '--log-file', help='Also write a rotating debug log to this file')
@click.option('--write-config', type=click.Path(dir_okay=False),
              help='Write a commented configuration file with the effective settings and exit')
def main_cli(config_path, input_path, output_path, geo_db_path, threads, timeout, precision,
             job_queue_size, result_queue_size, verbose, quiet, silent, log_file, write_config):
    """geoprobe - TCP liveness scanner with offline IP geolocation
    
    Reads endpoints from the input file, probes each one over TCP and writes
    the coordinates of every reachable endpoint to the output file.
    
    \b
    Examples:
      geoprobe -f ips -o coordinates -g GeoLite2-City.mmdb
      geoprobe -c scan.yaml -t 200 -T 1.5
    """
    output = CLIOutput(quiet=quiet, silent=silent)

    # Flags only until the config file is read; reconfigured below
    setup_logging(resolve_log_level(verbose, quiet, silent), log_file)

    overrides = create_cli_overrides(
        input_path=input_path, output_path=output_path, geo_db_path=geo_db_path,
        threads=threads, timeout=timeout, precision=precision,
        job_queue_size=job_queue_size, result_queue_size=result_queue_size,
        verbose=verbose, quiet=quiet, silent=silent, log_file=log_file
    )
    
    try:
        config = ConfigManager(config_path, overrides)
    except ConfigurationError as e:
        output.print_error(e.message, **e.context)
        sys.exit(EXIT_FAILURE)
    
    errors = config.validate()
    if errors:
        for error in errors:
            output.print_error(f"Invalid configuration: {error}")
        sys.exit(EXIT_FAILURE)
    
    settings = config.config
    setup_logging(resolve_log_level(verbose, quiet, silent, default=settings.log_level), settings.log_file)
    
    if write_config:
        try:
            config.save_config(write_config)
        except ConfigurationError as e:
            output.print_error(e.message, **e.context)
            sys.exit(EXIT_FAILURE)
        output.print_success(f"Configuration written to {write_config}")
        return
    
    pipeline = ScanPipeline(settings)
    try:
        with cancel_on_interrupt(pipeline):
            report = pipeline.run()
    except StartupError as e:
        output.print_error(e.message, **e.context)
        sys.exit(EXIT_FAILURE)
    except GeoProbeError as e:
        output.print_error(f"Scan failed: {e.message}", **e.context)
        sys.exit(EXIT_FAILURE)
    
    if report.cancelled:
        output.print_warning(
            f"Scan cancelled, {report.results_written} coordinates written to {settings.output_path}"
        )
        output.print_summary(report)
        sys.exit(EXIT_CANCELLED)
    
    output.print_success(f"{report.results_written} coordinates written to {settings.output_path}")
    output.print_summary(report)


def cli_main():
    """Entry point for console scripts"""
    main_cli()


if __name__ == '__main__':
    cli_main()
