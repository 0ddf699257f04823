import asyncio
import sys

import click

from localnet.env import Env, TimeParser, load_env
from localnet.errors import LocalnetError, ValidationError
from localnet.logging import LoggingConfig, LogLevel
from localnet.models import ConsensusMode, RunConfiguration
from localnet.orchestrator import Orchestrator

from .clean import wipe_network_state


LOG_OUTPUTS = ["stdout", "stderr"]


def _parse_duration(value: str | None) -> float | None:
    if value is None:
        return None

    try:
        return TimeParser().parse(value)

    except ValueError as err:
        raise ValidationError(
            str(err),
            stage="configure",
        ) from err


@click.command(help="Launch a local network and write its descriptor.")
@click.option("--peers", "-n", "peer_count", default=None, type=int, help="Number of peers to launch (default: 1).")
@click.option("--security/--no-security", default=None, help="Launch membersrvc and enroll peers.")
@click.option(
    "--consensus",
    default=None,
    type=click.Choice([mode.value for mode in ConsensusMode]),
    help="Consensus mode for every peer (default: noops).",
)
@click.option("--timeout", default=None, type=str, help="Startup timeout per node, e.g. 15s.")
@click.option("--host", default=None, type=str, help="Interface every node binds to.")
@click.option("--debug", is_flag=True, default=None, help="Leave node output attached to this terminal.")
@click.option("--profile", "profiling", is_flag=True, default=None, help="Enable the peers' profiling server.")
@click.option("--peer-logging", default=None, type=str, help="Logging level passed to every node.")
@click.option("--log-level", default=None, type=click.Choice(LogLevel.names()), help="localnet's own log level (default: info).")
@click.option("--log-output", default=None, type=click.Choice(LOG_OUTPUTS), help="Stream for localnet's own log (default: stderr).")
@click.option("--credentials", "credentials_file", default=None, type=str, help="membersrvc YAML holding enrollment users.")
@click.option("--descriptor", "descriptor_path", default=None, type=str, help="Where to write the network descriptor.")
@click.option("--logs-directory", default=None, type=str, help="Directory for per-node output files.")
@click.option("--parallel-readiness", is_flag=True, default=None, help="Wait for all peers at once after launching them.")
@click.option("--pristine", is_flag=True, default=False, help="Wipe node storage and logs before starting.")
@click.option("--env-file", default=None, type=str, help="dotenv file with LOCALNET_* settings (default: .env).")
def start(
    peer_count: int | None,
    security: bool | None,
    consensus: str | None,
    timeout: str | None,
    host: str | None,
    debug: bool | None,
    profiling: bool | None,
    peer_logging: str | None,
    log_level: str | None,
    log_output: str | None,
    credentials_file: str | None,
    descriptor_path: str | None,
    logs_directory: str | None,
    parallel_readiness: bool | None,
    pristine: bool,
    env_file: str | None,
):
    try:
        env = load_env(Env, env_file=env_file)

        if log_level is None:
            log_level = env.LOCALNET_LOG_LEVEL.lower()

        if log_output is None:
            log_output = env.LOCALNET_LOG_OUTPUT.lower()

        if log_level not in LogLevel.names():
            raise ValidationError(
                f"unknown log level {log_level}",
                stage="configure",
            )

        if log_output not in LOG_OUTPUTS:
            raise ValidationError(
                f"unknown log output {log_output}, expected stdout or stderr",
                stage="configure",
            )

        LoggingConfig().update(
            log_level=log_level,
            log_output=log_output,
        )

        config = RunConfiguration.from_env(
            env,
            peer_count=peer_count,
            security=security,
            consensus=consensus,
            startup_timeout=_parse_duration(timeout),
            host=host,
            debug=debug,
            profiling=profiling,
            peer_logging_level=peer_logging,
            credentials_file=credentials_file,
            descriptor_path=descriptor_path,
            logs_directory=logs_directory,
            parallel_readiness=parallel_readiness,
        )

        if pristine:
            wipe_network_state(config)

        descriptor = asyncio.run(
            Orchestrator(config).run()
        )

    except LocalnetError as err:
        click.echo(err.diagnostic(), err=True)
        sys.exit(1)

    click.echo(f"Network ready. Descriptor: {config.descriptor_path}")

    if descriptor.membersrvc:
        click.echo(f"  membersrvc  {descriptor.membersrvc.service}  pid {descriptor.membersrvc.pid}")

    for peer in descriptor.peers:
        click.echo(f"  {peer.id:<10}  rest {peer.rest}  grpc {peer.grpc}  pid {peer.pid}")
