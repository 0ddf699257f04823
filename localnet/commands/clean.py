import glob
import os
import shutil
import sys

import click

from localnet.env import Env, load_env
from localnet.errors import LocalnetError, ResourceError
from localnet.models import RunConfiguration


def wipe_network_state(config: RunConfiguration) -> list[str]:
    """
    Remove node storage and per-node output files so the next network
    starts from an empty ledger.
    """
    removed: list[str] = []

    try:
        if os.path.isdir(config.storage_root):
            shutil.rmtree(config.storage_root)
            removed.append(config.storage_root)

        for pattern in ("*.stdout", "*.stderr"):
            for path in glob.glob(os.path.join(config.logs_directory, pattern)):
                os.unlink(path)
                removed.append(path)

    except OSError as err:
        raise ResourceError(
            f"could not wipe network state - {err}",
            stage="clean",
        ) from err

    return removed


@click.command(help="Wipe node storage and per-node output files.")
@click.option("--env-file", default=None, type=str, help="dotenv file with LOCALNET_* settings (default: .env).")
@click.option("--logs-directory", default=None, type=str, help="Directory holding per-node output files.")
def clean(
    env_file: str | None,
    logs_directory: str | None,
):
    try:
        config = RunConfiguration.from_env(
            load_env(Env, env_file=env_file),
            logs_directory=logs_directory,
        )

        removed = wipe_network_state(config)

    except LocalnetError as err:
        click.echo(err.diagnostic(), err=True)
        sys.exit(1)

    for path in removed:
        click.echo(f"  removed {path}")

    click.echo(f"Removed {len(removed)} paths.")
