import click

from localnet import __version__

from .clean import clean
from .start import start
from .stop import stop


@click.group(help="Bootstrap and manage local ledger test networks.")
@click.version_option(__version__, prog_name="localnet")
def localnet():
    pass


localnet.add_command(start)
localnet.add_command(stop)
localnet.add_command(clean)


def run():
    localnet(prog_name="localnet")
