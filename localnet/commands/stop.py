import datetime
import os
import sys

import click
import msgspec
import psutil

from localnet.descriptor import NetworkDescriptor, NetworkDescriptorWriter


# psutil derives create_time from boot time and clock ticks, which can
# drift from the wall clock by up to a second.
CREATE_TIME_SLACK = 2.0


def _started_window(
    descriptor: NetworkDescriptor,
    descriptor_path: str,
) -> tuple[float, float]:
    started = datetime.datetime.fromisoformat(descriptor.date).timestamp()
    written = os.path.getmtime(descriptor_path)

    return (
        started - CREATE_TIME_SLACK,
        written + CREATE_TIME_SLACK,
    )


@click.command(help="Stop every process recorded in a network descriptor.")
@click.option("--descriptor", "descriptor_path", default="network.json", type=str, help="Network descriptor to read.")
@click.option("--timeout", default=5.0, type=float, help="Seconds to wait before killing processes that ignore SIGTERM.")
def stop(
    descriptor_path: str,
    timeout: float,
):
    try:
        descriptor = NetworkDescriptorWriter.load(descriptor_path)
        earliest, latest = _started_window(descriptor, descriptor_path)

    except (OSError, ValueError, msgspec.DecodeError) as err:
        click.echo(f"Err. - stop - could not read descriptor {descriptor_path} - {err}", err=True)
        sys.exit(1)

    processes: list[psutil.Process] = []
    denied: list[int] = []

    for pid in descriptor.pids():
        try:
            process = psutil.Process(pid)

            if not earliest <= process.create_time() <= latest:
                click.echo(f"  pid {pid} belongs to a process started after this network, skipping")
                continue

            process.terminate()
            processes.append(process)

        except psutil.NoSuchProcess:
            click.echo(f"  pid {pid} already exited")

        except psutil.AccessDenied:
            click.echo(f"Err. - stop - not permitted to signal pid {pid}", err=True)
            denied.append(pid)

    _, alive = psutil.wait_procs(processes, timeout=timeout)

    for process in alive:
        try:
            process.kill()

        except psutil.NoSuchProcess:
            pass

        except psutil.AccessDenied:
            click.echo(f"Err. - stop - not permitted to kill pid {process.pid}", err=True)
            denied.append(process.pid)

    psutil.wait_procs(alive, timeout=timeout)

    if denied:
        click.echo(
            f"Err. - stop - could not signal pids {', '.join(str(pid) for pid in denied)}, leaving {descriptor_path} in place",
            err=True,
        )
        sys.exit(1)

    os.unlink(descriptor_path)

    click.echo(f"Stopped {len(processes)} processes.")
