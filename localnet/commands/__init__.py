from .root import localnet as localnet
from .root import run as run
