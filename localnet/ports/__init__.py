from .port_allocator import PortAllocator as PortAllocator
from .port_reservation import PortReservation as PortReservation
from .port_role import PortRole as PortRole
from .port_set import PortSet as PortSet
