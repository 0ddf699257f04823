from .models import (
    MembersrvcRecord as MembersrvcRecord,
    NetworkDescriptor as NetworkDescriptor,
    PeerRecord as PeerRecord,
)
from .network_descriptor_writer import NetworkDescriptorWriter as NetworkDescriptorWriter
