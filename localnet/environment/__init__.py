from .credential_store import Credential as Credential
from .credential_store import CredentialStore as CredentialStore
from .environment_composer import EnvironmentComposer as EnvironmentComposer
from .node_environment import NodeEnvironment as NodeEnvironment
