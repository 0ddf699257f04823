from .errors import LocalnetError as LocalnetError
from .errors import ValidationError as ValidationError
from .errors import ResourceError as ResourceError
from .errors import LaunchError as LaunchError
from .errors import ReadinessTimeoutError as ReadinessTimeoutError
