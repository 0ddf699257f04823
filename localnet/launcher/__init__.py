from .process_launcher import ProcessLauncher as ProcessLauncher
from .process_record import ProcessRecord as ProcessRecord
