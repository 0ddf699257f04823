import re
from datetime import timedelta


_DURATION_PART = r"(?P<val>\d+(?:\.\d+)?)\s*(?P<unit>ms|[smh])?"
_DURATION = r"\s*(?:\d+(?:\.\d+)?\s*(?:ms|[smh])?\s*)+"


class TimeParser:
    """
    Parses durations such as `15s`, `250ms` or `1m30s` into seconds.

    A bare number is taken as seconds. The whole value must be made of
    `<number><unit>` parts, anything else raises ValueError.
    """

    def __init__(self) -> None:
        self._units = {
            "ms": "milliseconds",
            "s": "seconds",
            "m": "minutes",
            "h": "hours",
        }

    def parse(self, time_amount: str | int | float) -> float:
        if isinstance(time_amount, (int, float)):
            return float(time_amount)

        if re.fullmatch(_DURATION, time_amount, flags=re.I) is None:
            raise ValueError(
                f"Err. - could not parse duration - {time_amount}"
            )

        durations: dict[str, float] = {}
        for match in re.finditer(_DURATION_PART, time_amount, flags=re.I):
            unit = self._units[(match.group("unit") or "s").lower()]
            durations[unit] = durations.get(unit, 0) + float(match.group("val"))

        return float(
            timedelta(**durations).total_seconds()
        )
