import os
from typing import Dict, TypeVar, Union

import pydantic
from dotenv import dotenv_values
from pydantic import BaseModel

from localnet.errors import ValidationError

from .env import Env

T = TypeVar("T", bound=BaseModel)

PrimaryType = Union[str, int, bool, float, bytes]


def load_env(default: type[Env], env_file: str = None, override: T | None = None) -> T:
    envars = default.types_map()

    if env_file is None:
        env_file = ".env"

    values: Dict[str, PrimaryType] = {}
    for envar_name, envar_type in envars.items():
        envar_value = os.getenv(envar_name)
        if envar_value:
            values[envar_name] = envar_type(envar_value)

    if env_file and os.path.exists(env_file):
        env_file_values = dotenv_values(dotenv_path=env_file)

        for envar_name, envar_value in env_file_values.items():
            envar_type = envars.get(envar_name)
            if envar_type and envar_value is not None:
                values[envar_name] = envar_type(envar_value)

    model = default
    if override:
        values.update(**override.model_dump(exclude_none=True))
        model = type(override)

    try:
        return model(
            **{name: value for name, value in values.items() if value is not None}
        )

    except pydantic.ValidationError as err:
        details = [
            f"{'.'.join(str(loc) for loc in error['loc'])} - {error['msg']}"
            for error in err.errors()
        ]

        raise ValidationError(
            f"invalid environment: {'; '.join(details)}",
            stage="configure",
        ) from err
