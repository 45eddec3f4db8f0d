"""
Inkwell configuration.

Settings come from an ``inkwell.json`` next to where the CLI runs, falling back
to ``~/.inkwell/config.json`` and then to the defaults below.
"""
import json
import os
from typing import Optional

from pydantic import BaseModel, ValidationError

CONFIG_FILE = "inkwell.json"
USER_CONFIG_FILE = os.path.join("~", ".inkwell", "config.json")


class InkwellConfig(BaseModel):
    basedir: Optional[str] = None
    encoding: str = "utf-8"
    escape: bool = True


def load_config(paths=None):
    """Load the first configuration file found, or the defaults."""
    if paths is None:
        paths = [CONFIG_FILE, os.path.expanduser(USER_CONFIG_FILE)]
    for p in paths:
        if os.path.exists(p):
            with open(p, "r") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON in {p}: {e}") from e
            try:
                return InkwellConfig.model_validate(data)
            except ValidationError as e:
                raise ValueError(f"Invalid configuration in {p}: {e}") from e
    return InkwellConfig()
