# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Computation settings and their YAML / JSON persistence"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Union

import yaml

from .core.constants import KEPLER_MAX_ITER, KEPLER_TOL, TSTEP


@dataclass
class NavConfig:
    """Settings for orbit and clock computation.

    Attributes
    ----------
    kepler_tolerance : float
        Convergence limit of the Kepler solver (rad)
    kepler_max_iter : int
        Iteration cap of the Kepler solver
    glonass_step : float
        GLONASS Runge-Kutta integration step (s)
    validate_input : bool
        Reject non-physical elements and mismatched time scales with
        InvalidInputError instead of computing garbage
    logging : dict
        Logger settings passed to ``setup_logger_from_config``
    """
    kepler_tolerance: float = KEPLER_TOL
    kepler_max_iter: int = KEPLER_MAX_ITER
    glonass_step: float = TSTEP
    validate_input: bool = False
    logging: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.kepler_tolerance > 0.0:
            raise ValueError(f"kepler_tolerance must be positive, got {self.kepler_tolerance}")
        if int(self.kepler_max_iter) < 1:
            raise ValueError(f"kepler_max_iter must be at least 1, got {self.kepler_max_iter}")
        if not self.glonass_step > 0.0:
            raise ValueError(f"glonass_step must be positive, got {self.glonass_step}")
        self.kepler_tolerance = float(self.kepler_tolerance)
        self.kepler_max_iter = int(self.kepler_max_iter)
        self.glonass_step = float(self.glonass_step)
        self.validate_input = bool(self.validate_input)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'NavConfig':
        """Create a configuration from a plain dictionary.

        Raises
        ------
        ValueError
            If data contains keys that are not configuration fields
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)


def load_config(filepath: Union[str, Path]) -> NavConfig:
    """
    Load a NavConfig from file.

    The format is determined from the file extension.

    Parameters:
    -----------
    filepath : str or Path
        Path to configuration file (.yaml, .yml, or .json)

    Raises:
        ValueError: If the file format is not supported or a key is unknown
        FileNotFoundError: If the specified file doesn't exist

    Examples:
        >>> config = load_config('nav.yaml')
    """
    filepath = Path(filepath)

    if filepath.suffix in ['.yaml', '.yml']:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    elif filepath.suffix == '.json':
        with open(filepath) as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported file format: {filepath.suffix}")

    return NavConfig.from_dict(data or {})


def save_config(config: NavConfig, filepath: Union[str, Path]) -> None:
    """
    Save a NavConfig to file

    Parameters:
    -----------
    config : NavConfig
        Configuration to write
    filepath : str or Path
        Path to save file; .json writes JSON, anything else YAML
    """
    filepath = Path(filepath)
    data = config.to_dict()
    if filepath.suffix == '.json':
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)
    else:
        with open(filepath, 'w') as f:
            yaml.dump(data, f, default_flow_style=False)
