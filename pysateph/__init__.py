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

"""
pysateph - Broadcast ephemeris to satellite state

Computes GNSS satellite ECEF positions and clock biases from broadcast
navigation messages (GPS, Galileo, BeiDou, QZSS, IRNSS Keplerian elements,
GLONASS and SBAS state vectors), with a RINEX 3 navigation reader.
"""

__version__ = "0.1.0"
__author__ = "pysateph Development Team"
__title__ = "pysateph"
__description__ = "Satellite position and clock from GNSS broadcast ephemeris"

from .core import *
from .satellite import *
from .io import *
from .config import NavConfig, load_config, save_config
from .logger import setup_logger, setup_logger_from_config
