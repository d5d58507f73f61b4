# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from .command_mutation import CommandMutation as CommandMutation
from .command_mutation import SplitPoint as SplitPoint
from .geometry import Point as Point
from .geometry import Projection as Projection
from .path_model import IncompatibleTopologyError as IncompatibleTopologyError
from .path_model import PathModel as PathModel
from .path_model import PathProjection as PathProjection
from .path_model import SplitOp as SplitOp
from .path_model import UnsplitOp as UnsplitOp
from .path_parser import PathParser as PathParser
from .sub_path import SubPath as SubPath
from .svg import Command as Command
from .svg import CommandType as CommandType

__version__ = "0.1.0"
