"""Ground, apply, and validate actions in typed PDDL domains."""

from .exceptions import ActionParseError as ActionParseError
from .exceptions import ArityMismatchError as ArityMismatchError
from .exceptions import ClosureDivergenceError as ClosureDivergenceError
from .exceptions import LoadError as LoadError
from .exceptions import PDDLError as PDDLError
from .exceptions import UnboundVariableError as UnboundVariableError
from .exceptions import UnknownActionError as UnknownActionError
from .exceptions import UnknownObjectError as UnknownObjectError
from .exceptions import UnsupportedGoalConstructError as UnsupportedGoalConstructError
from .symbolic import Pddl as Pddl
from .symbolic import Proposition as Proposition
from .symbolic import State as State
