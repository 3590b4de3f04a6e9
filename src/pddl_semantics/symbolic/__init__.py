"""Import classes used to represent and query symbolic states, actions, and goals."""

from .action import Action as Action
from .derived_predicate import Axiom as Axiom
from .derived_predicate import DerivedPredicate as DerivedPredicate
from .effects import EffectDelta as EffectDelta
from .effects import Effects as Effects
from .formula import Formula as Formula
from .objects import Object as Object
from .objects import ObjectRegistry as ObjectRegistry
from .parameter_generator import ParameterGenerator as ParameterGenerator
from .pddl import Pddl as Pddl
from .proposition import Proposition as Proposition
from .state import State as State
