"""Import PDDL-related classes and definitions."""

from .loader import LoadSession as LoadSession
from .loader import load_pddl as load_pddl
from .loader import parse_pddl as parse_pddl
from .parser import PDDLParser as PDDLParser
from .scanner import PDDLScanner as PDDLScanner
from .scanner import PDDLToken as PDDLToken
from .scanner import PDDLTokenType as PDDLTokenType
from .syntax import DomainTree as DomainTree
from .syntax import PDDLTree as PDDLTree
from .syntax import ProblemTree as ProblemTree
from .type_checker import TypeChecker as TypeChecker
from .type_checker import TypeCheckReport as TypeCheckReport
from .type_hierarchy import TypeHierarchy as TypeHierarchy
