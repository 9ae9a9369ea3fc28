from .parser import parse_expression
from .classes import *
