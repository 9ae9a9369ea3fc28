from .evaluator import Evaluator, build_environment, evaluate
from .values import AnyValue, BoolValue, FloatValue, IntegerValue, Value, value_from_python
