from .math_tools import MathTools
from .periods import PeriodTools

__all__ = ["MathTools", "PeriodTools"]
