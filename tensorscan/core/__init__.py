from tensorscan.core.signature import Type, Annotation, Parameter, Signature
from tensorscan.core.computation import Computation, ComputationPlan, KernelArgument


class ConfigurationError(ValueError):
    """
    Thrown when a kernel or a computation is constructed with parameters it cannot support
    (unsupported rank, out-of-range axis, mismatched shapes between scan stages).
    Always raised at construction time, before anything is dispatched.
    """
    pass
