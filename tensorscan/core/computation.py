from tensorscan.core.signature import Type, Signature


class Translator:
    """
    A callable that translates strings from the known list, and prefixes unknown ones.
    Used to introduce parameter names from a nested computation to the parent namespace.
    """

    def __init__(self, known_old, known_new, prefix):
        self._mapping = dict(zip(known_old, known_new))
        self._prefix = prefix

    def __call__(self, name):
        if name in self._mapping:
            return self._mapping[name]
        else:
            return (self._prefix + '_' if self._prefix != '' else '') + name

    def get_nested(self, known_old, known_new, prefix):
        """
        Returns a new ``Translator`` with an extended prefix.
        """
        return Translator(known_old, known_new, prefix + self._prefix)

    @classmethod
    def identity(cls):
        return cls([], [], "")


def check_external_parameter_name(name):
    """
    Checks that a user-supplied parameter name meets the special criteria.
    Basically, we do not want such names start with underscores
    to prevent them from conflicting with internal names.
    """
    # Raising errors here so we can provide better explanation for the user
    if name.startswith('_'):
        raise ValueError("External parameter name cannot start with the underscore.")


class Computation:
    """
    A base class for computations, intended to be subclassed.

    :param root_parameters: a list of :py:class:`~tensorscan.core.Parameter` objects.

    .. py:attribute:: signature

        A :py:class:`~tensorscan.core.Signature` object representing the computation signature.

    .. py:attribute:: parameter

        A dictionary of :py:class:`~tensorscan.core.Type` objects
        corresponding to parameters from :py:attr:`signature`.
    """

    def __init__(self, root_parameters):
        root_parameters = list(root_parameters)
        for param in root_parameters:
            check_external_parameter_name(param.name)

        self.signature = Signature(root_parameters)
        self.parameter = {param.name: param.annotation.type for param in root_parameters}

    def _get_plan(self, translator, device_params):
        def plan_factory():
            return ComputationPlan(translator, device_params)

        args = KernelArguments(
            (param.name, KernelArgument(translator(param.name), param.annotation.type))
            for param in self.signature.parameters.values())
        return self._build_plan(plan_factory, device_params, args)

    def compile(self, thread):
        """
        Compiles the computation with the given :py:class:`~tensorscan.cluda.reference.Thread` object
        and returns a :py:class:`~tensorscan.core.computation.ComputationCallable` object.
        """
        plan = self._get_plan(Translator.identity(), thread.device_params)
        return plan.finalize(thread, list(self.signature.parameters.values()))

    def _build_plan(self, plan_factory, device_params, args):
        """
        Derived classes override this method.
        It is called by :py:meth:`compile` and
        supposed to return a :py:class:`~tensorscan.core.computation.ComputationPlan` object.

        :param plan_factory: a callable returning a new
            :py:class:`~tensorscan.core.computation.ComputationPlan` object.
        :param device_params: a :py:class:`~tensorscan.cluda.reference.DeviceParameters` object
            corresponding to the thread the computation is being compiled for.
        :param args: :py:class:`~tensorscan.core.computation.KernelArgument` objects,
            corresponding to ``parameters`` specified during the creation
            of this computation object.
        """
        raise NotImplementedError


class KernelArguments:

    def __init__(self, args):
        self._args = dict(args)

    def __getattr__(self, name):
        try:
            return self._args[name]
        except KeyError:
            raise AttributeError(name)


class IdGen:
    """
    Encapsulates a simple ID generator.
    """

    def __init__(self, prefix, counter=0):
        self._counter = counter
        self._prefix = prefix

    def __call__(self):
        self._counter += 1
        return self._prefix + str(self._counter)


class KernelArgument(Type):
    """
    Represents an argument suitable to pass to planned kernel or computation call.
    """

    def __init__(self, name, type_):
        """__init__()""" # hide the signature from Sphinx
        Type.__init__(self, type_.dtype, shape=type_.shape)
        self.name = name

    def __repr__(self):
        return "KernelArgument(" + self.name + ")"


class ComputationPlan:
    """
    Computation plan recorder.
    Kernel calls are recorded (and later executed) in the order they are added.
    """

    def __init__(self, translator, device_params):
        """__init__()""" # hide the signature from Sphinx
        self._translator = translator
        self._device_params = device_params

        self._nested_comp_idgen = IdGen('_nested')
        self._temp_array_idgen = IdGen('_temp')

        self._temp_arrays = {}
        self._kernels = []

    def temp_array(self, shape, dtype):
        """
        Adds a temporary array to the plan, and returns the corresponding
        :py:class:`KernelArgument`.
        Each temporary array gets its own buffer, so kernels never share their outputs.
        """
        name = self._translator(self._temp_array_idgen())
        type_ = Type(dtype, shape=shape)
        self._temp_arrays[name] = type_
        return KernelArgument(name, type_)

    def temp_array_like(self, arr):
        """
        Same as :py:meth:`temp_array`, taking the array properties
        from array or array-like object ``arr``.
        """
        return self.temp_array(arr.shape, arr.dtype)

    def kernel_call(self, kernel, args):
        """
        Adds a kernel call to the plan.

        :param kernel: a kernel object with the attributes ``variable_names``
            and ``output_shape``, and the method ``element()``.
        :param args: a list of :py:class:`~tensorscan.core.computation.KernelArgument` objects,
            the output array first, followed by arrays
            corresponding to ``kernel.variable_names``.
        """
        args = list(args)
        for arg in args:
            if not isinstance(arg, KernelArgument):
                raise TypeError("Unknown argument type: " + str(type(arg)))

        if len(args) != len(kernel.variable_names) + 1:
            raise ValueError(
                "Kernel " + kernel.name + " takes " + str(len(kernel.variable_names) + 1) +
                " arguments (" + str(len(args)) + " given)")

        output = args[0]
        if output.shape != tuple(kernel.output_shape):
            raise ValueError(
                "Kernel " + kernel.name + " writes an array of shape " +
                str(tuple(kernel.output_shape)) + ", got " + str(output.shape))

        self._kernels.append(PlannedKernelCall(kernel, [arg.name for arg in args]))

    def computation_call(self, computation, *args, **kwds):
        """
        Adds a nested computation call.
        The ``computation`` value must be a :py:class:`~tensorscan.core.Computation` object.
        ``args`` and ``kwds`` are values to be passed to the computation.
        """
        signature = computation.signature
        bound_args = signature.bind(*args, **kwds)

        argnames = []
        for name, param in signature.parameters.items():
            arg = bound_args.arguments[name]
            if not isinstance(arg, KernelArgument):
                raise TypeError("Unknown argument type: " + str(type(arg)))
            if not arg.compatible_with(param.annotation.type):
                raise TypeError(
                    "Got " + repr(Type.from_value(arg)) + " for '" + name +
                    "', expected " + repr(param.annotation.type))
            argnames.append(arg.name)

        translator = self._translator.get_nested(
            list(signature.parameters), argnames, self._nested_comp_idgen())

        self._append_plan(computation._get_plan(translator, self._device_params))

    def _append_plan(self, plan):
        self._kernels += plan._kernels
        self._temp_arrays.update(plan._temp_arrays)

    def finalize(self, thread, parameters):
        internal_args = {
            name: thread.array(type_.shape, type_.dtype)
            for name, type_ in self._temp_arrays.items()}
        return ComputationCallable(thread, parameters, self._kernels, internal_args)


class PlannedKernelCall:

    def __init__(self, kernel, argnames):
        self.kernel = kernel
        self.argnames = argnames

    def __call__(self, thread, known_args):
        output = known_args[self.argnames[0]]
        inputs = {
            var_name: known_args[argname]
            for var_name, argname in zip(self.kernel.variable_names, self.argnames[1:])}
        thread.parallel_map(self.kernel, output, inputs)


class ComputationCallable:
    """
    A result of calling :py:meth:`~tensorscan.core.Computation.compile` on a computation.
    Represents a callable opaque computation.

    .. py:attribute:: thread

        A :py:class:`~tensorscan.cluda.reference.Thread` object used to compile the computation.

    .. py:attribute:: signature

        A :py:class:`~tensorscan.core.Signature` object.

    .. py:attribute:: kernel_names

        A list with the names of the kernels in the order they are dispatched.
    """

    def __init__(self, thread, parameters, kernel_calls, internal_args):
        self.thread = thread
        self.signature = Signature(parameters)
        self.parameter = {param.name: param.annotation.type for param in parameters}
        self._kernel_calls = list(kernel_calls)
        self._internal_args = internal_args

    @property
    def kernel_names(self):
        return [kernel_call.kernel.name for kernel_call in self._kernel_calls]

    def __call__(self, *args, **kwds):
        """
        Execute the computation.
        Kernels are dispatched one by one;
        each dispatch is completed before the next one starts.
        """
        known_args = dict(self._internal_args)
        known_args.update(self.signature.bind_arrays(args, kwds))
        for kernel_call in self._kernel_calls:
            kernel_call(self.thread, known_args)
