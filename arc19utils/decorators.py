import time
from functools import wraps

from arc19utils.core.errors import Arc19Error


def traced(stage):
    """Reports a pipeline stage to an optional tracer.

    The wrapped function gains a ``tracer`` keyword argument. When it is None
    (the default) nothing is reported. Otherwise it is used as a structlog
    style logger: a debug event with the elapsed time on success, a warning
    with the error kind on failure. Errors are always re-raised.

    :param stage: name of the pipeline stage, attached to every event
    :type stage: str
    """

    def deco_traced(func):
        @wraps(func)
        def inner(*args, tracer=None, **kwargs):
            starttime = time.time()
            try:
                result = func(*args, **kwargs)
            except Arc19Error as e:
                if tracer is not None:
                    tracer.warning(
                        f"{func.__name__} failed",
                        stage=e.stage or stage,
                        kind=e.kind,
                        error=e.message,
                        value=e.value,
                    )
                raise
            endtime = time.time()

            if tracer is not None:
                tracer.debug(
                    f"Called {func.__name__}",
                    stage=stage,
                    elapsed=(endtime - starttime),
                )
            return result

        return inner

    return deco_traced
