import math
from typing import Any


def sanitize_for_json(obj: Any) -> Any:
    """
    Replace non-finite floats with None, recursing into dicts, lists and tuples.

    The engine reports some outcomes as NaN or infinity rather than raising:
    a non-converged IRR, or an implied growth rate with no finite solution.
    Neither is valid JSON, so both reach clients as ``null``.
    """
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    if isinstance(obj, dict):
        return {key: sanitize_for_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(item) for item in obj]
    return obj
