"""
Where: extensibility/gateway/core/compiler.py
What: Turns hook script source into a callable handler.
Why: Scripts are user-authored; every way they can be unusable surfaces as CompilationError.

A script is a Python module that binds a module-level ``handler`` accepting
``(user, context, done)``. The extension point's domain error class is
available to the script as a global under its ``name``.
"""

import inspect
import logging
import types
from pathlib import Path
from typing import Callable, Union

from ..models.extension_point import ExtensionPoint
from .exceptions import CompilationError
from .extension_points import PRE_USER_REGISTRATION

logger = logging.getLogger("gateway.compiler")

HANDLER_NAME = "handler"


def count_positional_parameters(func: Callable) -> int:
    """
    Number of positional arguments ``func`` accepts.

    Returns -1 when the signature cannot be inspected or takes ``*args``.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return -1

    count = 0
    for param in signature.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return -1
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
        elif param.kind == inspect.Parameter.KEYWORD_ONLY and param.default is param.empty:
            # A required keyword-only argument can never be supplied.
            return -1
    return count


def compile_script(
    script: str,
    extension_point: ExtensionPoint = PRE_USER_REGISTRATION,
    filename: str = "<script>",
) -> Callable:
    """
    Compile hook source text into its handler.

    Args:
        script: Python source of the hook
        extension_point: extension point the hook is written for
        filename: name used in tracebacks and error messages

    Returns:
        The handler callable

    Raises:
        CompilationError: syntax error, error while executing the module body,
            missing or non-callable handler, or wrong handler arity
    """
    try:
        code = compile(script, filename, "exec")
    except SyntaxError as e:
        raise CompilationError(f"{e.msg} (line {e.lineno})", filename) from e

    module = types.ModuleType(f"hook_{extension_point.name.replace('-', '_')}")
    module.__file__ = filename
    setattr(module, extension_point.domain_error_name, extension_point.domain_error)

    try:
        exec(code, module.__dict__)
    except Exception as e:
        raise CompilationError(f"{type(e).__name__}: {e}", filename) from e

    handler = getattr(module, HANDLER_NAME, None)
    if handler is None:
        raise CompilationError(f"script does not define '{HANDLER_NAME}'", filename)
    if not callable(handler):
        raise CompilationError(f"'{HANDLER_NAME}' is not callable", filename)

    arity = count_positional_parameters(handler)
    if arity != extension_point.arity:
        raise CompilationError(
            f"'{HANDLER_NAME}' must accept exactly {extension_point.arity} arguments "
            f"(user, context, done)",
            filename,
        )

    logger.info(
        f"Compiled {extension_point.name} hook",
        extra={"extension_point": extension_point.name, "script": filename},
    )
    return handler


def load_script(
    path: Union[str, Path], extension_point: ExtensionPoint = PRE_USER_REGISTRATION
) -> Callable:
    """Read a hook script from disk and compile it."""
    path = Path(path)
    try:
        script = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CompilationError(f"cannot read script: {e}", str(path)) from e
    return compile_script(script, extension_point, filename=str(path))
