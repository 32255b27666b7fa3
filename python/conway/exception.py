from taichi.lang.exception import TaichiCompilationError


class ConwayError(Exception):
    """Base class for all errors raised by the simulation."""

    pass


class ShaderCompilationError(ConwayError):
    """Thrown when a compute or render kernel fails to compile."""

    pass


class DeviceLostError(ConwayError, RuntimeError):
    """Thrown when the device fails during a dispatch.

    The generation buffers can no longer be trusted. The simulation has to be
    reset (reallocated and re-seeded) before it can step again.
    """

    pass


class BufferRoleError(ConwayError):
    """Thrown when a dispatch would write into the buffer it reads from."""

    pass


class ConfigError(ConwayError, ValueError):
    """Thrown when a configuration option is unknown or out of range."""

    pass


def handle_exception_from_taichi(exc, stage):
    """Translates an exception raised by a kernel launch.

    Args:
        exc (Exception): The exception raised by Taichi.
        stage (str): Name of the stage being dispatched, used in the message.

    Returns:
        Exception: The exception to raise in its place.
    """
    if isinstance(exc, ConwayError):
        return exc
    if isinstance(exc, TaichiCompilationError):
        return ShaderCompilationError(f"Failed to compile the `{stage}` stage: {exc}")
    if isinstance(exc, RuntimeError):
        return DeviceLostError(f"Device failure during the `{stage}` dispatch: {exc}")
    return exc


__all__ = [
    "ConwayError",
    "ShaderCompilationError",
    "DeviceLostError",
    "BufferRoleError",
    "ConfigError",
]
