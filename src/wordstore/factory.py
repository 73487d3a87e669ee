"""Factory functions for creating backends."""

from typing import Final, Literal, overload

from .backends import Backend, MemoryBackend, NativeBackend, TextFileBackend
from .config import Settings, load_settings
from .exceptions import BackendLoadError


# Backend factory
# ===================================================================================

BackendName = Literal["text", "memory", "native"]

_BACKEND_REGISTRY: Final[dict[str, type[Backend]]] = {
    "text": TextFileBackend,
    "memory": MemoryBackend,
    "native": NativeBackend,
}


def list_backends() -> list[str]:
    """Return names of all available backends."""
    return list(_BACKEND_REGISTRY.keys())


@overload
def get_backend(name: Literal["text"], *, encoding: str = ...) -> TextFileBackend: ...


@overload
def get_backend(
    name: Literal["memory"], *, files: dict[str, str] | None = ...
) -> MemoryBackend: ...


@overload
def get_backend(
    name: Literal["native"], *, library: str | None = ..., encoding: str = ...
) -> NativeBackend: ...


def get_backend(name: BackendName = "text", **kwargs) -> Backend:
    """
    Create a backend by registry name.

    :param name: Backend name: "text" stores tokens in a plain text file,
                 "memory" keeps them in process, "native" binds a shared library.
    :param kwargs: Passed through to the backend constructor.
    :return: Configured backend instance.
    :raises BackendLoadError: If the name is unknown or the backend fails to load.

    .. code-block:: python

        backend = get_backend("text", encoding="latin-1")
        backend = get_backend("native", library="./libfile32.so")
    """
    # handle invalid backend names
    if name not in _BACKEND_REGISTRY:
        raise BackendLoadError(
            "unknown backend name", name=name, available=list_backends()
        )

    try:
        return _BACKEND_REGISTRY[name](**kwargs)
    except TypeError as e:
        raise BackendLoadError(
            f"invalid options for backend: {sorted(kwargs)}", name=name
        ) from e


def resolve_backend(
    backend: Backend | str | None = None, settings: Settings | None = None
) -> Backend:
    """
    Turn a backend instance, registry name or ``None`` into a backend.

    ``None`` selects the backend named by ``settings`` (or the environment).
    File based backends receive the configured encoding.
    """
    if isinstance(backend, Backend):
        return backend

    if settings is None:
        settings = load_settings()
    name = settings.backend if backend is None else backend

    if name in ("text", "native"):
        return get_backend(name, encoding=settings.encoding)
    return get_backend(name)


# ===================================================================================
