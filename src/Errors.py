
class ConfigurationError(RuntimeError):
    """Raised during setup when the GPU pipeline or its inputs can't be built as asked.

    Vertex store overflow, a zero sized orthographic extent, shader compile or
        link failures and a missing window/context all end up here.  None of
        these are recoverable at runtime; initialization should abort.
    """
    pass
