# mazelab/core/errors.py
#!/usr/bin/env python3


class MazeError(Exception):
    """Base for everything mazelab raises on purpose."""


class UnknownKindError(MazeError, ValueError):
    def __init__(self, what: str, kind: str, known):
        self.kind = kind
        super().__init__(f"unknown {what} {kind!r} (expected one of: {', '.join(known)})")


class MissingEndpointError(MazeError):
    pass


class PathReconstructionError(MazeError):
    pass
