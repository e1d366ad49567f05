"""Per-plugin context handed to every command handler."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


@dataclass(frozen=True)
class PluginContext:
    """
    Where the plugin lives.

    Paths in request arguments are resolved against ``base_dir``, the
    directory the plugin was loaded from.
    """

    base_dir: Path

    @classmethod
    def from_module_path(cls, path: PathLike) -> "PluginContext":
        """Build a context from the plugin module path or its directory."""
        path = Path(path)
        if not path.is_dir():
            path = path.parent
        return cls(base_dir=path)

    def resolve(self, relative: PathLike) -> Path:
        return self.base_dir / relative
