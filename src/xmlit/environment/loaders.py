"""Template loaders for the xmlit environment.

Loaders provide template source to the Environment. They implement
``get_source(name)`` returning ``(source, filename)`` and
``list_templates()``.

Built-in Loaders:
- ``FileSystemLoader``: Load ``.xml`` templates from filesystem directories
- ``DictLoader``: Load from an in-memory dictionary (testing/embedded)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class PackageDataLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            resource = files("myapp.templates") / name
            if not resource.is_file():
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return resource.read_text("utf-8"), str(resource)

        def list_templates(self) -> list[str]:
            return [r.name for r in files("myapp.templates").iterdir()]
    ```

Thread-Safety:
Loaders should be thread-safe for concurrent ``get_source()`` calls. Both
built-in loaders are (file reads are independent, the dict is never
mutated by the loader).

"""

from __future__ import annotations

from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from xmlit.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_templates(self) -> list[str]: ...


class FileSystemLoader:
    """Load templates from filesystem directories.

    Directories are searched in order and the first matching file wins:
        ```python
        loader = FileSystemLoader(["feeds/custom/", "feeds/default/"])
        # Looks in feeds/custom/ first, then feeds/default/
        ```

    Attributes:
        _paths: List of Path objects to search
        _encoding: File encoding (default: utf-8)

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("feeds/rss.xml")
            >>> print(filename)
            'templates/feeds/rss.xml'

    Raises:
        TemplateNotFoundError: If template not found in any search path

    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from filesystem."""
        for base in self._paths:
            path = base / name
            if path.is_file():
                return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def list_templates(self) -> list[str]:
        """List all ``.xml`` templates in the search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*.xml"):
                    templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template names to source strings. Returns ``None`` as filename, so
    error messages show the template name instead of a path.

    Example:
            >>> loader = DictLoader({"item.xml": "<item>{title}</item>"})
            >>> env = Environment(loader=loader)
            >>> env.get_template("item.xml").render(title="Hi")
            '<item>Hi</item>'

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())
