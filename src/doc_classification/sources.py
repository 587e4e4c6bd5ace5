"""File-system access for documents and reference lists.

``DocumentSource`` is constructed once by the caller and passed to the
corpus builder and evaluator. Every read failure surfaces as an
``InputIOError`` naming the offending path.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .config import Settings
from .exceptions import DataError, InputIOError
from .preprocessing import FeatureSet, ReferenceLists


@dataclass(frozen=True)
class LoadedText:
    """Text of a document together with the name it is known by."""

    name: str
    text: str


@dataclass(frozen=True)
class ClassDescriptions(Mapping[str, str]):
    """Read-only lookup of human-readable class descriptions.

    Used for reporting only; unknown labels are described by the label itself.
    """

    descriptions: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "descriptions", MappingProxyType(dict(self.descriptions)))

    def __getitem__(self, label: str) -> str:
        return self.descriptions[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self.descriptions)

    def __len__(self) -> int:
        return len(self.descriptions)

    def describe(self, label: str | None) -> str:
        if label is None:
            return "-"
        return self.descriptions.get(label, label)


class DocumentSource:
    """Read documents and reference lists from the local file system.

    Args:
        encoding: Text encoding of every file read (UTF-8 by default).
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read(self, path: str | Path) -> LoadedText:
        """Load a document; its name is the file name of ``path``."""
        path = Path(path)
        return LoadedText(name=path.name, text=self._read_text(path))

    def list_files(self, directory: str | Path) -> list[Path]:
        """Return every regular file below ``directory``, recursively, sorted by path."""
        directory = Path(directory)
        if not directory.is_dir():
            raise InputIOError(directory, "not a readable directory")
        try:
            return sorted(p for p in directory.rglob("*") if p.is_file())
        except OSError as exc:
            raise InputIOError(directory, str(exc)) from exc

    def read_lines(self, path: str | Path) -> list[str]:
        """Read a reference list: one entry per line, blank lines skipped."""
        text = self._read_text(Path(path))
        return [line.strip() for line in text.splitlines() if line.strip()]

    def load_reference_lists(
        self,
        settings: Settings,
        feature_set: FeatureSet | str,
    ) -> ReferenceLists:
        """Load the reference lists required by ``feature_set``."""
        feature_set = FeatureSet.parse(feature_set)
        if not feature_set.uses_stop_words:
            return ReferenceLists()

        stop_words = tuple(self.read_lines(settings.stop_words_path))
        if not feature_set.uses_stemming:
            return ReferenceLists(stop_words=stop_words)

        return ReferenceLists(
            stop_words=stop_words,
            prefixes=tuple(self.read_lines(settings.prefixes_path)),
            suffixes=tuple(self.read_lines(settings.suffixes_path)),
            endings=tuple(self.read_lines(settings.endings_path)),
        )

    def load_class_descriptions(
        self,
        path: str | Path,
        separator: str = ":",
        optional: bool = False,
    ) -> ClassDescriptions:
        """Load ``label<separator>description`` lines.

        Args:
            path: Description file.
            separator: Separator between label and description.
            optional: Return an empty lookup instead of failing when the
                file does not exist.

        Raises:
            InputIOError: If the file cannot be read.
            DataError: If a line has no separator.
        """
        path = Path(path)
        if optional and not path.exists():
            return ClassDescriptions()

        descriptions: dict[str, str] = {}
        for line in self.read_lines(path):
            label, sep, description = line.partition(separator)
            if not sep:
                raise DataError(
                    f"Class description line has no '{separator}' separator: {line!r}",
                    document=str(path),
                )
            descriptions[label.strip()] = description.strip()
        return ClassDescriptions(descriptions)

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding=self.encoding)
        except FileNotFoundError as exc:
            raise InputIOError(path, "file not found") from exc
        except UnicodeDecodeError as exc:
            raise InputIOError(path, f"cannot decode as {self.encoding}: {exc}") from exc
        except OSError as exc:
            raise InputIOError(path, str(exc)) from exc
