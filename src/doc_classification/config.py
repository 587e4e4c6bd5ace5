"""Runtime settings.

Settings are read from ``DOCCLASS_*`` environment variables (a ``.env`` file
is loaded by the CLI before they are read). Reference list names are
resolved against ``data_dir`` unless they are absolute.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "DOCCLASS_"


@dataclass(frozen=True)
class Settings:
    """File locations and naming conventions used by the pipeline.

    Attributes:
        data_dir: Directory holding the reference lists.
        stop_words_file: Stop-word list, one word per line.
        prefixes_file: Word prefixes removed by the stemmer.
        suffixes_file: Word suffixes removed by the stemmer.
        endings_file: Word endings removed by the stemmer.
        class_descriptions_file: ``label:description`` lines used for reporting.
        class_separator: Regex splitting a document name into segments; the
            second segment is the class keyword.
        description_separator: Separator between a label and its description.
        model_suffix: Suffix appended to model paths that lack one.
        log_level: Logging level name.
        log_json: Render log events as JSON instead of console lines.
    """

    data_dir: Path = Path("data")
    stop_words_file: str = "stop_words.csv"
    prefixes_file: str = "word_prefixes.csv"
    suffixes_file: str = "word_suffixes.csv"
    endings_file: str = "word_endings.csv"
    class_descriptions_file: str = "document_classes.csv"
    class_separator: str = r"[_.]"
    description_separator: str = ":"
    model_suffix: str = ".model"
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables, keeping defaults for unset keys."""
        defaults = cls()

        def get(key: str, default: str) -> str:
            value = os.getenv(f"{ENV_PREFIX}{key}")
            return value if value else default

        def get_bool(key: str, default: bool) -> bool:
            value = os.getenv(f"{ENV_PREFIX}{key}", "").strip().lower()
            if value in ("1", "true", "yes", "on"):
                return True
            if value in ("0", "false", "no", "off"):
                return False
            return default

        return cls(
            data_dir=Path(get("DATA_DIR", str(defaults.data_dir))),
            stop_words_file=get("STOP_WORDS_FILE", defaults.stop_words_file),
            prefixes_file=get("PREFIXES_FILE", defaults.prefixes_file),
            suffixes_file=get("SUFFIXES_FILE", defaults.suffixes_file),
            endings_file=get("ENDINGS_FILE", defaults.endings_file),
            class_descriptions_file=get(
                "CLASS_DESCRIPTIONS_FILE", defaults.class_descriptions_file
            ),
            class_separator=get("CLASS_SEPARATOR", defaults.class_separator),
            description_separator=get(
                "DESCRIPTION_SEPARATOR", defaults.description_separator
            ),
            model_suffix=get("MODEL_SUFFIX", defaults.model_suffix),
            log_level=get("LOG_LEVEL", defaults.log_level).upper(),
            log_json=get_bool("LOG_JSON", defaults.log_json),
        )

    def resolve(self, name: str) -> Path:
        """Resolve a reference file name against ``data_dir``."""
        path = Path(name)
        return path if path.is_absolute() else self.data_dir / path

    @property
    def stop_words_path(self) -> Path:
        return self.resolve(self.stop_words_file)

    @property
    def prefixes_path(self) -> Path:
        return self.resolve(self.prefixes_file)

    @property
    def suffixes_path(self) -> Path:
        return self.resolve(self.suffixes_file)

    @property
    def endings_path(self) -> Path:
        return self.resolve(self.endings_file)

    @property
    def class_descriptions_path(self) -> Path:
        return self.resolve(self.class_descriptions_file)

    def model_path(self, path: str | Path) -> Path:
        """Append ``model_suffix`` to ``path`` unless it already ends with it."""
        path = Path(path)
        if self.model_suffix and path.suffix != self.model_suffix:
            return path.with_name(path.name + self.model_suffix)
        return path
