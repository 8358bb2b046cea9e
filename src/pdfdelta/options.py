"""Configuration options for extraction, comparison jobs and previews.

Options are frozen dataclasses; use ``create_updated`` to derive a modified
copy. Field metadata carries the help text used by the CLI.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from pdfdelta.constants import (
    ADDED_HIGHLIGHT_RGB,
    DEFAULT_EXTRACTION_WORKERS,
    DEFAULT_HIGHLIGHT_OPACITY,
    DEFAULT_RUN_GRANULARITY,
    DEFAULT_WORKER_MODE,
    DEFAULT_ZOOM,
    REMOVED_HIGHLIGHT_RGB,
    RunGranularity,
    WorkerMode,
)

_RUN_GRANULARITIES = ("span", "word")
_WORKER_MODES = ("process", "thread")


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ExtractionOptions(CloneFrozenMixin):
    """Options for turning a PDF into positioned tokens.

    Parameters
    ----------
    password : str or None, default None
        Password for encrypted PDFs
    run_granularity : {"span", "word"}, default "span"
        Whether one raw text run is produced per PyMuPDF span or per word.
        Word runs give finer highlights at the cost of more tokens.

    """

    password: str | None = field(
        default=None,
        metadata={"help": "Password for encrypted PDFs", "importance": "core"},
    )
    run_granularity: RunGranularity = field(
        default=DEFAULT_RUN_GRANULARITY,
        metadata={"help": "Text run granularity: span (default) or word", "choices": list(_RUN_GRANULARITIES)},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If ``run_granularity`` is not a supported value.

        """
        if self.run_granularity not in _RUN_GRANULARITIES:
            raise ValueError(f"run_granularity must be one of {_RUN_GRANULARITIES}, got {self.run_granularity!r}")


@dataclass(frozen=True)
class CompareOptions(CloneFrozenMixin):
    """Options for comparison jobs.

    Parameters
    ----------
    extraction : ExtractionOptions
        Options applied to both documents' extraction
    worker_mode : {"process", "thread"}, default "process"
        Execution context for the diff worker. ``process`` gives a
        shared-nothing worker; ``thread`` avoids process start-up cost.
    extraction_workers : int, default 2
        Threads used to extract both documents concurrently

    """

    extraction: ExtractionOptions = field(default_factory=ExtractionOptions)
    worker_mode: WorkerMode = field(
        default=DEFAULT_WORKER_MODE,
        metadata={"help": "Diff worker execution context", "choices": list(_WORKER_MODES)},
    )
    extraction_workers: int = field(
        default=DEFAULT_EXTRACTION_WORKERS,
        metadata={"help": "Threads used for concurrent extraction", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.worker_mode not in _WORKER_MODES:
            raise ValueError(f"worker_mode must be one of {_WORKER_MODES}, got {self.worker_mode!r}")
        if self.extraction_workers < 1:
            raise ValueError(f"extraction_workers must be at least 1, got {self.extraction_workers}")


@dataclass(frozen=True)
class PreviewOptions(CloneFrozenMixin):
    """Options for rendering highlighted page previews.

    Parameters
    ----------
    zoom : float, default 1.0
        Zoom factor applied on top of the fitted base scale
    available_width : float or None, default None
        Width the page should fit into; ``None`` renders at reference width
    device_scale : float, default 1.0
        Extra pixel density multiplier (e.g. 2.0 for high-DPI output)
    opacity : float, default 0.35
        Fill opacity of highlight rectangles
    added_color, removed_color : tuple of float
        RGB fill colors (0..1) for added and removed highlights

    """

    zoom: float = field(default=DEFAULT_ZOOM, metadata={"help": "Preview zoom factor", "type": float})
    available_width: float | None = field(
        default=None, metadata={"help": "Fit pages into this width (points)", "type": float}
    )
    device_scale: float = field(default=1.0, metadata={"help": "Pixel density multiplier", "type": float})
    opacity: float = field(default=DEFAULT_HIGHLIGHT_OPACITY, metadata={"help": "Highlight opacity", "type": float})
    added_color: tuple[float, float, float] = ADDED_HIGHLIGHT_RGB
    removed_color: tuple[float, float, float] = REMOVED_HIGHLIGHT_RGB

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")
        if self.device_scale <= 0:
            raise ValueError(f"device_scale must be positive, got {self.device_scale}")
        if self.available_width is not None and self.available_width < 0:
            raise ValueError(f"available_width must be non-negative, got {self.available_width}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be between 0 and 1, got {self.opacity}")


def _known_fields(options_class: type, values: Mapping[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(options_class)}
    return {key.replace("-", "_"): value for key, value in values.items() if key.replace("-", "_") in names}


def options_from_config(config: Mapping[str, Any]) -> tuple[CompareOptions, PreviewOptions]:
    """Build option objects from a loaded configuration mapping.

    Recognized layout::

        worker_mode = "thread"

        [extraction]
        run_granularity = "word"

        [preview]
        zoom = 1.5

    Unknown keys are ignored.

    Parameters
    ----------
    config : Mapping[str, Any]
        Configuration dictionary (see ``pdfdelta.cli.config``)

    Returns
    -------
    tuple[CompareOptions, PreviewOptions]
        Options derived from the configuration

    """
    extraction = ExtractionOptions(**_known_fields(ExtractionOptions, config.get("extraction", {}) or {}))
    compare_values = _known_fields(CompareOptions, config)
    compare_values.pop("extraction", None)
    compare = CompareOptions(extraction=extraction, **compare_values)

    preview_values = _known_fields(PreviewOptions, config.get("preview", {}) or {})
    for color_key in ("added_color", "removed_color"):
        if color_key in preview_values:
            preview_values[color_key] = tuple(preview_values[color_key])
    preview = PreviewOptions(**preview_values)
    return compare, preview
