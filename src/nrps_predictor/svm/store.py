"""Model store: all classifier artifacts of a run, keyed by scheme."""

from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType

import structlog

from nrps_predictor.errors import ArtifactLoadError
from nrps_predictor.svm.load import load_artifact
from nrps_predictor.svm.models import SCHEME_METADATA_FILE, ModelArtifact, scheme_sort_key

logger = structlog.get_logger()


class ModelStore:
    """Read-only collection of loaded artifacts plus the schemes that failed.

    Built once before prediction starts and passed explicitly to the
    predictor; nothing mutates it afterwards.
    """

    def __init__(
        self,
        artifacts: Iterable[ModelArtifact] = (),
        failures: Iterable[ArtifactLoadError] = (),
    ):
        ordered = sorted(artifacts, key=lambda a: scheme_sort_key(a.scheme))
        self._artifacts = MappingProxyType({a.scheme: a for a in ordered})
        self._failures = MappingProxyType(
            {f.scheme: f for f in sorted(failures, key=lambda f: scheme_sort_key(f.scheme))}
        )

    @classmethod
    def load(
        cls,
        model_dir: Path | str,
        schemes: Iterable[str] | None = None,
    ) -> "ModelStore":
        """Load every scheme directory below model_dir.

        Each artifact loads independently: a broken scheme is recorded as a
        failure and the others still load.

        Args:
            model_dir: Directory with one subdirectory per scheme
            schemes: Restrict loading to these schemes. Requested schemes
                without a directory are recorded as failures.

        Returns:
            ModelStore with artifacts and failures
        """
        model_dir = Path(model_dir)
        requested = list(dict.fromkeys(schemes)) if schemes is not None else None
        logger.info(
            "model_store_load_start",
            model_dir=str(model_dir),
            requested=requested,
        )

        candidates: dict[str, Path] = {}
        if model_dir.is_dir():
            for entry in sorted(model_dir.iterdir()):
                if entry.is_dir() and (entry / SCHEME_METADATA_FILE).exists():
                    candidates[entry.name] = entry
        else:
            logger.warning("model_dir_missing", model_dir=str(model_dir))

        artifacts: list[ModelArtifact] = []
        failures: list[ArtifactLoadError] = []

        if requested is None:
            to_load = list(candidates)
        else:
            to_load = [s for s in requested if s in candidates]
            for scheme in requested:
                if scheme not in candidates:
                    failures.append(
                        ArtifactLoadError(scheme, f"no artifact directory in {model_dir}")
                    )

        for scheme in to_load:
            try:
                artifacts.append(load_artifact(candidates[scheme]))
            except ArtifactLoadError as e:
                logger.warning("artifact_load_failed", scheme=e.scheme, reason=e.reason)
                failures.append(e)

        store = cls(artifacts, failures)
        logger.info(
            "model_store_load_complete",
            loaded=list(store.schemes),
            failed=list(store.failures),
        )
        return store

    @property
    def artifacts(self) -> MappingProxyType:
        return self._artifacts

    @property
    def failures(self) -> MappingProxyType:
        """Scheme identifier to the ArtifactLoadError that excluded it."""
        return self._failures

    @property
    def schemes(self) -> tuple[str, ...]:
        """Loaded schemes in output order."""
        return tuple(self._artifacts)

    def get(self, scheme: str) -> ModelArtifact | None:
        return self._artifacts.get(scheme)

    def __contains__(self, scheme: str) -> bool:
        return scheme in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)

    def require_usable(self, schemes: Iterable[str] | None = None) -> None:
        """Raise if not a single scheme could be loaded.

        Args:
            schemes: Schemes the run will report. When given, at least one
                of them must be loaded; skipped schemes do not count.

        Raises:
            ArtifactLoadError: Run-fatal, listing the individual failures
        """
        if schemes is None:
            usable = bool(self._artifacts)
        else:
            schemes = list(schemes)
            usable = any(scheme in self._artifacts for scheme in schemes)
        if usable:
            return
        if schemes is not None and not schemes:
            reasons = "every scheme was skipped"
        elif schemes is not None and self._artifacts:
            reasons = f"none of the active schemes is loaded: {', '.join(schemes)}"
        elif self._failures:
            reasons = "; ".join(str(f) for f in self._failures.values())
        else:
            reasons = "no scheme directories found"
        raise ArtifactLoadError("*", f"no usable classifier scheme ({reasons})")
